"""Health check, excluded by the default discovery patterns."""


def get(request):
    return '{"status": "ok"}'
