"""Article listing."""


def get(request):
    return "articles"
