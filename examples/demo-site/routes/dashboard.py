"""Dashboard, protected: never listed."""

pipelines = ["require_authenticated"]


def get(request):
    return "dashboard"
