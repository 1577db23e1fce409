"""Article detail."""

path = "/articles/{slug}"


def get(request):
    return "article"
