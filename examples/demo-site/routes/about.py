"""About page."""

nav_title = "About us"


def get(request):
    return "about"
