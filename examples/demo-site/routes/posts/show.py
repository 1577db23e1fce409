"""Post detail."""

path = "/posts/{slug}"


def get(request):
    return "post"
