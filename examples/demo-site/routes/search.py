"""Search: GET lists results, POST redirects back to GET."""


def get(request):
    return "results"


def post(request):
    return "redirect"
