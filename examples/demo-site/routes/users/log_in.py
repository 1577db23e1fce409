"""Sign-in form, excluded by the default discovery patterns."""

path = "/users/log-in"


def get(request):
    return "form"
