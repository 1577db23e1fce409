"""Members area, protected by a site-specific pipeline."""

pipelines = ["members_only"]


def get(request):
    return "members"
