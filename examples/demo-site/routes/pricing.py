"""Pricing page, listed explicitly through sitemap_static_routes."""


def pricing(request):
    return "pricing"


get = pricing
