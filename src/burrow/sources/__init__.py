"""Sources — one collector per content backend.

The registered list is static and explicit.  Its order is the collection
order, and the first source to produce a URL keeps it on deduplication::

    static -> entities -> pages -> posts -> blog -> shop -> router_discovery
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from burrow.sources.base import CollectOptions, Source, build_url, is_excluded, localize, slug_title
from burrow.sources.blog import BlogSource
from burrow.sources.discovery import DEFAULT_EXCLUDE_PATTERNS, RouteDiscoverySource
from burrow.sources.entities import EntitySource, PatternResolution
from burrow.sources.pages import PageSource
from burrow.sources.posts import PostSource
from burrow.sources.shop import DEFAULT_SHOP_PREFIX, ShopSource
from burrow.sources.static import DEFAULT_STATIC_ROUTES, StaticSource

if TYPE_CHECKING:
    from pathlib import Path

    from burrow.content.backends import BlogBackend, EntityBackend, PostBackend, ShopBackend
    from burrow.observability.recorder import EventRecorder
    from burrow.settings import SettingsReader


def default_sources(
    settings: SettingsReader,
    *,
    entity_backend: EntityBackend | None = None,
    post_backend: PostBackend | None = None,
    blog_backend: BlogBackend | None = None,
    shop_backend: ShopBackend | None = None,
    pages_root: Path | None = None,
    recorder: EventRecorder | None = None,
) -> list[Source]:
    """The standard source list, in collection order.

    Sources without a backend are still listed; they report themselves
    disabled.
    """
    return [
        StaticSource(settings, recorder=recorder),
        EntitySource(settings, entity_backend, recorder=recorder),
        PageSource(settings, pages_root, recorder=recorder),
        PostSource(settings, post_backend, recorder=recorder),
        BlogSource(settings, blog_backend, recorder=recorder),
        ShopSource(settings, shop_backend, recorder=recorder),
        RouteDiscoverySource(settings, recorder=recorder),
    ]


__all__ = [
    "DEFAULT_EXCLUDE_PATTERNS",
    "DEFAULT_SHOP_PREFIX",
    "DEFAULT_STATIC_ROUTES",
    "BlogSource",
    "CollectOptions",
    "EntitySource",
    "PageSource",
    "PatternResolution",
    "PostSource",
    "RouteDiscoverySource",
    "ShopSource",
    "Source",
    "StaticSource",
    "build_url",
    "default_sources",
    "is_excluded",
    "localize",
    "slug_title",
]
