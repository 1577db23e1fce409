"""Static source — configured fixed URLs.

Two JSON-list settings feed it:

``sitemap_static_routes``
    Items with either an explicit ``path`` or a ``handler`` name resolved
    through the host route table.  Defaults to the home page.

``sitemap_custom_urls``
    Items with a ``path``; always taken as given.

Both accept optional ``priority``, ``changefreq``, ``title`` and
``category``.  A handler that resolves to no route, to a parameterized
route, or to a protected route is skipped.  There is no hardcoded path
fallback.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from burrow.sources.base import CollectOptions, Source

if TYPE_CHECKING:
    from burrow.entry import UrlEntry

DEFAULT_STATIC_ROUTES: tuple[dict[str, Any], ...] = (
    {
        "path": "/",
        "priority": 0.9,
        "changefreq": "daily",
        "title": "Home",
        "category": "Main",
    },
)


class StaticSource(Source):
    """Entries for configured static routes and custom URLs."""

    name = "static"

    def _collect(self, opts: CollectOptions) -> list[UrlEntry]:
        entries: list[UrlEntry] = []
        routes = self._settings.get_json_list(
            "sitemap_static_routes", [dict(r) for r in DEFAULT_STATIC_ROUTES]
        )
        for item in routes:
            path = self._resolve(item, opts)
            if path is not None:
                entries.append(self._build(opts, path, item, category="Static"))

        for item in self._settings.get_json_list("sitemap_custom_urls", []):
            path = _explicit_path(item)
            if path is None:
                self._skip(f"custom URL {item!r}", "missing path")
                continue
            entries.append(self._build(opts, path, item, category="Custom"))
        return entries

    def _resolve(self, item: object, opts: CollectOptions) -> str | None:
        if not isinstance(item, Mapping):
            self._skip(f"static route {item!r}", "not an object")
            return None
        path = _explicit_path(item)
        if path is not None:
            return path

        handler = item.get("handler")
        if not isinstance(handler, str) or not handler.strip():
            self._skip(f"static route {dict(item)!r}", "needs 'path' or 'handler'")
            return None
        route = opts.routes.find_route(handler)
        if route is None:
            self._skip(f"handler {handler!r}", "no matching GET route")
            return None
        if route.is_parameterized:
            self._skip(f"handler {handler!r}", f"route {route.path!r} has parameters")
            return None
        if opts.routes.is_protected(route):
            self._skip(f"handler {handler!r}", "route requires authentication")
            return None
        return route.path

    def _build(
        self,
        opts: CollectOptions,
        path: str,
        item: Mapping[str, Any],
        *,
        category: str,
    ) -> UrlEntry:
        title = item.get("title")
        item_category = item.get("category")
        return self._entry(
            opts,
            path,
            changefreq=item.get("changefreq", "weekly"),
            priority=item.get("priority", 0.5),
            title=str(title) if title else path,
            category=str(item_category) if item_category else category,
        )


def _explicit_path(item: object) -> str | None:
    if not isinstance(item, Mapping):
        return None
    path = item.get("path")
    if isinstance(path, str) and path.strip():
        return path.strip()
    return None
