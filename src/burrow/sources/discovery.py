"""Route discovery source — every public GET route of the host.

Each GET route becomes an entry after three filters:

- exclude patterns (``sitemap_router_discovery_exclude_patterns``), by
  default the admin, API and tooling prefixes, placeholder and wildcard
  segments, account pages, infrastructure files, and the home page (which
  the static source owns);
- include-only patterns (``sitemap_router_discovery_include_only``); an
  empty list means no restriction;
- protection: routes behind an authentication pipeline or mount hook.

Patterns are regular expressions searched anywhere in the path.  A pattern
that does not compile never matches, in either list.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from burrow.sources.base import CollectOptions, Source

if TYPE_CHECKING:
    from burrow.entry import UrlEntry
    from burrow.routes.table import RouteInfo

DEFAULT_EXCLUDE_PATTERNS: tuple[str, ...] = (
    # Administrative, API and internal tooling
    "^/admin",
    "^/api",
    "^/dev",
    "^/sync",
    "^/test",
    "^/dashboard",
    # Parameterized and wildcard segments
    ":[a-z_]+",
    "\\*",
    # Account pages
    "/users/log-in",
    "/users/log-out",
    "/users/register",
    "/users/reset-password",
    "/users/confirm",
    "/users/magic-link",
    "/users/settings",
    # Functional pages
    "/checkout",
    "/cart",
    "/health",
    "/ready",
    # Infrastructure
    "/sitemap\\.",
    "/sitemaps/",
    "/assets/",
    # Home page (emitted by the static source)
    "^/$",
)


class RouteDiscoverySource(Source):
    """One entry per GET route that survives the filters."""

    name = "router_discovery"

    def _collect(self, opts: CollectOptions) -> list[UrlEntry]:
        exclude = compile_patterns(
            self._settings.get_json_list(self.setting_key("exclude_patterns"), list(DEFAULT_EXCLUDE_PATTERNS))
        )
        configured = self._settings.get_json_list(self.setting_key("include_only"), [])
        include_only = compile_patterns(configured)
        # Configured include patterns that all failed to compile still restrict
        restrict = bool(configured)

        entries: list[UrlEntry] = []
        for route in opts.routes.routes():
            if not self._wanted(route, exclude, include_only, restrict=restrict):
                continue
            if opts.routes.is_protected(route):
                continue
            entries.append(self._entry(
                opts,
                route.path,
                changefreq="weekly",
                priority=0.5,
                title=route.display_title(),
                category="Routes",
            ))
        return entries

    def _wanted(
        self,
        route: RouteInfo,
        exclude: list[re.Pattern[str]],
        include_only: list[re.Pattern[str]],
        *,
        restrict: bool,
    ) -> bool:
        path = route.path
        if any(p.search(path) for p in exclude):
            return False
        if restrict:
            return any(p.search(path) for p in include_only)
        return True


def compile_patterns(patterns: list[object]) -> list[re.Pattern[str]]:
    """Compile string patterns, dropping anything that is not a valid regex."""
    compiled: list[re.Pattern[str]] = []
    for pattern in patterns:
        if not isinstance(pattern, str) or not pattern:
            continue
        try:
            compiled.append(re.compile(pattern))
        except re.error:
            continue
    return compiled
