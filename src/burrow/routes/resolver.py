"""Route resolver — answers content questions against the host route table.

Given a ``RouteTable``, the resolver answers:

- does a public route exist for this content kind, and what is its pattern?
- what is the listing (index) path for a kind?
- is a given route protected by authentication?

Protection is decided by a ``ProtectionPolicy`` built once per collection
run: the union of default and configured pipeline names, plus the default set
of authentication mount hooks.

When the host table cannot be read the resolver is *unavailable*: it reports
no routes and every lookup returns *None*.  Sources decide what that means
for them (public-by-construction URLs proceed, content-backed ones skip).
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from burrow.routes.table import RouteInfo, RouteTable

if TYPE_CHECKING:
    from burrow.observability.recorder import EventRecorder
    from burrow.settings import SettingsReader

# Pipelines whose routes require a signed-in (or privileged) user
DEFAULT_PROTECTED_PIPELINES: frozenset[str] = frozenset({
    "require_authenticated",
    "require_authenticated_user",
    "authenticated",
    "admin",
    "admin_only",
    "require_admin",
})

# Mount-time guards that gate a live route on authentication state
DEFAULT_AUTH_HOOKS: frozenset[str] = frozenset({
    "ensure_authenticated",
    "ensure_authenticated_scope",
    "redirect_if_authenticated",
    "redirect_if_authenticated_scope",
    "ensure_admin",
    "require_authenticated_user",
})

_CONTENT_PARAMS = (":slug", ":id")
_CATCHALL_CONTENT = re.compile(r"^/:[a-z_]+/:[a-z_]+$")
_CATCHALL_INDEX = re.compile(r"^/:[a-z_]+$")
_LEADING_PARAM = re.compile(r"^/:[a-z_]+/")


@dataclass(frozen=True, slots=True)
class ProtectionPolicy:
    """Deny-lists deciding whether a route is access-protected.

    Attributes:
        pipelines: Pipeline names that mark a route protected.
        auth_hooks: Mount-hook identifiers that mark a route protected.

    """

    pipelines: frozenset[str] = DEFAULT_PROTECTED_PIPELINES
    auth_hooks: frozenset[str] = DEFAULT_AUTH_HOOKS

    @classmethod
    def from_settings(cls, settings: SettingsReader) -> ProtectionPolicy:
        """Defaults plus the ``sitemap_protected_pipelines`` JSON list.

        Non-string items and malformed JSON are ignored.
        """
        custom = {
            item.strip().lstrip(":")
            for item in settings.get_json_list("sitemap_protected_pipelines", [])
            if isinstance(item, str) and item.strip()
        }
        return cls(pipelines=DEFAULT_PROTECTED_PIPELINES | custom)

    def protects(self, route: RouteInfo) -> bool:
        """True if *route* uses a denied pipeline or auth hook."""
        return bool(route.pipelines & self.pipelines) or bool(route.auth_hooks & self.auth_hooks)


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """A route found for a content kind.

    Attributes:
        route: The matched host route.
        pattern: Pattern to use for this kind.  For catch-all routes the
            leading parameter is replaced by the kind name.

    """

    route: RouteInfo
    pattern: str


class RouteResolver:
    """Content-oriented queries over a ``RouteTable``.

    Args:
        table: The host routes, or *None* when no host router is available.
        policy: Protection policy for this run.

    """

    __slots__ = ("_policy", "_routes", "_table")

    def __init__(
        self,
        table: RouteTable | None,
        policy: ProtectionPolicy | None = None,
    ) -> None:
        self._table = table
        self._policy = policy if policy is not None else ProtectionPolicy()
        self._routes: tuple[RouteInfo, ...] = table.get_routes("GET") if table is not None else ()

    @classmethod
    def load(
        cls,
        loader: Callable[[], RouteTable | None] | RouteTable | None,
        policy: ProtectionPolicy | None = None,
        recorder: EventRecorder | None = None,
    ) -> RouteResolver:
        """Build a resolver, treating any failure to read routes as unavailable.

        *loader* may be a ready ``RouteTable``, a zero-argument callable
        returning one, or *None*.

        """
        if loader is None or isinstance(loader, RouteTable):
            return cls(loader, policy)
        try:
            table = loader()
        except Exception as exc:
            if recorder is not None:
                recorder.warn(f"Route table unavailable: {exc}")
            return cls(None, policy)
        return cls(table, policy)

    @property
    def available(self) -> bool:
        """False when the host route table could not be read."""
        return self._table is not None

    @property
    def policy(self) -> ProtectionPolicy:
        return self._policy

    def routes(self) -> tuple[RouteInfo, ...]:
        """All GET routes, in host declaration order."""
        return self._routes

    def is_protected(self, route: RouteInfo) -> bool:
        return self._policy.protects(route)

    # ----- Lookups -----

    def find_route(self, handler: object) -> RouteInfo | None:
        """GET route served by *handler*.

        *handler* may be the handler object itself or its name; names match
        the full dotted handler name or its last component.

        """
        if not isinstance(handler, str):
            return next((r for r in self._routes if r.handler is handler), None)
        wanted = handler.strip()
        if not wanted:
            return None
        for route in self._routes:
            name = route.handler_name
            if name == wanted or name.rsplit(".", 1)[-1] == wanted:
                return route
        return None

    def content_routes(self) -> tuple[RouteInfo, ...]:
        """GET routes with a ``:slug`` or ``:id`` segment."""
        return tuple(r for r in self._routes if _has_content_param(r.path))

    def index_routes(self) -> tuple[RouteInfo, ...]:
        """GET routes without any placeholder."""
        return tuple(r for r in self._routes if not r.is_parameterized)

    def find_kind_route(self, kind_name: str) -> RouteMatch | None:
        """Record route for a content kind.

        Resolution order:
            1. A content route whose path names the kind, singular or plural
               (``/article/:slug``, ``/articles/:slug``).
            2. A content route whose handler name contains the kind name.
            3. A catch-all ``/:param/:slug`` route, first segment replaced by
               the kind name.

        """
        kind = kind_name.lower()
        routes = self.content_routes()

        for route in routes:
            if _path_names_kind(route.path.lower(), kind):
                return RouteMatch(route=route, pattern=route.path)

        for route in routes:
            if kind in route.handler_name.lower():
                return RouteMatch(route=route, pattern=route.path)

        for route in routes:
            if _CATCHALL_CONTENT.match(route.path):
                return RouteMatch(
                    route=route,
                    pattern=_LEADING_PARAM.sub(f"/{kind_name}/", route.path, count=1),
                )
        return None

    def find_kind_index(self, kind_name: str) -> RouteMatch | None:
        """Listing route for a content kind (``/article`` or ``/articles``).

        Falls back to a catch-all ``/:param`` route, yielding ``/<kind>``.

        """
        kind = kind_name.lower()
        for route in self.index_routes():
            path = route.path.lower().rstrip("/")
            if path.endswith((f"/{kind}", f"/{kind}s")):
                return RouteMatch(route=route, pattern=route.path)

        for route in self._routes:
            if _CATCHALL_INDEX.match(route.path):
                return RouteMatch(route=route, pattern=f"/{kind_name}")
        return None

    def find_pages_route(self) -> RouteInfo | None:
        """Route serving filesystem pages (``/pages/:slug``, ``/content/*path``)."""
        for route in self._routes:
            if not (":slug" in route.path or _has_wildcard(route.path)):
                continue
            name = route.handler_name.lower()
            if "page" in name or "content" in name:
                return route
        return None

    def find_posts_route(self) -> RouteInfo | None:
        """Public post detail route (``/posts/:slug``)."""
        for route in self.content_routes():
            path = route.path.lower()
            name = route.handler_name.lower()
            if "/posts/" in path or ("post" in name and "page" not in name):
                return route
        return None


def extract_prefix(pattern: str | None) -> str | None:
    """URL prefix of a route pattern, up to its first placeholder.

    ``/pages/:slug`` -> ``/pages``; ``/content/*path`` -> ``/content``;
    ``/:slug`` -> ``/``.

    """
    if pattern is None:
        return None
    segments: list[str] = []
    for seg in pattern.split("/"):
        if seg.startswith((":", "*")):
            break
        if seg:
            segments.append(seg)
    return "/" + "/".join(segments)


def substitute(pattern: str, **values: str) -> str:
    """Replace ``:name`` placeholders in *pattern*.

    Longer names are substituted first so ``:id`` never clobbers ``:identity``.

    """
    result = pattern
    for name in sorted(values, key=len, reverse=True):
        result = re.sub(rf":{re.escape(name)}(?![A-Za-z0-9_])", lambda _m, v=values[name]: v, result)
    return result


def _has_content_param(path: str) -> bool:
    segments = path.split("/")
    return any(seg in _CONTENT_PARAMS for seg in segments)


def _has_wildcard(path: str) -> bool:
    return any(seg.startswith("*") for seg in path.split("/"))


def _path_names_kind(path: str, kind: str) -> bool:
    return f"/{kind}/" in path or f"/{kind}s/" in path

