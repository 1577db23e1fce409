"""Route table — the host application's routes as plain, read-only data.

The host's router is read once (at startup or at the start of a collection
run) into a ``RouteTable`` of ``RouteInfo`` records.  Nothing in the engine
reflects on the host after that point.

Path placeholders are normalized to colon form, so ``/users/{id}`` and
``/users/:id`` are the same pattern to every consumer.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from burrow._errors import RouteError

if TYPE_CHECKING:
    from pathlib import Path

    from burrow._types import RoutePath
    from burrow.routes.loader import RouteDefinition

_BRACE_PARAM = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)(?::[^}]*)?\}")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")

# Handler names that carry no meaning of their own (route-module convention)
_GENERIC_HANDLER_NAMES = frozenset({"get", "post", "put", "delete", "patch", "handler"})


def normalize_pattern(path: str) -> RoutePath:
    """Convert brace placeholders to colon placeholders.

    ``/users/{id}`` -> ``/users/:id``; ``/files/{path:path}`` -> ``/files/:path``.

    """
    return _BRACE_PARAM.sub(r":\1", path)


def has_placeholder(path: str) -> bool:
    """True if *path* contains a ``:param`` or ``*wildcard`` segment."""
    return any(seg.startswith((":", "*")) for seg in path.split("/"))


@dataclass(frozen=True, slots=True)
class RouteInfo:
    """One route of the host application.

    Attributes:
        path: Path pattern, possibly with ``:param`` / ``*wildcard`` segments.
        verb: Upper-case HTTP method.
        handler: Opaque handler reference, used only for naming and titles.
        pipelines: Named middleware stages applied to the route.
        auth_hooks: Mount-time guard identifiers attached to the route.
        title: Human title supplied by the host, if any.

    """

    path: RoutePath
    verb: str = "GET"
    handler: object = None
    pipelines: frozenset[str] = field(default=frozenset())
    auth_hooks: frozenset[str] = field(default=frozenset())
    title: str | None = None

    def __post_init__(self) -> None:
        path = normalize_pattern(self.path)
        if not path.startswith("/"):
            path = "/" + path
        object.__setattr__(self, "path", path)
        object.__setattr__(self, "verb", self.verb.upper())
        object.__setattr__(self, "pipelines", frozenset(self.pipelines))
        object.__setattr__(self, "auth_hooks", frozenset(self.auth_hooks))

    @property
    def is_get(self) -> bool:
        return self.verb == "GET"

    @property
    def is_parameterized(self) -> bool:
        return has_placeholder(self.path)

    @property
    def handler_name(self) -> str:
        """Dotted name of the handler (``"myapp.views.PostDetail"``), or ``""``."""
        return handler_name(self.handler)

    def display_title(self) -> str:
        """Best human title: explicit title, handler name, then last path segment."""
        if self.title:
            return self.title
        short = self.handler_name.rsplit(".", 1)[-1]
        if short and short not in _GENERIC_HANDLER_NAMES and not short.startswith("<"):
            words = _CAMEL_BOUNDARY.sub(" ", short).replace("_", " ").split()
            return " ".join(w[:1].upper() + w[1:] for w in words)
        last = self.path.rstrip("/").rsplit("/", 1)[-1]
        if not last:
            return "Home"
        return last.replace("-", " ").replace("_", " ").title()


def handler_name(handler: object) -> str:
    """Return a stable dotted name for an opaque handler reference."""
    if handler is None:
        return ""
    if isinstance(handler, str):
        return handler
    qualname = getattr(handler, "__qualname__", None) or type(handler).__qualname__
    module = getattr(handler, "__module__", None) or ""
    return f"{module}.{qualname}" if module else qualname


class RouteTable:
    """Immutable, ordered collection of ``RouteInfo`` records.

    Args:
        routes: Routes in the host router's declaration order.

    """

    __slots__ = ("_routes",)

    def __init__(self, routes: Iterable[RouteInfo] = ()) -> None:
        self._routes: tuple[RouteInfo, ...] = tuple(routes)

    def __iter__(self) -> Iterator[RouteInfo]:
        return iter(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    def __repr__(self) -> str:
        return f"RouteTable({len(self._routes)} routes)"

    @property
    def routes(self) -> tuple[RouteInfo, ...]:
        return self._routes

    def get_routes(self, verb: str | None = "GET") -> tuple[RouteInfo, ...]:
        """Routes answering *verb* (all routes when *verb* is *None*)."""
        if verb is None:
            return self._routes
        wanted = verb.upper()
        return tuple(r for r in self._routes if r.verb == wanted)

    @classmethod
    def from_definitions(cls, definitions: Iterable[RouteDefinition]) -> RouteTable:
        """Build a table from loader ``RouteDefinition`` records."""
        routes: list[RouteInfo] = []
        for defn in definitions:
            for method in defn.methods:
                routes.append(RouteInfo(
                    path=defn.path,
                    verb=method,
                    handler=defn.handler,
                    pipelines=frozenset(defn.pipelines),
                    auth_hooks=frozenset(defn.auth_hooks),
                    title=defn.nav_title,
                ))
        return cls(routes)

    @classmethod
    def from_routes_dir(cls, routes_dir: Path) -> RouteTable:
        """Read a host ``routes/`` directory into a table.

        Raises:
            ConfigError: If a route module cannot be loaded.

        """
        from burrow.routes.loader import discover_routes

        return cls.from_definitions(discover_routes(routes_dir))

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> RouteTable:
        """Build a table from plain mappings (config files, fixtures).

        Each mapping needs ``path``; ``verb``, ``handler``, ``pipelines``,
        ``auth_hooks`` and ``title`` are optional.

        Raises:
            RouteError: If a mapping has no ``path``.

        """
        routes: list[RouteInfo] = []
        for record in records:
            if not record.get("path"):
                msg = f"Route record without 'path': {dict(record)!r}"
                raise RouteError(msg)
            routes.append(RouteInfo(
                path=str(record["path"]),
                verb=str(record.get("verb", "GET")),
                handler=record.get("handler"),
                pipelines=frozenset(record.get("pipelines") or ()),
                auth_hooks=frozenset(record.get("auth_hooks") or ()),
                title=record.get("title"),
            ))
        return cls(routes)
