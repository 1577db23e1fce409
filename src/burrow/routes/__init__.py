"""Host route table access.

Reads the host application's routes into plain data and answers
content-oriented questions about them.

Public API::

    from burrow.routes import RouteTable, RouteResolver, ProtectionPolicy

    table = RouteTable.from_routes_dir(Path("my-site/routes"))
    resolver = RouteResolver(table, ProtectionPolicy.from_settings(settings))
    resolver.find_kind_route("article")
"""

from burrow.routes.loader import RouteDefinition, discover_routes
from burrow.routes.resolver import (
    ProtectionPolicy,
    RouteMatch,
    RouteResolver,
    extract_prefix,
    substitute,
)
from burrow.routes.table import RouteInfo, RouteTable

__all__ = [
    "ProtectionPolicy",
    "RouteDefinition",
    "RouteInfo",
    "RouteMatch",
    "RouteResolver",
    "RouteTable",
    "discover_routes",
    "extract_prefix",
    "substitute",
]
