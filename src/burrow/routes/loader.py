"""Route loader — read the host application's route modules.

Scans a ``routes/`` directory for Python modules and extracts route
definitions using a file-path convention:

    routes/search.py         -> GET /search
    routes/api/users.py      -> GET /api/users
    routes/dashboard.py      -> path = "/admin/dash"  (explicit override)

Handler convention — function names map to HTTP methods::

    async def get(request):   # GET
    async def post(request):  # POST
    async def handler(request):  # GET (catch-all default)

Modules may export optional metadata:

    path: str               — override URL path (default: derived from file path)
    name: str               — route name for URL generation
    nav_title: str          — human title (default: derived from path)
    pipelines: Sequence[str]  — middleware stages applied to the route
    auth_hooks: Sequence[str] — mount-time guards attached to the route

The loader only reads; it never registers or mutates anything in the host.
"""

import importlib.util
import inspect
import sys
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from burrow._errors import ConfigError

# HTTP methods recognised as handler function names
_METHOD_NAMES: frozenset[str] = frozenset({
    "get",
    "post",
    "put",
    "delete",
    "patch",
})

# Catch-all handler name (maps to GET)
_HANDLER_NAME = "handler"


@dataclass(frozen=True, slots=True)
class RouteDefinition:
    """A single route discovered in a route module.

    Attributes:
        path: URL path (e.g., ``/search``, ``/api/users/{id}``).
        handler: Callable accepting the host's request object.
        methods: HTTP methods this handler responds to (e.g., ``("GET",)``).
        name: Route name, used for handler-name matching.
        source: Filesystem path to the originating ``.py`` file.
        nav_title: Human-readable title, or *None* for non-GET handlers.
        pipelines: Named middleware stages applied to the route.
        auth_hooks: Mount-time guard identifiers attached to the route.

    """

    path: str
    handler: object
    methods: tuple[str, ...]
    name: str
    source: Path
    nav_title: str | None
    pipelines: tuple[str, ...] = field(default=())
    auth_hooks: tuple[str, ...] = field(default=())


def discover_routes(routes_dir: Path) -> tuple[RouteDefinition, ...]:
    """Scan *routes_dir* for Python modules and return route definitions.

    Skips ``__init__.py``, ``__pycache__`` directories, and files whose names
    start with ``_``.  Returns an empty tuple when *routes_dir* does not exist
    or contains no loadable modules.

    Raises:
        ConfigError: On duplicate (path, method) pairs, unloadable modules, or
            invalid handler signatures.

    """
    if not routes_dir.is_dir():
        return ()

    definitions: list[RouteDefinition] = []
    seen: dict[tuple[str, str], Path] = {}

    for py_file in sorted(routes_dir.rglob("*.py")):
        if py_file.name.startswith("_"):
            continue
        if "__pycache__" in py_file.parts:
            continue

        module = _load_module(py_file, routes_dir)
        if module is None:
            continue

        for defn in _extract_definitions(module, py_file, routes_dir):
            key = (defn.path, defn.methods[0])
            if key in seen:
                msg = (
                    f"Duplicate route {defn.methods[0]} {defn.path!r}: "
                    f"defined in {seen[key]} and {py_file}"
                )
                raise ConfigError(msg)
            seen[key] = py_file
            definitions.append(defn)

    return tuple(definitions)


def _load_module(py_file: Path, routes_dir: Path) -> object | None:
    """Import a Python file as a module without touching ``sys.path``.

    Uses ``importlib.util.spec_from_file_location`` for isolated loading.
    Returns *None* if no import spec can be built for the file.

    """
    relative = py_file.relative_to(routes_dir)
    parts = list(relative.with_suffix("").parts)
    module_name = "burrow_routes." + ".".join(parts)

    spec = importlib.util.spec_from_file_location(module_name, py_file)
    if spec is None or spec.loader is None:
        return None

    try:
        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        spec.loader.exec_module(module)  # type: ignore[union-attr]
    except Exception as exc:
        sys.modules.pop(module_name, None)
        msg = f"Failed to load route module {py_file}: {exc}"
        raise ConfigError(msg) from exc

    return module


def _derive_path(py_file: Path, routes_dir: Path) -> str:
    """Derive a URL path from a file's position relative to *routes_dir*.

    ``routes/search.py``       -> ``/search``
    ``routes/api/users.py``    -> ``/api/users``
    ``routes/index.py``        -> ``/``
    ``routes/docs/index.py``   -> ``/docs``

    """
    parts = list(py_file.relative_to(routes_dir).with_suffix("").parts)
    if parts and parts[-1] == "index":
        parts.pop()
    return "/" + "/".join(parts)


def _derive_nav_title(path: str) -> str:
    """Derive a human-readable title from a URL path.

    ``/search``     -> ``Search``
    ``/api/users``  -> ``Users``
    ``/``           -> ``Home``

    """
    last_segment = path.rstrip("/").rsplit("/", maxsplit=1)[-1]
    if not last_segment:
        return "Home"
    return last_segment.replace("-", " ").replace("_", " ").title()


def _string_tuple(value: object, attr: str, py_file: Path) -> tuple[str, ...]:
    """Validate optional ``pipelines`` / ``auth_hooks`` module metadata."""
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, (set, frozenset)) and all(isinstance(v, str) for v in value):
        return tuple(sorted(value))
    if isinstance(value, Sequence) and all(isinstance(v, str) for v in value):
        return tuple(value)
    msg = f"Route module {py_file}: {attr!r} must be a sequence of str"
    raise ConfigError(msg)


def _extract_definitions(
    module: object,
    py_file: Path,
    routes_dir: Path,
) -> list[RouteDefinition]:
    """Extract route definitions from a loaded module.

    Looks for handler functions named ``get``, ``post``, ``put``, ``delete``,
    ``patch``, or the catch-all ``handler`` (which maps to GET).

    """
    path = getattr(module, "path", None)
    if path is None:
        path = _derive_path(py_file, routes_dir)
    elif not isinstance(path, str):
        msg = f"Route module {py_file}: 'path' must be a str, got {type(path).__name__}"
        raise ConfigError(msg)

    if not path.startswith("/"):
        path = "/" + path

    route_name = getattr(module, "name", None)
    if route_name is None:
        route_name = "route:" + path

    nav_title = getattr(module, "nav_title", None)
    if nav_title is None:
        nav_title = _derive_nav_title(path)

    pipelines = _string_tuple(getattr(module, "pipelines", None), "pipelines", py_file)
    auth_hooks = _string_tuple(getattr(module, "auth_hooks", None), "auth_hooks", py_file)

    definitions: list[RouteDefinition] = []

    for method_name in sorted(_METHOD_NAMES):
        func = getattr(module, method_name, None)
        if func is not None and callable(func):
            _validate_handler(func, method_name, py_file)
            definitions.append(RouteDefinition(
                path=path,
                handler=func,
                methods=(method_name.upper(),),
                name=f"{route_name}:{method_name.upper()}",
                source=py_file,
                nav_title=nav_title if method_name == "get" else None,
                pipelines=pipelines,
                auth_hooks=auth_hooks,
            ))

    # Catch-all ``handler`` (maps to GET), only if no explicit ``get``
    handler_func = getattr(module, _HANDLER_NAME, None)
    if handler_func is not None and callable(handler_func):
        has_get = any(d.methods == ("GET",) for d in definitions)
        if not has_get:
            _validate_handler(handler_func, _HANDLER_NAME, py_file)
            definitions.append(RouteDefinition(
                path=path,
                handler=handler_func,
                methods=("GET",),
                name=route_name,
                source=py_file,
                nav_title=nav_title,
                pipelines=pipelines,
                auth_hooks=auth_hooks,
            ))

    return definitions


def _validate_handler(func: object, name: str, source: Path) -> None:
    """Validate that a handler accepts at least one parameter.

    Raises:
        ConfigError: If the handler takes no parameters.

    """
    try:
        sig = inspect.signature(func)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return
    if len(sig.parameters) < 1:
        msg = (
            f"Route handler '{name}' in {source} must accept at least one "
            f"parameter (the request object)."
        )
        raise ConfigError(msg)
