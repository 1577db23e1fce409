"""Settings provider — read-only key/value configuration.

Every source and the collector receive a ``SettingsReader`` at construction
time.  Keys are namespaced per feature::

    site_url
    sitemap_<source>_enabled
    sitemap_entity_<kind>_pattern
    sitemap_router_discovery_exclude_patterns
    sitemap_protected_pipelines

JSON-array settings may be stored either as a JSON string (as a database
settings table would hold them) or as an already-decoded list.  Malformed
values fall back to the caller's default instead of raising.

Thread Safety:
    ``MappingSettings`` copies its input and never mutates it afterwards, so
    concurrent reads from source worker threads are safe.

"""

import json
from collections.abc import Mapping
from typing import Any, Protocol

_TRUE_STRINGS = frozenset({"true", "1", "yes", "on"})
_FALSE_STRINGS = frozenset({"false", "0", "no", "off", ""})


class SettingsReader(Protocol):
    """Read-only settings lookup consumed by the engine."""

    def get(self, key: str, default: Any = None) -> Any: ...

    def get_str(self, key: str, default: str | None = None) -> str | None: ...

    def get_bool(self, key: str, default: bool = False) -> bool: ...

    def get_float(self, key: str, default: float) -> float: ...

    def get_json_list(self, key: str, default: list[Any]) -> list[Any]: ...


class MappingSettings:
    """``SettingsReader`` backed by an immutable snapshot of a mapping.

    Args:
        values: Initial key/value pairs.  Copied on construction.

    """

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = dict(values or {})

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)

    def get(self, key: str, default: Any = None) -> Any:
        """Return the raw value for *key*, or *default* when unset or ``None``."""
        value = self._values.get(key)
        return default if value is None else value

    def get_str(self, key: str, default: str | None = None) -> str | None:
        """Return *key* as a stripped, non-empty string, else *default*."""
        value = self._values.get(key)
        if value is None:
            return default
        text = str(value).strip()
        return text or default

    def get_bool(self, key: str, default: bool = False) -> bool:
        """Return *key* as a boolean.

        Accepts real booleans and the usual string spellings
        (``"true"``/``"false"``, ``"1"``/``"0"``, ``"yes"``/``"no"``).
        Anything else yields *default*.
        """
        value = self._values.get(key)
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in _TRUE_STRINGS:
                return True
            if lowered in _FALSE_STRINGS:
                return False
        if isinstance(value, int):
            return value != 0
        return default

    def get_float(self, key: str, default: float) -> float:
        """Return *key* as a float, or *default* if missing or unparseable."""
        value = self._values.get(key)
        if value is None or isinstance(value, bool):
            return default
        try:
            return float(value)
        except (TypeError, ValueError):
            return default

    def get_json_list(self, key: str, default: list[Any]) -> list[Any]:
        """Return *key* as a list, decoding JSON strings when necessary.

        A missing key, invalid JSON, or JSON that is not an array all return a
        copy of *default*.
        """
        value = self._values.get(key)
        if value is None:
            return list(default)
        if isinstance(value, (list, tuple)):
            return list(value)
        if isinstance(value, str):
            try:
                decoded = json.loads(value)
            except ValueError:
                return list(default)
            if isinstance(decoded, list):
                return decoded
        return list(default)

    def with_overrides(self, **values: Any) -> "MappingSettings":
        """Return a new snapshot with *values* layered on top."""
        return MappingSettings({**self._values, **values})
