"""Load BurrowConfig and settings from burrow.yaml if present.

Merges file config with CLI kwargs. CLI overrides file.  The same file may
carry a ``settings:`` section, which becomes the run's settings provider.
"""

from __future__ import annotations

from pathlib import Path

from burrow.config import BurrowConfig
from burrow.settings import MappingSettings

_CONFIG_KEYS = (
    "base_url", "routes_dir", "pages_dir", "blog_dir", "records_file",
    "source_timeout", "max_workers",
)


def load_config(root: Path, **overrides: object) -> BurrowConfig:
    """Load BurrowConfig from root, optionally merging burrow.yaml.

    Looks for burrow.yaml, burrow.yml, or burrow.toml in root. If found, loads
    and merges with overrides. Overrides take precedence; ``None`` overrides
    are ignored so unset CLI flags do not clobber file values.
    """
    file_config = _flatten_burrow_section(_read_burrow_file(root))
    merged = {**file_config, **{k: v for k, v in overrides.items() if v is not None}}
    return BurrowConfig(root=root, **merged)


def load_settings(root: Path) -> MappingSettings:
    """Return the ``settings:`` section of the burrow config file.

    Missing files or a missing/invalid section yield empty settings, so every
    lookup falls back to its documented default.
    """
    data = _read_burrow_file(root)
    section = data.get("settings")
    if not isinstance(section, dict):
        return MappingSettings()
    return MappingSettings({str(k): v for k, v in section.items()})


def _read_burrow_file(root: Path) -> dict[str, object]:
    """Read burrow config from yaml/toml if present. Returns empty dict otherwise."""
    for name in ("burrow.yaml", "burrow.yml"):
        path = root / name
        if path.is_file():
            return _parse_yaml(path)
    toml_path = root / "burrow.toml"
    if toml_path.is_file():
        return _parse_toml(toml_path)
    return {}


def _parse_yaml(path: Path) -> dict[str, object]:
    """Parse YAML config. Returns empty dict on error."""
    import yaml

    try:
        data = yaml.safe_load(path.read_text()) or {}
    except (OSError, yaml.YAMLError):
        return {}
    if not isinstance(data, dict):
        return {}
    return data


def _parse_toml(path: Path) -> dict[str, object]:
    """Parse TOML config. Returns empty dict on error."""
    import tomllib

    try:
        data = tomllib.loads(path.read_text())
    except (OSError, tomllib.TOMLDecodeError):
        return {}
    return data


def _flatten_burrow_section(data: dict[str, object]) -> dict[str, object]:
    """Extract burrow.* keys (and known top-level keys) into config kwargs."""
    result: dict[str, object] = {}
    section = data.get("burrow")
    if isinstance(section, dict):
        for k, v in section.items():
            if k in _CONFIG_KEYS:
                result[k] = v
    for k, v in data.items():
        if k in _CONFIG_KEYS:
            result[k] = v
    return result
