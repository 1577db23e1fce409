"""UrlEntry — one discoverable location with sitemap metadata.

Every source emits ``UrlEntry`` values.  Entries are frozen; the collector
derives new ones (e.g. with ``alternates`` filled in) via
``dataclasses.replace``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any
from urllib.parse import urlsplit

from burrow._types import ChangeFreq, SourceID

VALID_CHANGEFREQ: frozenset[str] = frozenset({
    "always",
    "hourly",
    "daily",
    "weekly",
    "monthly",
    "yearly",
    "never",
})

DEFAULT_PRIORITY = 0.5


@dataclass(frozen=True, slots=True)
class Alternate:
    """A language variant of an entry, for hreflang links.

    Attributes:
        hreflang: Base language code (``"en"``) or ``"x-default"``.
        href: Absolute URL of that variant.

    """

    hreflang: str
    href: str


@dataclass(frozen=True, slots=True)
class UrlEntry:
    """A single discoverable URL.

    Attributes:
        loc: Absolute URL.  Unique key for deduplication.
        canonical_path: Root-relative path without any locale prefix.  Groups
            language variants of the same content.
        lastmod: Last modification time, or *None* when unknown.
        changefreq: Change-frequency hint.
        priority: Relative priority, 0.0-1.0.
        title: Human-readable title.
        category: Grouping label (content-type name, blog name, ...).
        source: Identifier of the producing source.
        alternates: Language variants, filled by multi-language collection.

    Raises:
        ValueError: If ``loc`` is not absolute or ``canonical_path`` is not
            root-relative.

    """

    loc: str
    canonical_path: str
    lastmod: datetime | date | None = None
    changefreq: ChangeFreq = "weekly"
    priority: float = DEFAULT_PRIORITY
    title: str = ""
    category: str = ""
    source: SourceID = ""
    alternates: tuple[Alternate, ...] = field(default=())

    def __post_init__(self) -> None:
        parts = urlsplit(self.loc)
        if not parts.scheme or not parts.netloc:
            msg = f"UrlEntry.loc must be an absolute URL, got {self.loc!r}"
            raise ValueError(msg)
        if not self.canonical_path.startswith("/"):
            msg = f"UrlEntry.canonical_path must be root-relative, got {self.canonical_path!r}"
            raise ValueError(msg)
        object.__setattr__(self, "priority", normalize_priority(self.priority))
        object.__setattr__(self, "changefreq", normalize_changefreq(self.changefreq))

    def to_dict(self) -> dict[str, Any]:
        """Plain-data form for JSON output."""
        return {
            "loc": self.loc,
            "canonical_path": self.canonical_path,
            "lastmod": format_lastmod(self.lastmod),
            "changefreq": self.changefreq,
            "priority": self.priority,
            "title": self.title,
            "category": self.category,
            "source": self.source,
            "alternates": [
                {"hreflang": alt.hreflang, "href": alt.href} for alt in self.alternates
            ],
        }


def normalize_priority(value: object, default: float = DEFAULT_PRIORITY) -> float:
    """Coerce *value* to a priority in ``[0.0, 1.0]`` rounded to one decimal.

    Accepts floats, ints and numeric strings.  Anything else (including
    booleans and NaN) yields *default*.

    """
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return default
    if not isinstance(value, (int, float)):
        return default
    number = float(value)
    if number != number:  # NaN
        return default
    return round(min(max(number, 0.0), 1.0), 1)


def normalize_changefreq(value: object, default: ChangeFreq = "weekly") -> ChangeFreq:
    """Return *value* lowercased if it is a valid change frequency, else *default*."""
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in VALID_CHANGEFREQ:
            return lowered  # type: ignore[return-value]
    return default


def parse_lastmod(value: object) -> datetime | date | None:
    """Interpret a front-matter or record timestamp.

    ``datetime`` and ``date`` values pass through.  Strings are parsed as a
    plain ISO-8601 date first, then as a datetime.  Anything else is *None*.

    """
    if isinstance(value, (datetime, date)):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def format_lastmod(value: datetime | date | None) -> str | None:
    """ISO-8601 string for *value*, or *None*."""
    if value is None:
        return None
    return value.isoformat()
