"""Source contract — one pluggable collector per content backend.

A source knows how to enumerate its own backend and turn what it finds into
``UrlEntry`` values.  The public ``collect()`` is a template method: it runs
the subclass's ``_collect()`` inside a failure boundary, so an unreachable
backend, malformed metadata, or a bad pattern costs that source its entries
and nothing else.

Settings, backends and the event recorder are injected at construction.
Per-run state (language, base URL, route resolver) arrives in
``CollectOptions``.

Thread Safety:
    Sources hold only construction-time references and keep no per-run
    state on ``self``.  The collector calls each source from its own worker
    thread.

"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar, final

from burrow.entry import UrlEntry
from burrow.language import LanguageContext, build_localized_path, normalize_path
from burrow.observability.recorder import EventRecorder

if TYPE_CHECKING:
    from collections.abc import Mapping

    from burrow._types import SourceID
    from burrow.routes.resolver import RouteResolver
    from burrow.settings import SettingsReader


@dataclass(frozen=True, slots=True)
class CollectOptions:
    """Per-run inputs shared by every source.

    Attributes:
        language: Language being collected.
        base_url: Absolute site URL (``https://example.com``), no trailing slash.
        routes: Resolver over the host route table, built once per run.

    """

    language: LanguageContext
    base_url: str
    routes: RouteResolver


class Source(ABC):
    """Base class for every source.

    Subclasses set ``name`` and implement ``_collect``.  They may override
    ``_available`` with a cheap precondition (a backend is configured, a
    directory exists).

    Args:
        settings: Read-only settings.
        recorder: Where warnings and skip events go.

    """

    name: ClassVar[SourceID] = ""

    def __init__(
        self,
        settings: SettingsReader,
        *,
        recorder: EventRecorder | None = None,
    ) -> None:
        self._settings = settings
        self._recorder = recorder if recorder is not None else EventRecorder()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"

    @property
    def settings(self) -> SettingsReader:
        return self._settings

    def setting_key(self, suffix: str) -> str:
        """Namespaced settings key: ``sitemap_<name>_<suffix>``."""
        return f"sitemap_{self.name}_{suffix}"

    @final
    def enabled(self) -> bool:
        """True when the feature flag is on and the precondition holds.

        Never raises; an error while checking counts as disabled.
        """
        try:
            if not self._settings.get_bool(self.setting_key("enabled"), True):
                return False
            return self._available()
        except Exception:
            return False

    @final
    def collect(self, opts: CollectOptions) -> list[UrlEntry]:
        """Enumerate this source's entries for one language.

        Never raises.  Any failure is recorded as a ``SourceFailed`` event,
        printed as a warning, and yields an empty list.
        """
        if self._settings.get_bool(self.setting_key("default_language_only"), False) and (
            not opts.language.is_default_language
        ):
            return []
        t0 = time.perf_counter()
        try:
            entries = list(self._collect(opts))
        except Exception as exc:
            self._recorder.record_failure(self.name, exc)
            return []
        self._recorder.record_collected(
            self.name,
            len(entries),
            duration_ms=(time.perf_counter() - t0) * 1000,
            language=opts.language.requested_language,
        )
        return entries

    def _available(self) -> bool:
        return True

    @abstractmethod
    def _collect(self, opts: CollectOptions) -> list[UrlEntry]:
        """Produce entries; may raise, the caller contains it."""

    # ----- Helpers for subclasses -----

    def _entry(
        self,
        opts: CollectOptions,
        path: str,
        *,
        canonical_path: str | None = None,
        **fields: Any,
    ) -> UrlEntry:
        """Build an entry for *path* in the run's language.

        *canonical_path* groups language variants whose paths differ (a
        translated slug); it defaults to *path*.
        """
        local = normalize_path(path)
        return UrlEntry(
            loc=build_url(opts.base_url, localize(local, opts.language)),
            canonical_path=normalize_path(canonical_path) if canonical_path else local,
            source=self.name,
            **fields,
        )

    def _skip(self, subject: str, reason: str) -> None:
        self._recorder.record_skip(self.name, subject, reason)


def build_url(base_url: str, path: str) -> str:
    """Join *base_url* and a root-relative *path*.

    ``("https://example.com/", "/about")`` -> ``"https://example.com/about"``.

    """
    return base_url.rstrip("/") + normalize_path(path)


def localize(path: str, language: LanguageContext) -> str:
    """Apply the locale segment of *language* to canonical *path*."""
    return build_localized_path(path, language)


def is_excluded(metadata: Mapping[str, Any] | None) -> bool:
    """True when *metadata* carries ``sitemap_exclude: true`` (bool or string)."""
    if not metadata:
        return False
    value = metadata.get("sitemap_exclude")
    if value is True:
        return True
    return isinstance(value, str) and value.strip().lower() == "true"


def slug_title(slug: str) -> str:
    """``"hello-world"`` -> ``"Hello World"``."""
    words = slug.replace("_", " ").replace("-", " ").split()
    return " ".join(w[:1].upper() + w[1:] for w in words)
