"""Entity source — structured records grouped by content kind.

Each kind needs a record URL pattern.  Resolution walks a fallback chain,
first match wins:

    1. Explicit override: ``sitemap_url_pattern`` in the record's metadata,
       then in the kind's settings.
    2. Route introspection: a public GET route whose path names the kind
       (``/article/:slug``, ``/articles/:slug``) or whose handler mentions
       it, else a catch-all ``/:type/:slug`` route.
    3. ``sitemap_entity_<kind>_pattern`` setting.
    4. ``sitemap_entities_pattern`` setting with ``:kind_name`` substituted.
    5. ``/<kind>/:slug``, only when ``sitemap_entities_auto_pattern`` is on.

With no pattern the kind is skipped with a warning.  Index (listing) pages
follow a parallel chain ending in ``/<kind>`` behind
``sitemap_entities_index_auto_pattern``.

The auto-generated fallbacks are guesses; they are refused when the route
table is unavailable, since a public route cannot be confirmed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from burrow.routes.resolver import substitute
from burrow.routes.table import has_placeholder
from burrow.sources.base import CollectOptions, Source, is_excluded, slug_title

if TYPE_CHECKING:
    from burrow.content.backends import ContentKind, EntityBackend, Record
    from burrow.entry import UrlEntry
    from burrow.observability.recorder import EventRecorder
    from burrow.routes.resolver import RouteResolver
    from burrow.settings import SettingsReader

type PatternOrigin = Literal["override", "route", "kind_setting", "global_setting", "auto"]

_OVERRIDE_KEY = "sitemap_url_pattern"
_INDEX_OVERRIDE_KEY = "sitemap_index_path"


@dataclass(frozen=True, slots=True)
class PatternResolution:
    """A resolved pattern and the fallback step that produced it."""

    pattern: str
    origin: PatternOrigin

    @property
    def explicit(self) -> bool:
        return self.origin == "override"


class EntitySource(Source):
    """Record and index URLs for every published record of every kind.

    Args:
        settings: Read-only settings.
        backend: Record storage; the source is disabled without one.
        recorder: Event recorder.

    """

    name = "entities"

    def __init__(
        self,
        settings: SettingsReader,
        backend: EntityBackend | None = None,
        *,
        recorder: EventRecorder | None = None,
    ) -> None:
        super().__init__(settings, recorder=recorder)
        self._backend = backend

    def _available(self) -> bool:
        return self._backend is not None

    def _collect(self, opts: CollectOptions) -> list[UrlEntry]:
        assert self._backend is not None
        include_index = self._settings.get_bool("sitemap_entities_include_index", True)
        entries: list[UrlEntry] = []
        for kind in self._backend.list_kinds():
            entries.extend(self._collect_kind(kind, opts, include_index=include_index))
        return entries

    def _collect_kind(
        self,
        kind: ContentKind,
        opts: CollectOptions,
        *,
        include_index: bool,
    ) -> list[UrlEntry]:
        assert self._backend is not None
        resolution = self.resolve_pattern(kind, opts.routes)
        if resolution is None:
            self._skip(f"kind {kind.name!r}", "no URL pattern")
        elif not resolution.explicit and self._kind_protected(kind, opts.routes):
            self._skip(f"kind {kind.name!r}", "route requires authentication")
            resolution = None

        entries: list[UrlEntry] = []
        if include_index and resolution is not None:
            index = self._index_entry(kind, opts)
            if index is not None:
                entries.append(index)

        for record in self._backend.published_records(kind):
            if is_excluded(record.metadata):
                continue
            # Only records carrying their own override survive a kind without a pattern
            pattern = _record_override(record) or (resolution.pattern if resolution else None)
            if pattern is None:
                continue
            path = record_path(pattern, record, kind)
            if has_placeholder(path):
                self._skip(f"{kind.name} record {record.id!r}", f"unresolved placeholder in {path!r}")
                continue
            entries.append(self._entry(
                opts,
                path,
                lastmod=record.updated_at,
                changefreq="weekly",
                priority=0.8,
                title=record.title or slug_title(record.slug) or record.id,
                category=kind.label,
            ))
        return entries

    # ----- Resolution -----

    def resolve_pattern(self, kind: ContentKind, routes: RouteResolver) -> PatternResolution | None:
        """Record URL pattern for *kind* (steps 1-5 above, minus record overrides)."""
        override = _nonempty(kind.settings.get(_OVERRIDE_KEY))
        if override:
            return PatternResolution(override, "override")

        match = routes.find_kind_route(kind.name)
        if match is not None:
            return PatternResolution(match.pattern, "route")

        per_kind = self._settings.get_str(f"sitemap_entity_{kind.name}_pattern")
        if per_kind:
            return PatternResolution(per_kind, "kind_setting")

        global_pattern = self._settings.get_str("sitemap_entities_pattern")
        if global_pattern:
            return PatternResolution(substitute(global_pattern, kind_name=kind.name), "global_setting")

        if self._settings.get_bool("sitemap_entities_auto_pattern", False) and routes.available:
            return PatternResolution(f"/{kind.name}/:slug", "auto")
        return None

    def resolve_index_path(self, kind: ContentKind, routes: RouteResolver) -> str | None:
        """Listing path for *kind*, or *None* when none can be resolved."""
        override = _nonempty(kind.settings.get(_INDEX_OVERRIDE_KEY))
        if override:
            return override

        match = routes.find_kind_index(kind.name)
        if match is not None:
            if routes.is_protected(match.route):
                return None
            return match.pattern

        per_kind = self._settings.get_str(f"sitemap_entity_{kind.name}_index_path")
        if per_kind:
            return per_kind

        if self._settings.get_bool("sitemap_entities_index_auto_pattern", False) and routes.available:
            return f"/{kind.name}"
        return None

    def _kind_protected(self, kind: ContentKind, routes: RouteResolver) -> bool:
        match = routes.find_kind_route(kind.name)
        return match is not None and routes.is_protected(match.route)

    def _index_entry(self, kind: ContentKind, opts: CollectOptions) -> UrlEntry | None:
        path = self.resolve_index_path(kind, opts.routes)
        if path is None:
            return None
        path = substitute(path, kind_name=kind.name)
        if has_placeholder(path):
            self._skip(f"{kind.name} index", f"unresolved placeholder in {path!r}")
            return None
        return self._entry(
            opts,
            path,
            lastmod=kind.updated_at,
            changefreq="daily",
            priority=0.7,
            title=f"{kind.label} - Index",
            category=kind.label,
        )


def record_path(pattern: str, record: Record, kind: ContentKind) -> str:
    """Substitute record fields into *pattern*.

    ``:slug`` falls back to the record id when the slug is empty, so
    ``/:kind_name/:slug`` with kind ``article`` and slug ``hello-world``
    gives ``/article/hello-world``.

    """
    return substitute(
        pattern,
        slug=record.slug or record.id,
        id=record.id,
        kind_name=kind.name,
    )


def _record_override(record: Record) -> str | None:
    return _nonempty(record.metadata.get(_OVERRIDE_KEY))


def _nonempty(value: object) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None
