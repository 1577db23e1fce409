"""Collector — runs every enabled source and merges the results.

One run:

1. Check ``site_url``; without an absolute base URL there is nothing to
   build and the run returns ``[]``.
2. Read the host route table once into a ``RouteResolver`` with this run's
   ``ProtectionPolicy``.
3. Start every enabled source on its own daemon thread (sources are I/O
   bound and share nothing mutable); ``max_workers`` caps how many run at
   once.
4. Gather results in *registration* order, not completion order.  A source
   that exceeds the per-source timeout counts as failed and contributes
   nothing.
5. Deduplicate by ``loc``, first occurrence wins.  No re-sorting.

``collect_all()`` repeats the run for every configured language and links
the variants of each canonical path through hreflang ``alternates``.

Thread Safety:
    A ``Collector`` holds only configuration.  Concurrent ``collect()``
    calls each get their own threads and resolver.

"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterable, Sequence
from dataclasses import replace
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

from burrow._errors import SourceError
from burrow.entry import Alternate, UrlEntry
from burrow.language import (
    LanguageContext,
    context_for,
    default_context,
    extract_base,
    language_contexts,
    resolve_languages,
)
from burrow.observability.recorder import EventRecorder
from burrow.routes.resolver import ProtectionPolicy, RouteResolver
from burrow.routes.table import RouteTable
from burrow.sources.base import CollectOptions

if TYPE_CHECKING:
    from burrow.settings import SettingsReader
    from burrow.sources.base import Source

type RouteSource = Callable[[], RouteTable | None] | RouteTable | None

DEFAULT_SOURCE_TIMEOUT = 60.0
X_DEFAULT = "x-default"


class Collector:
    """Aggregates entries from a static, ordered list of sources.

    Args:
        sources: Sources in collection (and deduplication) order.
        settings: Read-only settings (``site_url``, languages, timeouts).
        routes: The host route table, a zero-argument loader for it, or
            *None* when there is no host router.  A loader is called once
            per run; if it raises, the run proceeds with routes unavailable.
        recorder: Event recorder shared with the sources.
        timeout: Per-source timeout in seconds.  *None* reads
            ``sitemap_source_timeout`` (default 60).  Zero or less disables it.
        max_workers: Most sources running at once; 0 means no limit.
        base_url: Overrides the ``site_url`` setting.

    Raises:
        SourceError: If two sources share a name, or a source has none.

    """

    __slots__ = (
        "_base_url",
        "_max_workers",
        "_recorder",
        "_routes",
        "_settings",
        "_sources",
        "_timeout",
    )

    def __init__(
        self,
        sources: Sequence[Source],
        settings: SettingsReader,
        *,
        routes: RouteSource = None,
        recorder: EventRecorder | None = None,
        timeout: float | None = None,
        max_workers: int = 0,
        base_url: str | None = None,
    ) -> None:
        self._sources: tuple[Source, ...] = tuple(sources)
        _check_names(self._sources)
        self._settings = settings
        self._routes = routes
        self._recorder = recorder if recorder is not None else EventRecorder()
        if timeout is None:
            timeout = settings.get_float("sitemap_source_timeout", DEFAULT_SOURCE_TIMEOUT)
        self._timeout = timeout if timeout > 0 else None
        self._max_workers = max_workers
        self._base_url = base_url

    @property
    def sources(self) -> tuple[Source, ...]:
        return self._sources

    @property
    def recorder(self) -> EventRecorder:
        return self._recorder

    @property
    def base_url(self) -> str:
        """The configured base URL without trailing slash (may be empty)."""
        value = self._base_url or self._settings.get_str("site_url", "") or ""
        return value.strip().rstrip("/")

    # ----- Public API -----

    def collect(self, language: LanguageContext | str | None = None) -> list[UrlEntry]:
        """Collect entries for one language.

        *language* may be a ready context, a locale code, or *None* for the
        install's default language.  Never raises because of a source.
        """
        context = self._context(language)
        if not self._check_base_url():
            return []
        return self._run(context, self._resolver())

    def collect_all(self) -> list[UrlEntry]:
        """Collect every configured language and fill hreflang alternates.

        Entries are returned grouped by language, in configured language
        order.  In single-language mode this is the same as ``collect()``.
        """
        contexts = language_contexts(resolve_languages(self._settings))
        if not self._check_base_url():
            return []
        resolver = self._resolver()
        per_language = [(ctx, self._run(ctx, resolver)) for ctx in contexts]
        if len(contexts) <= 1:
            return per_language[0][1] if per_language else []
        return link_alternates(per_language)

    # ----- Internals -----

    def _context(self, language: LanguageContext | str | None) -> LanguageContext:
        if isinstance(language, LanguageContext):
            return language
        if language is None:
            return default_context(self._settings)
        return context_for(self._settings, language)

    def _check_base_url(self) -> bool:
        base = self.base_url
        parts = urlsplit(base)
        if parts.scheme and parts.netloc:
            return True
        if base:
            self._recorder.warn(f"site_url {base!r} is not an absolute URL; nothing collected")
        else:
            self._recorder.warn("site_url is not set; nothing collected")
        return False

    def _resolver(self) -> RouteResolver:
        policy = ProtectionPolicy.from_settings(self._settings)
        return RouteResolver.load(self._routes, policy, self._recorder)

    def _run(self, context: LanguageContext, resolver: RouteResolver) -> list[UrlEntry]:
        t0 = time.perf_counter()
        opts = CollectOptions(language=context, base_url=self.base_url, routes=resolver)
        enabled = [source for source in self._sources if source.enabled()]

        results: list[list[UrlEntry]] = []
        if enabled:
            results = self._gather(enabled, opts)

        entries, duplicates = dedupe(chain_results(results))
        self._recorder.record_finished(
            language=context.requested_language,
            sources_run=len(enabled),
            entries=len(entries),
            duplicates=duplicates,
            duration_ms=(time.perf_counter() - t0) * 1000,
        )
        return entries

    def _gather(self, sources: list[Source], opts: CollectOptions) -> list[list[UrlEntry]]:
        """Run *sources* concurrently; results come back in *sources* order."""
        gate = threading.BoundedSemaphore(self._max_workers or len(sources))
        runs = [_SourceRun(source, opts, gate) for source in sources]
        for run in runs:
            run.start()
        deadline = None if self._timeout is None else time.monotonic() + self._timeout
        return [self._result(run, deadline) for run in runs]

    def _result(self, run: _SourceRun, deadline: float | None) -> list[UrlEntry]:
        remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
        if not run.done.wait(remaining):
            run.abandon()
            self._recorder.record_failure(
                run.source.name,
                f"no result within {self._timeout:g}s",
                timed_out=True,
            )
            return []
        if run.error is not None:
            self._recorder.record_failure(run.source.name, run.error)
            return []
        return run.result


class _SourceRun:
    """One source call on a daemon thread.

    A run past its deadline is left behind, still running; being a daemon
    thread it does not hold up interpreter exit.  *gate* bounds how many
    sources run at once; a run abandoned before it gets through the gate
    never calls its source.
    """

    __slots__ = ("_abandoned", "_gate", "_opts", "_thread", "done", "error", "result", "source")

    def __init__(self, source: Source, opts: CollectOptions, gate: threading.BoundedSemaphore) -> None:
        self.source = source
        self.result: list[UrlEntry] = []
        self.error: BaseException | None = None
        self.done = threading.Event()
        self._abandoned = threading.Event()
        self._gate = gate
        self._opts = opts
        self._thread = threading.Thread(
            target=self._run,
            name=f"burrow-source-{source.name}",
            daemon=True,
        )

    def start(self) -> None:
        self._thread.start()

    def abandon(self) -> None:
        self._abandoned.set()

    def _run(self) -> None:
        try:
            with self._gate:
                if self._abandoned.is_set():
                    return
                self.result = self.source.collect(self._opts)
        except Exception as exc:
            self.error = exc
        finally:
            self.done.set()


def _check_names(sources: Sequence[Source]) -> None:
    seen: set[str] = set()
    for source in sources:
        if not source.name:
            msg = f"{type(source).__name__} has no name"
            raise SourceError(msg)
        if source.name in seen:
            msg = f"Duplicate source name {source.name!r}"
            raise SourceError(msg)
        seen.add(source.name)


def chain_results(results: Iterable[Iterable[UrlEntry]]) -> list[UrlEntry]:
    """Flatten per-source results, keeping source order."""
    return [entry for entries in results for entry in entries]


def dedupe(entries: Iterable[UrlEntry]) -> tuple[list[UrlEntry], int]:
    """Drop repeated ``loc`` values, keeping the first.

    Returns:
        The unique entries in input order and the number dropped.

    """
    seen: set[str] = set()
    unique: list[UrlEntry] = []
    dropped = 0
    for entry in entries:
        if entry.loc in seen:
            dropped += 1
            continue
        seen.add(entry.loc)
        unique.append(entry)
    return unique, dropped


def link_alternates(
    per_language: Sequence[tuple[LanguageContext, list[UrlEntry]]],
) -> list[UrlEntry]:
    """Attach hreflang alternates to entries sharing a canonical path.

    Each entry of a path available in two or more languages gets one
    ``Alternate`` per language (base sub-tag) plus ``x-default`` pointing at
    the default language's variant, when there is one.  Paths available in a
    single language are left without alternates.
    """
    variants: dict[str, dict[str, str]] = {}
    default_locs: dict[str, str] = {}
    for context, entries in per_language:
        code = extract_base(context.requested_language or "")
        for entry in entries:
            by_language = variants.setdefault(entry.canonical_path, {})
            by_language.setdefault(code, entry.loc)
            if context.is_default_language:
                default_locs.setdefault(entry.canonical_path, entry.loc)

    linked: list[UrlEntry] = []
    for _context, entries in per_language:
        for entry in entries:
            by_language = variants[entry.canonical_path]
            if len(by_language) < 2:
                linked.append(entry)
                continue
            alternates = [Alternate(hreflang=code, href=loc) for code, loc in by_language.items()]
            default_loc = default_locs.get(entry.canonical_path)
            if default_loc is not None:
                alternates.append(Alternate(hreflang=X_DEFAULT, href=default_loc))
            linked.append(replace(entry, alternates=tuple(alternates)))
    return linked
