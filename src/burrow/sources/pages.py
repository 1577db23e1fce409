"""Page source — published markdown pages from a content directory.

Pages live under one directory, scanned recursively.  A page is included
when its front matter says ``status: published`` and it is not marked
``sitemap_exclude``.

The URL prefix is never guessed:

    1. Route introspection: a GET route with ``:slug`` or ``*path`` whose
       handler mentions "page" or "content"; its prefix is used.
    2. ``sitemap_pages_prefix`` setting.
    3. Neither: pages are left out, with a warning.

``guides/install.md`` under prefix ``/pages`` becomes ``/pages/guides/install``;
``index.md`` maps to its folder.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from burrow.content.scanner import scan_documents
from burrow.entry import parse_lastmod
from burrow.routes.resolver import extract_prefix
from burrow.sources.base import CollectOptions, Source, is_excluded, slug_title

if TYPE_CHECKING:
    from burrow._errors import ContentError
    from burrow.content.scanner import Document
    from burrow.entry import UrlEntry
    from burrow.observability.recorder import EventRecorder
    from burrow.settings import SettingsReader

_INDEX_STEM = "index"


class PageSource(Source):
    """One entry per published markdown page.

    Args:
        settings: Read-only settings.
        root: Pages directory.  The source is disabled when it is missing.
        recorder: Event recorder.

    """

    name = "pages"

    def __init__(
        self,
        settings: SettingsReader,
        root: Path | None = None,
        *,
        recorder: EventRecorder | None = None,
    ) -> None:
        super().__init__(settings, recorder=recorder)
        self._root = root

    def _available(self) -> bool:
        return self._root is not None and self._root.is_dir()

    def _collect(self, opts: CollectOptions) -> list[UrlEntry]:
        assert self._root is not None
        prefix = self._resolve_prefix(opts)
        if prefix is None:
            self._skip("pages", "no URL prefix (route or sitemap_pages_prefix)")
            return []

        entries: list[UrlEntry] = []
        for doc in scan_documents(self._root, on_error=self._on_error):
            if not doc.is_published or is_excluded(doc.metadata):
                continue
            entries.append(self._entry(
                opts,
                page_path(prefix, doc.relative),
                lastmod=parse_lastmod(doc.metadata.get("updated_at") or doc.metadata.get("date")),
                changefreq="monthly",
                priority=0.7,
                title=_title(doc),
                category="Pages",
            ))
        return entries

    def _resolve_prefix(self, opts: CollectOptions) -> str | None:
        route = opts.routes.find_pages_route()
        if route is not None:
            if opts.routes.is_protected(route):
                self._skip(f"route {route.path!r}", "route requires authentication")
                return None
            return extract_prefix(route.path)
        return self._settings.get_str("sitemap_pages_prefix")

    def _on_error(self, path: Path, exc: ContentError) -> None:
        self._skip(str(path), str(exc))


def page_path(prefix: str, relative: str) -> str:
    """Join *prefix* and a document path, mapping ``index`` to its folder."""
    parts = [p for p in relative.split("/") if p]
    if parts and parts[-1] == _INDEX_STEM:
        parts.pop()
    base = "/" + prefix.strip("/") if prefix.strip("/") else ""
    if not parts:
        return base or "/"
    return f"{base}/{'/'.join(parts)}"


def _title(doc: Document) -> str:
    title = doc.metadata.get("title")
    if isinstance(title, str) and title.strip():
        return title.strip()
    stem = doc.relative.rsplit("/", 1)[-1]
    if stem == _INDEX_STEM and "/" in doc.relative:
        stem = doc.relative.rsplit("/", 2)[-2]
    return slug_title(stem)
