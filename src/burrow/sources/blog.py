"""Blog source — blog listings and posts, per language.

Paths are ``<prefix>/<blog>`` for a listing and ``<prefix>/<blog>/<post>``
for a post, where the prefix comes from ``sitemap_blog_prefix`` (default
none).  A post is emitted only when it is published, not excluded, and
exists in the requested language; a blog listing only when the blog has at
least one such post.

Posts in timestamp mode (``mode: timestamp`` on the post or the blog index)
are addressed by publication date instead of slug: ``<prefix>/<blog>/<date>``,
or ``<prefix>/<blog>/<date>/<HH:MM>`` when the blog has several timestamp
posts on that date.
"""

from __future__ import annotations

import re
from collections import Counter
from datetime import datetime, time
from typing import TYPE_CHECKING, Any

from burrow.entry import parse_lastmod
from burrow.sources.base import CollectOptions, Source, is_excluded, slug_title

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    from burrow._errors import ContentError
    from burrow.content.backends import Blog, BlogBackend, BlogPost
    from burrow.entry import UrlEntry
    from burrow.observability.recorder import EventRecorder
    from burrow.settings import SettingsReader

TIMESTAMP_MODE = "timestamp"

_CLOCK = re.compile(r"^(\d{1,2}):(\d{2})")


class BlogSource(Source):
    """Listing plus post entries for every blog.

    Args:
        settings: Read-only settings.
        backend: Blog storage; the source is disabled without one.
        recorder: Event recorder.

    """

    name = "blog"

    def __init__(
        self,
        settings: SettingsReader,
        backend: BlogBackend | None = None,
        *,
        recorder: EventRecorder | None = None,
    ) -> None:
        super().__init__(settings, recorder=recorder)
        self._backend = backend

    def _available(self) -> bool:
        return self._backend is not None

    def _collect(self, opts: CollectOptions) -> list[UrlEntry]:
        assert self._backend is not None
        prefix = self._settings.get_str("sitemap_blog_prefix", "") or ""
        language = None if opts.language.single_language_mode else opts.language.requested_language

        listings: list[UrlEntry] = []
        posts: list[UrlEntry] = []
        for blog in self._backend.list_blogs(on_error=self._on_error):
            if is_excluded(blog.metadata):
                continue
            blog_posts = [
                p for p in self._backend.list_posts(blog.slug, language, on_error=self._on_error)
                if _is_published(p) and not is_excluded(p.metadata)
            ]
            entries = self._post_entries(opts, prefix, blog, blog_posts)
            if not entries:
                continue
            listings.append(self._entry(
                opts,
                blog_path(prefix, blog.slug),
                changefreq="daily",
                priority=0.7,
                title=blog.name,
                category=blog.name,
            ))
            posts.extend(entries)
        return listings + posts

    def _post_entries(
        self,
        opts: CollectOptions,
        prefix: str,
        blog: Blog,
        blog_posts: list[BlogPost],
    ) -> list[UrlEntry]:
        stamped: list[tuple[BlogPost, tuple[str, str] | None]] = []
        for post in blog_posts:
            if not is_timestamp_mode(post.metadata, blog.metadata):
                stamped.append((post, None))
                continue
            stamp = post_timestamp(post.metadata)
            if stamp is None:
                self._skip(f"{blog.slug} post {post.slug!r}", "timestamp post without a date")
                continue
            stamped.append((post, stamp))

        per_day = Counter(stamp[0] for _post, stamp in stamped if stamp is not None)
        entries: list[UrlEntry] = []
        for post, stamp in stamped:
            if stamp is None:
                path = blog_path(prefix, blog.slug, post.slug)
            elif per_day[stamp[0]] > 1:
                path = blog_path(prefix, blog.slug, *stamp)
            else:
                path = blog_path(prefix, blog.slug, stamp[0])
            entries.append(self._post_entry(opts, path, blog, post))
        return entries

    def _post_entry(self, opts: CollectOptions, path: str, blog: Blog, post: BlogPost) -> UrlEntry:
        title = post.metadata.get("title")
        meta = post.metadata
        return self._entry(
            opts,
            path,
            lastmod=parse_lastmod(meta.get("updated_at") or meta.get("date") or meta.get("published_at")),
            changefreq="weekly",
            priority=0.8,
            title=title.strip() if isinstance(title, str) and title.strip() else slug_title(post.slug),
            category=blog.name,
        )

    def _on_error(self, path: Path, exc: ContentError) -> None:
        self._skip(str(path), str(exc))


def blog_path(prefix: str, *segments: str) -> str:
    """``blog_path("/blog", "news", "launch")`` -> ``"/blog/news/launch"``."""
    parts = [p for p in prefix.split("/") if p]
    parts.extend(s.strip("/") for s in segments if s.strip("/"))
    return "/" + "/".join(parts)


def is_timestamp_mode(post_meta: Mapping[str, Any], blog_meta: Mapping[str, Any]) -> bool:
    """The post's ``mode`` wins; otherwise the blog index decides."""
    mode = post_meta.get("mode") or blog_meta.get("mode")
    return isinstance(mode, str) and mode.strip().lower() == TIMESTAMP_MODE


def post_timestamp(metadata: Mapping[str, Any]) -> tuple[str, str] | None:
    """``("2025-12-09", "16:26")`` for a timestamp-mode post.

    The date comes from ``date``, else ``published_at``.  The time comes from
    ``time`` (``"16:26"`` or a ``time`` value), else from whichever of the two
    holds a full datetime, else ``00:00``.  Returns *None* without a date.

    Unquoted ``16:26`` in YAML front matter is read as a number, not a time;
    such values are ignored.

    """
    moments = [parse_lastmod(metadata.get(key)) for key in ("date", "published_at")]
    day = next((m for m in moments if m is not None), None)
    if day is None:
        return None
    day_text = day.date().isoformat() if isinstance(day, datetime) else day.isoformat()

    clock = _clock(metadata.get("time"))
    if clock is None:
        clock = next((m.strftime("%H:%M") for m in moments if isinstance(m, datetime)), "00:00")
    return day_text, clock


def _clock(value: object) -> str | None:
    if isinstance(value, time):
        return value.strftime("%H:%M")
    if isinstance(value, str):
        match = _CLOCK.match(value.strip())
        if match is not None:
            return f"{int(match.group(1)):02d}:{match.group(2)}"
    return None


def _is_published(post: BlogPost) -> bool:
    status = post.metadata.get("status")
    return isinstance(status, str) and status.strip().lower() == "published"
