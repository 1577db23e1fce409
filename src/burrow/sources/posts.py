"""Post source — public posts behind a public posts route.

Posts are only listed when the host exposes a public detail route for them:
a GET route with ``:slug`` or ``:id`` whose path contains ``/posts/`` or
whose handler names "post" (but not "page").  A protected route, a missing
route, or an unreadable route table all mean no post entries.  The source
cannot confirm the URLs would resolve, so it does not guess.

Emits the listing page (the route's prefix) and one entry per public post.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from burrow.routes.resolver import extract_prefix, substitute
from burrow.routes.table import has_placeholder
from burrow.sources.base import CollectOptions, Source, is_excluded, slug_title

if TYPE_CHECKING:
    from burrow.content.backends import PostBackend
    from burrow.entry import UrlEntry
    from burrow.observability.recorder import EventRecorder
    from burrow.settings import SettingsReader

_CATEGORY = "Posts"


class PostSource(Source):
    """Listing page plus one entry per public post.

    Args:
        settings: Read-only settings.
        backend: Post storage; the source is disabled without one.
        recorder: Event recorder.

    """

    name = "posts"

    def __init__(
        self,
        settings: SettingsReader,
        backend: PostBackend | None = None,
        *,
        recorder: EventRecorder | None = None,
    ) -> None:
        super().__init__(settings, recorder=recorder)
        self._backend = backend

    def _available(self) -> bool:
        return self._backend is not None

    def _collect(self, opts: CollectOptions) -> list[UrlEntry]:
        assert self._backend is not None
        if not opts.routes.available:
            self._skip("posts", "route table unavailable")
            return []
        route = opts.routes.find_posts_route()
        if route is None:
            return []
        if opts.routes.is_protected(route):
            self._skip(f"route {route.path!r}", "route requires authentication")
            return []

        listing = extract_prefix(route.path) or "/"
        entries: list[UrlEntry] = [
            self._entry(
                opts,
                listing,
                changefreq="daily",
                priority=0.7,
                title=_CATEGORY,
                category=_CATEGORY,
            ),
        ]
        for post in self._backend.list_public_posts():
            if is_excluded(post.metadata):
                continue
            path = substitute(route.path, slug=post.slug or post.id, id=post.id)
            if has_placeholder(path):
                self._skip(f"post {post.id!r}", f"unresolved placeholder in {path!r}")
                continue
            entries.append(self._entry(
                opts,
                path,
                lastmod=post.updated_at,
                changefreq="weekly",
                priority=0.8,
                title=post.title or slug_title(post.slug) or f"Post {post.id}",
                category=_CATEGORY,
            ))
        return entries
