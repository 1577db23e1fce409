"""Burrow application wiring — from a site root to a ready Collector.

``build_collector`` assembles the standard sources over a site directory::

    site/
      burrow.yaml          # burrow: {...} config, settings: {...}
      routes/              # host route modules (read, never served)
      records.yaml         # entity kinds, posts and the shop catalog
      content/pages/       # markdown pages
      content/blog/        # one directory per blog

``collect`` is the one-call entry point used by the CLI.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from burrow.collector import Collector
from burrow.config_loader import load_config, load_settings
from burrow.content.backends import FilesystemBlogBackend, LazyRecordStore
from burrow.language import default_context, resolve_languages
from burrow.observability.recorder import EventRecorder
from burrow.routes.table import RouteTable
from burrow.sources import default_sources

if TYPE_CHECKING:
    from burrow.config import BurrowConfig
    from burrow.content.backends import BlogBackend, EntityBackend, PostBackend, ShopBackend
    from burrow.entry import UrlEntry
    from burrow.language import LanguageContext
    from burrow.settings import SettingsReader


def build_collector(
    config: BurrowConfig,
    settings: SettingsReader | None = None,
    *,
    entity_backend: EntityBackend | None = None,
    post_backend: PostBackend | None = None,
    blog_backend: BlogBackend | None = None,
    shop_backend: ShopBackend | None = None,
    recorder: EventRecorder | None = None,
) -> Collector:
    """Wire the standard sources for the site at ``config.root``.

    Backends not passed explicitly are derived from the site layout:
    ``records.yaml`` feeds entities, posts and the shop, the blog directory
    feeds the blog source.  Missing files leave the matching source disabled.

    The route table is read from ``routes/`` at the start of every run; a
    missing directory means no host router, a broken module means the table
    is unavailable for that run.

    """
    if settings is None:
        settings = load_settings(config.root)
    recorder = recorder if recorder is not None else EventRecorder()

    if config.records_path.is_file():
        store = LazyRecordStore(config.records_path)
        entity_backend = entity_backend if entity_backend is not None else store
        post_backend = post_backend if post_backend is not None else store
        shop_backend = shop_backend if shop_backend is not None else store

    if blog_backend is None and config.blog_path.is_dir():
        default_language = default_context(settings).requested_language or "en"
        languages = [lang.code for lang in resolve_languages(settings)]
        blog_backend = FilesystemBlogBackend(config.blog_path, default_language, languages)

    sources = default_sources(
        settings,
        entity_backend=entity_backend,
        post_backend=post_backend,
        blog_backend=blog_backend,
        shop_backend=shop_backend,
        pages_root=config.pages_path,
        recorder=recorder,
    )

    routes_path = config.routes_path

    def load_routes() -> RouteTable | None:
        if not routes_path.is_dir():
            return None
        return RouteTable.from_routes_dir(routes_path)

    return Collector(
        sources,
        settings,
        routes=load_routes,
        recorder=recorder,
        timeout=config.source_timeout or None,
        max_workers=config.max_workers,
        base_url=config.base_url or None,
    )


def collect(
    root: str | Path = ".",
    *,
    language: LanguageContext | str | None = None,
    all_languages: bool = False,
    recorder: EventRecorder | None = None,
    **overrides: object,
) -> list[UrlEntry]:
    """Collect entries for the site at *root*.

    Args:
        root: Site root directory.
        language: Language to collect (default: the install's default).
        all_languages: Collect every configured language with hreflang
            alternates instead of a single language.
        recorder: Event recorder (a fresh one by default).
        **overrides: ``BurrowConfig`` fields that win over ``burrow.yaml``.

    """
    root_path = Path(root).resolve()
    config = load_config(root_path, **overrides)
    collector = build_collector(config, recorder=recorder)
    if all_languages:
        return collector.collect_all()
    return collector.collect(language)
