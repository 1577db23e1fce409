"""Shop source — catalog, category and product pages.

Paths under ``sitemap_shop_prefix`` (default ``/shop``)::

    /shop                       catalog
    /shop/category/<slug>       active categories
    /shop/product/<slug>        active products

Slugs are translated: each language gets its own slug, and an item without
a slug for the requested language is left out of that language.  The
canonical path always uses the default language's slug, so the variants of
one product share hreflang alternates.

The catalog page is listed only when the shop has an active category or
product.  Carts and checkout pages are per-user and never listed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from burrow.language import default_context
from burrow.sources.base import CollectOptions, Source, is_excluded
from burrow.sources.blog import blog_path

if TYPE_CHECKING:
    from burrow.content.backends import ShopBackend, ShopItem
    from burrow.entry import UrlEntry
    from burrow.observability.recorder import EventRecorder
    from burrow.settings import SettingsReader

DEFAULT_SHOP_PREFIX = "/shop"


class ShopSource(Source):
    """Catalog plus category and product entries.

    Enabled when a backend is configured and ``sitemap_include_shop`` is on
    (default).

    Args:
        settings: Read-only settings.
        backend: Catalog storage; the source is disabled without one.
        recorder: Event recorder.

    """

    name = "shop"

    def __init__(
        self,
        settings: SettingsReader,
        backend: ShopBackend | None = None,
        *,
        recorder: EventRecorder | None = None,
    ) -> None:
        super().__init__(settings, recorder=recorder)
        self._backend = backend

    def _available(self) -> bool:
        return self._backend is not None and self._settings.get_bool("sitemap_include_shop", True)

    def _collect(self, opts: CollectOptions) -> list[UrlEntry]:
        assert self._backend is not None
        prefix = self._settings.get_str("sitemap_shop_prefix", DEFAULT_SHOP_PREFIX) or DEFAULT_SHOP_PREFIX
        default = default_context(self._settings).requested_language or "en"
        language = default
        if not opts.language.single_language_mode:
            language = opts.language.requested_language or default

        categories = self._backend.list_active_categories()
        products = self._backend.list_active_products()
        if not categories and not products:
            return []

        entries = [self._entry(
            opts,
            shop_path(prefix),
            changefreq="daily",
            priority=0.8,
            title="Shop",
            category="Shop",
        )]
        for item in categories:
            entry = self._item_entry(
                opts, prefix, "category", item, language, default,
                priority=0.7, category="Shop > Categories", fallback_title="Category",
            )
            if entry is not None:
                entries.append(entry)
        for item in products:
            entry = self._item_entry(
                opts, prefix, "product", item, language, default,
                priority=0.8, category="Shop > Products", fallback_title="Product",
            )
            if entry is not None:
                entries.append(entry)
        return entries

    def _item_entry(
        self,
        opts: CollectOptions,
        prefix: str,
        section: str,
        item: ShopItem,
        language: str,
        default: str,
        *,
        priority: float,
        category: str,
        fallback_title: str,
    ) -> UrlEntry | None:
        if is_excluded(item.metadata):
            return None
        slug = item.slug_for(language)
        if slug is None:
            return None
        return self._entry(
            opts,
            shop_path(prefix, section, slug),
            canonical_path=shop_path(prefix, section, item.canonical_slug(default)),
            lastmod=item.updated_at,
            changefreq="weekly",
            priority=priority,
            title=item.title_for(language) or fallback_title,
            category=category,
        )


def shop_path(prefix: str, *segments: str) -> str:
    """``shop_path("/shop", "product", "boots")`` -> ``"/shop/product/boots"``."""
    return blog_path(prefix, *segments)
