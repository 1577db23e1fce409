"""Burrow — content discovery and URL canonicalization for sitemaps.

Aggregates publishable locations from structured records, markdown files,
and the host application's own route table into one deduplicated,
language-aware list of canonical URLs with sitemap metadata.

Quick start::

    import burrow

    entries = burrow.collect("my-site/", base_url="https://example.com")
    xml = burrow.render_sitemap(entries)

Programmatic wiring::

    from burrow import Collector, MappingSettings
    from burrow.sources import default_sources

    settings = MappingSettings({"site_url": "https://example.com"})
    collector = Collector(default_sources(settings), settings, routes=table)
    entries = collector.collect("fr-FR")

Sources, in collection order:

    static            configured URLs and the home page
    entities          structured records by content kind
    pages             published markdown pages
    posts             public posts behind a public route
    blog              blog listings and posts, per language
    router_discovery  every remaining public GET route

"""

# PEP 703: Declare this module as free-threading safe
_Py_mod_gil = 0

__version__ = "0.1.0-dev"
__all__ = [
    "BurrowConfig",
    "Collector",
    "LanguageContext",
    "MappingSettings",
    "UrlEntry",
    "__version__",
    "collect",
    "render_sitemap",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import burrow`` fast while providing a clean top-level API.
    """
    if name == "BurrowConfig":
        from burrow.config import BurrowConfig

        return BurrowConfig

    if name == "Collector":
        from burrow.collector import Collector

        return Collector

    if name == "LanguageContext":
        from burrow.language import LanguageContext

        return LanguageContext

    if name == "MappingSettings":
        from burrow.settings import MappingSettings

        return MappingSettings

    if name == "UrlEntry":
        from burrow.entry import UrlEntry

        return UrlEntry

    if name == "collect":
        from burrow.app import collect

        return collect

    if name == "render_sitemap":
        from burrow.export.sitemap import render_sitemap

        return render_sitemap

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
