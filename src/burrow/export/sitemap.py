"""Sitemap rendering — turn collected entries into sitemap XML.

Produces a standard ``urlset`` document.  Entries with ``alternates`` get
``xhtml:link rel="alternate"`` children for hreflang.  Only a string is
returned; writing it anywhere is the caller's business.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from xml.etree.ElementTree import Element, SubElement, tostring

from burrow.entry import format_lastmod

if TYPE_CHECKING:
    from collections.abc import Iterable

    from burrow.entry import UrlEntry

# XML namespaces for sitemaps and hreflang links
_SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"
_XHTML_NS = "http://www.w3.org/1999/xhtml"


def render_sitemap(entries: Iterable[UrlEntry]) -> str:
    """Render *entries* as a sitemap XML string.

    Entries are written in the given order.  ``lastmod`` is omitted when
    unknown; ``priority`` is written with one decimal.

    Returns:
        Complete XML document, UTF-8 declaration included.

    """
    entries = list(entries)
    urlset = Element("urlset")
    urlset.set("xmlns", _SITEMAP_NS)
    if any(entry.alternates for entry in entries):
        urlset.set("xmlns:xhtml", _XHTML_NS)

    for entry in entries:
        url_el = SubElement(urlset, "url")
        SubElement(url_el, "loc").text = entry.loc

        lastmod = format_lastmod(entry.lastmod)
        if lastmod is not None:
            SubElement(url_el, "lastmod").text = lastmod

        SubElement(url_el, "changefreq").text = entry.changefreq
        SubElement(url_el, "priority").text = f"{entry.priority:.1f}"

        for alt in entry.alternates:
            link = SubElement(url_el, "xhtml:link")
            link.set("rel", "alternate")
            link.set("hreflang", alt.hreflang)
            link.set("href", alt.href)

    xml = tostring(urlset, encoding="unicode", xml_declaration=False)
    return '<?xml version="1.0" encoding="UTF-8"?>\n' + xml + "\n"
