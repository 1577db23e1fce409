"""Export layer — serialized forms of collected entries.

Renders entries as sitemap XML.  Output is returned as a string; the engine
never writes files.
"""

from burrow.export.sitemap import render_sitemap

__all__ = ["render_sitemap"]
