"""Burrow error hierarchy.

All burrow-specific errors inherit from BurrowError for easy catching.
"""


class BurrowError(Exception):
    """Base error for all burrow operations."""


class ConfigError(BurrowError):
    """Invalid or missing configuration."""


class ContentError(BurrowError):
    """Error reading a content backend (records, documents, front matter)."""


class RouteError(BurrowError):
    """The host route table could not be read or introspected."""


class SourceError(BurrowError):
    """A source failed while collecting entries."""
