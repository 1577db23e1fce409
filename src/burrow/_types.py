"""Shared type definitions for burrow."""

from typing import Literal

# Stable identifier of a source (e.g., "entities", "router_discovery")
type SourceID = str

# Route URL path or pattern (e.g., "/posts/:slug")
type RoutePath = str

# Locale code as configured (e.g., "en-US", "fr")
type LanguageCode = str

# Sitemap change-frequency hint
type ChangeFreq = Literal[
    "always",
    "hourly",
    "daily",
    "weekly",
    "monthly",
    "yearly",
    "never",
]
