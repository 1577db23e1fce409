"""Burrow configuration.

BurrowConfig is the central configuration object, frozen after creation.
"""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True, slots=True)
class BurrowConfig:
    """Configuration for a collection run.

    Attributes:
        root: Path to the site root directory (contains routes/, content/, etc.).
              Always resolved to an absolute path on construction.
        base_url: Site base URL used to build absolute ``loc`` values.  When
            empty, the ``site_url`` setting is used instead.
        routes_dir: Directory containing the host application's route modules.
        pages_dir: Directory of markdown pages scanned by the pages source.
        blog_dir: Directory of blogs scanned by the blog source.
        records_file: YAML file holding structured records (entity kinds and
            posts) for the record-backed sources.
        source_timeout: Seconds each source may run before it is treated as
            failed.  ``0`` defers to the ``sitemap_source_timeout`` setting.
        max_workers: Upper bound on concurrently running sources
            (0 = one worker per source).

    """

    root: Path = field(default_factory=Path.cwd)
    base_url: str = ""
    routes_dir: str = "routes"
    pages_dir: str = "content/pages"
    blog_dir: str = "content/blog"
    records_file: str = "records.yaml"
    source_timeout: float = 0.0
    max_workers: int = 0

    def __post_init__(self) -> None:
        if not self.root.is_absolute():
            object.__setattr__(self, "root", self.root.resolve())

    @property
    def routes_path(self) -> Path:
        """Absolute path to the route modules directory."""
        return self.root / self.routes_dir

    @property
    def pages_path(self) -> Path:
        """Absolute path to the pages directory."""
        return self.root / self.pages_dir

    @property
    def blog_path(self) -> Path:
        """Absolute path to the blog directory."""
        return self.root / self.blog_dir

    @property
    def records_path(self) -> Path:
        """Absolute path to the structured records file."""
        return self.root / self.records_file
