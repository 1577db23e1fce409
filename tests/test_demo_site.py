"""End-to-end run over examples/demo-site."""

from __future__ import annotations

from pathlib import Path

import pytest

from burrow import collect, render_sitemap
from burrow.observability import EventRecorder

DEMO = Path(__file__).resolve().parents[1] / "examples" / "demo-site"

pytestmark = pytest.mark.skipif(not DEMO.is_dir(), reason="demo site not present")


class TestDemoSite:
    def test_default_language(self, recorder: EventRecorder) -> None:
        paths = [e.canonical_path for e in collect(DEMO, recorder=recorder)]
        assert paths == [
            "/",
            "/pricing",
            "/press-kit",
            "/articles",
            "/articles/hello-world",
            "/articles/routing-in-depth",
            "/shop",
            "/shop/burrow-pro",
            "/docs/guides",
            "/docs/guides/install",
            "/docs/terms",
            "/posts",
            "/posts/launch",
            "/blog/news",
            "/blog/news/release-1-0",
            "/about",
            "/search",
        ]

    def test_default_language_is_prefixed(self, recorder: EventRecorder) -> None:
        entries = collect(DEMO, recorder=recorder)
        assert entries[0].loc == "https://demo.example.com/en"
        assert entries[-2].title == "About us"

    def test_private_routes_absent(self, recorder: EventRecorder) -> None:
        locs = " ".join(e.loc for e in collect(DEMO, recorder=recorder))
        for fragment in ("/dashboard", "/members", "/health", "/users/log-in", "/engineering"):
            assert fragment not in locs

    def test_french_sitemap(self, recorder: EventRecorder) -> None:
        entries = collect(DEMO, all_languages=True, recorder=recorder)
        release = next(e for e in entries if e.loc == "https://demo.example.com/fr/blog/news/release-1-0")
        assert release.title == "Version 1.0"
        assert {a.hreflang for a in release.alternates} == {"en", "fr", "x-default"}

        xml = render_sitemap(entries)
        assert 'hreflang="x-default" href="https://demo.example.com/en/blog/news/release-1-0"' in xml
