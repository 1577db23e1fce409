"""Integration tests for burrow.app — a site directory end to end."""

from __future__ import annotations

import shutil
from pathlib import Path

import pytest
import yaml

from burrow import collect
from burrow.app import build_collector
from burrow.config_loader import load_config
from burrow.content.backends import RecordStore
from burrow.observability import EventLog, EventRecorder, SourceFailed

EXPECTED_PATHS = [
    # static
    "/",
    # entities
    "/articles",
    "/articles/hello-world",
    # pages
    "/pages/guides/install",
    "/pages/terms",
    # posts
    "/posts",
    "/posts/42",
    # blog
    "/blog/news",
    "/blog/news/release",
    # router discovery (/articles already taken by entities)
    "/about",
    "/pricing",
]


def _quiet() -> EventRecorder:
    return EventRecorder(EventLog(), quiet=True)


class TestCollectSite:
    def test_every_source(self, tmp_site: Path) -> None:
        entries = collect(tmp_site, recorder=_quiet())
        assert [e.canonical_path for e in entries] == EXPECTED_PATHS
        assert all(e.loc == "https://example.com" + e.canonical_path for e in entries)

    def test_sources_attributed(self, tmp_site: Path) -> None:
        by_path = {e.canonical_path: e for e in collect(tmp_site, recorder=_quiet())}
        assert by_path["/"].source == "static"
        assert by_path["/articles"].source == "entities"
        assert by_path["/pages/terms"].title == "Terms"
        assert by_path["/posts/42"].title == "Launch"
        assert by_path["/blog/news/release"].category == "News"
        assert by_path["/about"].source == "router_discovery"

    def test_protected_route_absent(self, tmp_site: Path) -> None:
        locs = {e.loc for e in collect(tmp_site, recorder=_quiet())}
        assert "https://example.com/account" not in locs

    def test_override_beats_file(self, tmp_site: Path) -> None:
        entries = collect(tmp_site, recorder=_quiet(), base_url="https://cdn.example.net")
        assert entries[0].loc == "https://cdn.example.net/"

    def test_idempotent(self, tmp_site: Path) -> None:
        assert collect(tmp_site, recorder=_quiet()) == collect(tmp_site, recorder=_quiet())


class TestDegradedSites:
    def test_broken_records_file(self, tmp_site: Path) -> None:
        (tmp_site / "records.yaml").write_text("kinds: [unclosed\n", encoding="utf-8")
        recorder = _quiet()
        paths = [e.canonical_path for e in collect(tmp_site, recorder=recorder)]
        assert "/articles/hello-world" not in paths
        assert "/posts/42" not in paths
        assert "/pages/terms" in paths
        failed = {e.source for e in recorder.log.query(event_type=SourceFailed)}
        assert failed == {"entities", "posts"}

    def test_broken_route_module(self, tmp_site: Path, capsys: pytest.CaptureFixture[str]) -> None:
        (tmp_site / "routes" / "broken.py").write_text("raise RuntimeError('boom')\n")
        paths = [e.canonical_path for e in collect(tmp_site)]
        # Routes unavailable: configured sources proceed, route-backed ones do not
        assert "/" in paths
        assert "/pages/terms" in paths
        assert "/blog/news" in paths
        assert "/posts/42" not in paths
        assert "/about" not in paths
        assert "Route table unavailable" in capsys.readouterr().err

    def test_no_routes_dir(self, tmp_site: Path) -> None:
        shutil.rmtree(tmp_site / "routes")
        paths = [e.canonical_path for e in collect(tmp_site, recorder=_quiet())]
        assert paths[0] == "/"
        assert "/articles/hello-world" not in paths

    def test_source_disabled_by_setting(self, tmp_site: Path) -> None:
        data = yaml.safe_load((tmp_site / "burrow.yaml").read_text(encoding="utf-8"))
        data["settings"]["sitemap_router_discovery_enabled"] = False
        (tmp_site / "burrow.yaml").write_text(yaml.safe_dump(data), encoding="utf-8")
        paths = [e.canonical_path for e in collect(tmp_site, recorder=_quiet())]
        assert "/about" not in paths
        assert "/articles" in paths


class TestMultiLanguageSite:
    @pytest.fixture
    def multi_site(self, tmp_site: Path) -> Path:
        data = yaml.safe_load((tmp_site / "burrow.yaml").read_text(encoding="utf-8"))
        data["settings"]["languages_enabled"] = True
        data["settings"]["languages"] = '[{"code": "en", "is_default": true}, "fr"]'
        (tmp_site / "burrow.yaml").write_text(yaml.safe_dump(data), encoding="utf-8")
        release = tmp_site / "content" / "blog" / "news" / "release.fr.md"
        release.write_text("---\ntitle: Version\nstatus: published\n---\n", encoding="utf-8")
        return tmp_site

    def test_single_language_collect(self, multi_site: Path) -> None:
        entries = collect(multi_site, language="fr", recorder=_quiet())
        assert entries[0].loc == "https://example.com/fr"
        assert "https://example.com/fr/posts/42" in {e.loc for e in entries}

    def test_all_languages(self, multi_site: Path) -> None:
        entries = collect(multi_site, all_languages=True, recorder=_quiet())
        release = [e for e in entries if e.canonical_path == "/blog/news/release"]
        assert [e.loc for e in release] == [
            "https://example.com/en/blog/news/release",
            "https://example.com/fr/blog/news/release",
        ]
        assert {a.hreflang for a in release[0].alternates} == {"en", "fr", "x-default"}


class TestBuildCollector:
    def test_explicit_backend_wins(self, tmp_site: Path) -> None:
        store = RecordStore({"kinds": [{"name": "article", "records": [{"id": 9, "slug": "injected"}]}]})
        collector = build_collector(load_config(tmp_site), entity_backend=store, recorder=_quiet())
        paths = [e.canonical_path for e in collector.collect()]
        assert "/articles/injected" in paths
        assert "/articles/hello-world" not in paths

    def test_source_order(self, tmp_site: Path) -> None:
        collector = build_collector(load_config(tmp_site), recorder=_quiet())
        assert [s.name for s in collector.sources] == [
            "static", "entities", "pages", "posts", "blog", "shop", "router_discovery",
        ]
