"""Shared test fixtures for burrow."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import yaml

from burrow.language import LanguageContext
from burrow.observability import EventLog, EventRecorder
from burrow.routes.resolver import ProtectionPolicy, RouteResolver
from burrow.routes.table import RouteInfo, RouteTable
from burrow.settings import MappingSettings
from burrow.sources.base import CollectOptions

BASE_URL = "https://example.com"


@pytest.fixture
def recorder() -> EventRecorder:
    """A quiet recorder with its own log; inspect ``recorder.log`` after a run."""
    return EventRecorder(EventLog(), quiet=True)


def make_settings(**values: Any) -> MappingSettings:
    """Settings with ``site_url`` preset."""
    return MappingSettings({"site_url": BASE_URL, **values})


def make_route(
    path: str,
    handler: object = None,
    *,
    verb: str = "GET",
    pipelines: tuple[str, ...] = (),
    auth_hooks: tuple[str, ...] = (),
    title: str | None = None,
) -> RouteInfo:
    return RouteInfo(
        path=path,
        verb=verb,
        handler=handler,
        pipelines=frozenset(pipelines),
        auth_hooks=frozenset(auth_hooks),
        title=title,
    )


def make_options(
    routes: list[RouteInfo] | RouteTable | None = None,
    *,
    language: LanguageContext | None = None,
    policy: ProtectionPolicy | None = None,
    unavailable: bool = False,
) -> CollectOptions:
    """CollectOptions over a route list.  ``unavailable`` simulates no host router."""
    if unavailable:
        resolver = RouteResolver(None, policy)
    elif isinstance(routes, RouteTable):
        resolver = RouteResolver(routes, policy)
    else:
        resolver = RouteResolver(RouteTable(routes or []), policy)
    return CollectOptions(
        language=language or LanguageContext(),
        base_url=BASE_URL,
        routes=resolver,
    )


def multi_language(code: str, *, default: bool = False) -> LanguageContext:
    return LanguageContext(
        requested_language=code,
        is_default_language=default,
        single_language_mode=False,
    )


def write_markdown(path: Path, front: dict[str, Any] | None = None, body: str = "Body.\n") -> Path:
    """Write a markdown file with YAML front matter."""
    path.parent.mkdir(parents=True, exist_ok=True)
    text = body
    if front is not None:
        text = "---\n" + yaml.safe_dump(front, sort_keys=False) + "---\n\n" + body
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def tmp_site(tmp_path: Path) -> Path:
    """A complete site: config, route modules, records, pages and a blog."""
    (tmp_path / "burrow.yaml").write_text(
        yaml.safe_dump({
            "burrow": {"base_url": BASE_URL},
            "settings": {
                "sitemap_pages_prefix": "/pages",
                "sitemap_blog_prefix": "/blog",
            },
        }),
        encoding="utf-8",
    )

    routes = tmp_path / "routes"
    routes.mkdir()
    (routes / "about.py").write_text("def get(request):\n    return 'about'\n")
    (routes / "pricing.py").write_text("def get(request):\n    return 'pricing'\n")
    (routes / "account.py").write_text(
        "pipelines = ['require_authenticated']\n\ndef get(request):\n    return 'me'\n"
    )
    articles = routes / "articles"
    articles.mkdir()
    (articles / "show.py").write_text(
        "path = '/articles/{slug}'\n\ndef get(request):\n    return 'article'\n"
    )
    (articles / "index.py").write_text("def get(request):\n    return 'articles'\n")
    posts = routes / "posts"
    posts.mkdir()
    (posts / "show.py").write_text("path = '/posts/{id}'\n\ndef get(request):\n    return 'post'\n")

    (tmp_path / "records.yaml").write_text(
        yaml.safe_dump({
            "kinds": [
                {
                    "name": "article",
                    "display_name": "Articles",
                    "records": [
                        {"id": 1, "slug": "hello-world", "title": "Hello World",
                         "updated_at": "2024-05-01", "status": "published"},
                        {"id": 2, "slug": "draft", "status": "draft"},
                        {"id": 3, "slug": "secret", "metadata": {"sitemap_exclude": True}},
                    ],
                },
            ],
            "posts": [
                {"id": 42, "slug": "launch", "title": "Launch", "status": "public"},
            ],
        }),
        encoding="utf-8",
    )

    pages = tmp_path / "content" / "pages"
    write_markdown(pages / "terms.md", {"title": "Terms", "status": "published"})
    write_markdown(pages / "guides" / "install.md", {"status": "published"})
    write_markdown(pages / "wip.md", {"status": "draft"})

    blog = tmp_path / "content" / "blog"
    write_markdown(blog / "news" / "_index.md", {"name": "News"})
    write_markdown(blog / "news" / "release.md", {"title": "Release", "status": "published"})

    return tmp_path
