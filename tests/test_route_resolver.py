"""Tests for burrow.routes.resolver — content questions over the route table."""

import io

import pytest

from burrow.observability import EventRecorder
from burrow.routes.resolver import (
    DEFAULT_PROTECTED_PIPELINES,
    ProtectionPolicy,
    RouteResolver,
    extract_prefix,
    substitute,
)
from burrow.routes.table import RouteTable
from burrow.settings import MappingSettings

from .conftest import make_route


def _resolver(*routes, policy: ProtectionPolicy | None = None) -> RouteResolver:
    return RouteResolver(RouteTable(routes), policy)


# ---------------------------------------------------------------------------
# ProtectionPolicy
# ---------------------------------------------------------------------------


class TestProtectionPolicy:
    """Deny-lists: defaults plus configured pipelines."""

    def test_default_pipeline_protects(self) -> None:
        policy = ProtectionPolicy()
        assert policy.protects(make_route("/me", pipelines=("browser", "require_authenticated")))

    def test_auth_hook_protects(self) -> None:
        policy = ProtectionPolicy()
        assert policy.protects(make_route("/live", auth_hooks=("ensure_authenticated_scope",)))

    def test_public_route(self) -> None:
        assert not ProtectionPolicy().protects(make_route("/about", pipelines=("browser",)))

    def test_custom_pipelines_from_settings(self) -> None:
        settings = MappingSettings({"sitemap_protected_pipelines": '["member_only", ":vip"]'})
        policy = ProtectionPolicy.from_settings(settings)
        assert {"member_only", "vip"} <= policy.pipelines
        assert DEFAULT_PROTECTED_PIPELINES <= policy.pipelines
        assert policy.protects(make_route("/club", pipelines=("member_only",)))

    def test_malformed_setting_keeps_defaults(self) -> None:
        settings = MappingSettings({"sitemap_protected_pipelines": "{broken"})
        assert ProtectionPolicy.from_settings(settings).pipelines == DEFAULT_PROTECTED_PIPELINES


# ---------------------------------------------------------------------------
# RouteResolver.load
# ---------------------------------------------------------------------------


class TestLoad:
    def test_table(self) -> None:
        resolver = RouteResolver.load(RouteTable([make_route("/a")]))
        assert resolver.available
        assert len(resolver.routes()) == 1

    def test_none_is_unavailable(self) -> None:
        resolver = RouteResolver.load(None)
        assert not resolver.available
        assert resolver.routes() == ()
        assert resolver.find_kind_route("article") is None

    def test_failing_loader_is_unavailable(self) -> None:
        stream = io.StringIO()

        def broken() -> RouteTable:
            raise RuntimeError("router exploded")

        resolver = RouteResolver.load(broken, recorder=EventRecorder(stream=stream))
        assert not resolver.available
        assert "Route table unavailable: router exploded" in stream.getvalue()

    def test_only_get_routes_exposed(self) -> None:
        resolver = _resolver(make_route("/a"), make_route("/a", verb="POST"))
        assert [r.verb for r in resolver.routes()] == ["GET"]


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


class TestFindKindRoute:
    """Kind name in path, then handler name, then catch-all."""

    def test_plural_path(self) -> None:
        match = _resolver(make_route("/articles/:slug")).find_kind_route("article")
        assert match is not None
        assert match.pattern == "/articles/:slug"

    def test_singular_path_with_braces(self) -> None:
        match = _resolver(make_route("/product/{id}")).find_kind_route("product")
        assert match is not None
        assert match.pattern == "/product/:id"

    def test_handler_name(self) -> None:
        match = _resolver(make_route("/read/:slug", "app.ArticleController")).find_kind_route("article")
        assert match is not None
        assert match.pattern == "/read/:slug"

    def test_catch_all(self) -> None:
        match = _resolver(make_route("/:type/:slug", "app.EntityController")).find_kind_route("recipe")
        assert match is not None
        assert match.pattern == "/recipe/:slug"

    def test_path_match_preferred_over_catch_all(self) -> None:
        resolver = _resolver(make_route("/:type/:slug"), make_route("/recipes/:slug"))
        assert resolver.find_kind_route("recipe").pattern == "/recipes/:slug"

    def test_no_match(self) -> None:
        assert _resolver(make_route("/about")).find_kind_route("article") is None


class TestFindKindIndex:
    def test_plural_listing(self) -> None:
        match = _resolver(make_route("/articles")).find_kind_index("article")
        assert match is not None
        assert match.pattern == "/articles"

    def test_catch_all_listing(self) -> None:
        match = _resolver(make_route("/:type")).find_kind_index("recipe")
        assert match is not None
        assert match.pattern == "/recipe"

    def test_none(self) -> None:
        assert _resolver(make_route("/about")).find_kind_index("article") is None


class TestOtherLookups:
    def test_find_route_by_short_name(self) -> None:
        resolver = _resolver(make_route("/pricing", "app.web.PricingPage"))
        assert resolver.find_route("PricingPage").path == "/pricing"
        assert resolver.find_route("app.web.PricingPage").path == "/pricing"
        assert resolver.find_route("Missing") is None
        assert resolver.find_route("") is None

    def test_find_route_by_object(self) -> None:
        def about(request):
            return "about"

        resolver = _resolver(make_route("/about", about))
        assert resolver.find_route(about).path == "/about"

    def test_find_pages_route(self) -> None:
        resolver = _resolver(
            make_route("/posts/:slug", "app.PostController"),
            make_route("/pages/*path", "app.PageController"),
        )
        assert resolver.find_pages_route().path == "/pages/*path"

    def test_find_posts_route(self) -> None:
        resolver = _resolver(
            make_route("/pages/:slug", "app.PageController"),
            make_route("/posts/:slug", "app.Controller"),
        )
        assert resolver.find_posts_route().path == "/posts/:slug"

    def test_posts_route_by_handler(self) -> None:
        resolver = _resolver(make_route("/news/:id", "app.PostShow"))
        assert resolver.find_posts_route().path == "/news/:id"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestExtractPrefix:
    @pytest.mark.parametrize(
        ("pattern", "expected"),
        [
            ("/pages/:slug", "/pages"),
            ("/content/*path", "/content"),
            ("/:slug", "/"),
            ("/a/b/:id/c", "/a/b"),
            (None, None),
        ],
    )
    def test_prefix(self, pattern: str | None, expected: str | None) -> None:
        assert extract_prefix(pattern) == expected


class TestSubstitute:
    def test_kind_name_scenario(self) -> None:
        assert substitute("/:kind_name/:slug", kind_name="article", slug="hello-world") == (
            "/article/hello-world"
        )

    def test_longer_names_first(self) -> None:
        assert substitute("/:identity/:id", id="7", identity="me") == "/me/7"

    def test_prefix_names_do_not_clobber(self) -> None:
        assert substitute("/:idx", id="7") == "/:idx"

    def test_replacement_text_is_literal(self) -> None:
        assert substitute("/:slug", slug=r"a\1b") == r"/a\1b"
