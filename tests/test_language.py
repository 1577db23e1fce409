"""Tests for burrow.language — locale prefixes and language resolution."""

from burrow.language import (
    Language,
    LanguageContext,
    build_localized_path,
    context_for,
    default_context,
    extract_base,
    language_contexts,
    normalize_path,
    resolve_languages,
)
from burrow.settings import MappingSettings


class TestExtractBase:
    def test_region_stripped(self) -> None:
        assert extract_base("en-US") == "en"
        assert extract_base("FR-fr") == "fr"

    def test_plain(self) -> None:
        assert extract_base("et") == "et"

    def test_empty_falls_back(self) -> None:
        assert extract_base("") == "en"


class TestBuildLocalizedPath:
    """Single-language never prefixes; multi-language always does."""

    def test_single_language_never_prefixes(self) -> None:
        for code in ("en-US", "fr-FR", None):
            ctx = LanguageContext(requested_language=code, is_default_language=False)
            assert build_localized_path("/posts/42", ctx) == "/posts/42"

    def test_multi_language_non_default(self) -> None:
        ctx = LanguageContext("fr-FR", is_default_language=False, single_language_mode=False)
        assert build_localized_path("/posts/42", ctx) == "/fr/posts/42"

    def test_multi_language_default_also_prefixed(self) -> None:
        ctx = LanguageContext("en-US", is_default_language=True, single_language_mode=False)
        assert build_localized_path("/posts/42", ctx) == "/en/posts/42"

    def test_root_path(self) -> None:
        ctx = LanguageContext("fr", is_default_language=False, single_language_mode=False)
        assert build_localized_path("/", ctx) == "/fr"

    def test_localize_method(self) -> None:
        ctx = LanguageContext("de", single_language_mode=False)
        assert ctx.localize("about") == "/de/about"


class TestNormalizePath:
    def test_collapses_slashes(self) -> None:
        assert normalize_path("//a///b") == "/a/b"

    def test_keeps_trailing_slash(self) -> None:
        assert normalize_path("/a/") == "/a/"

    def test_empty(self) -> None:
        assert normalize_path("") == "/"


# ---------------------------------------------------------------------------
# resolve_languages and contexts
# ---------------------------------------------------------------------------


class TestResolveLanguages:
    def test_disabled_gives_single_default(self) -> None:
        langs = resolve_languages(MappingSettings({"languages": '["en", "fr"]'}))
        assert langs == (Language("en", is_default=True),)

    def test_default_language_setting_when_disabled(self) -> None:
        langs = resolve_languages(MappingSettings({"default_language": "et"}))
        assert langs == (Language("et", is_default=True),)

    def test_enabled_strings_first_is_default(self) -> None:
        langs = resolve_languages(MappingSettings({
            "languages_enabled": True, "languages": '["en-US", "fr-FR"]',
        }))
        assert [lang.code for lang in langs] == ["en-US", "fr-FR"]
        assert [lang.is_default for lang in langs] == [True, False]

    def test_enabled_objects_flagged_default(self) -> None:
        langs = resolve_languages(MappingSettings({
            "languages_enabled": "true",
            "languages": [{"code": "en"}, {"code": "fr", "is_default": True}, {"bad": 1}],
        }))
        assert [(lang.code, lang.is_default) for lang in langs] == [("en", False), ("fr", True)]

    def test_duplicates_dropped(self) -> None:
        langs = resolve_languages(MappingSettings({
            "languages_enabled": True, "languages": ["en", "EN", "fr"],
        }))
        assert [lang.code for lang in langs] == ["en", "fr"]

    def test_malformed_json_gives_single(self) -> None:
        langs = resolve_languages(MappingSettings({
            "languages_enabled": True, "languages": "[oops",
        }))
        assert len(langs) == 1


class TestContexts:
    def test_single_language_context(self) -> None:
        (ctx,) = language_contexts((Language("en", is_default=True),))
        assert ctx.single_language_mode is True

    def test_multi_language_contexts(self) -> None:
        contexts = language_contexts((Language("en", True), Language("fr", False)))
        assert all(not c.single_language_mode for c in contexts)
        assert [c.is_default_language for c in contexts] == [True, False]

    def test_default_context(self) -> None:
        settings = MappingSettings({"languages_enabled": True, "languages": ["en", "fr"]})
        ctx = default_context(settings)
        assert ctx.requested_language == "en"
        assert ctx.single_language_mode is False

    def test_context_for_matches_base(self) -> None:
        settings = MappingSettings({"languages_enabled": True, "languages": ["en-US", "fr-FR"]})
        ctx = context_for(settings, "fr")
        assert ctx.is_default_language is False
        assert ctx.locale_segment == "fr"

    def test_context_for_unknown_code(self) -> None:
        ctx = context_for(MappingSettings(), "de")
        assert ctx.requested_language == "de"
        assert ctx.is_default_language is False
        assert ctx.single_language_mode is True
