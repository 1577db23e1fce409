"""Tests for burrow.settings — typed lookups with safe defaults."""

from burrow.settings import MappingSettings


class TestMappingSettings:
    """Lookups never raise; malformed values fall back to the default."""

    def test_get_returns_default_for_missing_and_none(self) -> None:
        settings = MappingSettings({"a": None})
        assert settings.get("a", "x") == "x"
        assert settings.get("missing", 3) == 3

    def test_get_str_strips(self) -> None:
        settings = MappingSettings({"site_url": "  https://example.com  ", "blank": "   "})
        assert settings.get_str("site_url") == "https://example.com"
        assert settings.get_str("blank", "fallback") == "fallback"

    def test_get_bool_spellings(self) -> None:
        settings = MappingSettings({
            "a": True, "b": "true", "c": "Yes", "d": "0", "e": "off", "f": 1, "g": "maybe",
        })
        assert settings.get_bool("a") is True
        assert settings.get_bool("b") is True
        assert settings.get_bool("c") is True
        assert settings.get_bool("d", True) is False
        assert settings.get_bool("e", True) is False
        assert settings.get_bool("f") is True
        assert settings.get_bool("g", True) is True
        assert settings.get_bool("missing", True) is True

    def test_get_float(self) -> None:
        settings = MappingSettings({"a": "2.5", "b": "nope", "c": True})
        assert settings.get_float("a", 1.0) == 2.5
        assert settings.get_float("b", 1.0) == 1.0
        assert settings.get_float("c", 1.0) == 1.0

    def test_json_list_from_string(self) -> None:
        settings = MappingSettings({"p": '["^/admin", "^/api"]'})
        assert settings.get_json_list("p", []) == ["^/admin", "^/api"]

    def test_json_list_from_list(self) -> None:
        settings = MappingSettings({"p": ("a", "b")})
        assert settings.get_json_list("p", []) == ["a", "b"]

    def test_malformed_json_gives_default(self) -> None:
        settings = MappingSettings({"p": "[not json", "q": '{"a": 1}'})
        assert settings.get_json_list("p", ["d"]) == ["d"]
        assert settings.get_json_list("q", ["d"]) == ["d"]

    def test_default_is_copied(self) -> None:
        default = ["x"]
        result = MappingSettings().get_json_list("missing", default)
        result.append("y")
        assert default == ["x"]

    def test_input_is_copied(self) -> None:
        source = {"a": 1}
        settings = MappingSettings(source)
        source["a"] = 2
        assert settings.get("a") == 1

    def test_with_overrides(self) -> None:
        base = MappingSettings({"a": 1, "b": 2})
        layered = base.with_overrides(b=3)
        assert layered.get("b") == 3
        assert base.get("b") == 2
        assert "a" in layered
