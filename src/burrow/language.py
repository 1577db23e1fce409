"""Language context — locale-prefixed paths and canonical grouping.

Two install modes:

- **Single-language** (localization off, or one enabled language): paths are
  never prefixed, whatever language is requested.
- **Multi-language**: *every* language, the default included, gets its base
  sub-tag as the first path segment (``/fr/posts/42``).

The ``canonical_path`` recorded on each entry is always the unprefixed path,
so that variants of the same content can be grouped for hreflang links.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from burrow._types import LanguageCode
    from burrow.settings import SettingsReader

_FALLBACK_LANGUAGE = "en"


@dataclass(frozen=True, slots=True)
class LanguageContext:
    """Per-request language state.

    Attributes:
        requested_language: Locale code being collected (e.g. ``"en-US"``), or
            *None* when no language was requested.
        is_default_language: True when the requested language is the install's
            default.
        single_language_mode: True when locale prefixes are disabled entirely.

    """

    requested_language: LanguageCode | None = None
    is_default_language: bool = True
    single_language_mode: bool = True

    @property
    def locale_segment(self) -> str | None:
        """Base sub-tag used as the path prefix, or *None* when unprefixed."""
        if self.single_language_mode or not self.requested_language:
            return None
        return extract_base(self.requested_language)

    def localize(self, canonical_path: str) -> str:
        """Return *canonical_path* with the locale segment applied (if any)."""
        return build_localized_path(canonical_path, self)


@dataclass(frozen=True, slots=True)
class Language:
    """An enabled install language."""

    code: LanguageCode
    is_default: bool = False


def extract_base(code: str) -> str:
    """Lowercased sub-tag before the first hyphen.

    ``"en-US"`` -> ``"en"``, ``"PT_br"`` -> ``"pt_br"``, ``""`` -> ``"en"``.

    """
    base = code.strip().split("-", 1)[0].lower()
    return base or _FALLBACK_LANGUAGE


def normalize_path(path: str) -> str:
    """Ensure *path* is root-relative with no duplicate slashes."""
    segments = [s for s in path.split("/") if s]
    if not segments:
        return "/"
    trailing = "/" if path.endswith("/") else ""
    return "/" + "/".join(segments) + trailing


def build_localized_path(canonical_path: str, language: LanguageContext) -> str:
    """Prefix *canonical_path* with the locale segment of *language*.

    ``/posts/42`` with ``fr-FR`` in multi-language mode -> ``/fr/posts/42``.
    The root path becomes ``/fr``.

    """
    path = normalize_path(canonical_path)
    segment = language.locale_segment
    if segment is None:
        return path
    if path == "/":
        return f"/{segment}"
    return f"/{segment}{path}"


def resolve_languages(settings: SettingsReader) -> tuple[Language, ...]:
    """Read the install's enabled languages from settings.

    ``languages_enabled`` (default false) turns localization on; the JSON list
    ``languages`` holds codes either as plain strings or as
    ``{"code": ..., "is_default": ...}`` objects.  Exactly one language is
    marked default: the first flagged one, else the first in the list.

    Returns a single fallback language when localization is off or no usable
    entries are configured.

    """
    if not settings.get_bool("languages_enabled", False):
        return (Language(code=_default_code(settings), is_default=True),)

    parsed: list[Language] = []
    seen: set[str] = set()
    for item in settings.get_json_list("languages", []):
        if isinstance(item, str):
            code, flagged = item, False
        elif isinstance(item, dict) and isinstance(item.get("code"), str):
            code, flagged = item["code"], bool(item.get("is_default", False))
        else:
            continue
        code = code.strip()
        if not code or code.lower() in seen:
            continue
        seen.add(code.lower())
        parsed.append(Language(code=code, is_default=flagged))

    if not parsed:
        return (Language(code=_default_code(settings), is_default=True),)

    default_index = next((i for i, lang in enumerate(parsed) if lang.is_default), 0)
    return tuple(
        Language(code=lang.code, is_default=(i == default_index))
        for i, lang in enumerate(parsed)
    )


def language_contexts(languages: tuple[Language, ...]) -> tuple[LanguageContext, ...]:
    """One ``LanguageContext`` per enabled language, in configured order."""
    single = len(languages) <= 1
    return tuple(
        LanguageContext(
            requested_language=lang.code,
            is_default_language=lang.is_default,
            single_language_mode=single,
        )
        for lang in languages
    )


def default_context(settings: SettingsReader) -> LanguageContext:
    """Context for the install's default language."""
    contexts = language_contexts(resolve_languages(settings))
    return next(ctx for ctx in contexts if ctx.is_default_language)


def context_for(settings: SettingsReader, code: str) -> LanguageContext:
    """Context for *code*, matched against enabled languages by base sub-tag.

    Unknown codes are still honoured as the requested language (non-default),
    so callers may collect for a language the settings do not list.

    """
    languages = resolve_languages(settings)
    single = len(languages) <= 1
    wanted = extract_base(code)
    for lang in languages:
        if extract_base(lang.code) == wanted:
            return LanguageContext(
                requested_language=code,
                is_default_language=lang.is_default,
                single_language_mode=single,
            )
    return LanguageContext(
        requested_language=code,
        is_default_language=False,
        single_language_mode=single,
    )


def _default_code(settings: SettingsReader) -> str:
    value = settings.get("default_language", _FALLBACK_LANGUAGE)
    return value if isinstance(value, str) and value.strip() else _FALLBACK_LANGUAGE
