"""Content backends consumed by the record- and file-backed sources.

Backends are protocols so a host application can plug in its own storage
(an ORM query, an HTTP API).  Two implementations ship here:

- ``RecordStore``: structured records (entity kinds, posts, shop catalog)
  read from a YAML file, or handed in directly for tests.
- ``FilesystemBlogBackend``: blogs as directories of markdown posts, with
  translations stored as ``<slug>.<lang>.md``.

Backends raise ``ContentError`` when storage is unreachable; sources turn
that into an empty result.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any, Protocol

import yaml

from burrow._errors import ContentError
from burrow.content.scanner import Document, read_document
from burrow.entry import parse_lastmod
from burrow.language import extract_base

# ---------------------------------------------------------------------------
# Record model
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Record:
    """A published content record.

    Attributes:
        id: Record identifier.
        slug: URL slug; may be empty, in which case the id is used.
        title: Display title.
        updated_at: Last modification, or *None*.
        metadata: Free-form metadata (``sitemap_exclude`` etc.).

    """

    id: str
    slug: str = ""
    title: str = ""
    updated_at: datetime | date | None = None
    metadata: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ContentKind:
    """A kind of structured content (``article``, ``product``).

    Attributes:
        name: Machine name, used in patterns and settings keys.
        display_name: Human label, used as the entry category.
        settings: Kind-level configuration (``sitemap_url_pattern``,
            ``sitemap_index_path``).
        updated_at: Last modification of the kind itself.

    """

    name: str
    display_name: str = ""
    settings: Mapping[str, Any] = field(default_factory=dict)
    updated_at: datetime | date | None = None

    @property
    def label(self) -> str:
        return self.display_name or self.name.replace("_", " ").title()


class EntityBackend(Protocol):
    """Structured-record storage."""

    def list_kinds(self) -> list[ContentKind]: ...

    def published_records(self, kind: ContentKind) -> list[Record]: ...


class PostBackend(Protocol):
    """Post storage."""

    def list_public_posts(self) -> list[Record]: ...


ANY_LANGUAGE = "*"


@dataclass(frozen=True, slots=True)
class ShopItem:
    """A shop category or product.

    Slugs and titles are per language code (``{"en": "boots", "fr":
    "bottes"}``); a value stored under ``ANY_LANGUAGE`` serves every language.

    """

    id: str
    slugs: Mapping[str, str] = field(default_factory=dict)
    titles: Mapping[str, str] = field(default_factory=dict)
    updated_at: datetime | date | None = None
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def slug_for(self, language: str) -> str | None:
        return _localized(self.slugs, language)

    def title_for(self, language: str) -> str | None:
        return _localized(self.titles, language) or next(iter(self.titles.values()), None)

    def canonical_slug(self, default_language: str) -> str:
        """Slug in *default_language*, else the first one, else the id."""
        return self.slug_for(default_language) or next(iter(self.slugs.values()), None) or self.id


class ShopBackend(Protocol):
    """Catalog storage: active categories and products."""

    def list_active_categories(self) -> list[ShopItem]: ...

    def list_active_products(self) -> list[ShopItem]: ...


# ---------------------------------------------------------------------------
# RecordStore
# ---------------------------------------------------------------------------


class RecordStore:
    """``EntityBackend``, ``PostBackend`` and ``ShopBackend`` over plain data.

    Expected shape (YAML or mappings)::

        kinds:
          - name: article
            display_name: Articles
            settings: {sitemap_url_pattern: "/read/:slug"}
            records:
              - {id: 1, slug: hello-world, title: Hello, status: published}
        posts:
          - {id: 42, slug: launch, title: Launch, status: public}
        shop:
          categories:
            - {id: 7, slug: {en: boots, fr: bottes}, title: {en: Boots}}
          products:
            - {id: 9, slug: trail-boot, title: Trail Boot, status: active}

    Only records whose ``status`` is ``published`` (kinds), ``public`` /
    ``published`` (posts) or ``active`` (shop) are returned; a missing status
    counts as such.

    Args:
        data: Parsed mapping.  Use :meth:`from_file` to read YAML.

    """

    __slots__ = ("_categories", "_kinds", "_posts", "_products", "_records")

    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        data = data or {}
        self._kinds: list[ContentKind] = []
        self._records: dict[str, list[Record]] = {}
        for raw_kind in _as_list(data.get("kinds"), "kinds"):
            kind = _kind_from(raw_kind)
            self._kinds.append(kind)
            self._records[kind.name] = [
                _record_from(raw)
                for raw in _as_list(raw_kind.get("records"), f"kinds.{kind.name}.records")
                if _status_ok(raw, ("published",))
            ]
        self._posts: list[Record] = [
            _record_from(raw)
            for raw in _as_list(data.get("posts"), "posts")
            if _status_ok(raw, ("public", "published"))
        ]
        shop = data.get("shop") or {}
        if not isinstance(shop, Mapping):
            msg = "Records data: 'shop' must be a mapping"
            raise ContentError(msg)
        self._categories: list[ShopItem] = [
            _shop_item_from(raw)
            for raw in _as_list(shop.get("categories"), "shop.categories")
            if _status_ok(raw, ("active",))
        ]
        self._products: list[ShopItem] = [
            _shop_item_from(raw)
            for raw in _as_list(shop.get("products"), "shop.products")
            if _status_ok(raw, ("active",))
        ]

    @classmethod
    def from_file(cls, path: Path) -> RecordStore:
        """Load records from a YAML file.

        Raises:
            ContentError: If the file is missing or malformed.

        """
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except OSError as exc:
            msg = f"Cannot read records file {path}: {exc}"
            raise ContentError(msg) from exc
        except yaml.YAMLError as exc:
            msg = f"Invalid records file {path}: {exc}"
            raise ContentError(msg) from exc
        if not isinstance(data, dict):
            msg = f"Records file {path} must contain a mapping"
            raise ContentError(msg)
        return cls(data)

    def list_kinds(self) -> list[ContentKind]:
        return list(self._kinds)

    def published_records(self, kind: ContentKind) -> list[Record]:
        return list(self._records.get(kind.name, ()))

    def list_public_posts(self) -> list[Record]:
        return list(self._posts)

    def list_active_categories(self) -> list[ShopItem]:
        return list(self._categories)

    def list_active_products(self) -> list[ShopItem]:
        return list(self._products)


class LazyRecordStore:
    """Reads a ``RecordStore`` from disk on first use, inside the source call.

    Keeps file errors inside the source failure boundary instead of at
    construction time.
    """

    __slots__ = ("_path", "_store")

    def __init__(self, path: Path) -> None:
        self._path = path
        self._store: RecordStore | None = None

    def _load(self) -> RecordStore:
        if self._store is None:
            self._store = RecordStore.from_file(self._path)
        return self._store

    def list_kinds(self) -> list[ContentKind]:
        return self._load().list_kinds()

    def published_records(self, kind: ContentKind) -> list[Record]:
        return self._load().published_records(kind)

    def list_public_posts(self) -> list[Record]:
        return self._load().list_public_posts()

    def list_active_categories(self) -> list[ShopItem]:
        return self._load().list_active_categories()

    def list_active_products(self) -> list[ShopItem]:
        return self._load().list_active_products()


def _as_list(value: object, where: str) -> list[Mapping[str, Any]]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, Mapping) for v in value):
        msg = f"Records data: {where!r} must be a list of mappings"
        raise ContentError(msg)
    return value


def _status_ok(raw: Mapping[str, Any], allowed: Iterable[str]) -> bool:
    status = raw.get("status")
    return status is None or str(status).strip().lower() in allowed


def _kind_from(raw: Mapping[str, Any]) -> ContentKind:
    name = raw.get("name")
    if not isinstance(name, str) or not name.strip():
        msg = "Records data: every kind needs a non-empty 'name'"
        raise ContentError(msg)
    settings = raw.get("settings") or {}
    if not isinstance(settings, Mapping):
        settings = {}
    return ContentKind(
        name=name.strip(),
        display_name=str(raw.get("display_name") or ""),
        settings=dict(settings),
        updated_at=parse_lastmod(raw.get("updated_at")),
    )


def _record_from(raw: Mapping[str, Any]) -> Record:
    if raw.get("id") is None:
        msg = f"Records data: record without 'id': {dict(raw)!r}"
        raise ContentError(msg)
    metadata = raw.get("metadata") or {}
    if not isinstance(metadata, Mapping):
        metadata = {}
    return Record(
        id=str(raw["id"]),
        slug=str(raw.get("slug") or ""),
        title=str(raw.get("title") or ""),
        updated_at=parse_lastmod(raw.get("updated_at")),
        metadata=dict(metadata),
    )


def _shop_item_from(raw: Mapping[str, Any]) -> ShopItem:
    if raw.get("id") is None:
        msg = f"Records data: shop item without 'id': {dict(raw)!r}"
        raise ContentError(msg)
    metadata = raw.get("metadata") or {}
    if not isinstance(metadata, Mapping):
        metadata = {}
    return ShopItem(
        id=str(raw["id"]),
        slugs=_per_language(raw.get("slug")),
        titles=_per_language(raw.get("title") or raw.get("name")),
        updated_at=parse_lastmod(raw.get("updated_at")),
        metadata=dict(metadata),
    )


def _per_language(value: object) -> dict[str, str]:
    """``"boots"`` -> ``{"*": "boots"}``; mappings keep their non-empty values."""
    if isinstance(value, Mapping):
        return {str(k): str(v).strip() for k, v in value.items() if v is not None and str(v).strip()}
    if value is not None and str(value).strip():
        return {ANY_LANGUAGE: str(value).strip()}
    return {}


def _localized(values: Mapping[str, str], language: str) -> str | None:
    """Exact code, then base sub-tag, then any dialect of it, then ``ANY_LANGUAGE``."""
    if language in values:
        return values[language]
    base = extract_base(language)
    if base in values:
        return values[base]
    for code, value in values.items():
        if code != ANY_LANGUAGE and extract_base(code) == base:
            return value
    return values.get(ANY_LANGUAGE)


# ---------------------------------------------------------------------------
# Blogs
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Blog:
    """A blog: a named group of posts."""

    slug: str
    name: str
    metadata: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class BlogPost:
    """One language version of a blog post."""

    slug: str
    language: str | None
    metadata: Mapping[str, Any] = field(default_factory=dict)
    path: Path | None = None


type OnError = Callable[[Path, ContentError], None]


class BlogBackend(Protocol):
    """Blog storage.

    ``on_error`` receives documents that cannot be read; the backend leaves
    them out and carries on.  Without it the error propagates.
    """

    def list_blogs(self, *, on_error: OnError | None = None) -> list[Blog]: ...

    def list_posts(
        self,
        blog_slug: str,
        language: str | None,
        *,
        on_error: OnError | None = None,
    ) -> list[BlogPost]: ...


class FilesystemBlogBackend:
    """Blogs stored as directories of markdown files.

    Layout::

        blog/
          news/
            _index.md              # name, sitemap_exclude
            launch.md              # default-language post
            launch.fr.md           # French translation
          engineering/
            ...

    A dotted suffix is a language only when it names the default language or
    one of *languages*; ``release.notes.md`` is the default-language post
    ``release.notes``.

    Args:
        root: Directory holding one sub-directory per blog.
        default_language: Language of un-suffixed post files.
        languages: Other enabled language codes.

    """

    __slots__ = ("_default_base", "_known", "_root")

    def __init__(
        self,
        root: Path,
        default_language: str = "en",
        languages: Iterable[str] = (),
    ) -> None:
        self._root = root
        self._default_base = extract_base(default_language)
        self._known = frozenset({self._default_base, *(extract_base(code) for code in languages)})

    def list_blogs(self, *, on_error: OnError | None = None) -> list[Blog]:
        """All blog directories, sorted by slug.

        A blog whose ``_index.md`` is malformed is left out when *on_error*
        is given.

        Raises:
            ContentError: If the blog root is missing, or a blog index is
                malformed and there is no *on_error*.

        """
        if not self._root.is_dir():
            msg = f"Blog directory not found: {self._root}"
            raise ContentError(msg)
        blogs: list[Blog] = []
        for folder in sorted(p for p in self._root.iterdir() if p.is_dir()):
            if folder.name.startswith((".", "_")):
                continue
            metadata: dict[str, Any] = {}
            index = folder / "_index.md"
            if index.is_file():
                try:
                    metadata = dict(read_document(index, folder).metadata)
                except ContentError as exc:
                    if on_error is None:
                        raise
                    on_error(index, exc)
                    continue
            name = metadata.get("name") or metadata.get("title") or folder.name.replace("-", " ").title()
            blogs.append(Blog(slug=folder.name, name=str(name), metadata=metadata))
        return blogs

    def list_posts(
        self,
        blog_slug: str,
        language: str | None,
        *,
        on_error: OnError | None = None,
    ) -> list[BlogPost]:
        """Posts of *blog_slug* available in *language*, sorted by slug.

        *None* means the default language.  A post without a translation for
        the requested language is not returned.

        """
        folder = self._root / blog_slug
        if not folder.is_dir():
            msg = f"Blog not found: {blog_slug}"
            raise ContentError(msg)
        wanted = extract_base(language) if language else self._default_base

        candidates: dict[str, Path] = {}
        for path in sorted(folder.glob("*.md")):
            if path.name.startswith(("_", ".")):
                continue
            stem, lang = self._split_language(path)
            effective = lang or self._default_base
            if effective != wanted:
                continue
            # An explicit <slug>.<lang>.md wins over the un-suffixed default file
            if stem in candidates and lang is None:
                continue
            candidates[stem] = path

        posts: list[BlogPost] = []
        for stem in sorted(candidates):
            try:
                doc = read_document(candidates[stem], folder)
            except ContentError as exc:
                if on_error is None:
                    raise
                on_error(candidates[stem], exc)
                continue
            slug = str(doc.metadata.get("slug") or stem)
            posts.append(BlogPost(slug=slug, language=wanted, metadata=doc.metadata, path=doc.path))
        return posts

    def _split_language(self, path: Path) -> tuple[str, str | None]:
        """``launch.fr.md`` -> ``("launch", "fr")``; ``launch.md`` -> ``("launch", None)``."""
        stem = path.name[: -len(".md")]
        base, dot, suffix = stem.rpartition(".")
        if dot and base and suffix and extract_base(suffix) in self._known:
            return base, extract_base(suffix)
        return stem, None
