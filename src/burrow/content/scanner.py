"""Markdown document scanning.

Walks a directory tree and yields every ``.md`` file with its parsed front
matter.  Files whose front matter cannot be read are reported through
``on_error`` and left out; one bad document never hides the rest.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from burrow._errors import ContentError
from burrow.content.frontmatter import parse_frontmatter

_MARKDOWN_SUFFIX = ".md"


@dataclass(frozen=True, slots=True)
class Document:
    """A markdown document found on disk.

    Attributes:
        path: Absolute file path.
        relative: Path relative to the scan root, using ``/`` separators and
            without the ``.md`` suffix (``guides/install``).
        metadata: Parsed front matter.

    """

    path: Path
    relative: str
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def status(self) -> str | None:
        value = self.metadata.get("status")
        return str(value).strip().lower() if value is not None else None

    @property
    def is_published(self) -> bool:
        return self.status == "published"


def read_document(path: Path, root: Path) -> Document:
    """Read and parse one markdown file.

    Raises:
        ContentError: If the file cannot be read or its front matter is invalid.

    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        msg = f"Cannot read {path}: {exc}"
        raise ContentError(msg) from exc
    try:
        metadata, _body = parse_frontmatter(text)
    except ContentError as exc:
        msg = f"{path}: {exc}"
        raise ContentError(msg) from exc
    relative = path.relative_to(root).with_suffix("").as_posix()
    return Document(path=path, relative=relative, metadata=metadata)


def scan_documents(
    root: Path,
    *,
    on_error: Callable[[Path, ContentError], None] | None = None,
) -> list[Document]:
    """Return all markdown documents under *root*, sorted by relative path.

    Hidden files and directories (leading ``.``) and ``_``-prefixed files are
    skipped.

    Raises:
        ContentError: If *root* does not exist or is not a directory.

    """
    if not root.is_dir():
        msg = f"Content directory not found: {root}"
        raise ContentError(msg)

    documents: list[Document] = []
    for path in sorted(root.rglob(f"*{_MARKDOWN_SUFFIX}")):
        rel_parts = path.relative_to(root).parts
        if any(part.startswith(".") for part in rel_parts):
            continue
        if path.name.startswith("_") or not path.is_file():
            continue
        try:
            documents.append(read_document(path, root))
        except ContentError as exc:
            if on_error is None:
                raise
            on_error(path, exc)
    return documents
