"""Content layer — front matter, markdown documents, and record backends.

Sources read content only through these types; storage behind a backend
protocol can be swapped without touching the sources.
"""

from burrow.content.backends import (
    Blog,
    BlogBackend,
    BlogPost,
    ContentKind,
    EntityBackend,
    FilesystemBlogBackend,
    LazyRecordStore,
    PostBackend,
    Record,
    RecordStore,
)
from burrow.content.frontmatter import parse_frontmatter
from burrow.content.scanner import Document, read_document, scan_documents

__all__ = [
    "Blog",
    "BlogBackend",
    "BlogPost",
    "ContentKind",
    "Document",
    "EntityBackend",
    "FilesystemBlogBackend",
    "LazyRecordStore",
    "PostBackend",
    "Record",
    "RecordStore",
    "parse_frontmatter",
    "read_document",
    "scan_documents",
]
