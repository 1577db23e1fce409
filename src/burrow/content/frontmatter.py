"""Front-matter parsing for markdown documents.

Documents open with a YAML block fenced by ``---`` lines::

    ---
    title: Getting Started
    status: published
    updated_at: 2025-01-15
    ---

    # Getting Started

A document without a fence has empty metadata.
"""

from __future__ import annotations

from typing import Any

import yaml

from burrow._errors import ContentError

_FENCE = "---"


def parse_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Split *text* into ``(metadata, body)``.

    Raises:
        ContentError: If the fence is unterminated, the YAML is invalid, or the
            block is not a mapping.

    """
    if text.startswith("\ufeff"):
        text = text[1:]
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].strip() != _FENCE:
        return {}, text

    for index in range(1, len(lines)):
        if lines[index].strip() in (_FENCE, "..."):
            block = "".join(lines[1:index])
            body = "".join(lines[index + 1:])
            break
    else:
        msg = "Unterminated front matter (missing closing '---')"
        raise ContentError(msg)

    try:
        data = yaml.safe_load(block)
    except yaml.YAMLError as exc:
        msg = f"Invalid front matter: {exc}"
        raise ContentError(msg) from exc

    if data is None:
        return {}, body
    if not isinstance(data, dict):
        msg = f"Front matter must be a mapping, got {type(data).__name__}"
        raise ContentError(msg)
    return {str(k): v for k, v in data.items()}, body
