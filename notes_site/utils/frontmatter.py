"""YAML frontmatter parsing utilities.

Notes may open with a YAML block declaring their title and related notes:

---
title: Generics
related: [typescript/narrowing, nestjs/controllers]
---

# Generics
"""

import re
from typing import Any

import yaml  # type: ignore[import-untyped]

# Regex pattern for YAML frontmatter (--- delimited block at start of file)
FRONTMATTER_PATTERN = re.compile(r"^---[ \t]*\n(.*?\n)?---[ \t]*(?:\n|$)", re.DOTALL)


def split_frontmatter(content: str) -> tuple[dict[str, Any], str, int]:
    """Split YAML frontmatter from Markdown content.

    Args:
        content: Full note content that may contain frontmatter

    Returns:
        Tuple of (metadata dict, body, number of lines consumed by the block).
        Invalid YAML or a non-mapping block leaves the content untouched.
    """
    if not content or not content.startswith("---"):
        return {}, content, 0

    match = FRONTMATTER_PATTERN.match(content)
    if not match:
        return {}, content, 0

    try:
        metadata = yaml.safe_load(match.group(1) or "")
    except yaml.YAMLError:
        return {}, content, 0

    if metadata is None:
        metadata = {}
    if not isinstance(metadata, dict):
        return {}, content, 0

    consumed = match.group(0)
    line_count = consumed.count("\n") + (0 if consumed.endswith("\n") else 1)
    return metadata, content[match.end() :], line_count


def related_identifiers(metadata: dict[str, Any], key: str = "related") -> list[str]:
    """Read the raw related-note declarations from frontmatter.

    Accepts a YAML list or a single comma-separated string.
    """
    value = metadata.get(key)
    if value is None:
        return []
    if isinstance(value, str):
        return [part for part in (p.strip() for p in value.split(",")) if part]
    if isinstance(value, (list, tuple)):
        return [str(item).strip() for item in value if item is not None and str(item).strip()]
    return [str(value).strip()]
