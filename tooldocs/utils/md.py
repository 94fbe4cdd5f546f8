#!/usr/bin/env python3
"""
md.py
-------------------
Markdown front matter utilities.

Provides functions for:
- Splitting a leading `---` delimited YAML block from the body
- Detecting an opened but never closed front matter block
- Normalizing parsed YAML values to display strings

Body line offsets are preserved so every structure extracted from the body
can report line numbers in the original file.
"""
from __future__ import annotations

# --- Standard library imports ---
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple


FRONTMATTER_DELIMITER = "---"


def _closing_delimiter(lines: List[str]) -> Optional[int]:
    """Index of the closing delimiter, or None when the block is not closed."""
    if not lines or lines[0].strip() != FRONTMATTER_DELIMITER:
        return None
    for i, line in enumerate(lines[1:], 1):
        if line.strip() == FRONTMATTER_DELIMITER:
            return i
    return None


def split_frontmatter(content: str) -> Tuple[str, List[str], int]:
    """
    Split markdown content into YAML frontmatter and body.

    Expected format:
        ---
        title: Azure Storage tools for the Azure MCP Server
        ---

        # Azure Storage tools for the Azure MCP Server

    Args:
        content: Full markdown file content

    Returns:
        Tuple of (frontmatter_text, body_lines, body_offset)
        - frontmatter_text: YAML content as string (empty if no frontmatter)
        - body_lines: Body content lines, leading blank lines kept
        - body_offset: Index of the first body line in the original content

    Examples:
        >>> fm, body, offset = split_frontmatter("---\\ntitle: X\\n---\\n# X")
        >>> fm
        'title: X'
        >>> body, offset
        (['# X'], 3)
    """
    lines = content.splitlines()
    end = _closing_delimiter(lines)
    if end is None:
        return "", lines, 0
    return "\n".join(lines[1:end]), lines[end + 1 :], end + 1


def has_unterminated_frontmatter(content: str) -> bool:
    """
    Check whether content opens a front matter block without closing it.

    Args:
        content: Full markdown file content

    Returns:
        True if the first line is `---` and no closing `---` follows
    """
    lines = content.splitlines()
    return bool(lines) and lines[0].strip() == FRONTMATTER_DELIMITER and _closing_delimiter(lines) is None


def frontmatter_value_to_str(value: Any) -> str:
    """
    Render a parsed YAML value as a string.

    Args:
        value: Value produced by yaml.safe_load

    Returns:
        String form: dates as YYYY-MM-DD, lists joined with ', ', None as ''

    Examples:
        >>> frontmatter_value_to_str(date(2025, 1, 17))
        '2025-01-17'
        >>> frontmatter_value_to_str(["azure", "storage"])
        'azure, storage'
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return ", ".join(frontmatter_value_to_str(v) for v in value)
    if isinstance(value, dict):
        return ", ".join(f"{k}: {frontmatter_value_to_str(v)}" for k, v in value.items())
    return str(value).strip()


def normalize_frontmatter(data: Mapping[Any, Any]) -> Dict[str, str]:
    """
    Convert a parsed YAML mapping to an ordered string-to-string mapping.

    Args:
        data: Mapping produced by yaml.safe_load

    Returns:
        Dict with string keys and string values, in source order
    """
    return {str(key): frontmatter_value_to_str(value) for key, value in data.items()}


def find_frontmatter_key_line(frontmatter_text: str, key: str) -> Optional[int]:
    """
    Find the 1-based file line on which a front matter key is defined.

    The opening delimiter occupies line 1, so the first YAML line is line 2.

    Args:
        frontmatter_text: The YAML frontmatter text
        key: Top-level key to look for

    Returns:
        Line number, or None if the key is not defined at top level
    """
    prefix = f"{key}:"
    for i, line in enumerate(frontmatter_text.split("\n"), start=2):
        if line.startswith(prefix):
            return i
    return None
