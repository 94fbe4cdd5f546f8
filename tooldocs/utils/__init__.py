"""
Utilities package for ToolDocs.

- md: Front matter splitting and value normalization
- slugify: Heading anchor slugs

Import commonly-used utilities directly from this package:
    from tooldocs.utils import split_frontmatter, anchor_slug
"""

from .md import (
    split_frontmatter,
    has_unterminated_frontmatter,
    normalize_frontmatter,
    frontmatter_value_to_str,
    find_frontmatter_key_line,
)
from .slugify import anchor_slug, SlugRegistry

__all__ = [
    "split_frontmatter",
    "has_unterminated_frontmatter",
    "normalize_frontmatter",
    "frontmatter_value_to_str",
    "find_frontmatter_key_line",
    "anchor_slug",
    "SlugRegistry",
]
