#!/usr/bin/env python3
"""
slugify.py
----------
Heading anchor slugs.

Produces the same anchors a GitHub-style Markdown renderer assigns to
headings, so `[text](#slug)` links can be checked without rendering.

Key Features:
    - Lowercase transformation
    - Punctuation removal (letters, digits, '_', '-' and spaces survive)
    - Space to hyphen conversion (hyphens are not collapsed)
    - Duplicate disambiguation with -1, -2, ... suffixes

Usage:
    from tooldocs.utils.slugify import anchor_slug, SlugRegistry

    anchor_slug("List Storage Accounts")  # "list-storage-accounts"

    registry = SlugRegistry()
    registry.register("Examples")  # "examples"
    registry.register("Examples")  # "examples-1"
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import re
from typing import Set


def anchor_slug(text: str) -> str:
    """
    Convert heading text to its anchor slug.

    Args:
        text: Plain heading text (inline markup already removed)

    Returns:
        Anchor slug (may be empty for punctuation-only headings)

    Examples:
        >>> anchor_slug("List Storage Accounts")
        'list-storage-accounts'
        >>> anchor_slug("Key Vault: get secret")
        'key-vault-get-secret'
        >>> anchor_slug("What's new?")
        'whats-new'
    """
    if not text:
        return ""

    text = text.strip().lower()

    # Unicode letters and digits are kept, like the renderer does
    text = re.sub(r"[^\w\- ]", "", text)

    return text.replace(" ", "-")


class SlugRegistry:
    """
    Assigns unique anchor slugs within one document.

    The first heading with a given slug keeps it; later ones get the lowest
    free numeric suffix, skipping suffixes already claimed by real headings
    (a literal "Examples 1" heading takes "examples-1" first).
    """

    def __init__(self) -> None:
        self._taken: Set[str] = set()

    def register(self, text: str) -> str:
        """
        Compute and reserve the unique slug for a heading.

        Args:
            text: Plain heading text

        Returns:
            Unique slug for this heading
        """
        base = anchor_slug(text)
        slug = base
        counter = 0
        while slug in self._taken:
            counter += 1
            slug = f"{base}-{counter}"
        self._taken.add(slug)
        return slug

    def __contains__(self, slug: object) -> bool:
        return slug in self._taken
