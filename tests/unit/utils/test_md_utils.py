"""
test_md_utils.py
----------------
Unit tests for tooldocs.utils.md module.

Tests front matter splitting, value normalization and key line lookup.
"""
from datetime import date, datetime

from tooldocs.utils.md import (
    find_frontmatter_key_line,
    frontmatter_value_to_str,
    has_unterminated_frontmatter,
    normalize_frontmatter,
    split_frontmatter,
)


class TestSplitFrontmatter:
    """Test split_frontmatter function."""

    def test_basic_frontmatter(self):
        """Test parsing basic YAML frontmatter."""
        content = """---
title: Storage
ms.topic: reference
---

Body content here"""
        frontmatter, body, offset = split_frontmatter(content)
        assert frontmatter == "title: Storage\nms.topic: reference"
        assert body == ["", "Body content here"]
        assert offset == 4

    def test_no_frontmatter(self):
        """Test content without frontmatter."""
        frontmatter, body, offset = split_frontmatter("# Title\n\nBody")
        assert frontmatter == ""
        assert body == ["# Title", "", "Body"]
        assert offset == 0

    def test_unclosed_frontmatter(self):
        """Test an unclosed block is treated as body."""
        frontmatter, body, offset = split_frontmatter("---\ntitle: x\nBody")
        assert frontmatter == ""
        assert offset == 0
        assert has_unterminated_frontmatter("---\ntitle: x\nBody")

    def test_closed_frontmatter_is_not_unterminated(self):
        """Test a closed block."""
        assert not has_unterminated_frontmatter("---\ntitle: x\n---\nBody")
        assert not has_unterminated_frontmatter("Body")


class TestFrontmatterValues:
    """Test value normalization."""

    def test_scalars(self):
        """Test scalar conversion."""
        assert frontmatter_value_to_str(None) == ""
        assert frontmatter_value_to_str(True) == "true"
        assert frontmatter_value_to_str(3) == "3"
        assert frontmatter_value_to_str("  padded ") == "padded"

    def test_dates(self):
        """Test dates become ISO strings."""
        assert frontmatter_value_to_str(date(2025, 1, 17)) == "2025-01-17"
        assert frontmatter_value_to_str(datetime(2025, 1, 17, 10, 30)) == "2025-01-17"

    def test_lists(self):
        """Test lists are joined."""
        assert frontmatter_value_to_str(["a", "b"]) == "a, b"

    def test_normalize_keeps_order(self):
        """Test key order is preserved."""
        data = normalize_frontmatter({"title": "T", "ms.date": date(2025, 1, 1)})
        assert list(data.items()) == [("title", "T"), ("ms.date", "2025-01-01")]


class TestFindKeyLine:
    """Test find_frontmatter_key_line function."""

    def test_first_yaml_line_is_line_two(self):
        """Test lines are counted from the opening delimiter."""
        text = "title: T\ndescription: D"
        assert find_frontmatter_key_line(text, "title") == 2
        assert find_frontmatter_key_line(text, "description") == 3

    def test_missing_key(self):
        """Test absent and nested keys."""
        assert find_frontmatter_key_line("title: T\n  nested: x", "nested") is None
