#!/usr/bin/env python3
"""
document.py
-------------------
Structured representation of a parsed Markdown document.

A Document is produced once by tooldocs.parser.parse() and never modified
afterwards. Every validator queries this structure instead of re-scanning the
raw text. All types are frozen dataclasses holding tuples, so two parses of
the same text compare equal.

Line numbers are 1-based and refer to the original text, front matter
included.
"""
from __future__ import annotations

# --- Standard library imports ---
import re
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterator, List, Mapping, Optional, Tuple


_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*:")


@dataclass(frozen=True)
class Heading:
    """A heading and the headings nested under it."""

    level: int
    text: str
    anchor_slug: str
    line: int
    children: Tuple["Heading", ...] = ()


@dataclass(frozen=True)
class Table:
    """
    A Markdown table, positional: the first row is the header.

    raw_column_counts holds the pipe-separated cell count of every source
    row (header, delimiter and body rows), before the renderer pads or
    truncates rows to the header width.
    """

    header_row: Tuple[str, ...]
    rows: Tuple[Tuple[str, ...], ...]
    line: int
    raw_column_counts: Tuple[int, ...] = ()

    @property
    def is_ragged(self) -> bool:
        """True if any source row has a different cell count than the header."""
        return len(set(self.raw_column_counts)) > 1


@dataclass(frozen=True)
class CodeSpan:
    """Inline code or a code block, verbatim."""

    text: str
    is_fenced: bool
    location: int
    info: str = ""
    is_block: bool = False

    @property
    def content_line(self) -> int:
        """Line of the first content line (after the opening fence, if any)."""
        return self.location + 1 if self.is_fenced else self.location


@dataclass(frozen=True)
class Link:
    """A link found in the body."""

    display_text: str
    target: str
    is_anchor: bool
    location: int

    @property
    def is_external(self) -> bool:
        """True for URLs with a scheme (https:, mailto:) or protocol-relative URLs."""
        return bool(_SCHEME_RE.match(self.target)) or self.target.startswith("//")

    @property
    def target_document(self) -> Optional[str]:
        """Path part of a relative link, or None for anchors and external URLs."""
        if self.is_anchor or self.is_external:
            return None
        path = self.target.split("#", 1)[0].split("?", 1)[0]
        return path or None

    @property
    def target_anchor(self) -> Optional[str]:
        """Fragment after '#', or None."""
        if "#" not in self.target:
            return None
        return self.target.split("#", 1)[1]


@dataclass(frozen=True)
class ListItem:
    """
    One list item.

    marker is the bullet character ('-', '*', '+') or the ordered-list
    delimiter ('.', ')'). Items of the same list share list_index.
    """

    text: str
    marker: str
    line: int
    list_index: int


@dataclass(frozen=True)
class TextBlock:
    """Prose with code removed: kind is paragraph, list_item, table_cell or heading."""

    text: str
    line: int
    kind: str


@dataclass(frozen=True)
class HtmlComment:
    """Body of an HTML comment (without the <!-- --> markers)."""

    text: str
    line: int


@dataclass(frozen=True)
class ParseAnomaly:
    """A malformed construct the parser recovered from."""

    code: str
    message: str
    line: Optional[int] = None


@dataclass(frozen=True)
class Document:
    """
    Parsed Markdown document.

    Attributes:
        id: Document identifier (usually a relative path such as 'storage.md')
        raw_text: Original text
        front_matter: Front matter values as strings, in source order
        front_matter_present: Whether a front matter block (or override) exists
        headings: Root headings of the heading tree
        tables: Tables in document order
        code_spans: Inline code and code blocks in document order
        links: Links in document order
        list_items: List items in document order
        text_blocks: Prose blocks with code removed
        html_comments: HTML comments in document order
        explicit_anchors: Anchors defined by <a id="..."> or <a name="...">
        anomalies: Recovered parse problems
    """

    id: str
    raw_text: str
    front_matter: Dict[str, str] = field(default_factory=dict)
    front_matter_present: bool = False
    headings: Tuple[Heading, ...] = ()
    tables: Tuple[Table, ...] = ()
    code_spans: Tuple[CodeSpan, ...] = ()
    links: Tuple[Link, ...] = ()
    list_items: Tuple[ListItem, ...] = ()
    text_blocks: Tuple[TextBlock, ...] = ()
    html_comments: Tuple[HtmlComment, ...] = ()
    explicit_anchors: FrozenSet[str] = frozenset()
    anomalies: Tuple[ParseAnomaly, ...] = ()

    # ----- Heading queries -----

    def iter_headings(self) -> Iterator[Heading]:
        """Yield every heading in document order (depth-first)."""
        stack: List[Heading] = list(reversed(self.headings))
        while stack:
            heading = stack.pop()
            yield heading
            stack.extend(reversed(heading.children))

    @property
    def anchors(self) -> FrozenSet[str]:
        """All anchors a link in this document can target."""
        return frozenset(h.anchor_slug for h in self.iter_headings()) | self.explicit_anchors

    @property
    def line_count(self) -> int:
        return len(self.raw_text.splitlines())

    def find_headings(self, title: str, level: Optional[int] = None) -> List[Heading]:
        """
        Find headings by text, case-insensitively.

        Args:
            title: Heading text to match
            level: Restrict to this heading level

        Returns:
            Matching headings in document order
        """
        wanted = title.strip().lower()
        return [
            h
            for h in self.iter_headings()
            if h.text.strip().lower() == wanted and (level is None or h.level == level)
        ]

    def section_end(self, heading: Heading) -> int:
        """
        Last line belonging to a heading's section.

        A section runs until the next heading of the same or a higher level.
        """
        after = False
        for other in self.iter_headings():
            if other is heading:
                after = True
                continue
            if after and other.level <= heading.level:
                return other.line - 1
        return max(self.line_count, heading.line)

    def in_section(self, heading: Heading, line: int) -> bool:
        """True if a line lies inside the heading's section (heading line excluded)."""
        return heading.line < line <= self.section_end(heading)

    def own_section_end(self, heading: Heading) -> int:
        """Last line before the first heading of any level after this one."""
        after = False
        for other in self.iter_headings():
            if other is heading:
                after = True
                continue
            if after:
                return other.line - 1
        return max(self.line_count, heading.line)

    def innermost_heading(self, line: int) -> Optional[Heading]:
        """Closest heading at or before a line, or None before the first heading."""
        found = None
        for heading in self.iter_headings():
            if heading.line <= line:
                found = heading
            else:
                break
        return found


@dataclass(frozen=True)
class DocumentInput:
    """
    Input for a single document: id, raw content and optional front matter override.

    Override values replace (or add) front matter keys after parsing.
    """

    id: str
    content: str
    front_matter_override: Optional[Mapping[str, Any]] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "DocumentInput":
        """
        Build an input from a mapping such as {"id": ..., "content": ...}.

        Both 'front_matter_override' and 'frontMatterOverride' are accepted.

        Raises:
            TypeError: If data is not a mapping
        """
        if not isinstance(data, Mapping):
            raise TypeError(
                f"Expected a Document, DocumentInput or {{id, content}} mapping, "
                f"got {type(data).__name__}"
            )
        override = data.get("front_matter_override", data.get("frontMatterOverride"))
        return cls(
            id=str(data.get("id", "")),
            content=str(data.get("content", "")),
            front_matter_override=override,
        )
