#!/usr/bin/env python3
"""
parser.py
---------
Document parser: raw Markdown (+ optional front matter) to Document.

Front matter is split on `---` delimiters and read with yaml.safe_load.
The body is tokenized with markdown-it-py (CommonMark with HTML and GFM
tables) and walked once to collect headings, tables, code, links, list
items, prose and HTML comments.

The parser never raises on malformed input. Problems such as invalid YAML,
an unterminated front matter block, an unclosed code fence or ragged table
rows degrade to partial structures and are recorded as ParseAnomaly entries
that validators surface as warnings.

Usage:
    from tooldocs.parser import parse

    doc = parse(text, doc_id="storage.md")
    [h.anchor_slug for h in doc.iter_headings()]
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import re
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

# --- Third party imports ---
import yaml
from markdown_it import MarkdownIt
from markdown_it.token import Token

# --- Local imports ---
from tooldocs.dataclasses.document import (
    CodeSpan,
    Document,
    DocumentInput,
    Heading,
    HtmlComment,
    Link,
    ListItem,
    ParseAnomaly,
    Table,
    TextBlock,
)
from tooldocs.utils.md import (
    frontmatter_value_to_str,
    has_unterminated_frontmatter,
    normalize_frontmatter,
    split_frontmatter,
)
from tooldocs.utils.slugify import SlugRegistry


HTML_LINK_RE = re.compile(
    r"<a\s[^>]*?href\s*=\s*[\"']([^\"']*)[\"'][^>]*>(.*?)</a\s*>",
    re.IGNORECASE | re.DOTALL,
)
HTML_ANCHOR_RE = re.compile(
    r"<a\s[^>]*?\b(?:id|name)\s*=\s*[\"']([^\"']+)[\"']", re.IGNORECASE
)
HTML_COMMENT_RE = re.compile(r"<!--(.*?)-->", re.DOTALL)
HTML_TAG_RE = re.compile(r"<[^>]+>")


def _markdown() -> MarkdownIt:
    return MarkdownIt("commonmark", {"html": True}).enable("table")


# Token streams are stateless per call; one instance is reused
_MD = _markdown()


def _count_cells(line: str) -> int:
    """Count pipe-separated cells in a raw table row."""
    row = line.strip()
    if row.startswith("|"):
        row = row[1:]
    if row.endswith("|") and not row.endswith("\\|"):
        row = row[:-1]
    return len(re.split(r"(?<!\\)\|", row))


def _plain_text(children: List[Token], include_code: bool = True) -> str:
    """Render inline tokens as plain text."""
    parts: List[str] = []
    for child in children or []:
        if child.type in ("text", "image"):
            parts.append(child.content)
        elif child.type == "code_inline" and include_code:
            parts.append(child.content)
        elif child.type in ("softbreak", "hardbreak"):
            parts.append(" ")
    return "".join(parts)


def _prose_segments(children: List[Token], first_line: int) -> List[Tuple[str, int]]:
    """
    Split inline tokens into per-line prose segments with code removed.

    Returns:
        List of (text, line) tuples, one per source line with prose
    """
    segments: List[Tuple[str, int]] = []
    parts: List[str] = []
    line = first_line
    for child in children or []:
        if child.type in ("softbreak", "hardbreak"):
            segments.append(("".join(parts), line))
            parts = []
            line += 1
        elif child.type == "text":
            parts.append(child.content)
        elif child.type == "code_inline":
            # Keep word boundaries around removed code
            parts.append(" ")
    segments.append(("".join(parts), line))
    return [(text.strip(), ln) for text, ln in segments if text.strip()]


class _Builder:
    """Single pass over the markdown-it token stream for one document."""

    def __init__(self, body_lines: List[str], offset: int) -> None:
        self.body_lines = body_lines
        self.offset = offset
        self.slugs = SlugRegistry()
        self.heading_nodes: List[Dict[str, Any]] = []
        self.tables: List[Table] = []
        self.code_spans: List[CodeSpan] = []
        self.links: List[Link] = []
        self.list_items: List[ListItem] = []
        self.text_blocks: List[TextBlock] = []
        self.comments: List[HtmlComment] = []
        self.anchors: List[str] = []
        self.anomalies: List[ParseAnomaly] = []

    def line_of(self, token: Token, default: int = 0) -> int:
        """1-based line in the original text for a block token."""
        if token.map:
            return token.map[0] + self.offset + 1
        return default

    # ----- Walk -----

    def walk(self, tokens: List[Token]) -> None:
        list_index = -1
        list_stack: List[int] = []
        pending_item: Optional[Token] = None
        in_table = False
        in_heading = False
        heading_open: Optional[Token] = None
        table_start: Optional[Token] = None
        table_rows: List[List[str]] = []
        current_row: List[str] = []
        current_line = 0

        for token in tokens:
            if token.map:
                current_line = self.line_of(token)

            if token.type in ("bullet_list_open", "ordered_list_open"):
                list_index += 1
                list_stack.append(list_index)
            elif token.type in ("bullet_list_close", "ordered_list_close"):
                if list_stack:
                    list_stack.pop()
            elif token.type == "list_item_open":
                pending_item = token
            elif token.type == "list_item_close":
                pending_item = None
            elif token.type == "heading_open":
                in_heading = True
                heading_open = token
            elif token.type == "heading_close":
                in_heading = False
            elif token.type == "table_open":
                in_table = True
                table_start = token
                table_rows = []
            elif token.type == "tr_open":
                current_row = []
            elif token.type == "tr_close":
                table_rows.append(current_row)
            elif token.type == "table_close":
                in_table = False
                if table_start is not None:
                    self._add_table(table_start, table_rows)
                table_start = None
            elif token.type in ("fence", "code_block"):
                self._add_code_block(token)
            elif token.type == "html_block":
                self._add_html(token.content, self.line_of(token))
            elif token.type == "inline":
                line = current_line
                if in_heading and heading_open is not None:
                    self._add_heading(heading_open, token)
                elif in_table:
                    current_row.append(_plain_text(token.children).strip())
                    self._add_prose(token, line, "table_cell")
                elif pending_item is not None:
                    self._add_list_item(pending_item, token, list_stack[-1] if list_stack else 0)
                    pending_item = None
                    self._add_prose(token, line, "list_item")
                elif list_stack:
                    self._add_prose(token, line, "list_item")
                else:
                    self._add_prose(token, line, "paragraph")
                self._add_inline(token, line)

    # ----- Collectors -----

    def _add_heading(self, open_token: Token, inline: Token) -> None:
        level = int(open_token.tag[1])
        text = _plain_text(inline.children).strip()
        line = self.line_of(open_token)
        self.heading_nodes.append(
            {
                "level": level,
                "text": text,
                "slug": self.slugs.register(text),
                "line": line,
                "children": [],
            }
        )
        for segment, seg_line in _prose_segments(inline.children, line):
            self.text_blocks.append(TextBlock(segment, seg_line, "heading"))

    def _add_prose(self, inline: Token, line: int, kind: str) -> None:
        for segment, seg_line in _prose_segments(inline.children, line):
            self.text_blocks.append(TextBlock(segment, seg_line, kind))

    def _add_list_item(self, item: Token, inline: Token, list_index: int) -> None:
        self.list_items.append(
            ListItem(
                text=inline.content.strip(),
                marker=item.markup,
                line=self.line_of(item),
                list_index=list_index,
            )
        )

    def _add_table(self, table_open: Token, rows: List[List[str]]) -> None:
        line = self.line_of(table_open)
        raw_counts: Tuple[int, ...] = ()
        if table_open.map:
            start, end = table_open.map
            raw_counts = tuple(
                _count_cells(raw)
                for raw in self.body_lines[start:end]
                if raw.strip()
            )
        header = tuple(rows[0]) if rows else ()
        body = tuple(tuple(r) for r in rows[1:])
        table = Table(header_row=header, rows=body, line=line, raw_column_counts=raw_counts)
        if table.is_ragged:
            self.anomalies.append(
                ParseAnomaly(
                    "ragged-table",
                    f"Table rows have inconsistent column counts {sorted(set(raw_counts))}",
                    line,
                )
            )
        self.tables.append(table)

    def _add_code_block(self, token: Token) -> None:
        line = self.line_of(token)
        fenced = token.type == "fence"
        self.code_spans.append(
            CodeSpan(
                text=token.content,
                is_fenced=fenced,
                location=line,
                info=token.info.strip(),
                is_block=True,
            )
        )
        if fenced and token.map and not self._fence_closed(token):
            self.anomalies.append(
                ParseAnomaly(
                    "unclosed-code-fence",
                    f"Code fence opened with {token.markup} is never closed",
                    line,
                )
            )

    def _fence_closed(self, token: Token) -> bool:
        start, end = token.map
        if end - start < 2 or end > len(self.body_lines):
            return False
        closing = self.body_lines[end - 1].strip()
        marker = token.markup[0]
        return (
            len(closing) >= len(token.markup)
            and set(closing) == {marker}
        )

    def _add_html(self, content: str, line: int) -> None:
        for match in HTML_COMMENT_RE.finditer(content):
            comment_line = line + content.count("\n", 0, match.start())
            self.comments.append(HtmlComment(match.group(1).strip(), comment_line))
        if "<!--" in HTML_COMMENT_RE.sub("", content):
            self.anomalies.append(
                ParseAnomaly("unclosed-html-comment", "HTML comment is never closed", line)
            )
        for match in HTML_LINK_RE.finditer(content):
            link_line = line + content.count("\n", 0, match.start())
            self._append_link(
                HTML_TAG_RE.sub("", match.group(2)).strip(), match.group(1), link_line
            )
        self.anchors.extend(HTML_ANCHOR_RE.findall(content))

    def _append_link(self, display: str, target: str, line: int) -> None:
        target = target.strip()
        if not target:
            self.anomalies.append(
                ParseAnomaly("empty-link-target", f"Link '{display}' has an empty target", line)
            )
        self.links.append(
            Link(
                display_text=display,
                target=target,
                is_anchor=target.startswith("#"),
                location=line,
            )
        )

    def _add_inline(self, inline: Token, first_line: int) -> None:
        line = first_line
        link_href: Optional[str] = None
        link_text: List[str] = []
        link_line = line

        for child in inline.children or []:
            if child.type in ("softbreak", "hardbreak"):
                line += 1
            elif child.type == "code_inline":
                self.code_spans.append(CodeSpan(child.content, False, line))
                if link_href is not None:
                    link_text.append(child.content)
            elif child.type == "link_open":
                link_href = child.attrGet("href") or ""
                link_text = []
                link_line = line
            elif child.type == "link_close":
                if link_href is not None:
                    self._append_link("".join(link_text).strip(), str(link_href), link_line)
                link_href = None
            elif child.type in ("text", "image") and link_href is not None:
                link_text.append(child.content)
            elif child.type == "html_inline" and child.content.startswith("<!--"):
                match = HTML_COMMENT_RE.match(child.content)
                if match:
                    self.comments.append(HtmlComment(match.group(1).strip(), line))

        # Raw <a href> / <a id> tags inside paragraphs
        for match in HTML_LINK_RE.finditer(inline.content):
            html_line = first_line + inline.content.count("\n", 0, match.start())
            self._append_link(
                HTML_TAG_RE.sub("", match.group(2)).strip(), match.group(1), html_line
            )
        self.anchors.extend(HTML_ANCHOR_RE.findall(inline.content))

    # ----- Heading tree -----

    def heading_tree(self) -> Tuple[Heading, ...]:
        """Attach each heading to the nearest open heading of a lower level."""
        roots: List[Dict[str, Any]] = []
        stack: List[Dict[str, Any]] = []
        for node in self.heading_nodes:
            while stack and stack[-1]["level"] >= node["level"]:
                stack.pop()
            if stack:
                stack[-1]["children"].append(node)
            else:
                roots.append(node)
            stack.append(node)
        return tuple(_freeze(node) for node in roots)


def _freeze(node: Dict[str, Any]) -> Heading:
    return Heading(
        level=node["level"],
        text=node["text"],
        anchor_slug=node["slug"],
        line=node["line"],
        children=tuple(_freeze(child) for child in node["children"]),
    )


def _parse_frontmatter(
    frontmatter_text: str, anomalies: List[ParseAnomaly]
) -> Dict[str, str]:
    """Read front matter YAML, recording problems as anomalies."""
    try:
        data = yaml.safe_load(frontmatter_text)
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        anomalies.append(
            ParseAnomaly(
                "invalid-front-matter",
                f"Invalid YAML in front matter: {getattr(e, 'problem', None) or e}",
                mark.line + 2 if mark is not None else 1,
            )
        )
        return {}

    if data is None:
        return {}
    if not isinstance(data, dict):
        anomalies.append(
            ParseAnomaly(
                "front-matter-not-mapping",
                f"Front matter must be a mapping, got {type(data).__name__}",
                1,
            )
        )
        return {}
    return normalize_frontmatter(data)


def parse(
    raw_text: str,
    front_matter_text: Optional[str] = None,
    doc_id: str = "",
    front_matter_override: Optional[Mapping[str, Any]] = None,
) -> Document:
    """
    Parse Markdown text into a Document.

    Args:
        raw_text: Full document text, optionally starting with front matter
        front_matter_text: Front matter YAML supplied separately; replaces any
            embedded block (the embedded block is still removed from the body)
        doc_id: Document identifier
        front_matter_override: Values that replace parsed front matter keys

    Returns:
        Document (never raises on malformed Markdown or YAML)
    """
    raw_text = raw_text or ""
    anomalies: List[ParseAnomaly] = []

    embedded_text, body_lines, offset = split_frontmatter(raw_text)
    embedded_present = offset > 0

    if has_unterminated_frontmatter(raw_text):
        anomalies.append(
            ParseAnomaly(
                "unterminated-front-matter",
                "Front matter opened with '---' is never closed",
                1,
            )
        )

    if front_matter_text is not None:
        front_matter = _parse_frontmatter(front_matter_text, anomalies)
        present = True
    else:
        front_matter = _parse_frontmatter(embedded_text, anomalies) if embedded_present else {}
        present = embedded_present

    if front_matter_override:
        for key, value in front_matter_override.items():
            front_matter[str(key)] = frontmatter_value_to_str(value)
        present = True

    builder = _Builder(body_lines, offset)
    builder.walk(_MD.parse("\n".join(body_lines)))
    anomalies.extend(builder.anomalies)

    return Document(
        id=doc_id,
        raw_text=raw_text,
        front_matter=front_matter,
        front_matter_present=present,
        headings=builder.heading_tree(),
        tables=tuple(builder.tables),
        code_spans=tuple(builder.code_spans),
        links=tuple(builder.links),
        list_items=tuple(builder.list_items),
        text_blocks=tuple(builder.text_blocks),
        html_comments=tuple(builder.comments),
        explicit_anchors=frozenset(builder.anchors),
        anomalies=tuple(sorted(anomalies, key=lambda a: (a.line or 0, a.code))),
    )


def ensure_document(
    item: Union[Document, DocumentInput, Mapping[str, Any]],
) -> Document:
    """
    Accept a parsed Document, a DocumentInput or an {id, content} mapping.

    Args:
        item: Document source

    Returns:
        Parsed Document
    """
    if isinstance(item, Document):
        return item
    if not isinstance(item, DocumentInput):
        item = DocumentInput.from_mapping(item)
    return parse(
        item.content,
        doc_id=item.id,
        front_matter_override=item.front_matter_override,
    )
