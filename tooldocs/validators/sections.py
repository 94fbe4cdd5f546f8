#!/usr/bin/env python3
"""
sections.py
-----------
Structural queries over a parsed Document shared by the validators.

A tool reference page looks like:

    # Azure Storage tools for the Azure MCP Server
    ## Available operations
    ### List storage accounts
    <!-- storage.account.list --subscription -->
    Description paragraph...
    Example prompts include:
    - **List accounts**: "Show me my storage accounts"
    | Parameter | Required or optional | Description |
    ## Related content

Operation sections are the direct children of the operations heading.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

# --- Local imports ---
from tooldocs.configs.rules import QualityRules
from tooldocs.dataclasses.document import Document, Heading, ListItem, Table


PROMPT_RE = re.compile(r'^\*\*(?P<summary>.+?)\*\*\s*:\s*["“](?P<text>.*?)["”]\s*$')
FLAG_RE = re.compile(r"(?<![\w-])--?([a-z][a-z0-9-]*)", re.IGNORECASE)


@dataclass(frozen=True)
class ExamplePrompt:
    """One example prompt list item, split into optional summary and text."""

    summary: Optional[str]
    text: str
    line: int


def find_section(doc: Document, title: str) -> Optional[Heading]:
    """First heading whose text equals title (case-insensitive)."""
    found = doc.find_headings(title)
    return found[0] if found else None


def operation_headings(doc: Document, rules: QualityRules) -> List[Heading]:
    """Direct children of the operations heading, or [] when it is missing."""
    parent = find_section(doc, rules.operations_section)
    return list(parent.children) if parent else []


def _marker_line(doc: Document, heading: Heading, rules: QualityRules) -> Optional[int]:
    marker = re.compile(rules.prompt_marker, re.IGNORECASE)
    for block in doc.text_blocks:
        if not doc.in_section(heading, block.line):
            continue
        if block.kind not in ("paragraph", "heading"):
            continue
        if marker.search(block.text.strip(" *_:")):
            return block.line
    return None


def example_prompt_items(
    doc: Document, heading: Heading, rules: QualityRules
) -> Optional[List[ListItem]]:
    """
    List items of the example-prompts block in an operation section.

    Returns:
        None when the section has no example-prompts marker, otherwise the
        items of the first list after the marker ([] when there is none)
    """
    marker_line = _marker_line(doc, heading, rules)
    if marker_line is None:
        return None

    end = doc.section_end(heading)
    candidates = [
        item for item in doc.list_items if marker_line < item.line <= end
    ]
    if not candidates:
        return []
    list_index = candidates[0].list_index
    return [item for item in candidates if item.list_index == list_index]


def parse_prompt(item: ListItem) -> ExamplePrompt:
    """Split '**Summary**: "text"' list items; other items are text only."""
    match = PROMPT_RE.match(item.text)
    if match:
        return ExamplePrompt(match.group("summary").strip(), match.group("text").strip(), item.line)
    return ExamplePrompt(None, item.text.strip().strip('"“”'), item.line)


def is_parameter_table(table: Table, rules: QualityRules) -> bool:
    """A table whose first header cell names the parameter column."""
    if not table.header_row:
        return False
    first = table.header_row[0].strip().lower()
    return first == rules.parameter_table_columns[0].lower() or "parameter" in first


def parameter_table(doc: Document, heading: Heading, rules: QualityRules) -> Optional[Table]:
    """First parameter table inside an operation section."""
    for table in doc.tables:
        if doc.in_section(heading, table.line) and is_parameter_table(table, rules):
            return table
    return None


def table_column(table: Table, title: str) -> Optional[int]:
    """Index of a header cell (case-insensitive), or None."""
    wanted = title.strip().lower()
    for i, cell in enumerate(table.header_row):
        if cell.strip().lower() == wanted:
            return i
    return None


def parameter_rows(table: Table) -> List[Tuple[str, Tuple[str, ...]]]:
    """(parameter name, row) pairs; the name is the first cell without markup."""
    rows = []
    for row in table.rows:
        if not row:
            continue
        name = row[0].strip().strip("*`").strip()
        if name:
            rows.append((name, row))
    return rows


def operation_description(doc: Document, heading: Heading, rules: QualityRules) -> str:
    """Prose paragraphs of an operation before its example prompts."""
    stop = _marker_line(doc, heading, rules) or doc.own_section_end(heading) + 1
    parts = [
        block.text
        for block in doc.text_blocks
        if block.kind == "paragraph" and heading.line < block.line < stop
    ]
    return " ".join(parts).strip()


def command_tokens(text: str, rules: QualityRules) -> List[str]:
    """
    Command-shaped tokens in a piece of text, in order.

    Tokens ending with an ignored suffix (file names, domains) are skipped.
    """
    pattern = re.compile(rf"(?<![\w./-])({rules.command_pattern})(?![\w/-])")
    tokens = []
    for match in pattern.finditer(text):
        token = match.group(1)
        if token.lower().endswith(tuple(rules.ignored_token_suffixes)):
            continue
        tokens.append(token)
    return tokens


def flag_tokens(text: str) -> List[str]:
    """'--name' and '-name' flags in a piece of text, without dashes."""
    return [m.group(1).lower() for m in FLAG_RE.finditer(text)]


def operation_command(doc: Document, heading: Heading, rules: QualityRules) -> Optional[str]:
    """
    Command documented by an operation section.

    The command comment (<!-- storage.account.list -->) wins over inline code.
    """
    for comment in doc.html_comments:
        if doc.in_section(heading, comment.line):
            tokens = command_tokens(comment.text, rules)
            if tokens:
                return tokens[0]
    for span in doc.code_spans:
        if doc.in_section(heading, span.location):
            tokens = command_tokens(span.text, rules)
            if tokens:
                return tokens[0]
    return None
