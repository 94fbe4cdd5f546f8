#!/usr/bin/env python3
"""
format.py
---------
Template and style compliance checks for tool reference pages.

Four compliance areas, each scored 0-100 as the fraction of checks passed:
- front_matter: template keys present and in template order, topic value
- heading_structure: one H1 with the expected title pattern, no skipped
  levels, no forbidden headings, heading style
- template_format: parameter tables (presence, column schema, ragged rows),
  bullet character, duplicated see-also sections, unreplaced template variables
- standards_compliance: include directives, trailing whitespace, unmatched
  bold markers, discouraged terms, parse anomalies

Hard-rule violations (no front matter, no H1, several H1s, missing
parameter table, unreplaced template variable) are errors; everything else
is a warning.

Usage:
    from tooldocs.validators.format import FormatChecker

    result = FormatChecker().check(doc)
    result.compliance.template_format
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import re
from typing import List, Optional, Set, Tuple

# --- Local imports ---
from tooldocs.configs.rules import QualityRules
from tooldocs.core.logging_manager import safe_logger
from tooldocs.dataclasses.document import Document, Heading
from tooldocs.dataclasses.results import ComplianceMetrics, ValidationResult
from tooldocs.utils.md import find_frontmatter_key_line, split_frontmatter
from tooldocs.validators.base import (
    DocumentValidator,
    ScoreCard,
    ValidationContext,
    weighted_average,
)
from tooldocs.validators.sections import operation_headings, parameter_table


AREAS = ("front_matter", "heading_structure", "template_format", "standards_compliance")


class FormatChecker(DocumentValidator):
    """Checks a document against the reference page template and style rules."""

    name = "format"

    def validate(self, doc: Document, context: ValidationContext) -> ValidationResult:
        return self.check(doc, context.rules)

    def check(self, doc: Document, rules: Optional[QualityRules] = None) -> ValidationResult:
        """
        Check template compliance of a parsed document.

        Args:
            doc: Parsed document
            rules: Rule set (defaults to the checker's rules)

        Returns:
            ValidationResult with a compliance breakdown
        """
        rules = rules or self.rules
        result = ValidationResult(validator=self.name, document_id=doc.id)
        card = ScoreCard(*AREAS)

        self._check_front_matter(doc, rules, result, card)
        self._check_headings(doc, rules, result, card)
        self._check_template(doc, rules, result, card)
        self._check_standards(doc, rules, result, card)

        scores = card.scores()
        result.compliance = ComplianceMetrics(
            front_matter=scores["front_matter"],
            heading_structure=scores["heading_structure"],
            template_format=scores["template_format"],
            standards_compliance=scores["standards_compliance"],
            overall_compliance=weighted_average(scores, rules.compliance_weights),
        )

        safe_logger(self.logger).log_debug(
            "format_checked",
            {"document": doc.id, "overall_compliance": result.compliance.overall_compliance},
        )
        return result

    # ----- Front matter -----

    def _check_front_matter(
        self, doc: Document, rules: QualityRules, result: ValidationResult, card: ScoreCard
    ) -> None:
        if not card.check("front_matter", doc.front_matter_present):
            result.add_error(
                "missing-front-matter",
                "Document has no front matter block",
                1,
                "Start the file with a '---' delimited YAML block",
            )
            return

        fm = doc.front_matter
        fm_text = split_frontmatter(doc.raw_text)[0]
        for key in rules.front_matter_template:
            if not card.check("front_matter", key in fm):
                result.add_warning(
                    "missing-template-key",
                    f"Front matter is missing template key '{key}'",
                    1,
                )

        present = [k for k in fm if k in rules.front_matter_template]
        expected = [k for k in rules.front_matter_template if k in fm]
        if not card.check("front_matter", present == expected):
            first_wrong = next(a for a, b in zip(present, expected) if a != b)
            result.add_warning(
                "front-matter-order",
                f"Front matter keys are out of template order (expected {', '.join(expected)})",
                find_frontmatter_key_line(fm_text, first_wrong) or 1,
            )

        topic = fm.get("ms.topic")
        if topic and rules.expected_topic:
            if not card.check("front_matter", topic.strip().lower() == rules.expected_topic.lower()):
                result.add_warning(
                    "unexpected-topic",
                    f"ms.topic is '{topic}', expected '{rules.expected_topic}'",
                    find_frontmatter_key_line(fm_text, "ms.topic") or 1,
                )

    # ----- Headings -----

    def _check_headings(
        self, doc: Document, rules: QualityRules, result: ValidationResult, card: ScoreCard
    ) -> None:
        headings = list(doc.iter_headings())
        if not card.check("heading_structure", bool(headings)):
            result.add_error("no-headings", "Document has no headings")
            return

        h1s = [h for h in headings if h.level == 1]
        if not card.check("heading_structure", bool(h1s)):
            result.add_error("missing-h1", "Document has no H1 heading", headings[0].line)
        elif not card.check("heading_structure", len(h1s) == 1):
            for extra in h1s[1:]:
                result.add_error(
                    "duplicate-h1",
                    f"Extra H1 heading '{extra.text}' (only one H1 allowed)",
                    extra.line,
                )
        if h1s and rules.h1_pattern:
            if not card.check(
                "heading_structure", bool(re.search(rules.h1_pattern, h1s[0].text, re.IGNORECASE))
            ):
                result.add_warning(
                    "h1-title-pattern",
                    f"H1 '{h1s[0].text}' does not follow the title pattern",
                    h1s[0].line,
                    "Use '<Service> tools for the Azure MCP Server'",
                )

        self._check_nesting(doc.headings, result, card)

        forbidden = {t.lower() for t in rules.forbidden_h3_titles}
        for heading in headings:
            if heading.level >= 3 and not card.check(
                "heading_structure", heading.text.strip().lower() not in forbidden
            ):
                result.add_warning(
                    "forbidden-heading",
                    f"Heading '{heading.text}' is not allowed at level {heading.level}",
                    heading.line,
                    "Use a lead-in paragraph instead of a heading",
                )
            if not card.check("heading_structure", not heading.text.rstrip().endswith((".", ":"))):
                result.add_warning(
                    "heading-punctuation",
                    f"Heading '{heading.text}' should not end with punctuation",
                    heading.line,
                )
            letters = [c for c in heading.text if c.isalpha()]
            if len(letters) > 3 and not card.check(
                "heading_structure", not all(c.isupper() for c in letters)
            ):
                result.add_warning(
                    "heading-all-caps",
                    f"Heading '{heading.text}' is written in all caps",
                    heading.line,
                )

    def _check_nesting(
        self, headings: Tuple[Heading, ...], result: ValidationResult, card: ScoreCard
    ) -> None:
        for heading in headings:
            for child in heading.children:
                if not card.check("heading_structure", child.level - heading.level <= 1):
                    result.add_warning(
                        "heading-level-skip",
                        f"Heading '{child.text}' jumps from H{heading.level} to H{child.level}",
                        child.line,
                        f"Use H{heading.level + 1}",
                    )
            self._check_nesting(heading.children, result, card)

    # ----- Template format -----

    def _check_template(
        self, doc: Document, rules: QualityRules, result: ValidationResult, card: ScoreCard
    ) -> None:
        expected_columns = [c.lower() for c in rules.parameter_table_columns]

        for heading in operation_headings(doc, rules):
            table = parameter_table(doc, heading, rules)
            if not card.check("template_format", table is not None):
                result.add_error(
                    "missing-parameter-table",
                    f"Operation '{heading.text}' has no parameter table",
                    heading.line,
                    f"Add a table with columns: {' | '.join(rules.parameter_table_columns)}",
                )
                continue
            header = [c.strip().lower() for c in table.header_row]
            if not card.check("template_format", header == expected_columns):
                result.add_warning(
                    "parameter-table-schema",
                    f"Parameter table columns are '{' | '.join(table.header_row)}', "
                    f"expected '{' | '.join(rules.parameter_table_columns)}'",
                    table.line,
                )
            if not card.check("template_format", not table.is_ragged):
                result.add_warning(
                    "ragged-parameter-table",
                    "Parameter table rows have inconsistent column counts",
                    table.line,
                )

        bullets = [item for item in doc.list_items if item.marker in ("-", "*", "+")]
        for item in bullets:
            if not card.check("template_format", item.marker == rules.bullet_marker):
                result.add_warning(
                    "bullet-style",
                    f"List item uses '{item.marker}' instead of '{rules.bullet_marker}'",
                    item.line,
                )

        see_also = {t.lower() for t in rules.see_also_titles}
        sections = [h for h in doc.iter_headings() if h.text.strip().lower() in see_also]
        if not card.check("template_format", len(sections) <= 1):
            for duplicate in sections[1:]:
                result.add_warning(
                    "duplicate-section",
                    f"Duplicate related-links section '{duplicate.text}'",
                    duplicate.line,
                )

        if rules.template_variable_pattern:
            # Prose blocks exclude code, so {placeholders} in samples are fine
            variable = re.compile(rules.template_variable_pattern)
            unreplaced = [b for b in doc.text_blocks if variable.search(b.text)]
            if not card.check("template_format", not unreplaced):
                for block in unreplaced:
                    result.add_error(
                        "unreplaced-template-variable",
                        f"Unreplaced template variable {variable.search(block.text).group(0)}",
                        block.line,
                    )

    # ----- Standards -----

    def _check_standards(
        self, doc: Document, rules: QualityRules, result: ValidationResult, card: ScoreCard
    ) -> None:
        for include in rules.required_includes:
            if not card.check("standards_compliance", include.lower() in doc.raw_text.lower()):
                result.add_warning(
                    "missing-include",
                    f"Required include '{include}' is missing",
                )

        fenced = _fenced_lines(doc)
        trailing: List[int] = []
        unmatched: List[int] = []
        for number, line in enumerate(doc.raw_text.splitlines(), start=1):
            if number in fenced:
                continue
            if line != line.rstrip():
                trailing.append(number)
            if line.count("**") % 2:
                unmatched.append(number)

        if not card.check("standards_compliance", not trailing):
            result.add_warning(
                "trailing-whitespace",
                f"{len(trailing)} line(s) have trailing whitespace",
                trailing[0],
            )
        if not card.check("standards_compliance", not unmatched):
            for number in unmatched:
                result.add_warning("unmatched-bold", "Unmatched '**' bold marker", number)

        term_patterns = [
            (re.compile(rf"\b{re.escape(wrong)}\b", re.IGNORECASE), wrong, right)
            for wrong, right in rules.discouraged_terms.items()
        ]
        term_hits = 0
        for block in doc.text_blocks:
            for pattern, wrong, right in term_patterns:
                if pattern.search(block.text):
                    term_hits += 1
                    result.add_warning(
                        "discouraged-term",
                        f"Use '{right}' instead of '{wrong}'",
                        block.line,
                    )
        card.check("standards_compliance", term_hits == 0)

        for anomaly in doc.anomalies:
            card.check("standards_compliance", False)
            result.add_warning("parse-anomaly", anomaly.message, anomaly.line)


def _fenced_lines(doc: Document) -> Set[int]:
    """Line numbers covered by code blocks, fences included."""
    lines = set()
    for span in doc.code_spans:
        if span.is_block:
            end = span.content_line + span.text.count("\n") + (1 if span.is_fenced else 0)
            lines.update(range(span.location, end))
    return lines
