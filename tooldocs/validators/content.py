#!/usr/bin/env python3
"""
content.py
----------
Content completeness validation for tool reference pages.

Validates:
- Required front matter fields, description length, date format
- Required sections and at least one operation
- Per operation: description, example prompts (count, variety, quality),
  parameter descriptions, command reference, catalog parameter coverage
- Related content links

Produces QualityMetrics: structure, content, examples and metadata scores
(fraction of checks passed, 0-100) and their weighted overall score.
A low score never invalidates a document; only errors do.

Usage:
    from tooldocs.validators.content import ContentValidator

    result = ContentValidator().validate(doc, ValidationContext(catalog))
    result.quality_metrics.overall_score
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import re
from typing import List, Optional, Set

# --- Local imports ---
from tooldocs.catalog import CommandCatalog, normalize_parameter
from tooldocs.core.logging_manager import safe_logger
from tooldocs.dataclasses.document import Document, Heading
from tooldocs.dataclasses.results import QualityMetrics, ValidationResult
from tooldocs.validators.base import (
    DocumentValidator,
    ScoreCard,
    ValidationContext,
    weighted_average,
)
from tooldocs.validators.sections import (
    ExamplePrompt,
    example_prompt_items,
    find_section,
    operation_command,
    operation_description,
    operation_headings,
    parameter_rows,
    parameter_table,
    parse_prompt,
    table_column,
)


QUESTION_WORDS = {
    "what", "which", "how", "who", "where", "when", "why",
    "can", "could", "is", "are", "do", "does", "will", "should", "would",
}


class ContentValidator(DocumentValidator):
    """Checks structural and metadata completeness and scores content quality."""

    name = "content"

    def validate(self, doc: Document, context: ValidationContext) -> ValidationResult:
        """
        Validate a parsed document.

        Args:
            doc: Parsed document
            context: Catalog and rules for this run

        Returns:
            ValidationResult with quality_metrics
        """
        rules = context.rules
        result = ValidationResult(validator=self.name, document_id=doc.id)
        card = ScoreCard("structure", "content", "examples", "metadata")

        self._check_metadata(doc, context, result, card)
        operations = self._check_sections(doc, context, result, card)
        for heading in operations:
            self._check_operation(doc, heading, context, result, card)
        self._check_related_content(doc, context, result, card)

        scores = card.scores()
        result.quality_metrics = QualityMetrics(
            structure_score=scores["structure"],
            content_score=scores["content"],
            examples_score=scores["examples"],
            metadata_score=scores["metadata"],
            overall_score=weighted_average(scores, rules.quality_weights),
        )

        safe_logger(self.logger).log_debug(
            "content_validated",
            {
                "document": doc.id,
                "errors": len(result.errors),
                "warnings": len(result.warnings),
                "overall_score": result.quality_metrics.overall_score,
            },
        )
        return result

    # ----- Metadata -----

    def _check_metadata(
        self,
        doc: Document,
        context: ValidationContext,
        result: ValidationResult,
        card: ScoreCard,
    ) -> None:
        rules = context.rules
        fm = doc.front_matter

        for key in rules.required_front_matter:
            if card.check("metadata", bool(fm.get(key, "").strip())):
                continue
            result.add_error(
                "missing-front-matter-key",
                f"Required front matter field '{key}' missing or empty",
                1,
                f"Add '{key}: <value>' to the front matter",
            )

        description = fm.get("description", "").strip()
        if description:
            length = len(description)
            if not card.check(
                "metadata",
                rules.min_description_length <= length <= rules.max_description_length,
            ):
                bound = "short" if length < rules.min_description_length else "long"
                result.add_warning(
                    "description-length",
                    f"Description is too {bound} ({length} characters, expected "
                    f"{rules.min_description_length}-{rules.max_description_length})",
                    1,
                )

        date_value = fm.get("ms.date", "").strip()
        if date_value and not card.check("metadata", bool(re.match(rules.date_pattern, date_value))):
            result.add_error(
                "invalid-date",
                f"Invalid date format: '{date_value}'",
                1,
                "Use YYYY-MM-DD format (e.g., 2025-01-17)",
            )

        title = fm.get("title", "").strip()
        if title and rules.product_name:
            if not card.check("metadata", rules.product_name.lower() in title.lower()):
                result.add_warning(
                    "title-missing-product",
                    f"Title should mention '{rules.product_name}'",
                    1,
                )

    # ----- Sections -----

    def _check_sections(
        self,
        doc: Document,
        context: ValidationContext,
        result: ValidationResult,
        card: ScoreCard,
    ) -> List[Heading]:
        rules = context.rules

        for title in rules.required_sections:
            if not card.check("structure", find_section(doc, title) is not None):
                result.add_error(
                    "missing-section",
                    f"Required section '{title}' is missing",
                    None,
                    f"Add a '## {title}' heading",
                )

        operations = operation_headings(doc, rules)
        if find_section(doc, rules.operations_section) is not None:
            if not card.check("structure", bool(operations)):
                result.add_error(
                    "no-operations",
                    f"Section '{rules.operations_section}' documents no operations",
                    find_section(doc, rules.operations_section).line,
                )
        return operations

    # ----- Operations -----

    def _check_operation(
        self,
        doc: Document,
        heading: Heading,
        context: ValidationContext,
        result: ValidationResult,
        card: ScoreCard,
    ) -> None:
        rules = context.rules

        description = operation_description(doc, heading, rules)
        if not card.check(
            "structure", len(description) >= rules.min_operation_description_length
        ):
            result.add_warning(
                "short-operation-description",
                f"Operation '{heading.text}' needs a description of at least "
                f"{rules.min_operation_description_length} characters",
                heading.line,
            )

        command = operation_command(doc, heading, rules)
        if not card.check("content", command is not None):
            result.add_warning(
                "missing-command-reference",
                f"Operation '{heading.text}' does not reference its command",
                heading.line,
                "Add a command comment such as <!-- storage.account.list -->",
            )

        self._check_prompts(doc, heading, context, result, card)
        documented = self._check_parameters(doc, heading, context, result, card)

        if command is not None and command in context.catalog and documented is not None:
            self._check_catalog_coverage(heading, command, documented, context.catalog, result, card)

    def _check_prompts(
        self,
        doc: Document,
        heading: Heading,
        context: ValidationContext,
        result: ValidationResult,
        card: ScoreCard,
    ) -> None:
        rules = context.rules
        items = example_prompt_items(doc, heading, rules) or []
        prompts = [parse_prompt(item) for item in items]

        if not card.check("examples", len(prompts) >= rules.min_example_prompts):
            result.add_error(
                "insufficient-example-prompts",
                f"Operation '{heading.text}' has {len(prompts)} example prompt(s), "
                f"at least {rules.min_example_prompts} required",
                heading.line,
            )
        elif len(prompts) > rules.max_example_prompts:
            result.add_warning(
                "too-many-example-prompts",
                f"Operation '{heading.text}' has {len(prompts)} example prompts "
                f"(recommended maximum {rules.max_example_prompts})",
                heading.line,
            )

        if not prompts:
            return

        styles = {classify_prompt(p.text, context) for p in prompts}
        wanted = min(rules.min_prompt_styles, len(prompts))
        if not card.check("examples", len(styles) >= wanted):
            missing = [s for s in rules.prompt_styles if s not in styles]
            result.add_warning(
                "low-prompt-variety",
                f"Operation '{heading.text}' example prompts use {len(styles)} style(s); "
                f"at least {wanted} expected",
                heading.line,
                f"Add prompts in these styles: {', '.join(missing)}",
            )

        self._check_prompt_quality(heading, prompts, context, result, card)

    def _check_prompt_quality(
        self,
        heading: Heading,
        prompts: List[ExamplePrompt],
        context: ValidationContext,
        result: ValidationResult,
        card: ScoreCard,
    ) -> None:
        rules = context.rules
        generic = [re.compile(p, re.IGNORECASE) for p in rules.generic_prompt_patterns]
        seen: Set[str] = set()

        for prompt in prompts:
            if not card.check("examples", len(prompt.text) >= rules.min_prompt_length):
                result.add_error(
                    "prompt-too-short",
                    f"Example prompt '{prompt.text}' is shorter than {rules.min_prompt_length} characters",
                    prompt.line,
                )
            if not card.check("content", not any(g.search(prompt.text) for g in generic)):
                result.add_warning(
                    "generic-prompt",
                    f"Example prompt '{prompt.text}' is too generic",
                    prompt.line,
                    "Write a prompt a user would actually type for this operation",
                )
            key = prompt.text.lower()
            if not card.check("content", key not in seen):
                result.add_warning(
                    "duplicate-prompt",
                    f"Example prompt '{prompt.text}' is repeated in '{heading.text}'",
                    prompt.line,
                )
            seen.add(key)
            if prompt.summary is not None and len(prompt.summary) > rules.max_prompt_summary_length:
                result.add_warning(
                    "prompt-summary-length",
                    f"Prompt summary '{prompt.summary}' is longer than "
                    f"{rules.max_prompt_summary_length} characters",
                    prompt.line,
                )

    # ----- Parameters -----

    def _check_parameters(
        self,
        doc: Document,
        heading: Heading,
        context: ValidationContext,
        result: ValidationResult,
        card: ScoreCard,
    ) -> Optional[Set[str]]:
        """Check parameter descriptions; returns the documented names, or None without a table."""
        rules = context.rules
        table = parameter_table(doc, heading, rules)
        if table is None:
            return None

        required_col = table_column(table, rules.parameter_table_columns[1]) if len(rules.parameter_table_columns) > 1 else None
        description_col = table_column(table, rules.parameter_table_columns[-1])
        documented: Set[str] = set()

        for name, row in parameter_rows(table):
            documented.add(normalize_parameter(name))

            if required_col is not None and required_col < len(row):
                value = row[required_col].strip().lower()
                if not card.check("content", value in rules.required_values):
                    result.add_error(
                        "invalid-required-value",
                        f"Parameter '{name}' has invalid value '{row[required_col]}' in "
                        f"'{rules.parameter_table_columns[1]}'",
                        table.line,
                        f"Use one of: {', '.join(v.capitalize() for v in rules.required_values)}",
                    )

            if description_col is None or description_col >= len(row):
                continue
            text = row[description_col].strip()
            if not card.check("content", len(text) >= rules.min_parameter_description_length):
                result.add_warning(
                    "parameter-description",
                    f"Parameter '{name}' description is too short",
                    table.line,
                )
            elif not card.check("content", text.endswith((".", "!", "?", ")"))):
                result.add_warning(
                    "parameter-description",
                    f"Parameter '{name}' description should end with a period",
                    table.line,
                )
        return documented

    def _check_catalog_coverage(
        self,
        heading: Heading,
        command: str,
        documented: Set[str],
        catalog: CommandCatalog,
        result: ValidationResult,
        card: ScoreCard,
    ) -> None:
        for param in sorted(catalog.parameters_for(command)):
            if not card.check("content", param in documented):
                result.add_warning(
                    "undocumented-parameter",
                    f"Parameter '{param}' of '{command}' is not documented in '{heading.text}'",
                    heading.line,
                )

    # ----- Related content -----

    def _check_related_content(
        self,
        doc: Document,
        context: ValidationContext,
        result: ValidationResult,
        card: ScoreCard,
    ) -> None:
        rules = context.rules
        if not rules.related_section:
            return
        section = find_section(doc, rules.related_section)
        if not card.check("structure", section is not None):
            result.add_warning(
                "missing-related-content",
                f"Section '{rules.related_section}' is missing",
                None,
            )
            return

        targets = {
            (link.target_document or "").rsplit("/", 1)[-1].lower()
            for link in doc.links
            if doc.in_section(section, link.location)
        }
        for required in rules.required_related_links:
            if not card.check("structure", required.lower() in targets):
                result.add_warning(
                    "missing-related-link",
                    f"Section '{rules.related_section}' should link to {required}",
                    section.line,
                )


def classify_prompt(text: str, context: Optional[ValidationContext] = None) -> str:
    """
    Classify an example prompt into one style.

    Order of precedence: verbose (long), question, incomplete (short phrase
    without terminal punctuation), statement.

    Examples:
        >>> classify_prompt("Which storage accounts do I have?")
        'question'
        >>> classify_prompt("storage accounts in my subscription")
        'incomplete'
    """
    rules = context.rules if context else ValidationContext().rules
    stripped = text.strip()
    words = stripped.split()
    if len(words) >= rules.verbose_prompt_words:
        return "verbose"
    if stripped.endswith("?") or (words and words[0].lower().strip(",") in QUESTION_WORDS):
        return "question"
    if len(words) <= rules.incomplete_prompt_words and not stripped.endswith((".", "!", "?")):
        return "incomplete"
    return "statement"
