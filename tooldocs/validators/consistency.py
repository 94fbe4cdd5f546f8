#!/usr/bin/env python3
"""
consistency.py
--------------
Terminology and naming consistency checks, per document and across a corpus.

Single-document mode records every occurrence of a tracked domain term and
every parameter name in the document's parameter tables, keyed by a
normalized form. When a key shows more than one surface variant, each extra
variant is reported against the first one seen in the document.

Cross-document mode profiles every document, orders the profiles by
document id and lets the first document that uses a key define the corpus
canonical form. An authoritative spelling (rules.canonical_spellings for
terms, the catalog's spelling for parameters) always wins over first use.
Other documents that use a different variant are flagged. Parameter names
are compared ignoring case, so only separator spelling drifts across pages.

Variance is advisory: it only produces warnings. Disallowed branding
substitutions are the exception and are always errors.

Check types:
    - term-variant / non-canonical-spelling: capitalization drift of domain terms
    - parameter-name-variant: parameter spelled several ways
    - preferred-term: wordy phrase with a shorter preferred form
    - disallowed-branding: product name replaced by a forbidden form (error)
    - cross-document-term-drift / cross-document-parameter-drift

Usage:
    from tooldocs.validators.consistency import ConsistencyChecker

    checker = ConsistencyChecker()
    checker.check_document(doc)
    checker.check_corpus([{"id": "a.md", "content": a}, {"id": "b.md", "content": b}])
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Pattern, Tuple

# --- Local imports ---
from tooldocs.catalog import CommandCatalog, parameter_key
from tooldocs.configs.rules import QualityRules
from tooldocs.core.logging_manager import safe_logger
from tooldocs.dataclasses.document import Document, TextBlock
from tooldocs.dataclasses.results import (
    ConsistencyProfile,
    ConsistencyResult,
    CrossDocumentResult,
    Issue,
    ERROR,
    WARNING,
)
from tooldocs.parser import ensure_document
from tooldocs.utils.md import find_frontmatter_key_line, split_frontmatter
from tooldocs.validators.base import DocumentValidator, ValidationContext
from tooldocs.validators.sections import is_parameter_table, parameter_rows


PROSE_KINDS = ("paragraph", "list_item", "table_cell")


def term_key(text: str) -> str:
    """Normalized term key: lower-case, trimmed, single spaces."""
    return " ".join(text.split()).lower()


def _term_pattern(term: str) -> Pattern[str]:
    words = r"\s+".join(re.escape(w) for w in term.split())
    # Plural suffix stays outside the captured variant
    return re.compile(rf"\b({words})(?:s|es)?\b", re.IGNORECASE)


class ConsistencyChecker(DocumentValidator):
    """Detects terminology, capitalization and parameter-naming drift."""

    name = "consistency"

    def validate(self, doc: Document, context: ValidationContext) -> ConsistencyResult:
        return self.check_document(doc, context.rules)

    # ----- Profiles -----

    def _prose(self, doc: Document, rules: QualityRules) -> List[TextBlock]:
        kinds = PROSE_KINDS + (("heading",) if rules.scan_headings else ())
        return [block for block in doc.text_blocks if block.kind in kinds]

    def build_profile(self, doc: Document, rules: Optional[QualityRules] = None) -> ConsistencyProfile:
        """
        Record term and parameter-name variants of one document.

        Args:
            doc: Parsed document
            rules: Rule set (defaults to the checker's rules)

        Returns:
            ConsistencyProfile with variants in first-seen order
        """
        rules = rules or self.rules
        profile = ConsistencyProfile(doc_id=doc.id)
        patterns = [_term_pattern(term) for term in rules.domain_terms]

        for block in self._prose(doc, rules):
            for pattern in patterns:
                for match in pattern.finditer(block.text):
                    variant = " ".join(match.group(1).split())
                    profile.record_term(term_key(variant), variant, block.line)

        for table in doc.tables:
            if not is_parameter_table(table, rules):
                continue
            for name, _row in parameter_rows(table):
                profile.record_parameter(parameter_key(name), name, table.line)

        return profile

    # ----- Single document -----

    def check_document(
        self, doc: Any, rules: Optional[QualityRules] = None
    ) -> ConsistencyResult:
        """
        Check one document for internal drift, wording and branding.

        Args:
            doc: Parsed Document (or {id, content} input)
            rules: Rule set (defaults to the checker's rules)

        Returns:
            ConsistencyResult carrying the document's profile
        """
        rules = rules or self.rules
        doc = ensure_document(doc)
        result = ConsistencyResult(validator=self.name, document_id=doc.id)
        profile = self.build_profile(doc, rules)
        result.profile = profile

        canonical = {term_key(k): v for k, v in rules.canonical_spellings.items()}
        for key, variants in profile.terms.items():
            if key in canonical:
                self._report_non_canonical(result, canonical[key], variants)
            else:
                self._report_variants(result, "term-variant", "term", variants)

        for key, variants in profile.parameters.items():
            self._report_variants(result, "parameter-name-variant", "parameter", variants)

        self._check_phrases(doc, rules, result)
        for issue in self.branding_issues(doc, rules):
            result.add_issue(issue)

        safe_logger(self.logger).log_debug(
            "consistency_checked",
            {"document": doc.id, "terms": len(profile.terms), "warnings": len(result.warnings)},
        )
        return result

    def _report_variants(
        self,
        result: ConsistencyResult,
        code: str,
        noun: str,
        variants: Mapping[str, List[int]],
    ) -> None:
        if len(variants) < 2:
            return
        ordered = list(variants.items())
        first, first_lines = ordered[0]
        for variant, lines in ordered[1:]:
            result.add_warning(
                code,
                f"Inconsistent capitalization or spelling of {noun} '{first}' "
                f"(first used on line {first_lines[0]}): '{variant}'",
                lines[0],
                f"Use '{first}' throughout the document",
            )

    def _report_non_canonical(
        self,
        result: ConsistencyResult,
        canonical: str,
        variants: Mapping[str, List[int]],
    ) -> None:
        for variant, lines in variants.items():
            if variant != canonical:
                result.add_warning(
                    "non-canonical-spelling",
                    f"Capitalization '{variant}' differs from the product spelling '{canonical}'",
                    lines[0],
                    f"Use '{canonical}'",
                )

    def _check_phrases(self, doc: Document, rules: QualityRules, result: ConsistencyResult) -> None:
        for phrase, replacement in rules.preferred_phrases.items():
            pattern = re.compile(rf"\b{re.escape(phrase)}\b", re.IGNORECASE)
            for block in self._prose(doc, rules):
                if pattern.search(block.text):
                    result.add_warning(
                        "preferred-term",
                        f"Consider '{replacement}' instead of '{phrase}'",
                        block.line,
                    )

    def branding_issues(self, doc: Document, rules: Optional[QualityRules] = None) -> List[Issue]:
        """
        Disallowed branding in prose, headings and front matter text.

        Returns:
            One error Issue per offending block and rule
        """
        rules = rules or self.rules
        fm_text = split_frontmatter(doc.raw_text)[0]
        surfaces: List[Tuple[str, Optional[int]]] = [
            (doc.front_matter.get(key, ""), find_frontmatter_key_line(fm_text, key) or 1)
            for key in ("title", "description")
        ]
        surfaces += [(block.text, block.line) for block in doc.text_blocks]

        issues: List[Issue] = []
        for wrong, right, case_sensitive in rules.branding_rules:
            flags = 0 if case_sensitive else re.IGNORECASE
            pattern = re.compile(rf"\b{re.escape(wrong)}\b", flags)
            for text, line in surfaces:
                match = pattern.search(text)
                if match:
                    issues.append(
                        Issue(
                            ERROR,
                            "disallowed-branding",
                            f"Disallowed branding '{match.group(0)}'; use '{right}'",
                            line,
                            doc.id,
                            f"Replace with '{right}'",
                        )
                    )
        return issues

    # ----- Corpus -----

    def check_profiles(
        self,
        profiles: Iterable[ConsistencyProfile],
        canonical_spellings: Optional[Mapping[str, str]] = None,
        parameter_spellings: Optional[Mapping[str, str]] = None,
    ) -> CrossDocumentResult:
        """
        Merge per-document profiles and flag cross-document drift.

        Profiles are processed in document-id order; the first profile to use
        a key sets its canonical variant unless an authoritative spelling
        exists for that key.

        Args:
            profiles: One profile per document
            canonical_spellings: Authoritative term spellings (term key -> spelling)
            parameter_spellings: Authoritative parameter spellings (parameter key -> spelling)

        Returns:
            CrossDocumentResult with drift warnings and the canonical choices
        """
        ordered = sorted(profiles, key=lambda p: p.doc_id)
        result = CrossDocumentResult(validated_documents=len(ordered))

        terms = {term_key(k): v for k, v in (canonical_spellings or {}).items()}
        self._merge(ordered, "terms", terms, "cross-document-term-drift", "term", result)
        params = dict(parameter_spellings or {})
        self._merge(ordered, "parameters", params, "cross-document-parameter-drift", "parameter", result)

        safe_logger(self.logger).log_operation(
            "consistency_corpus_checked",
            {"documents": len(ordered), "warnings": len(result.warnings)},
        )
        return result

    def _merge(
        self,
        profiles: List[ConsistencyProfile],
        attr: str,
        authoritative: Mapping[str, str],
        code: str,
        noun: str,
        result: CrossDocumentResult,
    ) -> None:
        # Parameter names differ only by separators; tables capitalize them
        fold = str.lower if attr == "parameters" else str
        # key -> (canonical variant, establishing doc id or None when authoritative)
        canonical: Dict[str, Tuple[str, Optional[str]]] = {}
        for profile in profiles:
            for key, variants in getattr(profile, attr).items():
                if key in canonical:
                    continue
                if key in authoritative:
                    canonical[key] = (authoritative[key], None)
                else:
                    canonical[key] = (next(iter(variants)), profile.doc_id)

        for profile in profiles:
            for key, variants in getattr(profile, attr).items():
                form, source = canonical[key]
                if source == profile.doc_id:
                    continue
                origin = "the authoritative spelling" if source is None else f"first used in {source}"
                for variant, lines in variants.items():
                    if fold(variant) == fold(form):
                        continue
                    result.add_issue(
                        Issue(
                            WARNING,
                            code,
                            f"{noun.capitalize()} '{variant}' differs from corpus canonical form "
                            f"'{form}' ({origin})",
                            lines[0],
                            profile.doc_id,
                            f"Use '{form}'",
                        )
                    )

        prefix = "" if attr == "terms" else "parameter:"
        for key, (form, _source) in sorted(canonical.items()):
            result.canonical_terms[f"{prefix}{key}"] = form

    def check_corpus(
        self,
        documents: Iterable[Any],
        canonical_spellings: Optional[Mapping[str, str]] = None,
        catalog: Optional[CommandCatalog] = None,
        rules: Optional[QualityRules] = None,
    ) -> CrossDocumentResult:
        """
        Check a set of documents for cross-document drift.

        Args:
            documents: Parsed Documents or {id, content} inputs
            canonical_spellings: Authoritative term spellings
                (default: rules.canonical_spellings)
            catalog: Catalog whose parameter spellings are authoritative
            rules: Rule set (defaults to the checker's rules)

        Returns:
            CrossDocumentResult (drift warnings plus branding errors)
        """
        rules = rules or self.rules
        docs = sorted((ensure_document(d) for d in documents), key=lambda d: d.id)
        if canonical_spellings is None:
            canonical_spellings = rules.canonical_spellings

        result = self.check_profiles(
            [self.build_profile(doc, rules) for doc in docs],
            canonical_spellings,
            catalog.parameter_spellings if catalog is not None else None,
        )
        for doc in docs:
            for issue in self.branding_issues(doc, rules):
                result.add_issue(issue)
        return result
