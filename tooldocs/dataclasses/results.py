#!/usr/bin/env python3
"""
results.py
-------------------
Result types produced by the validators and the aggregator.

- Issue: one finding (error or warning)
- ValidationResult: one validator's findings for one document
- ConsistencyResult / ReferenceResult: ValidationResult plus the per-document
  profile/index that feeds the cross-document pass
- CrossDocumentResult: findings that need the whole corpus, kept apart from
  per-document results
- ReferenceIndex / ConsistencyProfile: per-document indices merged in phase 2

A result is valid exactly when it has no errors; warnings never invalidate.
"""
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Tuple


ERROR = "error"
WARNING = "warning"


@dataclass
class Issue:
    """Represents a validation finding."""

    severity: str  # error, warning
    code: str  # short machine-readable identifier, e.g. unresolved-anchor
    message: str
    location: Optional[int] = None  # 1-based line
    document_id: Optional[str] = None
    suggestion: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.severity == ERROR


@dataclass
class QualityMetrics:
    """Content quality scores, each 0-100."""

    structure_score: float = 100.0
    content_score: float = 100.0
    examples_score: float = 100.0
    metadata_score: float = 100.0
    overall_score: float = 100.0


@dataclass
class ComplianceMetrics:
    """Format compliance scores, each 0-100."""

    front_matter: float = 100.0
    heading_structure: float = 100.0
    template_format: float = 100.0
    standards_compliance: float = 100.0
    overall_compliance: float = 100.0


@dataclass
class ValidationResult:
    """One validator's findings for one document."""

    validator: str
    document_id: str
    errors: List[Issue] = field(default_factory=list)
    warnings: List[Issue] = field(default_factory=list)
    quality_metrics: Optional[QualityMetrics] = None
    compliance: Optional[ComplianceMetrics] = None

    def add_issue(self, issue: Issue) -> None:
        """Add an issue to the matching list."""
        if issue.document_id is None:
            issue.document_id = self.document_id
        if issue.severity == ERROR:
            self.errors.append(issue)
        else:
            self.warnings.append(issue)

    def add_error(
        self,
        code: str,
        message: str,
        location: Optional[int] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        self.add_issue(Issue(ERROR, code, message, location, self.document_id, suggestion))

    def add_warning(
        self,
        code: str,
        message: str,
        location: Optional[int] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        self.add_issue(Issue(WARNING, code, message, location, self.document_id, suggestion))

    @property
    def is_valid(self) -> bool:
        """True iff there are no errors."""
        return not self.errors

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    @property
    def issues(self) -> List[Issue]:
        """Errors followed by warnings."""
        return self.errors + self.warnings


@dataclass(frozen=True)
class OutboundLink:
    """A link from one document to another, with the target id resolved."""

    target_document: str
    anchor: Optional[str]
    line: int
    raw_target: str


@dataclass(frozen=True)
class ReferenceIndex:
    """
    Reference usage of one document.

    Attributes:
        doc_id: Document identifier
        anchors: Anchors the document defines
        commands_referenced: Command names referenced anywhere in the document
        parameters_referenced: (command, parameter) pairs checked against the catalog
        outbound_links: Links to other documents
        commands_documented: Commands declared by operation command comments
    """

    doc_id: str
    anchors: FrozenSet[str] = frozenset()
    commands_referenced: FrozenSet[str] = frozenset()
    parameters_referenced: FrozenSet[Tuple[str, str]] = frozenset()
    outbound_links: Tuple[OutboundLink, ...] = ()
    commands_documented: FrozenSet[str] = frozenset()


@dataclass
class ConsistencyProfile:
    """
    Surface variants of tracked terms and parameter names in one document.

    Both mappings are normalized key -> variant -> line numbers; variants
    keep first-seen order.
    """

    doc_id: str
    terms: Dict[str, Dict[str, List[int]]] = field(default_factory=dict)
    parameters: Dict[str, Dict[str, List[int]]] = field(default_factory=dict)

    @staticmethod
    def _record(table: Dict[str, Dict[str, List[int]]], key: str, variant: str, line: int) -> None:
        table.setdefault(key, {}).setdefault(variant, []).append(line)

    def record_term(self, key: str, variant: str, line: int) -> None:
        self._record(self.terms, key, variant, line)

    def record_parameter(self, key: str, variant: str, line: int) -> None:
        self._record(self.parameters, key, variant, line)


@dataclass
class ConsistencyResult(ValidationResult):
    """Single-document consistency findings plus the document's profile."""

    profile: Optional[ConsistencyProfile] = None


@dataclass
class ReferenceResult(ValidationResult):
    """Single-document reference findings plus the document's reference index."""

    index: Optional[ReferenceIndex] = None


@dataclass(frozen=True)
class CorpusSummary:
    """Aggregate counts for a corpus run."""

    total_issues: int
    error_count: int
    warning_count: int
    validated_documents: int
    validated_commands: int
    validated_parameters: int


@dataclass
class CrossDocumentResult:
    """
    Findings that need the merged corpus view.

    Never merged into per-document results. The summary is computed from the
    current issue lists, so it always agrees with them.
    """

    errors: List[Issue] = field(default_factory=list)
    warnings: List[Issue] = field(default_factory=list)
    validated_documents: int = 0
    validated_commands: int = 0
    validated_parameters: int = 0
    canonical_terms: Dict[str, str] = field(default_factory=dict)

    def add_issue(self, issue: Issue) -> None:
        if issue.severity == ERROR:
            self.errors.append(issue)
        else:
            self.warnings.append(issue)

    def extend(self, other: "CrossDocumentResult") -> None:
        """Append another cross-document result's issues (counters are kept)."""
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        for key, value in other.canonical_terms.items():
            self.canonical_terms.setdefault(key, value)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def issues(self) -> List[Issue]:
        """Errors followed by warnings."""
        return self.errors + self.warnings

    @property
    def summary(self) -> CorpusSummary:
        return CorpusSummary(
            total_issues=len(self.errors) + len(self.warnings),
            error_count=len(self.errors),
            warning_count=len(self.warnings),
            validated_documents=self.validated_documents,
            validated_commands=self.validated_commands,
            validated_parameters=self.validated_parameters,
        )
