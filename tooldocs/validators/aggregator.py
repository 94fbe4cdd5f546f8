#!/usr/bin/env python3
"""
aggregator.py
-------------
Runs the four validators and assembles per-document and corpus reports.

Per document:
    parse -> content, format, consistency, reference -> DocumentReport

Corpus (two phases):
    Phase 1: every document is parsed and validated on its own. A failure
             inside one document is captured as an `internal-error` issue of
             that document and never stops the others.
    Barrier: phase 2 starts only after every document finished phase 1.
    Phase 2: consistency profiles and reference indices are merged in
             document-id order into one CrossDocumentResult.

The catalog is validated when the aggregator is built, so a malformed
catalog raises CatalogError before any document is processed.

Usage:
    from tooldocs.validators.aggregator import ResultAggregator

    aggregator = ResultAggregator({"storage.account.list": {"parameters": ["subscription"]}})
    report = aggregator.validate_document({"id": "storage.md", "content": text})
    corpus = aggregator.validate_corpus(items)
    corpus.cross_document.summary
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set

# --- Local imports ---
from tooldocs.catalog import CommandCatalog
from tooldocs.configs.rules import DEFAULT_RULES, QualityRules
from tooldocs.core.logging_manager import ToolDocsLogger, safe_logger
from tooldocs.dataclasses.document import Document, DocumentInput
from tooldocs.dataclasses.results import (
    ConsistencyProfile,
    CrossDocumentResult,
    Issue,
    ReferenceIndex,
    ValidationResult,
    ERROR,
)
from tooldocs.parser import ensure_document
from tooldocs.validators.base import DocumentValidator, ValidationContext
from tooldocs.validators.consistency import ConsistencyChecker
from tooldocs.validators.content import ContentValidator
from tooldocs.validators.format import FormatChecker
from tooldocs.validators.reference import ReferenceValidator


@dataclass
class DocumentReport:
    """
    Merged view of one document's validation.

    Attributes:
        document_id: Document identifier
        results: Validator name -> that validator's own result
        errors: Union of all validators' errors
        warnings: Union of all validators' warnings
        metrics: Validator name -> metrics block (content, format)
    """

    document_id: str
    results: Dict[str, ValidationResult] = field(default_factory=dict)
    errors: List[Issue] = field(default_factory=list)
    warnings: List[Issue] = field(default_factory=list)
    metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add_result(self, result: ValidationResult) -> None:
        self.results[result.validator] = result
        self.errors.extend(result.errors)
        self.warnings.extend(result.warnings)
        if result.quality_metrics is not None:
            self.metrics[result.validator] = result.quality_metrics
        if result.compliance is not None:
            self.metrics[result.validator] = result.compliance


@dataclass
class CorpusReport:
    """Per-document reports plus the cross-document result of a corpus run."""

    documents: List[DocumentReport] = field(default_factory=list)
    cross_document: CrossDocumentResult = field(default_factory=CrossDocumentResult)

    @property
    def is_valid(self) -> bool:
        return self.cross_document.is_valid and all(d.is_valid for d in self.documents)

    @property
    def error_count(self) -> int:
        return sum(len(d.errors) for d in self.documents) + len(self.cross_document.errors)

    @property
    def warning_count(self) -> int:
        return sum(len(d.warnings) for d in self.documents) + len(self.cross_document.warnings)

    def document(self, document_id: str) -> Optional[DocumentReport]:
        for report in self.documents:
            if report.document_id == document_id:
                return report
        return None


def _item_id(item: Any, fallback: str = "<input>") -> str:
    if isinstance(item, (Document, DocumentInput)):
        return item.id
    if isinstance(item, Mapping):
        return str(item.get("id", ""))
    return fallback


class ResultAggregator:
    """
    Orchestrates validators over single documents and corpora.

    Attributes:
        catalog: Validated command catalog
        rules: Rule set shared by every validator
        validators: Fixed tuple of the four validators
    """

    VALIDATORS = (ContentValidator, FormatChecker, ConsistencyChecker, ReferenceValidator)

    def __init__(
        self,
        catalog: Any = None,
        rules: Optional[QualityRules] = None,
        logger: Optional[ToolDocsLogger] = None,
    ) -> None:
        """
        Initialize the aggregator.

        Args:
            catalog: CommandCatalog or raw catalog mapping
            rules: Rule set (default: DEFAULT_RULES)
            logger: Optional logger (no output when None)

        Raises:
            CatalogError: If the catalog is malformed
        """
        self.catalog = CommandCatalog.from_mapping(catalog if catalog is not None else {})
        self.rules = rules or DEFAULT_RULES
        self.logger = logger
        self.context = ValidationContext(catalog=self.catalog, rules=self.rules)
        self.validators: tuple = tuple(cls(self.rules, logger) for cls in self.VALIDATORS)

    def _validator(self, name: str) -> DocumentValidator:
        return next(v for v in self.validators if v.name == name)

    # ----- Single document -----

    def validate_document(self, item: Any) -> DocumentReport:
        """
        Parse and validate one document with every validator.

        Args:
            item: Document, DocumentInput or {id, content} mapping

        Returns:
            DocumentReport (never raises for document content)
        """
        return self._validate(item, _item_id(item))

    def _validate(self, item: Any, doc_id: str) -> DocumentReport:
        log = safe_logger(self.logger)
        report = DocumentReport(document_id=doc_id)

        try:
            doc = ensure_document(item)
        except Exception as e:
            log.log_error(e, {"operation": "parse", "document": doc_id})
            report.add_result(self._internal_error("parser", doc_id, e))
            return report

        for validator in self.validators:
            try:
                result = validator.validate(doc, self.context)
            except Exception as e:
                log.log_error(e, {"operation": validator.name, "document": doc_id})
                result = self._internal_error(validator.name, doc_id, e)
            report.add_result(result)

        log.log_info(
            "document_validated",
            {"document": doc_id, "errors": len(report.errors), "warnings": len(report.warnings)},
        )
        return report

    @staticmethod
    def _internal_error(validator: str, doc_id: str, error: Exception) -> ValidationResult:
        result = ValidationResult(validator=validator, document_id=doc_id)
        result.add_error(
            "internal-error",
            f"{validator} failed on this document: {type(error).__name__}: {error}",
        )
        return result

    # ----- Corpus -----

    def validate_corpus(
        self,
        items: Iterable[Any],
        unreadable: Optional[Mapping[str, str]] = None,
    ) -> CorpusReport:
        """
        Validate a corpus in two phases.

        Args:
            items: Documents, DocumentInputs or {id, content} mappings
            unreadable: Ids of documents whose source could not be read,
                mapped to the reason. Each gets an `unreadable-document`
                error and counts as a failed document in phase 2.

        Returns:
            CorpusReport with one DocumentReport per unique id and the
            cross-document result
        """
        log = safe_logger(self.logger)
        corpus = CorpusReport()
        duplicates: List[Issue] = []
        seen: Set[str] = set()

        # Phase 1
        for position, item in enumerate(items):
            doc_id = _item_id(item, f"<item {position}>")
            if doc_id in seen:
                duplicates.append(
                    Issue(
                        ERROR,
                        "duplicate-document-id",
                        f"Document id '{doc_id}' appears more than once; later copies were skipped",
                        None,
                        doc_id,
                    )
                )
                continue
            seen.add(doc_id)
            corpus.documents.append(self._validate(item, doc_id))

        for doc_id, reason in sorted((unreadable or {}).items()):
            if doc_id in seen:
                continue
            seen.add(doc_id)
            log.log_info("document_unreadable", {"document": doc_id, "reason": reason})
            result = ValidationResult(validator="reader", document_id=doc_id)
            result.add_error("unreadable-document", reason)
            report = DocumentReport(document_id=doc_id)
            report.add_result(result)
            corpus.documents.append(report)

        # Phase 2
        profiles: List[ConsistencyProfile] = []
        indices: List[ReferenceIndex] = []
        failed: List[str] = []
        for report in corpus.documents:
            profile = getattr(report.results.get("consistency"), "profile", None)
            index = getattr(report.results.get("reference"), "index", None)
            if profile is not None:
                profiles.append(profile)
            if index is not None:
                indices.append(index)
            else:
                failed.append(report.document_id)

        consistency: ConsistencyChecker = self._validator("consistency")  # type: ignore[assignment]
        reference: ReferenceValidator = self._validator("reference")  # type: ignore[assignment]
        terms = consistency.check_profiles(
            profiles, self.rules.canonical_spellings, self.catalog.parameter_spellings
        )
        links = reference.resolve_indices(indices, self.rules.known_documents, failed)

        cross = corpus.cross_document
        for issue in duplicates:
            cross.add_issue(issue)
        cross.extend(terms)
        cross.extend(links)
        cross.validated_documents = len(corpus.documents)
        cross.validated_commands = links.validated_commands
        cross.validated_parameters = links.validated_parameters

        summary = cross.summary
        log.log_operation(
            "corpus_validated",
            {
                "documents": summary.validated_documents,
                "cross_errors": summary.error_count,
                "cross_warnings": summary.warning_count,
                "document_errors": sum(len(d.errors) for d in corpus.documents),
            },
        )
        return corpus
