"""
dataclasses package
-------------------
Data structures shared by the parser and the validators.

- document: Document model produced by the parser (immutable)
- results: Issues, per-document results, indices and corpus results
"""
from tooldocs.dataclasses.document import Document, DocumentInput, Heading
from tooldocs.dataclasses.results import CrossDocumentResult, Issue, ValidationResult

__all__ = [
    "Document",
    "DocumentInput",
    "Heading",
    "Issue",
    "ValidationResult",
    "CrossDocumentResult",
]
