"""
test_report.py
--------------
Unit tests for report rendering.
"""
import json

import pytest

from tooldocs.dataclasses.results import Issue, ValidationResult, ERROR, WARNING
from tooldocs.validators.aggregator import DocumentReport, ResultAggregator
from tooldocs.validators.report import (
    corpus_to_dict,
    document_to_dict,
    format_corpus_report,
    format_document_report,
    issue_to_dict,
)


@pytest.fixture
def corpus(catalog, valid_page):
    return ResultAggregator(catalog).validate_corpus(
        [
            {"id": "storage.md", "content": valid_page},
            {"id": "overview.md", "content": "# Overview\n\n[x](missing.md)\n"},
        ]
    )


class TestTextReports:
    """Tests for the text renderers."""

    def test_valid_document(self, catalog, valid_page):
        report = ResultAggregator(catalog).validate_document({"id": "storage.md", "content": valid_page})
        text = format_document_report(report)
        assert "DOCUMENT VALIDATION REPORT: storage.md" in text
        assert "✅ DOCUMENT VALID" in text
        assert "Quality: 100.0" in text
        assert "Compliance: 100.0" in text

    def test_issue_lines(self):
        """Test issues show their code, line and suggestion."""
        result = ValidationResult("reference", "a.md")
        result.add_error("unresolved-anchor", "Anchor '#x' not found", 7, "Did you mean '#y'?")
        report = DocumentReport("a.md")
        report.add_result(result)

        text = format_document_report(report)
        assert "❌ VALIDATION FAILED" in text
        assert "REFERENCE:" in text
        assert "❌ [unresolved-anchor]:7 Anchor '#x' not found" in text
        assert "💡 Did you mean '#y'?" in text

    def test_corpus_report(self, corpus):
        text = format_corpus_report(corpus)
        assert "Documents Checked: 2" in text
        assert "❌ overview.md" in text
        assert "CROSS-DOCUMENT ISSUES:" in text
        assert "overview.md ❌ [unresolved-document]" in text
        # Clean documents are hidden by default
        assert "✅ storage.md" not in text

    def test_show_clean(self, corpus):
        assert "✅ storage.md" in format_corpus_report(corpus, show_clean=True)


class TestJsonReports:
    """Tests for the JSON views."""

    def test_issue_to_dict(self):
        issue = Issue(WARNING, "bullet-style", "Use '-'", 3, "a.md")
        assert issue_to_dict(issue) == {
            "severity": "warning",
            "code": "bullet-style",
            "message": "Use '-'",
            "location": 3,
            "document_id": "a.md",
            "suggestion": None,
        }

    def test_document_to_dict(self):
        report = DocumentReport("a.md")
        result = ValidationResult("content", "a.md")
        result.add_issue(Issue(ERROR, "missing-section", "Missing"))
        report.add_result(result)

        data = document_to_dict(report)
        assert data["id"] == "a.md"
        assert data["isValid"] is False
        assert [e["code"] for e in data["errors"]] == ["missing-section"]

    def test_corpus_to_dict_is_serializable(self, corpus):
        """Test the corpus view survives json.dumps."""
        data = json.loads(json.dumps(corpus_to_dict(corpus)))
        assert data["isValid"] is False
        assert [d["id"] for d in data["documents"]] == ["storage.md", "overview.md"]
        summary = data["crossDocument"]["summary"]
        assert summary["errorCount"] == 1
        assert summary["validatedDocuments"] == 2
        assert data["documents"][0]["metrics"]["content"]["overall_score"] == 100.0
        assert "storage account" in data["crossDocument"]["canonicalTerms"]
