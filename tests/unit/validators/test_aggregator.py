"""
test_aggregator.py
------------------
Unit tests for tooldocs.validators.aggregator.
"""
import pytest
from unittest.mock import MagicMock

from tooldocs.core.exceptions import CatalogError
from tooldocs.core.logging_manager import ToolDocsLogger
from tooldocs.validators import aggregator as aggregator_module
from tooldocs.validators.aggregator import ResultAggregator
from tooldocs.validators.content import ContentValidator
from tooldocs.validators.format import FormatChecker


def codes(issues):
    return [i.code for i in issues]


@pytest.fixture
def aggregator(catalog):
    return ResultAggregator(catalog)


class TestValidateDocument:
    """Single-document aggregation."""

    def test_valid_page(self, aggregator, valid_page):
        """Test every validator contributes a result."""
        report = aggregator.validate_document({"id": "storage.md", "content": valid_page})
        assert report.document_id == "storage.md"
        assert set(report.results) == {"content", "format", "consistency", "reference"}
        assert report.is_valid
        assert report.warnings == []
        assert report.metrics["content"].overall_score == 100.0
        assert report.metrics["format"].overall_compliance == 100.0

    def test_errors_are_merged(self, aggregator, body_only_page):
        """Test the report holds the union of validator errors."""
        report = aggregator.validate_document({"id": "a.md", "content": body_only_page})
        assert not report.is_valid
        expected = sum(len(r.errors) for r in report.results.values())
        assert len(report.errors) == expected
        assert {i.document_id for i in report.errors} == {"a.md"}

    def test_is_valid_means_no_errors(self, aggregator, make_page):
        """Test warnings alone keep a report valid."""
        page = make_page(("- [What are", "* [What are"))
        report = aggregator.validate_document({"id": "a.md", "content": page})
        assert report.warnings
        assert report.is_valid

    def test_validator_failure_is_captured(self, aggregator, valid_page, monkeypatch):
        """Test an exception inside one validator becomes an internal-error issue."""

        def boom(self, doc, context):
            raise RuntimeError("boom")

        monkeypatch.setattr(FormatChecker, "validate", boom)
        report = aggregator.validate_document({"id": "a.md", "content": valid_page})

        assert codes(report.results["format"].errors) == ["internal-error"]
        assert "RuntimeError: boom" in report.errors[0].message
        assert report.results["content"].is_valid
        assert report.results["reference"].index is not None

    def test_parse_failure_is_captured(self, aggregator, monkeypatch):
        def broken(item):
            raise ValueError("unreadable")

        monkeypatch.setattr(aggregator_module, "ensure_document", broken)
        report = aggregator.validate_document({"id": "a.md", "content": "x"})
        assert list(report.results) == ["parser"]
        assert codes(report.errors) == ["internal-error"]

    def test_failure_is_logged(self, catalog, valid_page, monkeypatch):
        logger = MagicMock(spec=ToolDocsLogger)

        def boom(self, doc, context):
            raise RuntimeError("boom")

        monkeypatch.setattr(FormatChecker, "validate", boom)
        ResultAggregator(catalog, logger=logger).validate_document(
            {"id": "a.md", "content": valid_page}
        )
        error, context = logger.log_error.call_args[0]
        assert isinstance(error, RuntimeError)
        assert context == {"operation": "format", "document": "a.md"}


class TestConstruction:
    """Catalog validation at construction time."""

    def test_malformed_catalog(self):
        """Test a bad catalog fails before any document is read."""
        with pytest.raises(CatalogError):
            ResultAggregator(["storage.account.list"])

    def test_no_catalog(self, valid_page):
        report = ResultAggregator().validate_document({"id": "a.md", "content": valid_page})
        assert report.is_valid


class TestValidateCorpus:
    """Two-phase corpus aggregation."""

    def test_corpus(self, aggregator, valid_page):
        """Test per-document reports and the cross-document result."""
        corpus = aggregator.validate_corpus(
            [
                {"id": "storage.md", "content": valid_page},
                {
                    "id": "overview.md",
                    "content": "# Overview\n\nSee [accounts](storage.md#list-storage-accounts).\n",
                },
            ]
        )
        assert [d.document_id for d in corpus.documents] == ["storage.md", "overview.md"]
        assert corpus.document("storage.md").is_valid
        assert not corpus.document("overview.md").is_valid
        assert corpus.cross_document.is_valid
        assert not corpus.is_valid

        summary = corpus.cross_document.summary
        assert summary.validated_documents == 2
        assert summary.validated_commands == 1
        assert corpus.cross_document.canonical_terms["storage account"] == "storage account"

    def test_cross_document_link_errors(self, aggregator, valid_page):
        corpus = aggregator.validate_corpus(
            [
                {"id": "storage.md", "content": valid_page},
                {"id": "overview.md", "content": "# Overview\n\n[x](missing.md) [y](storage.md#nope)\n"},
            ]
        )
        cross = corpus.cross_document
        assert codes(cross.errors) == ["unresolved-document"]
        assert codes(cross.warnings) == ["unresolved-document-anchor"]
        assert corpus.error_count == sum(len(d.errors) for d in corpus.documents) + 1

    def test_term_drift(self, aggregator):
        corpus = aggregator.validate_corpus(
            [
                {"id": "b.md", "content": "Delete the storage account.\n"},
                {"id": "a.md", "content": "Create a Storage account.\n"},
            ]
        )
        drift = [i for i in corpus.cross_document.warnings if i.code == "cross-document-term-drift"]
        assert [i.document_id for i in drift] == ["b.md"]

    def test_one_failure_does_not_stop_the_corpus(self, aggregator, valid_page, broken_yaml_page, monkeypatch):
        """Test a failing document leaves every other document fully validated."""
        original = ContentValidator.validate

        def flaky(self, doc, context):
            if doc.id == "bad.md":
                raise RuntimeError("boom")
            return original(self, doc, context)

        monkeypatch.setattr(ContentValidator, "validate", flaky)
        corpus = aggregator.validate_corpus(
            [
                {"id": "bad.md", "content": valid_page},
                {"id": "broken.md", "content": broken_yaml_page},
                {"id": "good.md", "content": valid_page},
            ]
        )

        assert codes(corpus.document("bad.md").results["content"].errors) == ["internal-error"]
        broken = corpus.document("broken.md")
        assert set(broken.results) == {"content", "format", "consistency", "reference"}
        assert "parse-anomaly" in codes(broken.warnings)
        assert corpus.document("good.md").is_valid
        assert corpus.document("good.md").metrics["content"].overall_score == 100.0

    def test_malformed_entry_does_not_stop_the_corpus(self, aggregator, valid_page):
        """Test an entry that is not a document input is reported under its position."""
        corpus = aggregator.validate_corpus([{"id": "a.md", "content": valid_page}, "b.md"])

        assert [d.document_id for d in corpus.documents] == ["a.md", "<item 1>"]
        assert corpus.document("a.md").is_valid
        bad = corpus.document("<item 1>")
        assert codes(bad.errors) == ["internal-error"]
        assert "TypeError" in bad.errors[0].message
        assert not corpus.is_valid

    def test_unreadable_documents(self, aggregator):
        """Test unreadable ids get their own error and still resolve as link targets."""
        corpus = aggregator.validate_corpus(
            [{"id": "overview.md", "content": "# Overview\n\nSee [storage](storage.md).\n"}],
            unreadable={"storage.md": "storage.md is not UTF-8 encoded"},
        )
        bad = corpus.document("storage.md")
        assert codes(bad.errors) == ["unreadable-document"]
        assert "not UTF-8" in bad.errors[0].message
        assert "unresolved-document" not in codes(corpus.cross_document.errors)
        assert corpus.cross_document.summary.validated_documents == 2

    def test_duplicate_document_id(self, aggregator, valid_page):
        """Test later copies of an id are skipped and reported."""
        corpus = aggregator.validate_corpus(
            [
                {"id": "a.md", "content": valid_page},
                {"id": "a.md", "content": "# Other\n"},
            ]
        )
        assert len(corpus.documents) == 1
        assert codes(corpus.cross_document.errors) == ["duplicate-document-id"]
        assert corpus.document("a.md").is_valid

    def test_empty_corpus(self, aggregator):
        corpus = aggregator.validate_corpus([])
        assert corpus.documents == []
        assert corpus.is_valid
        assert corpus.cross_document.summary.total_issues == 0
