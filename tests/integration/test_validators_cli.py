#!/usr/bin/env python3
"""
Integration tests for validators CLI.

Runs the `validate` commands end to end on files in a temporary directory.
"""
import json

import pytest
from click.testing import CliRunner

from tooldocs.core import cli as cli_helpers
from tooldocs.validators.cli import cli


@pytest.fixture
def runner():
    """Create Click test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def no_data_defaults(tmp_path, monkeypatch):
    """Keep a checked-in data/ directory out of the runs."""
    monkeypatch.setattr(cli_helpers, "CATALOG_PATH", tmp_path / "none" / "catalog.json")
    monkeypatch.setattr(cli_helpers, "RULES_PATH", tmp_path / "none" / "rules.yaml")


@pytest.fixture
def base_args(tmp_path):
    return ["--log-dir", str(tmp_path / "logs")]


class TestValidatorsCLIBasics:
    """Test basic validators CLI functionality."""

    def test_cli_help(self, runner):
        """Test that CLI help message works."""
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "validation" in result.output.lower()

    @pytest.mark.parametrize("command", ["document", "corpus", "catalog"])
    def test_command_help(self, runner, command):
        result = runner.invoke(cli, [command, "--help"])
        assert result.exit_code == 0


class TestDocumentCommand:
    """Test `validate document`."""

    def test_valid_document(self, runner, base_args, tmp_path, valid_page, catalog_file):
        """A clean page exits 0."""
        page = tmp_path / "storage.md"
        page.write_text(valid_page, encoding="utf-8")

        result = runner.invoke(cli, base_args + ["document", str(page), "--catalog", str(catalog_file)])
        assert result.exit_code == 0, result.output
        assert "✅ DOCUMENT VALID" in result.output
        assert (tmp_path / "logs" / "operations" / "validators.log").exists()

    def test_document_with_errors(self, runner, base_args, tmp_path, body_only_page):
        """Documentation errors exit 1."""
        page = tmp_path / "overview.md"
        page.write_text(body_only_page, encoding="utf-8")

        result = runner.invoke(cli, base_args + ["document", str(page)])
        assert result.exit_code == 1
        assert "❌ VALIDATION FAILED" in result.output
        assert "missing-front-matter" in result.output

    def test_json_output(self, runner, base_args, tmp_path, valid_page):
        page = tmp_path / "storage.md"
        page.write_text(valid_page, encoding="utf-8")

        result = runner.invoke(cli, base_args + ["document", str(page), "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["id"] == "storage.md"
        assert data["isValid"] is True
        assert data["metrics"]["format"]["overall_compliance"] == 100.0

    def test_malformed_catalog_aborts(self, runner, base_args, tmp_path, valid_page):
        """A bad catalog is fatal and exits 2."""
        page = tmp_path / "storage.md"
        page.write_text(valid_page, encoding="utf-8")
        bad = tmp_path / "catalog.json"
        bad.write_text('["storage.account.list"]', encoding="utf-8")

        result = runner.invoke(cli, base_args + ["document", str(page), "--catalog", str(bad)])
        assert result.exit_code == 2
        assert "CatalogError" in result.output

    def test_undecodable_file_aborts(self, runner, base_args, tmp_path):
        page = tmp_path / "binary.md"
        page.write_bytes(b"\xff\xfe\x00")

        result = runner.invoke(cli, base_args + ["document", str(page)])
        assert result.exit_code == 2
        assert "DocumentReadError" in result.output


class TestCorpusCommand:
    """Test `validate corpus`."""

    def test_corpus_with_errors(self, runner, base_args, docs_dir, catalog_file):
        """A corpus with an invalid page exits 1 and lists it."""
        result = runner.invoke(
            cli, base_args + ["corpus", str(docs_dir), "--catalog", str(catalog_file)]
        )
        assert result.exit_code == 1
        assert "CORPUS VALIDATION REPORT" in result.output
        assert "Documents Checked: 2" in result.output
        assert "❌ overview.md" in result.output

    def test_clean_corpus_json(self, runner, base_args, tmp_path, valid_page, catalog_file):
        root = tmp_path / "clean"
        root.mkdir()
        (root / "storage.md").write_text(valid_page, encoding="utf-8")

        result = runner.invoke(
            cli, base_args + ["corpus", str(root), "--catalog", str(catalog_file), "--json"]
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["isValid"] is True
        assert [d["id"] for d in data["documents"]] == ["storage.md"]
        assert data["crossDocument"]["summary"]["validatedCommands"] == 1

    def test_unreadable_file_is_reported_per_document(
        self, runner, base_args, tmp_path, valid_page, catalog_file
    ):
        """An undecodable page fails on its own; the other pages are still validated."""
        root = tmp_path / "mixed"
        root.mkdir()
        (root / "storage.md").write_text(valid_page, encoding="utf-8")
        (root / "binary.md").write_bytes(b"\xff\xfe\x00")

        result = runner.invoke(
            cli, base_args + ["corpus", str(root), "--catalog", str(catalog_file), "--json"]
        )
        assert result.exit_code == 1
        output = result.stdout
        data = json.loads(output[: output.rindex("}") + 1])
        by_id = {d["id"]: d for d in data["documents"]}
        assert by_id["storage.md"]["isValid"] is True
        assert [e["code"] for e in by_id["binary.md"]["errors"]] == ["unreadable-document"]

    def test_canonical_spellings_file(self, runner, base_args, tmp_path):
        """Authoritative spellings from --canonical decide which page drifts."""
        root = tmp_path / "docs"
        root.mkdir()
        (root / "a.md").write_text("Create a Storage account.\n", encoding="utf-8")
        (root / "b.md").write_text("Delete the storage account.\n", encoding="utf-8")
        canonical = tmp_path / "canonical.yaml"
        canonical.write_text("- storage account\n", encoding="utf-8")

        result = runner.invoke(
            cli, base_args + ["corpus", str(root), "--canonical", str(canonical), "--json"]
        )
        assert result.exit_code == 1
        output = result.stdout
        data = json.loads(output[: output.rindex("}") + 1])
        drift = [
            w["document_id"]
            for w in data["crossDocument"]["warnings"]
            if w["code"] == "cross-document-term-drift"
        ]
        assert drift == ["a.md"]

    def test_empty_directory(self, runner, base_args, tmp_path):
        empty = tmp_path / "empty"
        empty.mkdir()
        result = runner.invoke(cli, base_args + ["corpus", str(empty)])
        assert result.exit_code == 0
        assert "No Markdown files found" in result.output


class TestCatalogCommand:
    """Test `validate catalog`."""

    def test_valid_catalog(self, runner, base_args, catalog_file):
        result = runner.invoke(cli, base_args + ["catalog", str(catalog_file)])
        assert result.exit_code == 0
        assert "✅ Catalog is valid" in result.output
        assert "Commands: 3" in result.output
        assert "Namespaces: keyvault, storage" in result.output

    def test_invalid_catalog(self, runner, base_args, tmp_path):
        bad = tmp_path / "catalog.yaml"
        bad.write_text("storage.account.list: 42\n", encoding="utf-8")
        result = runner.invoke(cli, base_args + ["catalog", str(bad)])
        assert result.exit_code == 2
        assert "CatalogError" in result.output

    def test_missing_catalog(self, runner, base_args, tmp_path):
        result = runner.invoke(cli, base_args + ["catalog", str(tmp_path / "nope.json")])
        assert result.exit_code == 2
        assert "Cannot read catalog" in result.output


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
