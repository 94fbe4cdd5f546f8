"""
test_catalog.py
---------------
Unit tests for tooldocs.catalog.
"""
import json
import pytest

from tooldocs.catalog import (
    CommandCatalog,
    load_catalog,
    normalize_parameter,
    parameter_key,
)
from tooldocs.core.exceptions import CatalogError


class TestCatalogFromMapping:
    """Test catalog construction."""

    def test_accepted_shapes(self):
        """Test every supported entry shape."""
        catalog = CommandCatalog.from_mapping(
            {
                "a.one": {"parameters": ["Subscription", "--tenant"]},
                "a.two": {"parameters": [{"name": "vault"}]},
                "b.three": ["account"],
                "b.four": None,
                "b.five": {"description": "no parameters key"},
            }
        )
        assert len(catalog) == 5
        assert catalog.parameters_for("a.one") == frozenset({"subscription", "tenant"})
        assert catalog["a.two"].has_parameter("VAULT")
        assert catalog.parameters_for("b.four") == frozenset()
        assert catalog.parameters_for("missing.command") == frozenset()

    def test_namespaces(self, catalog):
        """Test namespaces are the first dotted segment."""
        assert catalog.namespaces == frozenset({"storage", "keyvault"})

    def test_parameter_count(self, catalog):
        """Test parameters are counted per command."""
        assert catalog.parameter_count == 1 + 3 + 2

    def test_parameter_spellings(self):
        """Test spelling-insensitive keys map to the catalog spelling."""
        catalog = CommandCatalog.from_mapping({"a.b": ["resource-group"]})
        assert catalog.parameter_spellings == {"resourcegroup": "resource-group"}

    def test_existing_catalog_is_returned(self, catalog):
        """Test a CommandCatalog passes through unchanged."""
        assert CommandCatalog.from_mapping(catalog) is catalog

    @pytest.mark.parametrize(
        "data",
        [
            ["a.b"],
            "a.b",
            {"": {"parameters": []}},
            {"a.b": "subscription"},
            {"a.b": {"parameters": "subscription"}},
            {"a.b": {"parameters": [42]}},
            {"a.b": 3},
        ],
    )
    def test_malformed_catalog_raises(self, data):
        """Test structurally invalid catalogs raise CatalogError."""
        with pytest.raises(CatalogError):
            CommandCatalog.from_mapping(data)


class TestParameterNames:
    """Test parameter normalization."""

    def test_normalize_parameter(self):
        """Test dashes, markup and case are removed."""
        assert normalize_parameter("--Subscription") == "subscription"
        assert normalize_parameter("**resource-group**") == "resource-group"
        assert normalize_parameter("`tenant`") == "tenant"

    def test_parameter_key(self):
        """Test spelling variants share a key."""
        assert parameter_key("resource-group") == parameter_key("resource_group")
        assert parameter_key("resourceGroup") == parameter_key("--resource-group")


class TestLoadCatalog:
    """Test catalog files."""

    def test_load_json(self, catalog_file):
        """Test a JSON catalog."""
        catalog = load_catalog(catalog_file)
        assert "storage.account.list" in catalog

    def test_load_yaml(self, tmp_path):
        """Test a YAML catalog."""
        path = tmp_path / "catalog.yaml"
        path.write_text("tool.op:\n  parameters:\n    - subscription\n", encoding="utf-8")
        assert load_catalog(path).parameters_for("tool.op") == frozenset({"subscription"})

    def test_invalid_json(self, tmp_path):
        """Test undecodable files raise CatalogError."""
        path = tmp_path / "catalog.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(CatalogError, match="Cannot decode"):
            load_catalog(path)

    def test_missing_file(self, tmp_path):
        """Test missing files raise CatalogError."""
        with pytest.raises(CatalogError, match="Cannot read"):
            load_catalog(tmp_path / "absent.json")

    def test_json_list_is_rejected(self, tmp_path):
        """Test a JSON list is not a catalog."""
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps(["tool.op"]), encoding="utf-8")
        with pytest.raises(CatalogError, match="mapping"):
            load_catalog(path)
