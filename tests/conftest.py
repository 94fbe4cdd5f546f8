"""
conftest.py
-----------
Shared pytest fixtures for ToolDocs tests.

Provides fixtures for:
- A well-formed tool reference page and variations of it
- A small command catalog
- A docs directory with a two-page corpus
"""
import json
import pytest

from tooldocs.catalog import CommandCatalog


# ----- Sample Markdown Content Fixtures -----

VALID_PAGE = """---
title: Azure Storage tools for the Azure MCP Server
description: Learn how to use the Azure MCP Server with Azure Storage to list storage accounts and inspect blob containers.
ms.date: 2025-01-17
ms.service: azure-mcp-server
ms.topic: reference
---

# Azure Storage tools for the Azure MCP Server

The Azure MCP Server lets you manage Azure Storage resources with natural language prompts.

[!INCLUDE [tip-about-params](../includes/tools/parameter-consideration.md)]

## Available operations

### List storage accounts

<!-- storage.account.list -->

This operation lists all storage accounts in a subscription, including their location and SKU.

Example prompts include:

- **List accounts**: "Show me all my storage accounts"
- **Find accounts**: "What storage accounts do I have in my subscription?"
- **Quick list**: "storage accounts in subscription"
- **Detailed request**: "I need a complete list of every storage account in my subscription along with the region each one is deployed in"
- **Team accounts**: "List the storage accounts that belong to my team"

| Parameter | Required or optional | Description |
|-----------|----------------------|-------------|
| **Subscription** | Required | The ID or name of the Azure subscription. |

## Related content

- [What are the Azure MCP Server tools?](index.md)
- [Get started using Azure MCP Server](get-started.md)
"""


@pytest.fixture
def valid_page():
    """A reference page that passes every check."""
    return VALID_PAGE


@pytest.fixture
def body_only_page():
    """A page without front matter."""
    return """# Azure Storage tools for the Azure MCP Server

Some text about storage accounts.
"""


@pytest.fixture
def broken_yaml_page():
    """A page whose front matter is not valid YAML."""
    return """---
title: [unclosed list
description: broken
---

# Broken tools for the Azure MCP Server

Some text.
"""


@pytest.fixture
def make_page():
    """Factory that edits the valid page with (old, new) replacements."""

    def _make(*replacements):
        text = VALID_PAGE
        for old, new in replacements:
            assert old in text, f"'{old}' not in the sample page"
            text = text.replace(old, new)
        return text

    return _make


# ----- Catalog Fixtures -----

CATALOG_DATA = {
    "storage.account.list": {"parameters": ["subscription"]},
    "storage.blob.container.list": {"parameters": ["subscription", "account", "resource-group"]},
    "keyvault.secret.get": {"parameters": [{"name": "vault"}, {"name": "name"}]},
}


@pytest.fixture
def catalog_data():
    """Raw catalog mapping."""
    return json.loads(json.dumps(CATALOG_DATA))


@pytest.fixture
def catalog(catalog_data):
    """Validated CommandCatalog."""
    return CommandCatalog.from_mapping(catalog_data)


@pytest.fixture
def tool_catalog():
    """Minimal catalog with one command."""
    return CommandCatalog.from_mapping({"tool.op": {"parameters": ["subscription"]}})


# ----- Corpus Fixtures -----

@pytest.fixture
def docs_dir(tmp_path):
    """Docs directory with a valid page and a page linking to it."""
    root = tmp_path / "docs"
    root.mkdir()
    (root / "storage.md").write_text(VALID_PAGE, encoding="utf-8")
    (root / "overview.md").write_text(
        """# Overview

See [storage accounts](storage.md#list-storage-accounts) for details.
""",
        encoding="utf-8",
    )
    return root


@pytest.fixture
def catalog_file(tmp_path):
    """Catalog JSON file."""
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps(CATALOG_DATA), encoding="utf-8")
    return path
