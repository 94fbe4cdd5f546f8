"""
ToolDocs Development Package
============================

Quality validation engine for generated tool-catalog documentation.

This package parses generated Markdown reference pages (one per service,
documenting commands, parameters and example prompts) into a structured
model and checks them for structural completeness, template compliance,
terminology consistency and reference integrity, both per document and
across a whole corpus.

Main Components:
    - parser: Markdown + front matter to structured Document
    - catalog: Command catalog (known commands and their parameters)
    - validators: Content, format, consistency and reference validators,
      the result aggregator and the `validate` CLI
    - configs: Quality rules, weights and vocabulary
    - core: Logging, exceptions, paths
    - dataclasses: Document model and validation result types
    - utils: Front matter splitting, anchor slugs

Primary Interfaces:
    - tooldocs.validators.aggregator.ResultAggregator: Per-document and corpus runs
    - tooldocs.validators.cli: `validate` command-line entry point

Example Usage:
    >>> from tooldocs.catalog import CommandCatalog
    >>> from tooldocs.validators.aggregator import ResultAggregator
    >>> catalog = CommandCatalog.from_mapping({"storage.account.list": {"parameters": ["subscription"]}})
    >>> aggregator = ResultAggregator(catalog)
    >>> report = aggregator.validate_corpus([{"id": "storage.md", "content": text}])
    >>> report.cross_document.summary.error_count

Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
