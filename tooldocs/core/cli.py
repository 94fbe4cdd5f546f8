#!/usr/bin/env python3
"""
cli.py
------
Shared helpers for ToolDocs command-line commands.

Provides:
    - setup_logger: Logger factory for CLI commands
    - read_document_file: UTF-8 file reading at the CLI boundary
    - load_run_inputs: Catalog and rules with data/ defaults
    - collect_markdown_files: Sorted discovery of documents in a directory

Usage:
    from tooldocs.core.cli import setup_logger

    logger = setup_logger(LOG_DIR, "validators")
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from pathlib import Path
from typing import List, Optional, Tuple

# --- Local imports ---
from tooldocs.catalog import CommandCatalog, load_catalog
from tooldocs.configs.rules import QualityRules, load_rules
from tooldocs.core.exceptions import DocumentReadError
from tooldocs.core.logging_manager import ToolDocsLogger
from tooldocs.core.paths import CATALOG_PATH, RULES_PATH


def setup_logger(log_dir: Path, component_name: str) -> ToolDocsLogger:
    """
    Setup logging for CLI operations.

    Args:
        log_dir: Base log directory (typically from paths.LOG_DIR)
        component_name: Component identifier for logging (e.g., 'validators')

    Returns:
        Configured ToolDocsLogger instance

    Examples:
        >>> from tooldocs.core.paths import LOG_DIR
        >>> logger = setup_logger(LOG_DIR, "validators")
        >>> logger.log_info("Starting validation...")
    """
    operations_log_dir = Path(log_dir) / "operations"
    operations_log_dir.mkdir(parents=True, exist_ok=True)
    return ToolDocsLogger(operations_log_dir, component_name=component_name)


def read_document_file(file_path: Path) -> str:
    """
    Read a Markdown document as UTF-8 text.

    Args:
        file_path: Path to the document

    Returns:
        File content

    Raises:
        DocumentReadError: If the file cannot be read or decoded
    """
    try:
        return Path(file_path).read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise DocumentReadError(f"{file_path} is not UTF-8 encoded: {e}") from e
    except OSError as e:
        raise DocumentReadError(f"Cannot read {file_path}: {e}") from e


def load_run_inputs(
    catalog_path: Optional[str], rules_path: Optional[str]
) -> Tuple[CommandCatalog, QualityRules]:
    """
    Load the catalog and rules for a CLI run.

    Missing paths fall back to data/catalog.json and data/rules.yaml when
    those files exist, otherwise to an empty catalog and the default rules.

    Args:
        catalog_path: Catalog file given on the command line
        rules_path: Rules file given on the command line

    Returns:
        (catalog, rules) tuple

    Raises:
        CatalogError: If the catalog is malformed
        RulesError: If the rules file is invalid
    """
    if catalog_path is None and CATALOG_PATH.is_file():
        catalog_path = str(CATALOG_PATH)
    if rules_path is None and RULES_PATH.is_file():
        rules_path = str(RULES_PATH)

    catalog = load_catalog(Path(catalog_path)) if catalog_path else CommandCatalog()
    rules = load_rules(Path(rules_path) if rules_path else None)
    return catalog, rules


def collect_markdown_files(docs_dir: Path) -> List[Path]:
    """
    Find Markdown documents under a directory, sorted by relative path.

    Args:
        docs_dir: Directory to search recursively

    Returns:
        Sorted list of .md file paths
    """
    docs_dir = Path(docs_dir)
    return sorted(
        (p for p in docs_dir.rglob("*.md") if p.is_file()),
        key=lambda p: p.relative_to(docs_dir).as_posix(),
    )
