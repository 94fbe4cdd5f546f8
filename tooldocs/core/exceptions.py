#!/usr/bin/env python3
"""
exceptions.py
--------------------
Custom exception classes for the ToolDocs project.

Only conditions that must stop a whole run are raised. Problems found in a
single document are never raised: they are recorded as issues inside that
document's validation result so the rest of the corpus keeps validating.

Exception Hierarchy:
    Exception (built-in)
    └── ToolDocsError - Base for all project errors
        ├── CatalogError - Malformed command catalog (fatal precondition)
        ├── RulesError - Invalid quality rules configuration
        └── DocumentReadError - Document file cannot be read

Usage:
    from tooldocs.core.exceptions import CatalogError

    try:
        catalog = load_catalog(path)
    except CatalogError as e:
        logger.log_error(e)
        raise
"""


class ToolDocsError(Exception):
    """
    Base exception for ToolDocs errors.

    Catch this to handle any failure raised by the validation engine or its
    loaders, or catch specific subclasses for more granular handling.

    Examples:
        >>> raise ToolDocsError("Validation run aborted")
    """

    pass


class CatalogError(ToolDocsError):
    """
    Exception for a structurally invalid command catalog.

    This is the engine's only precondition failure. It is raised before any
    document is processed when the catalog:
    - is not a mapping of command name to entry
    - has a non-string command name
    - has an entry whose parameters are not a collection of names
    - cannot be read or decoded from its source file

    Because the catalog is shared by every validator, the error is not
    attributable to a single document and aborts the run.

    Examples:
        >>> raise CatalogError("Catalog must be a mapping, got list")
        >>> raise CatalogError("Entry 'storage.account.list' has invalid parameters")
    """

    pass


class RulesError(ToolDocsError):
    """
    Exception for invalid quality rules configuration.

    Raised when a rules override file:
    - is not valid YAML
    - is not a mapping
    - names an unknown rule
    - sets weights that do not sum to a positive value

    Examples:
        >>> raise RulesError("Unknown rule 'min_examples' in rules.yaml")
    """

    pass


class DocumentReadError(ToolDocsError):
    """
    Exception for document files that cannot be read.

    Raised at the file-system boundary (CLI) when a Markdown file is not
    UTF-8 or cannot be opened. The engine itself only receives strings.

    Examples:
        >>> raise DocumentReadError("storage.md is not UTF-8 encoded")
    """

    pass
