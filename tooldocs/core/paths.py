#!/usr/bin/env python3
"""
paths.py
-------------------
Default path constants for the ToolDocs project.

The validation engine itself works on strings; these paths are only the
defaults used by the CLI when no explicit location is given.

The project structure:
    ROOT/
    ├── tooldocs/      # Package code
    ├── docs/          # Generated documentation to validate
    ├── data/          # Command catalog and rules overrides
    └── logs/          # Validation logs
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from pathlib import Path


def _get_project_root() -> Path:
    """
    Determine project root directory.

    Assumes this file is at ROOT/tooldocs/core/paths.py.

    Returns:
        Path object for project root

    Raises:
        RuntimeError: If the package directory is not where it should be
    """
    current_file = Path(__file__).resolve()

    # paths.py -> core/ -> tooldocs/ -> ROOT/
    root = current_file.parent.parent.parent

    if not (root / "tooldocs").is_dir():
        raise RuntimeError(
            f"Cannot determine valid project root. "
            f"Expected {root / 'tooldocs'} to exist. "
            f"Current file: {current_file}"
        )

    return root


# ----- Project directory -----
ROOT = _get_project_root()

# ----- Inputs -----
DOCS_DIR = ROOT / "docs"
DATA_DIR = ROOT / "data"
CATALOG_PATH = DATA_DIR / "catalog.json"
RULES_PATH = DATA_DIR / "rules.yaml"

# ----- Logs -----
LOG_DIR = ROOT / "logs"
