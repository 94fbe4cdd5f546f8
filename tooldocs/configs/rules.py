#!/usr/bin/env python3
"""
rules.py
--------
Quality rules configuration for the validation engine.

Every threshold, pattern and score weight used by the validators lives in
one immutable QualityRules value. A run constructs it once (defaults, or
defaults plus a YAML override file) and passes it to every validator.

Score weights:
    quality_weights     structure 0.3, content 0.3, examples 0.2, metadata 0.2
    compliance_weights  front_matter 0.25, heading_structure 0.25,
                        template_format 0.3, standards_compliance 0.2

Weights are normalized by their sum, so they only need to be positive.

Usage:
    from tooldocs.configs.rules import DEFAULT_RULES, load_rules

    rules = load_rules(Path("data/rules.yaml"))   # overrides on top of defaults
    rules.min_example_prompts                      # 5
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import dataclasses
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

# --- Third party imports ---
import yaml

# --- Local imports ---
from tooldocs.configs.terminology import (
    BRANDING_RULES,
    CANONICAL_SPELLINGS,
    DISCOURAGED_TERMS,
    DOMAIN_TERMS,
    PREFERRED_PHRASES,
)
from tooldocs.core.exceptions import RulesError


QUALITY_WEIGHTS: Dict[str, float] = {
    "structure": 0.3,
    "content": 0.3,
    "examples": 0.2,
    "metadata": 0.2,
}

COMPLIANCE_WEIGHTS: Dict[str, float] = {
    "front_matter": 0.25,
    "heading_structure": 0.25,
    "template_format": 0.3,
    "standards_compliance": 0.2,
}


@dataclass(frozen=True)
class QualityRules:
    """
    Immutable rule set shared by all validators during a run.

    Attributes are grouped by the validator that mostly consumes them; some
    (operation detection, parameter table columns) are shared.
    """

    # ----- Product -----
    product_name: str = "Azure MCP Server"

    # ----- Front matter -----
    required_front_matter: Tuple[str, ...] = (
        "title",
        "description",
        "ms.topic",
        "ms.date",
        "ms.service",
    )
    front_matter_template: Tuple[str, ...] = (
        "title",
        "description",
        "ms.date",
        "ms.service",
        "ms.topic",
    )
    expected_topic: str = "reference"
    min_description_length: int = 50
    max_description_length: int = 300
    date_pattern: str = r"^\d{4}-\d{2}-\d{2}$"

    # ----- Sections -----
    required_sections: Tuple[str, ...] = ("Available operations",)
    operations_section: str = "Available operations"
    related_section: str = "Related content"
    required_related_links: Tuple[str, ...] = ("index.md", "get-started.md")
    min_operation_description_length: int = 50

    # ----- Example prompts -----
    prompt_marker: str = r"^example prompts\b"
    min_example_prompts: int = 5
    max_example_prompts: int = 10
    prompt_styles: Tuple[str, ...] = ("question", "statement", "incomplete", "verbose")
    min_prompt_styles: int = 3
    verbose_prompt_words: int = 15
    incomplete_prompt_words: int = 5
    min_prompt_length: int = 10
    max_prompt_summary_length: int = 40
    generic_prompt_patterns: Tuple[str, ...] = (
        r"^(test|example|sample|todo|tbd)\b",
        r"^do something\b",
        r"^help( me)?\W*$",
    )

    # ----- Parameter tables -----
    parameter_table_columns: Tuple[str, ...] = (
        "Parameter",
        "Required or optional",
        "Description",
    )
    required_values: Tuple[str, ...] = ("required", "optional")
    min_parameter_description_length: int = 20

    # ----- Format -----
    h1_pattern: str = r"\btools for the\b.*\bMCP Server\b"
    forbidden_h3_titles: Tuple[str, ...] = ("Parameters", "Example prompts")
    bullet_marker: str = "-"
    see_also_titles: Tuple[str, ...] = ("See also", "Related content")
    required_includes: Tuple[str, ...] = ("[!INCLUDE [tip-about-params]",)
    template_variable_pattern: str = r"(?<![{$\\])\{[A-Za-z_][A-Za-z0-9_]*\}(?!\})"

    # ----- References -----
    command_pattern: str = r"[a-z][a-z0-9_-]*(?:\.[a-z][a-z0-9_-]*)+"
    ignored_token_suffixes: Tuple[str, ...] = (
        ".md", ".json", ".yml", ".yaml", ".txt", ".py", ".js", ".ts",
        ".csv", ".xml", ".html", ".png", ".svg", ".com", ".net", ".org", ".io",
    )
    known_documents: Tuple[str, ...] = ("index.md", "get-started.md")
    min_url_length: int = 10

    # ----- Terminology -----
    domain_terms: Tuple[str, ...] = DOMAIN_TERMS
    canonical_spellings: Mapping[str, str] = field(
        default_factory=lambda: dict(CANONICAL_SPELLINGS)
    )
    discouraged_terms: Mapping[str, str] = field(
        default_factory=lambda: dict(DISCOURAGED_TERMS)
    )
    preferred_phrases: Mapping[str, str] = field(
        default_factory=lambda: dict(PREFERRED_PHRASES)
    )
    branding_rules: Tuple[Tuple[str, str, bool], ...] = BRANDING_RULES
    scan_headings: bool = False

    # ----- Scoring -----
    quality_weights: Mapping[str, float] = field(
        default_factory=lambda: dict(QUALITY_WEIGHTS)
    )
    compliance_weights: Mapping[str, float] = field(
        default_factory=lambda: dict(COMPLIANCE_WEIGHTS)
    )


DEFAULT_RULES = QualityRules()

_WEIGHT_KEYS = {
    "quality_weights": set(QUALITY_WEIGHTS),
    "compliance_weights": set(COMPLIANCE_WEIGHTS),
}


def _coerce(name: str, value: Any, default: Any) -> Any:
    """Convert a YAML value to the type of the rule's default."""
    if name in _WEIGHT_KEYS:
        if not isinstance(value, dict):
            raise RulesError(f"Rule '{name}' must be a mapping of weights")
        unknown = set(value) - _WEIGHT_KEYS[name]
        if unknown:
            raise RulesError(f"Rule '{name}' has unknown keys: {', '.join(sorted(unknown))}")
        merged = dict(default)
        for key, weight in value.items():
            if not isinstance(weight, (int, float)) or weight < 0:
                raise RulesError(f"Weight '{name}.{key}' must be a non-negative number")
            merged[key] = float(weight)
        if sum(merged.values()) <= 0:
            raise RulesError(f"Weights in '{name}' must sum to a positive value")
        return merged

    if name == "branding_rules":
        try:
            return tuple((str(w), str(r), bool(cs)) for w, r, cs in value)
        except (TypeError, ValueError) as e:
            raise RulesError(
                "Rule 'branding_rules' must be a list of [disallowed, replacement, case_sensitive]"
            ) from e

    if isinstance(default, tuple):
        if isinstance(value, str) or not isinstance(value, list):
            raise RulesError(f"Rule '{name}' must be a list")
        return tuple(str(v) for v in value)

    if isinstance(default, dict):
        if not isinstance(value, dict):
            raise RulesError(f"Rule '{name}' must be a mapping")
        return {str(k): str(v) for k, v in value.items()}

    # bool is checked before int (bool is an int subclass)
    if isinstance(default, bool):
        if not isinstance(value, bool):
            raise RulesError(f"Rule '{name}' must be true or false")
        return value

    if isinstance(default, int):
        if isinstance(value, bool) or not isinstance(value, int):
            raise RulesError(f"Rule '{name}' must be an integer")
        return value

    if not isinstance(value, str):
        raise RulesError(f"Rule '{name}' must be a string")
    return value


def rules_from_mapping(
    overrides: Mapping[str, Any], base: Optional[QualityRules] = None
) -> QualityRules:
    """
    Build a rule set by applying overrides to a base rule set.

    Args:
        overrides: Mapping of rule name to new value
        base: Rule set to start from (default: DEFAULT_RULES)

    Returns:
        New QualityRules instance

    Raises:
        RulesError: If a rule is unknown or a value has the wrong shape
    """
    base = base or DEFAULT_RULES
    known = {f.name: f for f in dataclasses.fields(QualityRules)}

    unknown = sorted(set(overrides) - set(known))
    if unknown:
        raise RulesError(f"Unknown rule(s): {', '.join(unknown)}")

    changes = {
        name: _coerce(name, value, getattr(base, name))
        for name, value in overrides.items()
    }
    return dataclasses.replace(base, **changes)


def load_rules(path: Optional[Path]) -> QualityRules:
    """
    Load rule overrides from a YAML file.

    A missing path (None) yields the defaults. An empty file also yields
    the defaults.

    Args:
        path: YAML file with rule overrides

    Returns:
        QualityRules with overrides applied

    Raises:
        RulesError: If the file cannot be read, is invalid YAML,
            or contains invalid rules
    """
    if path is None:
        return DEFAULT_RULES

    try:
        data = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise RulesError(f"Cannot read rules file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise RulesError(f"Invalid YAML in rules file {path}: {e}") from e

    if data is None:
        return DEFAULT_RULES
    if not isinstance(data, dict):
        raise RulesError(
            f"Rules file {path} must contain a mapping, got {type(data).__name__}"
        )

    return rules_from_mapping(data)


def load_canonical_spellings(path: Path) -> Dict[str, str]:
    """
    Load authoritative term spellings from a YAML file.

    The file lists spellings ("- Azure MCP Server") or maps terms to their
    spelling. Keys are normalized to lower case with single spaces.

    Args:
        path: YAML file

    Returns:
        Normalized term -> spelling

    Raises:
        RulesError: If the file cannot be read or has the wrong shape
    """
    try:
        data = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise RulesError(f"Cannot read canonical spellings {path}: {e}") from e
    except yaml.YAMLError as e:
        raise RulesError(f"Invalid YAML in canonical spellings {path}: {e}") from e

    if data is None:
        return {}
    if isinstance(data, list):
        data = {str(v): str(v) for v in data}
    if not isinstance(data, dict):
        raise RulesError(f"Canonical spellings in {path} must be a list or a mapping")
    return {" ".join(str(k).split()).lower(): str(v) for k, v in data.items()}
