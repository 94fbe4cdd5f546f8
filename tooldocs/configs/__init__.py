"""
configs package
---------------
Rule sets and vocabulary for the validation engine.

- rules: QualityRules (thresholds, patterns, score weights) and loaders
- terminology: Domain terms, branding and style-guide vocabulary
"""
from tooldocs.configs.rules import DEFAULT_RULES, QualityRules, load_rules

__all__ = ["DEFAULT_RULES", "QualityRules", "load_rules"]
