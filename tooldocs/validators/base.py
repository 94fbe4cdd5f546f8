#!/usr/bin/env python3
"""
base.py
-------
Common interface and scoring helpers for document validators.

Every validator implements `validate(doc, context) -> ValidationResult`.
The aggregator holds a fixed tuple of validator instances and calls this
method on each; there is no runtime plugin lookup.

ValidationContext carries the run's read-only inputs (catalog and rules)
so validators keep no state between calls.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

# --- Local imports ---
from tooldocs.catalog import CommandCatalog
from tooldocs.configs.rules import DEFAULT_RULES, QualityRules
from tooldocs.core.logging_manager import ToolDocsLogger
from tooldocs.dataclasses.document import Document
from tooldocs.dataclasses.results import ValidationResult


@dataclass(frozen=True)
class ValidationContext:
    """Read-only inputs shared by all validators during one run."""

    catalog: CommandCatalog = field(default_factory=CommandCatalog)
    rules: QualityRules = DEFAULT_RULES


class DocumentValidator(ABC):
    """
    Base class for the four document validators.

    Attributes:
        name: Key under which the aggregator stores this validator's result
        rules: Rule set used when a call does not supply a context
        logger: Optional logger (no output when None)
    """

    name: str = ""

    def __init__(
        self,
        rules: Optional[QualityRules] = None,
        logger: Optional[ToolDocsLogger] = None,
    ) -> None:
        self.rules = rules or DEFAULT_RULES
        self.logger = logger

    @abstractmethod
    def validate(self, doc: Document, context: ValidationContext) -> ValidationResult:
        """Validate one parsed document."""


class ScoreCard:
    """
    Tallies pass/fail checks per scoring category.

    A category's score is passed / total * 100, and 100 when no check in
    that category ran.
    """

    def __init__(self, *categories: str) -> None:
        self._passed: Dict[str, int] = {c: 0 for c in categories}
        self._total: Dict[str, int] = {c: 0 for c in categories}

    def check(self, category: str, passed: bool) -> bool:
        """Record one check; returns `passed` so it can be used inline."""
        self._total[category] += 1
        if passed:
            self._passed[category] += 1
        return passed

    def score(self, category: str) -> float:
        total = self._total[category]
        if total == 0:
            return 100.0
        return round(self._passed[category] / total * 100, 1)

    def scores(self) -> Dict[str, float]:
        return {category: self.score(category) for category in self._total}


def weighted_average(scores: Mapping[str, float], weights: Mapping[str, float]) -> float:
    """
    Weighted mean of category scores; weights are normalized by their sum.

    Args:
        scores: Category -> 0-100 score
        weights: Category -> non-negative weight

    Returns:
        Weighted score rounded to one decimal
    """
    total_weight = sum(weights.get(category, 0.0) for category in scores)
    if total_weight <= 0:
        return round(sum(scores.values()) / len(scores), 1) if scores else 100.0
    value = sum(score * weights.get(category, 0.0) for category, score in scores.items())
    return round(value / total_weight, 1)
