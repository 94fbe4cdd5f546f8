#!/usr/bin/env python3
"""
validators
----------
Documentation quality validators for tool reference pages.

This package contains one validator per quality aspect:
- content: Front matter, required sections, operations, example prompts
- format: Template compliance (front matter order, headings, tables, style)
- consistency: Terminology, capitalization and parameter-name drift
- reference: Commands, parameters, anchors and inter-document links

Architecture:
    - Every validator implements validate(doc, context) (see base.py)
    - aggregator.py runs the four validators per document and the
      two-phase corpus pass
    - report.py renders results as text or JSON
    - The cli package provides the `validate` entry point

Usage:
    # Through CLI
    validate document docs/storage.md
    validate corpus docs/ --catalog data/catalog.json
    validate catalog data/catalog.json

    # Direct import for programmatic use
    from tooldocs.validators.aggregator import ResultAggregator
    from tooldocs.validators.reference import ReferenceValidator
"""

__all__ = [
    "ResultAggregator",
    "ContentValidator",
    "FormatChecker",
    "ConsistencyChecker",
    "ReferenceValidator",
]

from tooldocs.validators.aggregator import ResultAggregator
from tooldocs.validators.consistency import ConsistencyChecker
from tooldocs.validators.content import ContentValidator
from tooldocs.validators.format import FormatChecker
from tooldocs.validators.reference import ReferenceValidator
