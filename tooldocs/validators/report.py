#!/usr/bin/env python3
"""
report.py
---------
Text and JSON rendering of validation reports for the CLI.

The engine returns result objects only; this module turns them into the
terminal report or a JSON-serializable dictionary.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import asdict
from typing import Any, Dict, List

# --- Local imports ---
from tooldocs.dataclasses.results import CrossDocumentResult, Issue
from tooldocs.validators.aggregator import CorpusReport, DocumentReport


def _issue_lines(issues: List[Issue], indent: str = "   ") -> List[str]:
    lines = []
    for issue in issues:
        icon = "❌" if issue.is_error else "⚠️"
        line_info = f":{issue.location}" if issue.location else ""
        lines.append(f"{indent}{icon} [{issue.code}]{line_info} {issue.message}")
        if issue.suggestion:
            lines.append(f"{indent}   💡 {issue.suggestion}")
    return lines


def _metrics_lines(report: DocumentReport) -> List[str]:
    lines = []
    quality = report.metrics.get("content")
    if quality is not None:
        lines.append(
            f"   Quality: {quality.overall_score:.1f} "
            f"(structure {quality.structure_score:.0f}, content {quality.content_score:.0f}, "
            f"examples {quality.examples_score:.0f}, metadata {quality.metadata_score:.0f})"
        )
    compliance = report.metrics.get("format")
    if compliance is not None:
        lines.append(
            f"   Compliance: {compliance.overall_compliance:.1f} "
            f"(front matter {compliance.front_matter:.0f}, headings {compliance.heading_structure:.0f}, "
            f"template {compliance.template_format:.0f}, standards {compliance.standards_compliance:.0f})"
        )
    return lines


def format_document_report(report: DocumentReport) -> str:
    """
    Format one document's report as readable text.

    Args:
        report: Report to format

    Returns:
        Formatted report string
    """
    lines = []
    lines.append("\n" + "=" * 60)
    lines.append(f"DOCUMENT VALIDATION REPORT: {report.document_id}")
    lines.append("=" * 60)
    lines.append("")
    lines.extend(_metrics_lines(report))
    lines.append("")
    lines.append(f"Total Errors: {len(report.errors)}")
    lines.append(f"Total Warnings: {len(report.warnings)}")
    lines.append("")

    if report.is_valid:
        lines.append("✅ DOCUMENT VALID")
    else:
        lines.append("❌ VALIDATION FAILED")
    lines.append("")

    for name, result in report.results.items():
        if not result.issues:
            continue
        lines.append(f"{name.upper()}:")
        lines.extend(_issue_lines(result.issues))
        lines.append("")

    lines.append("=" * 60)
    return "\n".join(lines)


def format_corpus_report(corpus: CorpusReport, show_clean: bool = False) -> str:
    """
    Format a corpus report as readable text.

    Args:
        corpus: Report to format
        show_clean: Also list documents without issues

    Returns:
        Formatted report string
    """
    summary = corpus.cross_document.summary
    with_errors = sum(1 for d in corpus.documents if d.errors)
    with_warnings = sum(1 for d in corpus.documents if d.warnings and not d.errors)

    lines = []
    lines.append("\n" + "=" * 60)
    lines.append("CORPUS VALIDATION REPORT")
    lines.append("=" * 60)
    lines.append("")
    lines.append(f"Documents Checked: {summary.validated_documents}")
    lines.append(f"✅ Clean Documents: {len(corpus.documents) - with_errors - with_warnings}")
    lines.append(f"⚠️  Documents with Warnings: {with_warnings}")
    lines.append(f"❌ Documents with Errors: {with_errors}")
    lines.append(f"Commands Validated: {summary.validated_commands}")
    lines.append(f"Parameters Validated: {summary.validated_parameters}")
    lines.append("")
    lines.append(f"Total Errors: {corpus.error_count}")
    lines.append(f"Total Warnings: {corpus.warning_count}")
    lines.append("")

    if corpus.is_valid:
        lines.append("✅ ALL DOCUMENTS VALID")
    else:
        lines.append("❌ VALIDATION FAILED")
    lines.append("")

    documents = [d for d in corpus.documents if show_clean or d.errors or d.warnings]
    if documents:
        lines.append("ISSUES BY DOCUMENT:")
        lines.append("")
        for report in sorted(documents, key=lambda d: d.document_id):
            icon = "❌" if report.errors else ("⚠️" if report.warnings else "✅")
            lines.append(f"{icon} {report.document_id}")
            lines.extend(_issue_lines(report.errors + report.warnings))
            lines.append("")

    cross = corpus.cross_document
    if cross.errors or cross.warnings:
        lines.append("CROSS-DOCUMENT ISSUES:")
        lines.append("")
        for issue in cross.errors + cross.warnings:
            lines.extend(_issue_lines([issue], indent=f"   {issue.document_id or '-'} "))
        lines.append("")

    lines.append("=" * 60)
    return "\n".join(lines)


# ----- JSON -----


def issue_to_dict(issue: Issue) -> Dict[str, Any]:
    return asdict(issue)


def document_to_dict(report: DocumentReport) -> Dict[str, Any]:
    """JSON-ready view of a DocumentReport."""
    return {
        "id": report.document_id,
        "isValid": report.is_valid,
        "errors": [issue_to_dict(i) for i in report.errors],
        "warnings": [issue_to_dict(i) for i in report.warnings],
        "metrics": {name: asdict(block) for name, block in report.metrics.items()},
    }


def cross_document_to_dict(cross: CrossDocumentResult) -> Dict[str, Any]:
    summary = cross.summary
    return {
        "isValid": cross.is_valid,
        "errors": [issue_to_dict(i) for i in cross.errors],
        "warnings": [issue_to_dict(i) for i in cross.warnings],
        "summary": {
            "totalIssues": summary.total_issues,
            "errorCount": summary.error_count,
            "warningCount": summary.warning_count,
            "validatedDocuments": summary.validated_documents,
            "validatedCommands": summary.validated_commands,
            "validatedParameters": summary.validated_parameters,
        },
        "canonicalTerms": dict(cross.canonical_terms),
    }


def corpus_to_dict(corpus: CorpusReport) -> Dict[str, Any]:
    """JSON-ready view of a CorpusReport."""
    return {
        "isValid": corpus.is_valid,
        "documents": [document_to_dict(d) for d in corpus.documents],
        "crossDocument": cross_document_to_dict(corpus.cross_document),
    }
