"""
Document Validation Command
---------------------------

Validate a single Markdown reference page.

Runs the content, format, consistency and reference validators on one file
and prints the merged report. Cross-document checks need the whole corpus
and are only run by `validate corpus`.
"""
import json
import click
from pathlib import Path
from typing import Optional

from tooldocs.core.cli_options import catalog_option, json_option, rules_option


@click.command()
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False))
@catalog_option
@rules_option
@json_option
@click.pass_context
def document(
    ctx: click.Context,
    file_path: str,
    catalog: Optional[str],
    rules: Optional[str],
    as_json: bool,
) -> None:
    """
    Validate one Markdown reference page.

    Checks for:
    - Required front matter, sections and operations
    - Example prompt count and variety
    - Template format (headings, parameter tables, style)
    - Terminology consistency within the page
    - Commands, parameters and anchors against the catalog
    """
    from tooldocs.core.cli import load_run_inputs, read_document_file
    from tooldocs.core.exceptions import ToolDocsError
    from tooldocs.core.logging_manager import handle_cli_error
    from tooldocs.validators.aggregator import ResultAggregator
    from tooldocs.validators.report import document_to_dict, format_document_report

    logger = ctx.obj["logger"]
    path = Path(file_path)

    try:
        command_catalog, quality_rules = load_run_inputs(catalog, rules)
        content = read_document_file(path)
    except ToolDocsError as e:
        handle_cli_error(ctx, e, "validate_document", {"file": str(path)})
        return

    aggregator = ResultAggregator(command_catalog, quality_rules, logger)
    report = aggregator.validate_document({"id": path.name, "content": content})

    if as_json:
        click.echo(json.dumps(document_to_dict(report), indent=2, ensure_ascii=False))
    else:
        click.echo(f"🔍 Validating {path}\n")
        click.echo(format_document_report(report))

    if not report.is_valid:
        raise click.ClickException(f"Found {len(report.errors)} error(s) in {path.name}")
