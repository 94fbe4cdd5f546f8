"""
Corpus Validation Command
-------------------------

Validate every Markdown page under a docs directory.

Each page is validated on its own first; then terminology and links are
checked across pages. Document ids are paths relative to the docs
directory, so relative links between pages resolve.
"""
import json
import click
from pathlib import Path
from typing import Optional

from tooldocs.core.cli_options import catalog_option, json_option, rules_option
from tooldocs.core.paths import DOCS_DIR


@click.command()
@click.argument(
    "docs_dir",
    type=click.Path(exists=True, file_okay=False),
    default=str(DOCS_DIR),
    required=False,
)
@catalog_option
@rules_option
@json_option
@click.option(
    "--canonical",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML file with authoritative term spellings",
)
@click.option("--show-clean", is_flag=True, help="Also list documents without issues")
@click.pass_context
def corpus(
    ctx: click.Context,
    docs_dir: str,
    catalog: Optional[str],
    rules: Optional[str],
    as_json: bool,
    canonical: Optional[str],
    show_clean: bool,
) -> None:
    """
    Validate all reference pages in a directory.

    Runs every per-document check, then the cross-document checks:
    - Terminology drift between pages (first page by path sets the
      canonical form unless an authoritative spelling exists)
    - Links to other pages and their anchors
    - Commands documented by more than one page
    """
    from tooldocs.configs.rules import load_canonical_spellings, rules_from_mapping
    from tooldocs.core.cli import collect_markdown_files, load_run_inputs, read_document_file
    from tooldocs.core.exceptions import DocumentReadError, ToolDocsError
    from tooldocs.core.logging_manager import handle_cli_error
    from tooldocs.validators.aggregator import ResultAggregator
    from tooldocs.validators.report import corpus_to_dict, format_corpus_report

    logger = ctx.obj["logger"]
    root = Path(docs_dir)

    try:
        command_catalog, quality_rules = load_run_inputs(catalog, rules)
        if canonical:
            spellings = dict(quality_rules.canonical_spellings)
            spellings.update(load_canonical_spellings(Path(canonical)))
            quality_rules = rules_from_mapping({"canonical_spellings": spellings}, quality_rules)
    except ToolDocsError as e:
        handle_cli_error(ctx, e, "validate_corpus", {"docs_dir": str(root)})
        return

    items = []
    unreadable = {}
    for path in collect_markdown_files(root):
        doc_id = path.relative_to(root).as_posix()
        try:
            items.append({"id": doc_id, "content": read_document_file(path)})
        except DocumentReadError as e:
            unreadable[doc_id] = str(e)

    if not items and not unreadable:
        click.echo(f"⚠️  No Markdown files found in {root}")
        return

    aggregator = ResultAggregator(command_catalog, quality_rules, logger)
    report = aggregator.validate_corpus(items, unreadable)

    if as_json:
        click.echo(json.dumps(corpus_to_dict(report), indent=2, ensure_ascii=False))
    else:
        click.echo(f"🔍 Validating {len(report.documents)} document(s) in {root}\n")
        click.echo(format_corpus_report(report, show_clean=show_clean))

    if not report.is_valid:
        raise click.ClickException(
            f"Corpus validation failed with {report.error_count} error(s)"
        )
