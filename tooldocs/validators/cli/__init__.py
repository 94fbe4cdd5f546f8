"""
Validators CLI Package
----------------------

Unified CLI for ToolDocs documentation validation.

Provides a single `validate` entry point. Each command feeds file contents
into the validation engine and prints the resulting report.

Available commands:
    - document: Validate one Markdown reference page
    - corpus: Validate every page of a docs directory, including
      cross-document consistency and links
    - catalog: Check that a command catalog is well formed

Exit codes:
    0  no errors (warnings allowed)
    1  documentation errors found
    2  run aborted (malformed catalog or rules, unreadable file)

Usage:
    validate document docs/storage.md --catalog data/catalog.json
    validate corpus docs/ --json
    validate catalog data/catalog.json
"""
import click
from pathlib import Path

from tooldocs.core.cli_options import log_dir_option, verbose_option

# Import commands from submodules
from .document import document
from .corpus import corpus
from .catalog import catalog


@click.group()
@log_dir_option
@verbose_option
@click.pass_context
def cli(ctx: click.Context, log_dir: str, verbose: bool) -> None:
    """
    ToolDocs Validation Suite.

    Check generated tool reference pages for completeness, template
    compliance, terminology consistency and reference integrity.
    """
    from tooldocs.core.cli import setup_logger

    ctx.ensure_object(dict)
    ctx.obj["log_dir"] = Path(log_dir)
    ctx.obj["verbose"] = verbose
    ctx.obj["logger"] = setup_logger(Path(log_dir), "validators")


# Register all commands
cli.add_command(document)
cli.add_command(corpus)
cli.add_command(catalog)


if __name__ == "__main__":
    cli()
