"""
Catalog Validation Command
--------------------------

Check that a command catalog is well formed before using it for a run.
"""
import click
from pathlib import Path

from tooldocs.core.paths import CATALOG_PATH


@click.command()
@click.argument(
    "file_path",
    type=click.Path(dir_okay=False),
    default=str(CATALOG_PATH),
    required=False,
)
@click.pass_context
def catalog(ctx: click.Context, file_path: str) -> None:
    """
    Validate a command catalog file (JSON or YAML).

    A malformed catalog aborts every validation run, so this command
    reports the problem on its own and prints a short summary otherwise.
    """
    from tooldocs.catalog import load_catalog
    from tooldocs.core.exceptions import CatalogError
    from tooldocs.core.logging_manager import handle_cli_error

    logger = ctx.obj["logger"]
    path = Path(file_path)

    try:
        command_catalog = load_catalog(path)
    except CatalogError as e:
        handle_cli_error(ctx, e, "validate_catalog", {"file": str(path)})
        return

    logger.log_operation("catalog_validated", {"file": str(path), "commands": len(command_catalog)})

    click.echo(f"✅ Catalog is valid: {path}")
    click.echo(f"   Commands: {len(command_catalog)}")
    click.echo(f"   Namespaces: {', '.join(sorted(command_catalog.namespaces)) or '-'}")
    click.echo(f"   Parameters: {command_catalog.parameter_count}")
