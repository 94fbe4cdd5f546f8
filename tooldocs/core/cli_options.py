#!/usr/bin/env python3
"""
cli_options.py
-------------------
Reusable Click option decorators for the `validate` commands.

Usage:
    from tooldocs.core.cli_options import catalog_option, json_option

    @cli.command()
    @catalog_option
    @json_option
    def my_command(catalog, as_json):
        pass
"""
import click
from tooldocs.core.paths import LOG_DIR


# ═══════════════════════════════════════════════════════════════════════════
# LOGGING OPTIONS
# ═══════════════════════════════════════════════════════════════════════════

verbose_option = click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Show tracebacks for fatal errors"
)

log_dir_option = click.option(
    "--log-dir",
    type=click.Path(),
    default=str(LOG_DIR),
    help="Directory for log files"
)


# ═══════════════════════════════════════════════════════════════════════════
# INPUT OPTIONS
# ═══════════════════════════════════════════════════════════════════════════

catalog_option = click.option(
    "--catalog",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Command catalog (JSON or YAML); defaults to data/catalog.json when present"
)

rules_option = click.option(
    "--rules",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML file with quality rule overrides; defaults to data/rules.yaml when present"
)


# ═══════════════════════════════════════════════════════════════════════════
# OUTPUT FORMAT OPTIONS
# ═══════════════════════════════════════════════════════════════════════════

json_option = click.option(
    "--json",
    "as_json",
    is_flag=True,
    help="Output in JSON format"
)
