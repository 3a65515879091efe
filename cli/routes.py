"""
Routes Subcommand Module

Standalone check of the global slug namespace: loads every config.json,
registers subject, teacher and system article slugs, and prints the route
table together with any reserved word use or collision.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

import click

from contentbuild.build.routes import register_routes
from contentbuild.build.sources import load_content
from contentbuild.config.schema import DEFAULT_CONTENT_DIR
from contentbuild.errors import ContentSourceError
from contentbuild.utils.logging_config import configure_logging

from .help_texts import ROUTES_HELP, ExitCodes
from .shared_options import content_dir_option, log_level_option


logger = logging.getLogger(__name__)


@click.command(help=ROUTES_HELP)
@content_dir_option()
@click.option(
    "--reserved",
    multiple=True,
    help="Additional reserved slug (repeatable)",
)
@log_level_option(default="WARNING")
def routes(content_dir: Optional[str], reserved: Tuple[str, ...], log_level: str):
    """Validate the route namespace.

    Examples:
        content-build routes
        content-build routes --content-dir site/content --reserved admin
    """
    configure_logging(level=log_level.lower())

    try:
        tree = load_content(Path(content_dir or DEFAULT_CONTENT_DIR))
    except ContentSourceError as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(ExitCodes.VALIDATION_FAILED)

    if tree.has_errors:
        for diagnostic in tree.diagnostics:
            click.echo(diagnostic.format_human(), err=True)
        click.echo("\n✗ Configuration errors, routes not checked", err=True)
        sys.exit(ExitCodes.VALIDATION_FAILED)

    registry = register_routes(tree, reserved)

    registrations = registry.registrations
    width = max([len(r.slug) for r in registrations] + [4])
    click.echo(f"{'SLUG'.ljust(width)}  {'TYPE'.ljust(14)}  SOURCE")
    for registration in registrations:
        click.echo(
            f"{registration.slug.ljust(width)}  {registration.kind.ljust(14)}  {registration.source}"
        )

    if registry.violations:
        click.echo("\n" + "=" * 60, err=True)
        click.echo("  ROUTE VALIDATION FAILED", err=True)
        click.echo("=" * 60 + "\n", err=True)
        for index, violation in enumerate(registry.violations, 1):
            click.echo(f"[{index}] {violation.message}", err=True)
            if violation.suggestion:
                click.echo(f"    Fix: {violation.suggestion}", err=True)
        click.echo(f"\nTotal errors: {len(registry.violations)}", err=True)
        sys.exit(ExitCodes.VALIDATION_FAILED)

    click.echo(f"\n✓ Route validation passed. {len(registry)} unique slugs.")
