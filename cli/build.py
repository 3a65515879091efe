"""
Build Subcommand Module

Runs the full content build and reports the result. Markup syntax errors
are shown with a boxed source excerpt; every other problem is listed as one
diagnostic line.
"""

import logging
import sys
from typing import Optional

import click

from contentbuild.build.orchestrator import BuildOrchestrator
from contentbuild.config.manager import ConfigurationManager
from contentbuild.config.yaml_parser import ConfigurationError
from contentbuild.errors import (
    BuildFailedError,
    BuildLockError,
    ContentSourceError,
    SchemaWiringError,
    UnsafeOutputError,
)
from contentbuild.utils.logging_config import logging_config

from .help_texts import (
    BUILD_FAILED_ERROR,
    BUILD_HELP,
    CONFIG_ERROR,
    REGISTRY_ERROR,
    ExitCodes,
)
from .shared_options import (
    config_option,
    content_dir_option,
    jobs_option,
    log_file_option,
    log_level_option,
    output_dir_option,
    registry_option,
)


logger = logging.getLogger(__name__)


@click.command(help=BUILD_HELP)
@content_dir_option()
@output_dir_option()
@jobs_option()
@config_option()
@registry_option()
@log_level_option()
@log_file_option()
def build(
    content_dir: Optional[str],
    output_dir: Optional[str],
    jobs: Optional[int],
    config: Optional[str],
    registry_file: Optional[str],
    log_level: Optional[str],
    log_file: Optional[str],
):
    """Build the content tree.

    Examples:
        # Build ./content into ./.content-build
        content-build build

        # Explicit directories and eight compile workers
        content-build build --content-dir site/content --output-dir dist/content --jobs 8

        # Settings from a YAML file
        content-build build --config build.yaml
    """
    try:
        build_config = ConfigurationManager().load_configuration(
            config_file=config,
            cli_overrides={
                "content_dir": content_dir,
                "output_dir": output_dir,
                "jobs": jobs,
                "log_level": log_level.lower() if log_level else None,
                "log_file": log_file,
                "registry_file": registry_file,
            },
        )
    except ConfigurationError as e:
        click.echo(CONFIG_ERROR.format(error=e), err=True)
        sys.exit(ExitCodes.VALIDATION_FAILED)

    logging_config.configure_logging(level=build_config.log_level, log_file=build_config.log_file)
    if logging_config.is_debug_enabled():
        logging_config.log_configuration_details(vars(build_config))

    try:
        orchestrator = BuildOrchestrator(build_config)
    except SchemaWiringError as e:
        click.echo(REGISTRY_ERROR.format(error=e), err=True)
        sys.exit(ExitCodes.VALIDATION_FAILED)

    try:
        result = orchestrator.run()
    except BuildFailedError as e:
        for excerpt in e.excerpts:
            click.echo("", err=True)
            click.echo(excerpt, err=True)
        click.echo("", err=True)
        for diagnostic in e.diagnostics:
            click.echo(diagnostic.format_human(), err=True)
        click.echo(
            "\n" + BUILD_FAILED_ERROR.format(stage=e.stage, count=len(e.errors)), err=True
        )
        sys.exit(ExitCodes.VALIDATION_FAILED)
    except (BuildLockError, ContentSourceError, UnsafeOutputError) as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(ExitCodes.VALIDATION_FAILED)

    stats = result.stats
    click.echo(f"✓ Build complete in {result.duration:.2f}s")
    click.echo(
        f"  {stats['subjects']} subjects, {stats['teachers']} teachers, "
        f"{stats['system_articles']} system articles, {stats['documents']} documents"
    )
    if result.warnings:
        click.echo(f"  {len(result.warnings)} warning(s)")
    click.echo(f"  Build hash: {result.build_hash}")
