"""
Validate Subcommand Module

Validates a content repository (subject, teacher, unified teachers or system
articles) without producing build output: config.json schemas, front matter,
slug/filename consistency, markup syntax and component contracts. Intended for
content repository CI and pre-commit hooks.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from contentbuild.errors import ContentBuildError, SchemaWiringError
from contentbuild.mdx.registry import load_registry
from contentbuild.utils.logging_config import configure_logging
from contentbuild.validation.engine import VALID_CONTENT_TYPES, ValidationEngine

from .help_texts import (
    REGISTRY_ERROR,
    VALIDATE_HELP,
    VALIDATE_REPORT_HELP,
    VALIDATE_STRICT_HELP,
    VALIDATE_TYPE_HELP,
    ExitCodes,
)
from .shared_options import log_level_option, registry_option


logger = logging.getLogger(__name__)


@click.command(help=VALIDATE_HELP)
@click.argument(
    "directory",
    default=".",
    type=click.Path(exists=True, file_okay=False),
)
@click.option(
    "--type", "-t",
    "content_type",
    type=click.Choice(VALID_CONTENT_TYPES, case_sensitive=False),
    default=None,
    help=VALIDATE_TYPE_HELP,
)
@click.option(
    "--strict",
    is_flag=True,
    help=VALIDATE_STRICT_HELP,
)
@click.option(
    "--report", "-r",
    "report_path",
    type=click.Path(dir_okay=False),
    help=VALIDATE_REPORT_HELP,
)
@registry_option()
@log_level_option(default="WARNING")
def validate(
    directory: str,
    content_type: Optional[str],
    strict: bool,
    report_path: Optional[str],
    registry_file: Optional[str],
    log_level: str,
):
    """Validate a content repository.

    Examples:
        # Validate only the documents under ./articles
        content-build validate .

        # Validate a subject repository
        content-build validate . --type subject

        # Validate a unified teachers repository, failing on warnings
        content-build validate teachers/ --type teachers --strict

        # Write a JSON report for CI
        content-build validate . --type system --report validation.json
    """
    configure_logging(level=log_level.lower())

    try:
        registry = load_registry(Path(registry_file)) if registry_file else None
    except SchemaWiringError as e:
        click.echo(REGISTRY_ERROR.format(error=e), err=True)
        sys.exit(ExitCodes.USAGE_ERROR)

    engine = ValidationEngine(strict=strict, registry=registry)

    try:
        report = engine.validate(Path(directory), content_type.lower() if content_type else None)
    except ContentBuildError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(ExitCodes.VALIDATION_FAILED)

    click.echo(report.format_human())

    summary = f"\n  {report.checked_files} file(s) checked"
    if report.errors:
        summary += f", {len(report.errors)} error(s)"
    if report.warnings:
        summary += f", {len(report.warnings)} warning(s)"
    click.echo(summary)

    if report_path:
        _write_report(report_path, report.to_dict())
        click.echo(f"\nReport saved: {report_path}")

    if not report.is_valid:
        sys.exit(ExitCodes.VALIDATION_FAILED)


def _write_report(path: str, data: dict):
    """Write a JSON report to disk."""
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
