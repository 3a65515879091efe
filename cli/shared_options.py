"""
Shared CLI Option Decorators

This module provides reusable Click decorators for common CLI options,
ensuring consistency across subcommands and following DRY principles.
"""

import click

from .help_texts import (
    CONFIG_HELP,
    CONTENT_DIR_HELP,
    JOBS_HELP,
    LOG_FILE_HELP,
    LOG_LEVEL_HELP,
    OUTPUT_DIR_HELP,
    REGISTRY_HELP,
)


def content_dir_option(help=None):
    """Decorator for the content directory option."""
    def decorator(f):
        return click.option(
            '--content-dir', '-c',
            default=None,
            type=click.Path(file_okay=False),
            help=help or CONTENT_DIR_HELP
        )(f)
    return decorator

def output_dir_option(help=None):
    """Decorator for output directory options."""
    def decorator(f):
        return click.option(
            '--output-dir', '-o',
            default=None,
            type=click.Path(file_okay=False),
            help=help or OUTPUT_DIR_HELP
        )(f)
    return decorator

def jobs_option(help=None):
    """Decorator for the parallel worker count."""
    def decorator(f):
        return click.option(
            '--jobs', '-j',
            default=None,
            type=click.IntRange(min=1),
            help=help or JOBS_HELP
        )(f)
    return decorator

def config_option(help=None):
    """Decorator for configuration file options."""
    def decorator(f):
        return click.option(
            '--config',
            default=None,
            type=click.Path(exists=True, dir_okay=False),
            help=help or CONFIG_HELP
        )(f)
    return decorator

def registry_option(help=None):
    """Decorator for the component registry file option."""
    def decorator(f):
        return click.option(
            '--registry',
            'registry_file',
            default=None,
            type=click.Path(exists=True, dir_okay=False),
            help=help or REGISTRY_HELP
        )(f)
    return decorator

def log_level_option(default=None, help=None):
    """Decorator for logging level options."""
    def decorator(f):
        return click.option(
            '--log-level',
            default=default,
            type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
            help=help or LOG_LEVEL_HELP
        )(f)
    return decorator

def log_file_option(help=None):
    """Decorator for the log file option."""
    def decorator(f):
        return click.option(
            '--log-file',
            default=None,
            type=click.Path(dir_okay=False),
            help=help or LOG_FILE_HELP
        )(f)
    return decorator
