"""
CLI Package for Content Build

This package provides a modular CLI architecture using Click groups and subcommands.
Each subcommand is implemented in its own module for better maintainability and testing.

The main entry point is the main() function which creates a Click group and registers
all available subcommands. The cli() function serves as the console script entry point
for setup.py.
"""

import os
import click
from dotenv import load_dotenv
from contentbuild import __version__
from contentbuild.utils.logging_config import configure_logging

# Load environment variables from .env files
# Priority: .env.dev (if exists) overrides .env
if os.path.exists('.env.dev'):
    load_dotenv('.env.dev')
elif os.path.exists('.env'):
    load_dotenv('.env')
from .validate import validate
from .build import build
from .routes import routes

# Configure logging when CLI package is imported
configure_logging()

@click.group()
@click.version_option(version=__version__, prog_name='content-build')
def main():
    """Content Build CLI - Validate and compile educational content.

    Reads subjects, teachers and system articles from a content tree,
    validates configs and MDX documents, and writes compiled documents,
    search indexes and a manifest for the site renderer.
    """
    pass

# Register subcommands
main.add_command(validate)
main.add_command(build)
main.add_command(routes)

# Entry point for setup.py console script
def cli():
    """Console script entry point.

    This function is called when the content-build command is executed
    from the command line after installation via pip.
    """
    main()
