"""
Build configuration schema.

Settings for one content build: where content is read from, where output
goes, how many compile workers run, logging, and optional extensions of the
route and component rules.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional


class LogLevel(Enum):
    """Supported logging levels."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


DEFAULT_CONTENT_DIR = "content"
DEFAULT_OUTPUT_DIR = ".content-build"
DEFAULT_JOBS = 4


@dataclass
class BuildConfig:
    """Complete build configuration."""

    # Core settings
    content_dir: str = DEFAULT_CONTENT_DIR
    output_dir: str = DEFAULT_OUTPUT_DIR
    jobs: int = DEFAULT_JOBS
    log_level: str = LogLevel.INFO.value
    log_file: Optional[str] = None

    # Extra words that no subject, teacher or system article may use as slug
    reserved_slugs: List[str] = field(default_factory=list)

    # YAML component registry replacing the built-in one
    registry_file: Optional[str] = None

    # Treat warnings as errors during validation
    strict: bool = False

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors."""
        errors = []

        if not self.content_dir:
            errors.append("content_dir cannot be empty")

        if not self.output_dir:
            errors.append("output_dir cannot be empty")

        if isinstance(self.jobs, bool) or not isinstance(self.jobs, int) or self.jobs < 1:
            errors.append(f"jobs must be a positive integer, got {self.jobs!r}")

        valid_levels = [level.value for level in LogLevel]
        if self.log_level not in valid_levels:
            errors.append(f"Invalid log_level '{self.log_level}'. Valid options: {valid_levels}")

        if not isinstance(self.reserved_slugs, list) or not all(
            isinstance(slug, str) and slug for slug in self.reserved_slugs
        ):
            errors.append("reserved_slugs must be a list of non-empty strings")

        if self.content_dir and self.output_dir:
            conflict = output_dir_conflict(self.content_dir, self.output_dir)
            if conflict:
                errors.append(conflict)

        return errors


def output_dir_conflict(content_dir, output_dir, cwd=None) -> Optional[str]:
    """Return why output_dir cannot be wiped before a build, or None.

    The output directory is deleted at the start of every build, so it must
    not be the filesystem root, the working directory or one of its parents,
    and it must neither contain nor sit inside the content directory.
    Paths are compared after resolving symlinks and relative parts.
    """
    content = Path(content_dir).resolve()
    output = Path(output_dir).resolve()
    working = Path(cwd if cwd is not None else os.getcwd()).resolve()

    if output == Path(output.anchor):
        return f"output_dir must not be the filesystem root: {output}"
    if output == content:
        return "output_dir must differ from content_dir"
    if output in content.parents:
        return f"output_dir {output} contains content_dir {content}"
    if output == working or output in working.parents:
        return f"output_dir {output} contains the working directory"
    if content in output.parents:
        return f"output_dir {output} is inside content_dir {content}"
    return None
