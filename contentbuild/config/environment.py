"""
Environment variable integration for the build configuration.

Centralizes the environment variable names the configuration manager reads,
with documentation and validation of their values.
"""

import os
from typing import Dict, List

from contentbuild.config.schema import LogLevel


class EnvironmentVariables:
    """Centralized environment variable definitions and utilities."""

    CONTENT_DIR = "CONTENT_BUILD_CONTENT_DIR"
    OUTPUT_DIR = "CONTENT_BUILD_OUTPUT_DIR"
    JOBS = "CONTENT_BUILD_JOBS"
    LOG_LEVEL = "CONTENT_BUILD_LOG_LEVEL"

    @classmethod
    def get_all_variables(cls) -> List[str]:
        """Get list of all supported environment variables."""
        return [cls.CONTENT_DIR, cls.OUTPUT_DIR, cls.JOBS, cls.LOG_LEVEL]

    @classmethod
    def get_variable_documentation(cls) -> Dict[str, str]:
        """Get documentation for all environment variables."""
        return {
            cls.CONTENT_DIR: "Root of the content tree (subjects/, teachers/, system/)",
            cls.OUTPUT_DIR: "Directory the build writes to (deleted and recreated on every build)",
            cls.JOBS: "Number of parallel compile workers",
            cls.LOG_LEVEL: "Default logging level (debug, info, warning, error)",
        }

    @classmethod
    def validate_environment_setup(cls) -> List[str]:
        """Validate current environment variable values.

        Returns:
            List of errors for invalid values.
        """
        errors = []

        jobs = os.environ.get(cls.JOBS)
        if jobs is not None:
            try:
                if int(jobs) < 1:
                    raise ValueError
            except ValueError:
                errors.append(f"Invalid {cls.JOBS}: '{jobs}'. Expected a positive integer")

        log_level = os.environ.get(cls.LOG_LEVEL)
        if log_level:
            valid = [level.value for level in LogLevel]
            if log_level not in valid:
                errors.append(f"Invalid {cls.LOG_LEVEL}: '{log_level}'. "
                              f"Valid options: {', '.join(valid)}")

        return errors
