"""
YAML parser for build configuration files with line-aware error reporting.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from contentbuild.errors import ContentBuildError


class ConfigurationError(ContentBuildError):
    """Invalid configuration file or value, with file and position if known."""

    def __init__(self, message: str, file_path: Optional[Path] = None,
                 line_number: Optional[int] = None, column: Optional[int] = None):
        self.file_path = file_path
        self.line_number = line_number
        self.column = column

        error_parts = [message]

        if file_path:
            error_parts.append(f"File: {file_path}")

        if line_number is not None:
            if column is not None:
                error_parts.append(f"Line {line_number}, Column {column}")
            else:
                error_parts.append(f"Line {line_number}")

        super().__init__(" | ".join(error_parts))


class ConfigurationYAMLParser:
    """Parses configuration YAML into a mapping."""

    def parse_file(self, file_path: Path) -> Dict[str, Any]:
        """
        Parse a YAML configuration file.

        Raises:
            ConfigurationError: If the file cannot be read, is not valid YAML
                or is not a mapping.
        """
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                content = f.read()
        except FileNotFoundError:
            raise ConfigurationError("Configuration file not found", file_path)
        except PermissionError:
            raise ConfigurationError("Permission denied reading configuration file", file_path)
        except UnicodeDecodeError as e:
            raise ConfigurationError(f"File encoding error: {e}", file_path)
        except OSError as e:
            raise ConfigurationError(f"Cannot read configuration file: {e}", file_path)

        return self.parse_string(content, file_path)

    def parse_string(self, yaml_content: str, file_path: Optional[Path] = None) -> Dict[str, Any]:
        """
        Parse YAML configuration from a string.

        Raises:
            ConfigurationError: If the YAML is invalid or not a mapping.
        """
        try:
            content = yaml.safe_load(yaml_content)
        except yaml.YAMLError as e:
            line_number = None
            column = None

            mark = getattr(e, "problem_mark", None)
            if mark is not None:
                # YAML marks are 0-based
                line_number = mark.line + 1
                column = mark.column + 1

            problem = getattr(e, "problem", None)
            message = f"YAML parsing error: {problem or e}"
            raise ConfigurationError(message, file_path, line_number, column)

        if content is None:
            return {}
        if not isinstance(content, dict):
            raise ConfigurationError(
                f"Configuration must be a mapping, got {type(content).__name__}", file_path
            )
        return content
