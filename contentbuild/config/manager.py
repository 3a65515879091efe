"""
Configuration Manager for the content build.

Loads and merges configuration from multiple sources:
- System defaults
- Project configuration (./.content-build.yaml)
- Explicit configuration (--config file.yaml)
- Environment variables
- CLI arguments (highest precedence)
"""

import dataclasses
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from contentbuild.config.environment import EnvironmentVariables
from contentbuild.config.schema import BuildConfig
from contentbuild.config.yaml_parser import ConfigurationError, ConfigurationYAMLParser


logger = logging.getLogger(__name__)

PROJECT_CONFIG_NAME = ".content-build.yaml"


class ConfigurationManager:
    """Manages configuration loading, validation, and environment variable integration."""

    def __init__(self, project_dir: Optional[Path] = None):
        self.project_config_path = Path(project_dir or Path.cwd()) / PROJECT_CONFIG_NAME
        self.yaml_parser = ConfigurationYAMLParser()

    def load_configuration(self,
                           config_file: Optional[str] = None,
                           cli_overrides: Optional[Dict[str, Any]] = None) -> BuildConfig:
        """
        Load configuration from all sources with proper precedence.

        Precedence order (highest to lowest):
        1. CLI arguments (cli_overrides; None values are ignored)
        2. Environment variables
        3. Explicit config file (--config)
        4. Project config (./.content-build.yaml)
        5. System defaults

        Args:
            config_file: Optional explicit configuration file path
            cli_overrides: Dictionary of CLI argument overrides

        Returns:
            BuildConfig: Merged and validated configuration

        Raises:
            ConfigurationError: If a file is not valid YAML or a value is invalid
        """
        config_dict = self._get_default_config()

        if self.project_config_path.exists():
            logger.debug(f"Loading project configuration {self.project_config_path}")
            config_dict = self._merge_configs(
                config_dict, self._load_yaml_file(self.project_config_path)
            )

        if config_file:
            logger.debug(f"Loading configuration {config_file}")
            config_dict = self._merge_configs(config_dict, self._load_yaml_file(Path(config_file)))

        config_dict = self._merge_configs(config_dict, self._load_environment_variables())

        if cli_overrides:
            overrides = {k: v for k, v in cli_overrides.items() if v is not None}
            config_dict = self._merge_configs(config_dict, overrides)

        config = self._dict_to_config(config_dict)
        errors = self.validate_configuration(config)
        if errors:
            raise ConfigurationError(
                "Invalid configuration:\n" + "\n".join(f"  - {error}" for error in errors)
            )
        return config

    def validate_configuration(self, config: BuildConfig) -> List[str]:
        """Validate configuration and return any errors."""
        return config.validate()

    def _get_default_config(self) -> Dict[str, Any]:
        """Get system default configuration values."""
        return dataclasses.asdict(BuildConfig())

    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        config_dict = self.yaml_parser.parse_file(file_path)

        known = {f.name for f in dataclasses.fields(BuildConfig)}
        unknown = sorted(set(config_dict) - known)
        if unknown:
            raise ConfigurationError(
                f"Unknown configuration key(s): {', '.join(unknown)}. "
                f"Valid keys: {', '.join(sorted(known))}",
                file_path,
            )
        return config_dict

    def _load_environment_variables(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        env_config: Dict[str, Any] = {}
        env_vars = EnvironmentVariables

        if env_vars.CONTENT_DIR in os.environ:
            env_config["content_dir"] = os.environ[env_vars.CONTENT_DIR]

        if env_vars.OUTPUT_DIR in os.environ:
            env_config["output_dir"] = os.environ[env_vars.OUTPUT_DIR]

        if env_vars.JOBS in os.environ:
            raw = os.environ[env_vars.JOBS]
            try:
                env_config["jobs"] = int(raw)
            except ValueError:
                raise ConfigurationError(
                    f"Invalid {env_vars.JOBS}: '{raw}'. Expected a positive integer"
                )

        if env_vars.LOG_LEVEL in os.environ:
            env_config["log_level"] = os.environ[env_vars.LOG_LEVEL].lower()

        return env_config

    def _merge_configs(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Merge configuration dictionaries; override wins key by key."""
        result = base.copy()
        result.update(override)
        return result

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> BuildConfig:
        """Convert configuration dictionary to BuildConfig object."""
        reserved = config_dict.get("reserved_slugs") or []
        return BuildConfig(
            content_dir=str(config_dict["content_dir"]),
            output_dir=str(config_dict["output_dir"]),
            jobs=config_dict["jobs"],
            log_level=str(config_dict["log_level"]).lower(),
            log_file=config_dict.get("log_file"),
            reserved_slugs=list(reserved) if isinstance(reserved, (list, tuple)) else reserved,
            registry_file=config_dict.get("registry_file"),
            strict=bool(config_dict.get("strict", False)),
        )
