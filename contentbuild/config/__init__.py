"""
Build configuration: schema, environment variables and the layered
configuration manager.
"""

from contentbuild.config.environment import EnvironmentVariables
from contentbuild.config.manager import ConfigurationManager
from contentbuild.config.schema import BuildConfig, LogLevel
from contentbuild.config.yaml_parser import ConfigurationError, ConfigurationYAMLParser

__all__ = [
    "BuildConfig",
    "LogLevel",
    "ConfigurationManager",
    "ConfigurationError",
    "ConfigurationYAMLParser",
    "EnvironmentVariables",
]
