"""
Validation Module for the Content Build

Provides diagnostics and reports, schema validation of configuration files
and front matter, and the repository validation engine
(contentbuild.validation.engine).
"""

from contentbuild.validation.report import Diagnostic, ValidationReport
from contentbuild.validation.schema_validator import (
    SchemaResult,
    load_json_config,
    validate_config,
)

__all__ = [
    "Diagnostic",
    "ValidationReport",
    "SchemaResult",
    "load_json_config",
    "validate_config",
]
