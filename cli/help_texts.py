"""
Centralized Help Text Constants

This module provides all CLI help text constants for commands and options,
ensuring consistency across subcommands and enabling easy maintenance.
"""

# Exit codes for different error types
class ExitCodes:
    SUCCESS = 0
    VALIDATION_FAILED = 1
    USAGE_ERROR = 2

# Command help texts
VALIDATE_HELP = "Validate a content repository without writing build output."
BUILD_HELP = "Build the content tree into compiled documents, search indexes and a manifest."
ROUTES_HELP = "Check the global slug namespace and print the route table."

# Option help texts - validate command
VALIDATE_TYPE_HELP = (
    "Repository layout:\n"
    "  subject: single subject (config.json + articles/)\n"
    "  teacher: single teacher directory (config.json + articles/)\n"
    "  teachers: unified teachers repo (one directory with config.json per teacher)\n"
    "  system: system articles (config.json with articles array + articles/)\n"
    "Without --type only the documents under DIR/articles are validated."
)

VALIDATE_STRICT_HELP = "Fail on warnings in addition to errors"

VALIDATE_REPORT_HELP = "Write a JSON report to this path"

# Shared option help texts
CONTENT_DIR_HELP = (
    "Root of the content tree holding subjects/, teachers/ and system/. "
    "Overrides configuration (default: ./content)."
)

OUTPUT_DIR_HELP = (
    "Build output directory. It is deleted and recreated on every build "
    "(default: ./.content-build)."
)

JOBS_HELP = "Number of documents compiled in parallel (default: 4)"

CONFIG_HELP = (
    "Path to configuration file (.yaml). Settings are merged in this order:\n"
    "  1. Built-in defaults\n"
    "  2. ./.content-build.yaml (project config)\n"
    "  3. --config file\n"
    "  4. CONTENT_BUILD_* environment variables\n"
    "  5. Command line options"
)

REGISTRY_HELP = "YAML component registry to validate components against instead of the built-in one"

LOG_LEVEL_HELP = "Logging level for detailed output. Use DEBUG for troubleshooting."

LOG_FILE_HELP = "Also write log output to this file (rotated at 10MB)"

# Error messages
BUILD_FAILED_ERROR = "✗ Build failed during {stage}: {count} error(s)"
CONFIG_ERROR = "Configuration error: {error}"
REGISTRY_ERROR = "Component registry error: {error}"
