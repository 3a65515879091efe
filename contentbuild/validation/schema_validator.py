"""
Schema Validator

Wraps the Pydantic content schemas (subject, teacher, system, front matter)
for validation with field-level error details. Returns Diagnostic lists
instead of raising exceptions; only a broken schema argument raises.
"""

import json
from collections import OrderedDict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from contentbuild.errors import ContentSourceError, SchemaWiringError
from contentbuild.schemas import (
    LOCALES,
    ArticleFrontmatter,
    SubjectConfig,
    SystemConfig,
    TeacherConfig,
)
from contentbuild.utils.error_messages import ErrorCategory, ErrorMessages
from contentbuild.validation.report import (
    CATEGORY_CONFIG,
    CATEGORY_FRONTMATTER,
    Diagnostic,
)


# Schema type constants
SCHEMA_SUBJECT = "subject"
SCHEMA_TEACHER = "teacher"
SCHEMA_SYSTEM = "system"
SCHEMA_ARTICLE = "article"

SCHEMAS: Dict[str, Type[BaseModel]] = {
    SCHEMA_SUBJECT: SubjectConfig,
    SCHEMA_TEACHER: TeacherConfig,
    SCHEMA_SYSTEM: SystemConfig,
    SCHEMA_ARTICLE: ArticleFrontmatter,
}

VALID_SCHEMA_TYPES = list(SCHEMAS)

T = TypeVar("T", bound=BaseModel)


@dataclass
class SchemaResult(Generic[T]):
    """Outcome of validating one configuration object.

    Exactly one of the two is meaningful: value is set when issues is empty.
    """
    value: Optional[T] = None
    issues: List[Diagnostic] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return self.value is not None and not self.issues


def _field_path(loc) -> str:
    return ".".join(str(part) for part in loc) if loc else "root"


def _pydantic_errors_to_issues(
    errors: list,
    category: str,
    label: str,
    file_path: Optional[str],
) -> List[Diagnostic]:
    """Convert Pydantic validation errors to Diagnostic list.

    Missing locales of one localized field are merged into a single
    diagnostic that names every missing locale.
    """
    templates_category = (
        ErrorCategory.FRONTMATTER if category == CATEGORY_FRONTMATTER else ErrorCategory.CONFIG
    )
    missing_locales: "OrderedDict[str, List[str]]" = OrderedDict()
    issues: List[Diagnostic] = []

    for err in errors:
        loc = tuple(err.get("loc") or ())
        if err.get("type") == "missing" and loc and loc[-1] in LOCALES:
            missing_locales.setdefault(_field_path(loc[:-1]), []).append(str(loc[-1]))
            continue

        field_path = _field_path(loc)
        message, suggestion = ErrorMessages.format_message(
            templates_category, "schema_field",
            field=field_path, error=f"{err['msg']} (type={err['type']})", label=label,
        )
        issues.append(Diagnostic(
            level="error",
            category=category,
            message=message,
            file_path=file_path,
            field=field_path,
            suggestion=suggestion,
        ))

    for field_path, locales in missing_locales.items():
        message, suggestion = ErrorMessages.format_message(
            ErrorCategory.CONFIG, "missing_locales",
            field=field_path, locales=", ".join(locales), supported=", ".join(LOCALES),
        )
        if category == CATEGORY_FRONTMATTER:
            message = f"Frontmatter: {message}"
        issues.append(Diagnostic(
            level="error",
            category=category,
            message=message,
            file_path=file_path,
            field=field_path,
            suggestion=suggestion,
        ))

    return issues


def validate_config(
    data: Any,
    model: Type[T],
    file_path: Optional[str] = None,
    category: str = CATEGORY_CONFIG,
    label: Optional[str] = None,
) -> SchemaResult[T]:
    """Validate parsed data against a content schema.

    Args:
        data: Parsed JSON/YAML data.
        model: Pydantic model class to validate against.
        file_path: Source file, attached to every diagnostic.
        category: Diagnostic category ('config' or 'frontmatter').
        label: Name of the file in messages (defaults to file_path).

    Returns:
        SchemaResult with either the typed value or all issues found.

    Raises:
        SchemaWiringError: If model is not a Pydantic model class.
    """
    if not (isinstance(model, type) and issubclass(model, BaseModel)):
        raise SchemaWiringError(f"Not a schema model: {model!r}")

    label = label or file_path or "config"

    if not isinstance(data, dict):
        return SchemaResult(issues=[Diagnostic(
            level="error",
            category=category,
            message=f"Expected an object, got {type(data).__name__}",
            file_path=file_path,
            field="root",
        )])

    try:
        value = model.model_validate(data)
    except ValidationError as e:
        return SchemaResult(
            issues=_pydantic_errors_to_issues(e.errors(), category, label, file_path)
        )
    return SchemaResult(value=value)


def validate_by_schema(
    data: Dict[str, Any],
    schema_type: str,
    file_path: Optional[str] = None,
) -> SchemaResult:
    """Validate data against the named schema type.

    Args:
        data: Parsed data.
        schema_type: One of 'subject', 'teacher', 'system', 'article'.
        file_path: Source file for diagnostics.

    Raises:
        SchemaWiringError: If schema_type is unknown.
    """
    if schema_type not in SCHEMAS:
        raise SchemaWiringError(
            f"Unknown schema type: {schema_type}. "
            f"Valid types: {VALID_SCHEMA_TYPES}"
        )
    category = CATEGORY_FRONTMATTER if schema_type == SCHEMA_ARTICLE else CATEGORY_CONFIG
    return validate_config(data, SCHEMAS[schema_type], file_path=file_path, category=category)


def load_json_config(
    path: Path,
    model: Type[T],
    label: Optional[str] = None,
) -> SchemaResult[T]:
    """Read a config.json file and validate it.

    A missing file or invalid JSON is reported as a diagnostic.

    Raises:
        ContentSourceError: If the file exists but cannot be read.
    """
    path = Path(path)
    label = label or path.name
    file_path = str(path)

    if not path.is_file():
        message, suggestion = ErrorMessages.format_message(
            ErrorCategory.CONFIG, "file_missing", label=label, path=file_path
        )
        return SchemaResult(issues=[Diagnostic(
            level="error", category=CATEGORY_CONFIG, message=message,
            file_path=file_path, suggestion=suggestion,
        )])

    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ContentSourceError(f"Cannot read {file_path}: {e}", path=file_path) from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        message, suggestion = ErrorMessages.format_message(
            ErrorCategory.CONFIG, "invalid_json", label=label, error=e.msg
        )
        return SchemaResult(issues=[Diagnostic(
            level="error", category=CATEGORY_CONFIG, message=message,
            file_path=file_path, line=e.lineno, column=e.colno, suggestion=suggestion,
        )])

    return validate_config(data, model, file_path=file_path, label=label)
