"""
Validation Report Data Models

Defines Diagnostic and ValidationReport dataclasses used across the
validator, compiler and build stages for structured error/warning reporting.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, List, Literal, Optional


Level = Literal["error", "warning", "info"]

# Diagnostic categories
CATEGORY_CONFIG = "config"
CATEGORY_FRONTMATTER = "frontmatter"
CATEGORY_STRUCTURE = "structure"
CATEGORY_SYNTAX = "mdx-syntax"
CATEGORY_COMPONENT = "component"
CATEGORY_RELATIONSHIP = "relationship"


@dataclass
class Diagnostic:
    """A single problem found while validating or building content.

    Attributes:
        level: Severity level (error, warning, info)
        category: Short tag such as 'frontmatter' or 'component'
        message: Human-readable description of the issue
        file_path: File the issue was found in, if known
        line: 1-based line number, if known
        column: 1-based column number, if known
        field: Field path inside a config or front matter, if any
        rule_id: Machine-readable rule name, if any
        suggestion: Optional suggestion for fixing the issue
    """
    level: Level
    category: str
    message: str
    file_path: Optional[str] = None
    line: Optional[int] = None
    column: Optional[int] = None
    field: Optional[str] = None
    rule_id: Optional[str] = None
    suggestion: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.level == "error"

    def location(self) -> str:
        """Return 'path:line:column' with whatever parts are known."""
        parts = [self.file_path or "<unknown>"]
        if self.line is not None:
            parts.append(str(self.line))
            if self.column is not None:
                parts.append(str(self.column))
        return ":".join(parts)

    def sort_key(self):
        return (
            self.file_path or "",
            self.line or 0,
            self.column or 0,
            self.category,
            self.message,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        d = {"level": self.level, "category": self.category, "message": self.message}
        for key in ("file_path", "line", "column", "field", "rule_id", "suggestion"):
            value = getattr(self, key)
            if value is not None:
                d[key] = value
        return d

    def format_human(self) -> str:
        """Format as a single console line (plus suggestion line)."""
        if self.level == "error":
            prefix = "❌"
        elif self.level == "warning":
            prefix = "⚠"
        else:
            prefix = "ℹ"
        where = f"[{self.field}] " if self.field else ""
        text = f"{prefix} {self.location()} {self.category}: {where}{self.message}"
        if self.suggestion:
            text += f"\n      → {self.suggestion}"
        return text


def sort_diagnostics(diagnostics: Iterable[Diagnostic]) -> List[Diagnostic]:
    """Order diagnostics by file path, then position."""
    return sorted(diagnostics, key=lambda d: d.sort_key())


def has_errors(diagnostics: Iterable[Diagnostic]) -> bool:
    return any(d.level == "error" for d in diagnostics)


@dataclass
class ValidationReport:
    """Structured report from a validation run.

    Attributes:
        target: Path of the validated file or directory
        content_type: Content type (subject, teacher, teachers, system, articles)
        is_valid: Whether the target passed validation
        issues: List of diagnostics found
        checked_files: Number of documents checked
        timestamp: When validation was performed (UTC)
        duration_ms: How long validation took in milliseconds
    """
    target: str
    content_type: str
    is_valid: bool
    issues: List[Diagnostic] = field(default_factory=list)
    checked_files: int = 0
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    duration_ms: int = 0

    @property
    def errors(self) -> List[Diagnostic]:
        return [i for i in self.issues if i.level == "error"]

    @property
    def warnings(self) -> List[Diagnostic]:
        return [i for i in self.issues if i.level == "warning"]

    @property
    def infos(self) -> List[Diagnostic]:
        return [i for i in self.issues if i.level == "info"]

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "target": self.target,
            "content_type": self.content_type,
            "is_valid": self.is_valid,
            "checked_files": self.checked_files,
            "issues": [i.to_dict() for i in self.issues],
            "timestamp": self.timestamp,
            "duration_ms": self.duration_ms,
            "summary": {
                "errors": len(self.errors),
                "warnings": len(self.warnings),
                "infos": len(self.infos),
            },
        }

    def to_json(self, indent: int = 2) -> str:
        """Serialize report to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def format_human(self) -> str:
        """Format report for human-readable console output."""
        if self.is_valid and not self.warnings:
            icon = "✅"
            status = "Valid"
        elif self.is_valid and self.warnings:
            icon = "✅"
            status = "Valid (with warnings)"
        else:
            icon = "❌"
            status = "Failed"

        lines = [
            f"{icon} {self.target}: {status} ({self.content_type}, "
            f"{self.checked_files} file(s))"
        ]
        for issue in self.issues:
            lines.append("  " + issue.format_human())
        return "\n".join(lines)
