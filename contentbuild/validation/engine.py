"""
Validation Engine

Validates content repositories without producing build output. Handles the
four repository layouts (single subject, single teacher, unified teachers
repo, system articles) and the bare articles/ tree, and returns one
ValidationReport per run. validate_document() is also used by the build
orchestrator so both commands judge a document the same way.
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from contentbuild.errors import ContentSourceError
from contentbuild.mdx.compiler import CompileResult, compile_document
from contentbuild.mdx.errors import DocumentSyntaxError
from contentbuild.mdx.frontmatter import FrontmatterError, split_document
from contentbuild.mdx.registry import ComponentRegistry
from contentbuild.schemas import (
    FRONT_SLUG,
    LOCALES,
    ArticleFrontmatter,
    SubjectConfig,
    SystemConfig,
    TeacherConfig,
)
from contentbuild.utils.error_messages import ErrorCategory, ErrorMessages
from contentbuild.validation.report import (
    CATEGORY_FRONTMATTER,
    CATEGORY_STRUCTURE,
    CATEGORY_SYNTAX,
    Diagnostic,
    ValidationReport,
    has_errors,
)
from contentbuild.validation.schema_validator import load_json_config, validate_config


logger = logging.getLogger(__name__)

# Content types accepted by validate()
TYPE_SUBJECT = "subject"
TYPE_TEACHER = "teacher"
TYPE_TEACHERS = "teachers"
TYPE_SYSTEM = "system"
TYPE_ARTICLES = "articles"

VALID_CONTENT_TYPES = [TYPE_SUBJECT, TYPE_TEACHER, TYPE_TEACHERS, TYPE_SYSTEM]

# Directories never treated as teacher directories in a unified repo
SKIP_DIRS = {"node_modules", "scripts", ".github", ".git", "dist", ".cursor"}

DOCUMENT_SUFFIX = ".mdx"


@dataclass
class DocumentValidation:
    """Outcome of validating one document.

    Attributes:
        file_path: Document path used in diagnostics
        diagnostics: All findings for the document
        frontmatter: Validated front matter, or None if it failed
        compiled: Compile output, or None if compilation did not run or failed
        syntax_error: The markup error, if compilation failed on one
    """
    file_path: str
    diagnostics: List[Diagnostic] = field(default_factory=list)
    frontmatter: Optional[ArticleFrontmatter] = None
    compiled: Optional[CompileResult] = None
    syntax_error: Optional[DocumentSyntaxError] = None

    @property
    def is_valid(self) -> bool:
        return not any(d.is_error for d in self.diagnostics)


def read_document(path: Path) -> str:
    """Read a document as UTF-8.

    Raises:
        ContentSourceError: If the file cannot be read or decoded.
    """
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ContentSourceError(f"Cannot read {path}: {e}", path=str(path)) from e


def list_documents(locale_dir: Path) -> List[Path]:
    """Sorted .mdx files directly inside a locale directory."""
    if not locale_dir.is_dir():
        return []
    return sorted(
        p for p in locale_dir.iterdir()
        if p.is_file() and p.suffix == DOCUMENT_SUFFIX
    )


def find_entity_dirs(root: Path) -> List[Path]:
    """Sub-directories of root that hold a config.json, sorted by name."""
    if not root.is_dir():
        return []
    found = []
    for entry in sorted(root.iterdir(), key=lambda p: p.name):
        if entry.name in SKIP_DIRS or entry.name.startswith("."):
            continue
        if entry.is_dir() and (entry / "config.json").is_file():
            found.append(entry)
    return found


class ValidationEngine:
    """Validates content repositories and single documents.

    Example:
        >>> engine = ValidationEngine()
        >>> report = engine.validate("content/subjects/algebra", "subject")
        >>> report.is_valid
        True
    """

    def __init__(self, strict: bool = False, registry: Optional[ComponentRegistry] = None):
        """Initialize the validation engine.

        Args:
            strict: If True, warnings are treated as errors.
            registry: Component contracts; defaults to the built-in registry.
        """
        self.strict = strict
        self.registry = registry

    # -- single document -------------------------------------------------

    def validate_document(
        self,
        source: str,
        file_path: str,
        compile_document_body: bool = True,
    ) -> DocumentValidation:
        """Validate one document.

        Performs front matter parsing and schema validation, the slug and
        filename check, a trial compilation and the component contract
        check. Never raises for bad content.
        """
        result = DocumentValidation(file_path=file_path)

        try:
            metadata = split_document(source).metadata
        except FrontmatterError as e:
            message, suggestion = ErrorMessages.format_message(
                ErrorCategory.FRONTMATTER, "unparseable", error=str(e)
            )
            result.diagnostics.append(Diagnostic(
                level="error", category=CATEGORY_FRONTMATTER, message=message,
                file_path=file_path, suggestion=suggestion,
            ))
            return result

        schema = validate_config(
            metadata, ArticleFrontmatter, file_path=file_path,
            category=CATEGORY_FRONTMATTER, label=Path(file_path).name,
        )
        result.diagnostics.extend(schema.issues)
        result.frontmatter = schema.value

        stem = Path(file_path).stem
        if schema.value is not None and stem != FRONT_SLUG and schema.value.slug != stem:
            message, suggestion = ErrorMessages.format_message(
                ErrorCategory.STRUCTURE, "slug_mismatch", slug=schema.value.slug, stem=stem
            )
            result.diagnostics.append(Diagnostic(
                level="error", category=CATEGORY_STRUCTURE, message=message,
                file_path=file_path, field="slug", rule_id="slug-mismatch",
                suggestion=suggestion,
            ))

        if not compile_document_body:
            return result

        try:
            compiled = compile_document(source, file_path=file_path, registry=self.registry)
        except DocumentSyntaxError as e:
            message, suggestion = ErrorMessages.format_message(
                ErrorCategory.SYNTAX, "compile_failed", reason=e.reason, line=e.line
            )
            result.syntax_error = e
            result.diagnostics.append(Diagnostic(
                level="error", category=CATEGORY_SYNTAX, message=message,
                file_path=file_path, line=e.line, column=e.column,
                rule_id=e.rule_id, suggestion=suggestion,
            ))
            return result

        result.compiled = compiled
        result.diagnostics.extend(compiled.diagnostics)
        return result

    def validate_file(self, path: Path) -> DocumentValidation:
        path = Path(path)
        return self.validate_document(read_document(path), str(path))

    # -- directories -----------------------------------------------------

    def validate_articles_dir(self, articles_dir: Path) -> Tuple[List[Diagnostic], int]:
        """Validate every document under articles/<locale>/.

        Returns:
            Tuple of (diagnostics, number of documents checked).
        """
        articles_dir = Path(articles_dir)
        issues: List[Diagnostic] = []
        checked = 0
        for locale in LOCALES:
            for path in list_documents(articles_dir / locale):
                checked += 1
                document = self.validate_file(path)
                issues.extend(document.diagnostics)
        return issues, checked

    def check_front_documents(self, articles_dir: Path) -> List[Diagnostic]:
        """Warn about present locale directories without a _front document."""
        issues: List[Diagnostic] = []
        for locale in LOCALES:
            locale_dir = Path(articles_dir) / locale
            if locale_dir.is_dir() and not (locale_dir / f"{FRONT_SLUG}{DOCUMENT_SUFFIX}").is_file():
                message, suggestion = ErrorMessages.format_message(
                    ErrorCategory.STRUCTURE, "front_missing", locale=locale
                )
                issues.append(Diagnostic(
                    level="warning", category=CATEGORY_STRUCTURE, message=message,
                    file_path=str(locale_dir), rule_id="front-missing", suggestion=suggestion,
                ))
        return issues

    def _missing_articles_dir(self, articles_dir: Path) -> Diagnostic:
        message, suggestion = ErrorMessages.format_message(
            ErrorCategory.STRUCTURE, "articles_dir_missing", path=str(articles_dir)
        )
        return Diagnostic(
            level="error", category=CATEGORY_STRUCTURE, message=message,
            file_path=str(articles_dir), suggestion=suggestion,
        )

    def _validate_entity(self, root: Path, model, label: str) -> Tuple[List[Diagnostic], int]:
        """Config plus articles of one subject or teacher directory."""
        issues = list(load_json_config(root / "config.json", model, label=label).issues)

        articles_dir = root / "articles"
        if not articles_dir.is_dir():
            issues.append(self._missing_articles_dir(articles_dir))
            return issues, 0

        issues.extend(self.check_front_documents(articles_dir))
        article_issues, checked = self.validate_articles_dir(articles_dir)
        issues.extend(article_issues)
        return issues, checked

    def validate_subject(self, root: Path) -> Tuple[List[Diagnostic], int]:
        return self._validate_entity(Path(root), SubjectConfig, "config.json")

    def validate_teacher(self, root: Path) -> Tuple[List[Diagnostic], int]:
        return self._validate_entity(Path(root), TeacherConfig, "config.json")

    def validate_teachers(self, root: Path) -> Tuple[List[Diagnostic], int]:
        """Unified teachers repo: every sub-directory holding a config.json."""
        root = Path(root)
        teacher_dirs = find_entity_dirs(root)
        if not teacher_dirs:
            message, suggestion = ErrorMessages.format_message(
                ErrorCategory.STRUCTURE, "no_entities", kind="teacher"
            )
            return [Diagnostic(
                level="error", category=CATEGORY_STRUCTURE, message=message,
                file_path=str(root), suggestion=suggestion,
            )], 0

        logger.info(
            f"Found {len(teacher_dirs)} teacher(s): {', '.join(d.name for d in teacher_dirs)}"
        )
        issues: List[Diagnostic] = []
        checked = 0
        for teacher_dir in teacher_dirs:
            teacher_issues, teacher_checked = self._validate_entity(
                teacher_dir, TeacherConfig, f"{teacher_dir.name}/config.json"
            )
            issues.extend(teacher_issues)
            checked += teacher_checked
        return issues, checked

    def validate_system(self, root: Path) -> Tuple[List[Diagnostic], int]:
        """System repo: config plus articles; _front documents are not expected."""
        root = Path(root)
        issues = list(load_json_config(root / "config.json", SystemConfig, label="config.json").issues)

        articles_dir = root / "articles"
        if not articles_dir.is_dir():
            issues.append(self._missing_articles_dir(articles_dir))
            return issues, 0

        if not any((articles_dir / locale).is_dir() for locale in LOCALES):
            message, suggestion = ErrorMessages.format_message(
                ErrorCategory.STRUCTURE, "no_locales", supported="{" + ",".join(LOCALES) + "}"
            )
            issues.append(Diagnostic(
                level="error", category=CATEGORY_STRUCTURE, message=message,
                file_path=str(articles_dir), rule_id="no-locales", suggestion=suggestion,
            ))

        article_issues, checked = self.validate_articles_dir(articles_dir)
        issues.extend(article_issues)
        return issues, checked

    def validate_articles(self, root: Path) -> Tuple[List[Diagnostic], int]:
        """Bare mode: only the documents under root/articles."""
        articles_dir = Path(root) / "articles"
        if not articles_dir.is_dir():
            return [self._missing_articles_dir(articles_dir)], 0
        return self.validate_articles_dir(articles_dir)

    # -- entry point -----------------------------------------------------

    def validate(self, root: Path, content_type: Optional[str] = None) -> ValidationReport:
        """Validate a content directory.

        Args:
            root: Directory to validate.
            content_type: 'subject', 'teacher', 'teachers', 'system', or
                None to validate only root/articles.

        Returns:
            ValidationReport with all issues found.

        Raises:
            ValueError: If content_type is not recognised.
        """
        handlers: Dict[Optional[str], Callable[[Path], Tuple[List[Diagnostic], int]]] = {
            None: self.validate_articles,
            TYPE_SUBJECT: self.validate_subject,
            TYPE_TEACHER: self.validate_teacher,
            TYPE_TEACHERS: self.validate_teachers,
            TYPE_SYSTEM: self.validate_system,
        }
        if content_type not in handlers:
            raise ValueError(
                f"Unknown content type: {content_type}. Valid types: {VALID_CONTENT_TYPES}"
            )

        start = time.time()
        issues, checked = handlers[content_type](Path(root))

        has_warnings = any(i.level == "warning" for i in issues)
        is_valid = not has_errors(issues) and (not self.strict or not has_warnings)

        elapsed_ms = int((time.time() - start) * 1000)
        return ValidationReport(
            target=str(root),
            content_type=content_type or TYPE_ARTICLES,
            is_valid=is_valid,
            issues=issues,
            checked_files=checked,
            duration_ms=elapsed_ms,
        )
