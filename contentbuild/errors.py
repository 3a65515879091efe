"""
Content Build Error Hierarchy

Defines the exceptions raised by the build pipeline. Malformed content is
reported as diagnostics, not exceptions; these errors cover conditions the
pipeline cannot recover from.

Error Categories:
- Wiring Errors: a schema or registry is set up incorrectly (programmer error)
- Source Errors: content directory or file cannot be read
- Build Errors: the build collected error diagnostics and was aborted
- Lock Errors: another build owns the output directory
- Output Errors: the output directory is unsafe to delete
"""

from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from contentbuild.validation.report import Diagnostic


class ContentBuildError(Exception):
    """Base exception for all content build errors."""
    pass


class SchemaWiringError(ContentBuildError):
    """A validator was called with something that is not a schema.

    Raised for programmer errors only, never for bad content.
    """
    pass


class ContentSourceError(ContentBuildError):
    """Content could not be read from disk.

    Attributes:
        path: The file or directory that failed
    """

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class BuildFailedError(ContentBuildError):
    """The build collected error diagnostics and stopped.

    Attributes:
        stage: Pipeline stage that aborted the build
        diagnostics: Every diagnostic collected up to that point
        excerpts: Formatted source excerpts of markup syntax errors
    """

    def __init__(
        self,
        stage: str,
        diagnostics: List["Diagnostic"],
        excerpts: Optional[List[str]] = None,
    ):
        self.stage = stage
        self.diagnostics = diagnostics
        self.excerpts = excerpts or []
        errors = [d for d in diagnostics if d.level == "error"]
        super().__init__(f"Build failed during {stage}: {len(errors)} error(s)")

    @property
    def errors(self) -> List["Diagnostic"]:
        return [d for d in self.diagnostics if d.level == "error"]


class BuildLockError(ContentBuildError):
    """Another build is writing to the same output directory.

    Attributes:
        lock_path: Path of the lock file held by the other build
    """

    def __init__(self, lock_path: str):
        super().__init__(
            f"Output directory is locked by another build: {lock_path}. "
            f"Remove the lock file if no build is running."
        )
        self.lock_path = lock_path


class UnsafeOutputError(ContentBuildError):
    """The output directory overlaps the content or working directory.

    Attributes:
        output_dir: The rejected output directory
    """

    def __init__(self, reason: str, output_dir: str):
        super().__init__(f"Refusing to clear output directory: {reason}")
        self.output_dir = output_dir
