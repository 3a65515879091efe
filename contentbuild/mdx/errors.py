"""
Document Compilation Errors

DocumentSyntaxError is the one failure presented with a source excerpt,
because markup syntax errors are otherwise hard for authors to locate.
"""

from typing import List, Optional

from contentbuild.errors import ContentBuildError


RULE = "═" * 56


class DocumentSyntaxError(ContentBuildError):
    """Malformed markup in a document body.

    Attributes:
        reason: What went wrong
        file_path: Document path used for reporting
        line: 1-based line in the file (front matter included)
        column: 1-based column
        rule_id: Short rule identifier such as 'unclosed-tag'
    """

    def __init__(
        self,
        reason: str,
        file_path: str = "<unknown>",
        line: Optional[int] = None,
        column: Optional[int] = None,
        rule_id: Optional[str] = None,
    ):
        super().__init__(reason)
        self.reason = reason
        self.file_path = file_path
        self.line = line
        self.column = column
        self.rule_id = rule_id

    def __str__(self) -> str:
        where = self.file_path
        if self.line is not None:
            where += f":{self.line}"
            if self.column is not None:
                where += f":{self.column}"
        return f"{where}: {self.reason}"

    def shifted(self, line_offset: int, file_path: Optional[str] = None) -> "DocumentSyntaxError":
        """Return a copy with line numbers moved by line_offset."""
        return DocumentSyntaxError(
            self.reason,
            file_path=file_path or self.file_path,
            line=self.line + line_offset if self.line is not None else None,
            column=self.column,
            rule_id=self.rule_id,
        )

    def format(self, source: Optional[str] = None) -> str:
        """Pretty-print the error with a source excerpt.

        Args:
            source: Full text of the file the line numbers refer to.
        """
        lines: List[str] = [
            RULE,
            "MDX COMPILATION ERROR",
            RULE,
            f"File:   {self.file_path}",
            f"Line:   {self.line if self.line is not None else '?'}, "
            f"Column: {self.column if self.column is not None else '?'}",
            f"Reason: {self.reason}",
        ]
        if self.rule_id:
            lines.append(f"Rule:   {self.rule_id}")

        if source is not None and self.line is not None and self.line > 0:
            source_lines = source.split("\n")
            start = max(0, self.line - 4)
            end = min(len(source_lines), self.line + 1)
            lines.append("")
            lines.append("Source context:")
            for index in range(start, end):
                number = index + 1
                marker = " >>>" if number == self.line else "    "
                lines.append(f"{marker} {number:>4} | {source_lines[index]}")

        lines.append(RULE)
        return "\n".join(lines)
