"""
Document Parser

Splits an MDX-style document body into a tree of Markdown text segments and
JSX-style elements:

    Some **markdown**.

    <Quiz>
      <Question text="2 + 2?">
        <Option value="4" correct />
      </Question>
    </Quiz>

Tags inside fenced code blocks, inline code spans and $...$ / $$...$$ math
are left alone, and a '<' that does not start a tag is plain text. {/* ... */} comments are
dropped. Malformed markup raises DocumentSyntaxError with the line and
column of the problem.
"""

import bisect
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from contentbuild.mdx.errors import DocumentSyntaxError


ATTR_STRING = "string"
ATTR_EXPRESSION = "expression"
ATTR_FLAG = "flag"

_TAG_NAME = re.compile(r"[A-Za-z][A-Za-z0-9_.-]*")
_ATTR_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_:.-]*")
_FENCE_OPEN = re.compile(r"[ \t]*(`{3,}|~{3,})")
_NUMBER = re.compile(r"-?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_LITERAL_STRING = re.compile(r"""^(?:"([^"\\]*)"|'([^'\\]*)'|`([^`\\$]*)`)$""")


@dataclass
class Attribute:
    """An attribute on an element.

    Attributes:
        name: Attribute name
        kind: 'string' ("x"), 'expression' ({...}) or 'flag' (bare name)
        raw: Source text of the value ('' for flags)
        value: Python value: str for strings, True for flags, the literal
            value for literal expressions, None for other expressions
    """
    name: str
    kind: str
    raw: str = ""
    value: Any = None

    @property
    def is_literal(self) -> bool:
        return self.kind != ATTR_EXPRESSION or self.value is not None

    def to_prop(self) -> Any:
        """JSON form of the value for the render tree."""
        if self.kind == ATTR_EXPRESSION and not self.is_literal:
            return {"$expression": self.raw}
        return self.value


@dataclass
class MarkdownNode:
    text: str
    line: int
    column: int


@dataclass
class ElementNode:
    name: str
    attributes: List[Attribute] = field(default_factory=list)
    children: List["Node"] = field(default_factory=list)
    line: int = 1
    column: int = 1
    self_closing: bool = False
    inline: bool = False

    @property
    def is_component(self) -> bool:
        """PascalCase names are custom components; lowercase are plain HTML."""
        return self.name[:1].isupper()

    def attribute_map(self) -> Dict[str, Attribute]:
        return {attr.name: attr for attr in self.attributes}

    def has_content(self) -> bool:
        for child in self.children:
            if isinstance(child, ElementNode) or child.text.strip():
                return True
        return False


Node = Union[MarkdownNode, ElementNode]


@dataclass
class DocumentTree:
    children: List[Node] = field(default_factory=list)

    def walk(self):
        """Yield (node, ancestors) depth-first in document order."""
        stack = [(child, ()) for child in reversed(self.children)]
        while stack:
            node, ancestors = stack.pop()
            yield node, ancestors
            if isinstance(node, ElementNode):
                inner = ancestors + (node,)
                stack.extend((child, inner) for child in reversed(node.children))


def literal_value(raw: str) -> Any:
    """Evaluate a literal JSX expression; None when it is not a literal."""
    text = raw.strip()
    if text == "true":
        return True
    if text == "false":
        return False
    if _NUMBER.fullmatch(text):
        number = float(text)
        return int(number) if number.is_integer() and re.fullmatch(r"-?\d+", text) else number
    match = _LITERAL_STRING.match(text)
    if match:
        return next(group for group in match.groups() if group is not None)
    return None


class _Scanner:
    """Single-use scanner over one document body."""

    def __init__(self, text: str, file_path: str):
        self.text = text
        self.file_path = file_path
        self.length = len(text)
        self._line_starts = [0] + [m.end() for m in re.finditer(r"\n", text)]

    # -- positions -------------------------------------------------------

    def position(self, index: int):
        line = bisect.bisect_right(self._line_starts, index)
        column = index - self._line_starts[line - 1] + 1
        return line, column

    def error(self, reason: str, index: int, rule_id: str) -> DocumentSyntaxError:
        line, column = self.position(index)
        return DocumentSyntaxError(
            reason, file_path=self.file_path, line=line, column=column, rule_id=rule_id
        )

    def at_line_start(self, index: int) -> bool:
        return index == 0 or self.text[index - 1] == "\n"

    def starts_line(self, index: int) -> bool:
        """True if only whitespace precedes index on its line."""
        line, _ = self.position(index)
        start = self._line_starts[line - 1]
        return self.text[start:index].strip() == ""

    # -- skipping --------------------------------------------------------

    def skip_fence(self, index: int) -> int:
        """If a code fence opens at index, return the index after it closes."""
        match = _FENCE_OPEN.match(self.text, index)
        if not match:
            return index
        fence = match.group(1)
        line_end = self.text.find("\n", index)
        if line_end == -1:
            return self.length
        closing = re.compile(
            r"^[ \t]*" + re.escape(fence[0]) + "{" + str(len(fence)) + r",}[ \t]*$",
            re.MULTILINE,
        )
        close = closing.search(self.text, line_end + 1)
        if not close:
            return self.length
        return close.end()

    def skip_code_span(self, index: int) -> int:
        run_end = index
        while run_end < self.length and self.text[run_end] == "`":
            run_end += 1
        run = self.text[index:run_end]
        search_from = run_end
        while True:
            found = self.text.find(run, search_from)
            if found == -1:
                return run_end
            after = found + len(run)
            if after < self.length and self.text[after] == "`":
                search_from = after
                while search_from < self.length and self.text[search_from] == "`":
                    search_from += 1
                continue
            return after

    def skip_math(self, index: int) -> int:
        """Return the index after a $...$ or $$...$$ span starting at index.

        An unmatched dollar sign is plain text. Inline spans stop at a blank line.
        """
        delimiter = "$$" if self.text.startswith("$$", index) else "$"
        start = index + len(delimiter)
        end = self.text.find(delimiter, start)
        while end != -1 and self.text[end - 1] == "\\":
            end = self.text.find(delimiter, end + 1)
        if end == -1 or (delimiter == "$" and "\n\n" in self.text[start:end]):
            return start
        return end + len(delimiter)

    def scan_expression(self, index: int) -> int:
        """Return the index after the '}' matching the '{' at index."""
        depth = 0
        i = index
        while i < self.length:
            char = self.text[i]
            if char in "\"'`":
                end = self.text.find(char, i + 1)
                if end == -1:
                    break
                i = end + 1
                continue
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return i + 1
            i += 1
        raise self.error("Unterminated expression: missing '}'", index, "unterminated-attribute")

    def skip_whitespace(self, index: int) -> int:
        while index < self.length and self.text[index].isspace():
            index += 1
        return index


def parse_document(text: str, file_path: str = "<unknown>") -> DocumentTree:
    """Parse a document body into a DocumentTree.

    Raises:
        DocumentSyntaxError: On unclosed, mismatched or malformed tags.
    """
    scanner = _Scanner(text, file_path)
    root = ElementNode(name="#root")
    stack: List[ElementNode] = [root]
    segment_start = 0
    i = 0

    def flush(end: int) -> None:
        if end > segment_start:
            chunk = text[segment_start:end]
            if chunk.strip():
                line, column = scanner.position(segment_start)
                stack[-1].children.append(MarkdownNode(chunk, line, column))

    while i < scanner.length:
        char = text[i]

        if scanner.at_line_start(i):
            after_fence = scanner.skip_fence(i)
            if after_fence != i:
                i = after_fence
                continue

        if char == "\\":
            i += 2
            continue

        if char == "`":
            i = scanner.skip_code_span(i)
            continue

        if char == "$":
            i = scanner.skip_math(i)
            continue

        if char == "{":
            end = scanner.scan_expression(i)
            if text[i + 1:end - 1].strip().startswith("/*"):
                flush(i)
                segment_start = end
            i = end
            continue

        if char == "<" and i + 1 < scanner.length:
            if text[i + 1] == "/":
                match = _TAG_NAME.match(text, i + 2)
                if match:
                    close_end = scanner.skip_whitespace(match.end())
                    if close_end >= scanner.length or text[close_end] != ">":
                        raise scanner.error(
                            f"Malformed closing tag </{match.group(0)}>", i, "malformed-tag"
                        )
                    name = match.group(0)
                    if len(stack) == 1:
                        raise scanner.error(
                            f"Unexpected closing tag </{name}>: no element is open",
                            i, "unexpected-closing-tag",
                        )
                    current = stack[-1]
                    if current.name != name:
                        raise scanner.error(
                            f"Expected closing tag </{current.name}> (opened at line "
                            f"{current.line}), found </{name}>",
                            i, "mismatched-closing-tag",
                        )
                    flush(i)
                    stack.pop()
                    i = close_end + 1
                    segment_start = i
                    continue
            else:
                match = _TAG_NAME.match(text, i + 1)
                if match and (match.end() >= scanner.length
                              or text[match.end()] in " \t\r\n/>"):
                    element, end = _parse_open_tag(scanner, i, match)
                    flush(i)
                    stack[-1].children.append(element)
                    if not element.self_closing:
                        stack.append(element)
                    i = end
                    segment_start = i
                    continue

        i += 1

    flush(scanner.length)

    if len(stack) > 1:
        unclosed = stack[-1]
        raise DocumentSyntaxError(
            f"Unclosed element <{unclosed.name}>: expected </{unclosed.name}> before end of file",
            file_path=file_path, line=unclosed.line, column=unclosed.column,
            rule_id="unclosed-tag",
        )

    return DocumentTree(children=root.children)


def _parse_open_tag(scanner: _Scanner, start: int, name_match) -> tuple:
    """Parse '<Name attr=... >' starting at start. Returns (element, end index)."""
    text = scanner.text
    name = name_match.group(0)
    line, column = scanner.position(start)
    element = ElementNode(
        name=name, line=line, column=column, inline=not scanner.starts_line(start)
    )
    i = name_match.end()

    while True:
        i = scanner.skip_whitespace(i)
        if i >= scanner.length:
            raise scanner.error(f"Unterminated tag <{name}>: missing '>'", start, "malformed-tag")

        char = text[i]
        if char == ">":
            return element, i + 1
        if text.startswith("/>", i):
            element.self_closing = True
            return element, i + 2
        if char == "{":
            # Spread attribute such as {...props}; kept out of the contract.
            i = scanner.scan_expression(i)
            continue

        attr_match = _ATTR_NAME.match(text, i)
        if not attr_match:
            raise scanner.error(
                f"Unexpected character {char!r} in tag <{name}>", i, "malformed-tag"
            )
        attr_name = attr_match.group(0)
        i = scanner.skip_whitespace(attr_match.end())

        if i < scanner.length and text[i] == "=":
            i = scanner.skip_whitespace(i + 1)
            if i >= scanner.length:
                raise scanner.error(
                    f"Missing value for attribute {attr_name!r} on <{name}>", i, "malformed-tag"
                )
            quote = text[i]
            if quote in "\"'":
                end = text.find(quote, i + 1)
                if end == -1:
                    raise scanner.error(
                        f"Unterminated string in attribute {attr_name!r} on <{name}>",
                        i, "unterminated-attribute",
                    )
                value = text[i + 1:end]
                element.attributes.append(Attribute(attr_name, ATTR_STRING, value, value))
                i = end + 1
            elif quote == "{":
                end = scanner.scan_expression(i)
                raw = text[i + 1:end - 1]
                element.attributes.append(
                    Attribute(attr_name, ATTR_EXPRESSION, raw, literal_value(raw))
                )
                i = end
            else:
                raise scanner.error(
                    f"Attribute {attr_name!r} on <{name}> needs a quoted or {{...}} value",
                    i, "malformed-tag",
                )
        else:
            element.attributes.append(Attribute(attr_name, ATTR_FLAG, "", True))
