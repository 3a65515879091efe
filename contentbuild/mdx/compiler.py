"""
Document Compiler

Compiles an MDX-style document into a JSON render tree plus a table of
contents. Markdown segments are rendered to HTML with markdown-it-py;
custom elements become element nodes the renderer maps onto its component
library:

    {"type": "root", "children": [
        {"type": "html", "value": "<h2 id=\\"intro\\">...</h2>"},
        {"type": "element", "name": "Callout", "props": {"type": "info"},
         "children": [...]}
    ]}

Inline elements stay inside the paragraph they appear in: the paragraph
becomes an element node whose children mix html and component nodes.
$...$ and $$...$$ math is rendered as <span class="math inline"> and
<div class="math block"> holding the escaped TeX for client-side KaTeX.

Output is a pure function of the input text, so compiling the same document
twice yields byte-identical JSON.
"""

import json
import logging
import re
import textwrap
from dataclasses import dataclass, field
from html.parser import HTMLParser
from typing import Any, Dict, List, Optional, Union

from markdown_it import MarkdownIt
from markdown_it.rules_core import StateCore
from markdown_it.token import Token
from mdit_py_plugins.dollarmath import dollarmath_plugin

from contentbuild.mdx.anchors import AnchorSlugger
from contentbuild.mdx.components import ComponentValidator
from contentbuild.mdx.errors import DocumentSyntaxError
from contentbuild.mdx.frontmatter import split_document
from contentbuild.mdx.parser import DocumentTree, ElementNode, MarkdownNode, Node, parse_document
from contentbuild.mdx.registry import ComponentRegistry
from contentbuild.validation.report import Diagnostic, has_errors


logger = logging.getLogger(__name__)

_ENV_SLUGGER = "anchor_slugger"
_ENV_TOC = "toc"

# Stand-in for an inline element while its paragraph goes through markdown-it
_SLOT = re.compile("\ue000(\\d+)\ue001")
_VOID_TAGS = frozenset(["area", "br", "col", "embed", "hr", "img", "input", "link", "meta", "source", "wbr"])


@dataclass
class TocEntry:
    id: str
    text: str
    depth: int

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "text": self.text, "depth": self.depth}


@dataclass
class CompileResult:
    """Output of compile_document().

    Attributes:
        compiled: Render tree serialized as compact JSON
        toc: Headings in document order
        diagnostics: Component contract findings (errors and warnings)
        metadata: Parsed front matter ({} when the document has none)
    """
    compiled: str
    toc: List[TocEntry] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def has_errors(self) -> bool:
        return has_errors(self.diagnostics)

    def toc_dicts(self) -> List[Dict[str, Any]]:
        return [entry.to_dict() for entry in self.toc]


def _heading_text(inline: Token) -> str:
    parts = []
    for child in inline.children or []:
        if child.type in ("text", "code_inline", "text_special"):
            parts.append(child.content)
    text = "".join(parts).strip() or inline.content.strip()
    return " ".join(_SLOT.sub(" ", text).split())


def _heading_anchors(state: StateCore) -> None:
    """Give every heading an id and wrap its content in a self-link."""
    slugger: AnchorSlugger = state.env[_ENV_SLUGGER]
    toc: List[TocEntry] = state.env[_ENV_TOC]
    tokens = state.tokens

    for index, token in enumerate(tokens):
        if token.type != "heading_open" or index + 1 >= len(tokens):
            continue
        inline = tokens[index + 1]
        if inline.type != "inline":
            continue

        text = _heading_text(inline)
        anchor = slugger.slug(text)
        token.attrSet("id", anchor)
        toc.append(TocEntry(id=anchor, text=text, depth=int(token.tag[1:])))

        link_open = Token("link_open", "a", 1)
        link_open.attrSet("href", f"#{anchor}")
        link_close = Token("link_close", "a", -1)
        inline.children = [link_open] + list(inline.children or []) + [link_close]


def create_markdown() -> MarkdownIt:
    """CommonMark with tables, strikethrough, dollar math, raw HTML and heading anchors."""
    md = (
        MarkdownIt("commonmark", {"html": True})
        .enable(["table", "strikethrough"])
        .use(dollarmath_plugin)
    )
    md.core.ruler.push("heading_anchors", _heading_anchors)
    return md


def _slot(index: int) -> str:
    return f"\ue000{index}\ue001"


class _HtmlNode:
    """An element of rendered HTML that keeps its source text."""

    def __init__(self, tag: str, attrs: list, start_text: str):
        self.tag = tag
        self.attrs = attrs
        self.start_text = start_text
        self.children: List[Union[str, "_HtmlNode"]] = []
        self.closed = False

    def has_slot(self) -> bool:
        for child in self.children:
            if isinstance(child, str):
                if _SLOT.search(child):
                    return True
            elif child.has_slot():
                return True
        return False

    def raw(self) -> str:
        inner = "".join(c if isinstance(c, str) else c.raw() for c in self.children)
        return self.start_text + inner + (f"</{self.tag}>" if self.closed else "")


class _HtmlTreeBuilder(HTMLParser):
    """Parses markdown-it output into _HtmlNodes without altering any text."""

    def __init__(self):
        super().__init__(convert_charrefs=False)
        self.root = _HtmlNode("#root", [], "")
        self.stack = [self.root]

    def handle_starttag(self, tag, attrs):
        node = _HtmlNode(tag, attrs, self.get_starttag_text())
        self.stack[-1].children.append(node)
        if tag not in _VOID_TAGS:
            self.stack.append(node)

    def handle_startendtag(self, tag, attrs):
        self.stack[-1].children.append(_HtmlNode(tag, attrs, self.get_starttag_text()))

    def handle_endtag(self, tag):
        for depth in range(len(self.stack) - 1, 0, -1):
            if self.stack[depth].tag == tag:
                self.stack[depth].closed = True
                del self.stack[depth:]
                return
        self.stack[-1].children.append(f"</{tag}>")

    def handle_data(self, data):
        self.stack[-1].children.append(data)

    def handle_entityref(self, name):
        self.stack[-1].children.append(f"&{name};")

    def handle_charref(self, name):
        self.stack[-1].children.append(f"&#{name};")

    def handle_comment(self, data):
        self.stack[-1].children.append(f"<!--{data}-->")

    def handle_decl(self, decl):
        self.stack[-1].children.append(f"<!{decl}>")

    def handle_pi(self, data):
        self.stack[-1].children.append(f"<?{data}>")

    def unknown_decl(self, data):
        self.stack[-1].children.append(f"<![{data}]>")


def _fill_slots(pieces, elements: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Render-tree nodes for parsed HTML, putting elements back at their slots.

    HTML that holds no slot stays one html node; only the tags enclosing a
    slot become element nodes.
    """
    rendered: List[Dict[str, Any]] = []
    buffer: List[str] = []

    def flush() -> None:
        text = "".join(buffer)
        buffer.clear()
        if text:
            rendered.append({"type": "html", "value": text})

    for piece in pieces:
        if isinstance(piece, str):
            last = 0
            for match in _SLOT.finditer(piece):
                buffer.append(piece[last:match.start()])
                flush()
                rendered.append(elements[int(match.group(1))])
                last = match.end()
            buffer.append(piece[last:])
        elif piece.has_slot():
            flush()
            rendered.append({
                "type": "element",
                "name": piece.tag,
                "props": {name: True if value is None else value for name, value in piece.attrs},
                "children": _fill_slots(piece.children, elements),
            })
        else:
            buffer.append(piece.raw())
    flush()
    return rendered


def _block_runs(children) -> List[List[Node]]:
    """Group siblings so Markdown and the inline elements inside it stay together."""
    runs: List[List[Node]] = []
    current: List[Node] = []
    for child in children:
        if isinstance(child, ElementNode) and not child.inline:
            if current:
                runs.append(current)
                current = []
            runs.append([child])
        else:
            current.append(child)
    if current:
        runs.append(current)
    return runs


class _TreeRenderer:
    """Turns a DocumentTree into render-tree dictionaries."""

    def __init__(self, md: MarkdownIt, env: Dict[str, Any]):
        self.md = md
        self.env = env

    def render(self, tree: DocumentTree) -> Dict[str, Any]:
        return {"type": "root", "children": self._render_children(tree.children, inline=False)}

    def _render_children(self, children, inline: bool) -> List[Dict[str, Any]]:
        if inline:
            rendered = []
            for child in children:
                if isinstance(child, ElementNode):
                    rendered.append(self._render_element(child))
                    continue
                html = self.md.renderInline(child.text.strip(), self.env)
                if html.strip():
                    rendered.append({"type": "html", "value": html})
            return rendered

        rendered = []
        for run in _block_runs(children):
            if len(run) == 1 and isinstance(run[0], ElementNode):
                rendered.append(self._render_element(run[0]))
            else:
                rendered.extend(self._render_run(run))
        return rendered

    def _render_run(self, run: List[Node]) -> List[Dict[str, Any]]:
        """Render Markdown with inline elements kept inside their paragraph."""
        inline_elements: List[ElementNode] = []
        parts = []
        for node in run:
            if isinstance(node, ElementNode):
                parts.append(_slot(len(inline_elements)))
                inline_elements.append(node)
            else:
                parts.append(node.text)
        text = "".join(parts)
        html = self.md.render(textwrap.dedent(text).strip("\n") + "\n", self.env)
        if not inline_elements:
            return [{"type": "html", "value": html}] if html.strip() else []

        elements = [self._render_element(node) for node in inline_elements]
        builder = _HtmlTreeBuilder()
        builder.feed(html)
        builder.close()
        rendered = []
        for node in _fill_slots(builder.root.children, elements):
            if node["type"] == "html":
                # Block separators between paragraphs
                node["value"] = node["value"].lstrip("\n")
                if not node["value"].strip():
                    continue
            rendered.append(node)
        return rendered

    def _render_element(self, node: ElementNode) -> Dict[str, Any]:
        return {
            "type": "element",
            "name": node.name,
            "props": {attr.name: attr.to_prop() for attr in node.attributes},
            "children": self._render_children(node.children, inline=node.inline),
        }


def compile_document(
    source: str,
    file_path: str = "<unknown>",
    registry: Optional[ComponentRegistry] = None,
    validate_components: bool = True,
) -> CompileResult:
    """Compile one document.

    Args:
        source: Full file text; front matter, if any, is split off first
        file_path: Path used in diagnostics and errors
        registry: Component contracts (defaults to the built-in registry)
        validate_components: Run the component contract check in the same pass

    Returns:
        CompileResult with the serialized render tree, ToC and diagnostics.

    Raises:
        DocumentSyntaxError: On malformed markup. Line numbers refer to the
            file, front matter included.
        FrontmatterError: If the front matter block cannot be parsed.
    """
    document = split_document(source)
    offset = document.body_line_offset

    try:
        tree = parse_document(document.body, file_path)
    except DocumentSyntaxError as e:
        raise e.shifted(offset, file_path) from e

    diagnostics: List[Diagnostic] = []
    if validate_components:
        for diagnostic in ComponentValidator(registry).validate(tree, file_path):
            if diagnostic.line is not None:
                diagnostic.line += offset
            diagnostics.append(diagnostic)

    env: Dict[str, Any] = {_ENV_SLUGGER: AnchorSlugger(), _ENV_TOC: []}
    render_tree = _TreeRenderer(create_markdown(), env).render(tree)
    compiled = json.dumps(render_tree, ensure_ascii=False, sort_keys=True, separators=(",", ":"))

    logger.debug(f"Compiled {file_path}: {len(env[_ENV_TOC])} heading(s)")
    return CompileResult(
        compiled=compiled,
        toc=env[_ENV_TOC],
        diagnostics=diagnostics,
        metadata=document.metadata,
    )
