"""
Tests for contentbuild.mdx.parser
"""

import pytest

from contentbuild.mdx.errors import DocumentSyntaxError
from contentbuild.mdx.parser import (
    ATTR_EXPRESSION,
    ATTR_FLAG,
    ATTR_STRING,
    ElementNode,
    MarkdownNode,
    literal_value,
    parse_document,
)


class TestParseDocument:
    def test_plain_markdown(self):
        tree = parse_document("# Title\n\nSome *text*.\n")
        assert len(tree.children) == 1
        assert isinstance(tree.children[0], MarkdownNode)

    def test_block_element_with_children(self):
        tree = parse_document('Intro\n\n<Callout type="info">\n  Note.\n</Callout>\n\nOutro\n')
        kinds = [type(c).__name__ for c in tree.children]
        assert kinds == ["MarkdownNode", "ElementNode", "MarkdownNode"]

        callout = tree.children[1]
        assert callout.name == "Callout"
        assert callout.line == 3 and callout.column == 1
        assert not callout.inline
        assert callout.attribute_map()["type"].value == "info"
        assert callout.children[0].text.strip() == "Note."

    def test_nested_elements_and_self_closing(self):
        tree = parse_document(
            "<Quiz>\n"
            "  <Question text=\"2 + 2?\">\n"
            "    <Option value=\"4\" correct />\n"
            "  </Question>\n"
            "</Quiz>\n"
        )
        quiz = tree.children[0]
        question = quiz.children[0]
        option = question.children[0]
        assert (quiz.name, question.name, option.name) == ("Quiz", "Question", "Option")
        assert option.self_closing
        assert option.line == 3 and option.column == 5

    def test_attribute_kinds(self):
        tree = parse_document('<Figure src="a.png" width={640} caption={label} wide />\n')
        attrs = tree.children[0].attribute_map()
        assert attrs["src"].kind == ATTR_STRING
        assert attrs["width"].kind == ATTR_EXPRESSION and attrs["width"].value == 640
        assert attrs["caption"].value is None
        assert attrs["caption"].to_prop() == {"$expression": "label"}
        assert attrs["wide"].kind == ATTR_FLAG and attrs["wide"].value is True

    def test_inline_element(self):
        tree = parse_document("Press <kbd>Ctrl</kbd> to copy.\n")
        element = next(c for c in tree.children if isinstance(c, ElementNode))
        assert element.inline
        assert not element.is_component

    def test_less_than_is_text(self):
        tree = parse_document("If a < b and b<3 then a < 3.\n")
        assert all(isinstance(c, MarkdownNode) for c in tree.children)

    def test_tags_in_code_are_ignored(self):
        text = "Use `<Quiz>` like this:\n\n```mdx\n<Quiz>\n```\n"
        tree = parse_document(text)
        assert all(isinstance(c, MarkdownNode) for c in tree.children)

    def test_math_spans_are_skipped(self):
        text = "Inline $\\text{it's} < x$ and\n\n$$\n\\frac{a}{<b>}\n$$\n"
        tree = parse_document(text)
        assert all(isinstance(c, MarkdownNode) for c in tree.children)

    def test_escaped_and_unmatched_dollars_are_text(self):
        tree = parse_document("Costs \\$5 or $6 <kbd>x</kbd>\n")
        element = next(c for c in tree.children if isinstance(c, ElementNode))
        assert element.name == "kbd"

    def test_comments_dropped(self):
        tree = parse_document("Before {/* hidden <Quiz> */} after\n")
        text = "".join(c.text for c in tree.children)
        assert "hidden" not in text
        assert "Before" in text and "after" in text

    def test_walk_yields_ancestors(self):
        tree = parse_document("<Tabs>\n<Tab label=\"a\">\nx\n</Tab>\n</Tabs>\n")
        walked = [(n.name, [a.name for a in anc]) for n, anc in tree.walk() if isinstance(n, ElementNode)]
        assert walked == [("Tabs", []), ("Tab", ["Tabs"])]


class TestSyntaxErrors:
    @pytest.mark.parametrize("text,rule_id,line", [
        ("<Quiz>\ntext\n", "unclosed-tag", 1),
        ("text\n</Quiz>\n", "unexpected-closing-tag", 2),
        ("<Quiz>\n\n</Tabs>\n", "mismatched-closing-tag", 3),
        ('<Callout type="info>\nx\n', "unterminated-attribute", 1),
        ("<Figure width={640 />\n", "unterminated-attribute", 1),
        ("<Figure src=a.png />\n", "malformed-tag", 1),
        ("<Figure\n", "malformed-tag", 1),
    ])
    def test_errors_carry_rule_and_line(self, text, rule_id, line):
        with pytest.raises(DocumentSyntaxError) as exc:
            parse_document(text, "doc.mdx")
        assert exc.value.rule_id == rule_id
        assert exc.value.line == line
        assert exc.value.file_path == "doc.mdx"

    def test_mismatch_message_names_opening_line(self):
        with pytest.raises(DocumentSyntaxError, match=r"Expected closing tag </Quiz> \(opened at line 1\)"):
            parse_document("<Quiz>\n</Tabs>\n")

    def test_shifted_and_format(self):
        error = DocumentSyntaxError("Unclosed element <Quiz>", "doc.mdx", line=2, column=1,
                                    rule_id="unclosed-tag")
        shifted = error.shifted(4)
        assert shifted.line == 6
        assert str(shifted) == "doc.mdx:6:1: Unclosed element <Quiz>"

        source = "\n".join(f"line {n}" for n in range(1, 9))
        text = shifted.format(source)
        assert "MDX COMPILATION ERROR" in text
        assert " >>>    6 | line 6" in text
        assert "       3 | line 3" in text
        assert "line 8" not in text


@pytest.mark.parametrize("raw,expected", [
    ("true", True),
    ("false", False),
    ("42", 42),
    ("-1.5", -1.5),
    ('"text"', "text"),
    ("'text'", "text"),
    ("items.length", None),
    ("`a ${b}`", None),
])
def test_literal_value(raw, expected):
    assert literal_value(raw) == expected
