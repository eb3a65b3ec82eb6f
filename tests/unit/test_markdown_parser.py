#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_markdown_parser.py
"""Unit tests for the mistune-based markdown parser."""

import pytest

from richmark.ast import (
    Blockquote,
    Break,
    Code,
    Emphasis,
    Heading,
    Html,
    Image,
    InlineCode,
    InlineMarkup,
    Link,
    List,
    ListItem,
    Paragraph,
    Strong,
    Text,
    ThematicBreak,
)
from richmark.exceptions import ValidationError
from richmark.options import MarkdownParserOptions
from richmark.parsers import MarkdownParser, markdown_to_ast


@pytest.mark.unit
class TestBlocks:
    """Tests for block-level tokens."""

    def test_empty(self):
        """Test empty input parses to an empty root."""
        assert markdown_to_ast("").children == []

    def test_paragraphs(self):
        """Test blank lines separate paragraphs and soft breaks stay in the text."""
        root = markdown_to_ast("Hello\nWorld\n\nAgain")
        assert root.children == [
            Paragraph(children=[Text(value="Hello\nWorld")]),
            Paragraph(children=[Text(value="Again")]),
        ]

    def test_headings(self):
        """Test ATX and setext headings."""
        root = markdown_to_ast("# Hello\n\nWorld\n-----")
        assert root.children == [
            Heading(depth=1, children=[Text(value="Hello")]),
            Heading(depth=2, children=[Text(value="World")]),
        ]

    def test_fenced_code(self):
        """Test fenced code keeps language and drops the trailing newline."""
        root = markdown_to_ast("```js\nconst hello = 'world'\n```")
        assert root.children == [Code(lang="js", value="const hello = 'world'")]

    def test_blockquote(self):
        """Test block quotes wrap paragraphs."""
        root = markdown_to_ast("> quoted")
        assert root.children == [Blockquote(children=[Paragraph(children=[Text(value="quoted")])])]

    def test_thematic_break(self):
        """Test thematic breaks."""
        assert markdown_to_ast("***").children == [ThematicBreak()]

    def test_lists(self):
        """Test tight bullet and ordered lists."""
        root = markdown_to_ast("* a\n* b")
        bullet = root.children[0]
        assert bullet == List(
            ordered=False,
            start=None,
            spread=False,
            children=[
                ListItem(children=[Paragraph(children=[Text(value="a")])]),
                ListItem(children=[Paragraph(children=[Text(value="b")])]),
            ],
        )
        ordered = markdown_to_ast("3. c").children[0]
        assert ordered.ordered is True
        assert ordered.start == 3

    def test_nested_list(self):
        """Test a nested list is a child of its item."""
        root = markdown_to_ast("* World\n  * Nested")
        item = root.children[0].children[0]
        assert isinstance(item.children[0], Paragraph)
        assert isinstance(item.children[1], List)

    def test_block_html(self):
        """Test block HTML is kept raw."""
        root = markdown_to_ast("<div>\nhi\n</div>")
        assert isinstance(root.children[0], Html)


@pytest.mark.unit
class TestInline:
    """Tests for inline tokens."""

    def _inline(self, text):
        return markdown_to_ast(text).children[0].children

    def test_emphasis_and_strong(self):
        """Test nested emphasis and strong."""
        assert self._inline("*Hello **world** there*") == [
            Emphasis(
                children=[Text(value="Hello "), Strong(children=[Text(value="world")]), Text(value=" there")]
            )
        ]

    def test_underline_pair(self):
        """Test a balanced <u> pair becomes an underline wrapper."""
        assert self._inline("<u>Hello</u> World") == [
            InlineMarkup(name="u", children=[Text(value="Hello")]),
            Text(value=" World"),
        ]

    def test_unclosed_underline_stays_html(self):
        """Test an unclosed <u> tag is kept as raw HTML."""
        assert self._inline("<u>Hello") == [Html(value="<u>"), Text(value="Hello")]

    def test_underline_disabled(self):
        """Test parse_underline=False keeps the tags raw."""
        parser = MarkdownParser(MarkdownParserOptions(parse_underline=False))
        children = parser.parse("<u>Hello</u>").children[0].children
        assert children == [Html(value="<u>"), Text(value="Hello"), Html(value="</u>")]

    def test_inline_code(self):
        """Test code spans."""
        assert self._inline("Hello `const` World") == [
            Text(value="Hello "),
            InlineCode(value="const"),
            Text(value=" World"),
        ]

    def test_link_and_image(self):
        """Test links and images with titles."""
        assert self._inline('[Virtuoso](https://virtuoso.dev/ "V")') == [
            Link(url="https://virtuoso.dev/", title="V", children=[Text(value="Virtuoso")])
        ]
        assert self._inline('![alt *text*](/a.png "T")') == [Image(url="/a.png", alt="alt text", title="T")]

    def test_hard_break(self):
        """Test a backslash hard break."""
        assert self._inline("a\\\nb") == [Text(value="a"), Break(), Text(value="b")]

    def test_escapes_are_resolved(self):
        """Test backslash escapes yield the literal character."""
        assert self._inline("\\*not emphasis\\*") == [Text(value="*not emphasis*")]


@pytest.mark.unit
class TestParserValidation:
    """Tests for argument validation."""

    def test_wrong_options_type(self):
        """Test the parser rejects options of another type."""
        with pytest.raises(ValidationError):
            MarkdownParser(options="nope")  # type: ignore[arg-type]

    def test_non_string_input(self):
        """Test non-string input is rejected."""
        with pytest.raises(ValidationError):
            markdown_to_ast(b"bytes")  # type: ignore[arg-type]
