#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_ast_nodes.py
"""Unit tests for AST node classes.

Tests cover:
- Node creation and validation
- Visitor pattern acceptance
- Adjacency merging through ``ParentNode.append``
- Dictionary and JSON serialization

"""

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
    NodeCounter,
    Paragraph,
    Root,
    Strong,
    Text,
    ThematicBreak,
    Underline,
    is_parent,
    merge,
    should_merge,
)
from richmark.ast.serialization import ast_to_dict, ast_to_json, dict_to_ast, json_to_ast
from richmark.exceptions import StructuralError, UnsupportedNodeError, ValidationError


@pytest.mark.unit
class TestNodeCreation:
    """Tests for node construction."""

    def test_heading_depth_range(self):
        """Test heading depth must be between 1 and 6."""
        assert Heading(depth=6).depth == 6
        with pytest.raises(ValueError):
            Heading(depth=0)
        with pytest.raises(ValueError):
            Heading(depth=7)

    def test_underline_factory(self):
        """Test Underline builds a ``u`` inline markup wrapper."""
        node = Underline([Text(value="x")])
        assert isinstance(node, InlineMarkup)
        assert node.type == "inlineMarkup"
        assert node.name == "u"
        assert node.children == [Text(value="x")]

    def test_kind_tags(self):
        """Test each node carries its mdast kind tag."""
        assert Root().type == "root"
        assert ListItem().type == "listItem"
        assert InlineCode().type == "inlineCode"
        assert ThematicBreak().type == "thematicBreak"

    def test_is_parent(self):
        """Test parent detection."""
        assert is_parent(Paragraph())
        assert is_parent(Link())
        assert not is_parent(Text())
        assert not is_parent(Image())


@pytest.mark.unit
class TestMerge:
    """Tests for the adjacency merge rule."""

    def test_text_nodes_merge(self):
        """Test appending text after text concatenates values."""
        paragraph = Paragraph()
        first = paragraph.append(Text(value="Hello"))
        result = paragraph.append(Text(value=" World"))

        assert result is first
        assert paragraph.children == [Text(value="Hello World")]

    def test_same_wrappers_merge(self):
        """Test two emphasis wrappers become one."""
        paragraph = Paragraph()
        paragraph.append(Emphasis(children=[Text(value="Hello,")]))
        paragraph.append(Emphasis(children=[Text(value=" world!")]))

        assert len(paragraph.children) == 1
        assert paragraph.children[0] == Emphasis(children=[Text(value="Hello,"), Text(value=" world!")])

    def test_different_wrappers_do_not_merge(self):
        """Test emphasis followed by strong stays two nodes."""
        paragraph = Paragraph()
        paragraph.append(Emphasis(children=[Text(value="a")]))
        paragraph.append(Strong(children=[Text(value="b")]))
        assert len(paragraph.children) == 2

    def test_inline_markup_merges_by_name(self):
        """Test inline markup merges only with the same tag name."""
        assert should_merge(Underline(), Underline())
        assert not should_merge(Underline(), InlineMarkup(name="sup"))

    def test_non_wrapper_parents_do_not_merge(self):
        """Test paragraphs and links are never merged."""
        assert not should_merge(Paragraph(), Paragraph())
        assert not should_merge(Link(url="a"), Link(url="a"))

    def test_merge_incompatible_raises(self):
        """Test merging a leaf into a parent is a structural error."""
        with pytest.raises(StructuralError):
            merge(Paragraph(), Text(value="x"))


@pytest.mark.unit
class TestVisitors:
    """Tests for visitor acceptance."""

    def test_node_counter(self):
        """Test NodeCounter tallies every kind in the tree."""
        root = Root(
            children=[
                Paragraph(children=[Text(value="a"), Strong(children=[Text(value="b")]), Break()]),
                ThematicBreak(),
                Blockquote(children=[Paragraph(children=[Text(value="c")])]),
            ]
        )
        counter = NodeCounter()
        root.accept(counter)

        assert counter.counts["paragraph"] == 2
        assert counter.counts["text"] == 3
        assert counter.counts["break"] == 1
        assert counter.total == 10


@pytest.mark.unit
class TestSerialization:
    """Tests for dictionary and JSON conversion."""

    def test_to_dict_omits_none(self):
        """Test None attributes are left out of the dictionary."""
        data = ast_to_dict(Code(value="x = 1"))
        assert data == {"type": "code", "value": "x = 1"}

    def test_round_trip_through_json(self):
        """Test a tree survives JSON serialization."""
        root = Root(
            children=[
                Heading(depth=2, children=[Text(value="Title")]),
                List(
                    ordered=True,
                    start=3,
                    children=[ListItem(children=[Paragraph(children=[Link(url="/x", children=[Text(value="x")])])])],
                ),
                Paragraph(children=[Image(url="a.png", alt="A", title="T"), Html(value="<br>")]),
            ]
        )
        assert json_to_ast(ast_to_json(root)) == root

    def test_dict_to_ast_unknown_type(self):
        """Test an unknown kind tag is rejected."""
        with pytest.raises(UnsupportedNodeError) as exc_info:
            dict_to_ast({"type": "table"})
        assert exc_info.value.direction == "deserialize"

    def test_dict_to_ast_unknown_key(self):
        """Test an attribute the kind does not define is rejected."""
        with pytest.raises(ValidationError):
            dict_to_ast({"type": "text", "value": "x", "bold": True})

    def test_invalid_json(self):
        """Test malformed JSON raises ValidationError."""
        with pytest.raises(ValidationError):
            json_to_ast("{not json")
