#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_conversion.py
"""Unit tests for the visitor registry and the import/export traversals.

Trees are built by hand on both sides so these tests do not depend on the
markdown parser or renderer.

"""

import pytest

from richmark.api import ast_to_editor, editor_to_ast
from richmark.ast import (
    Blockquote,
    Break,
    Code,
    Emphasis,
    Heading,
    Html,
    Image,
    InlineCode,
    Link,
    List,
    ListItem,
    Paragraph,
    Root,
    Strong,
    Text,
    ThematicBreak,
    Underline,
)
from richmark.conversion import DEFAULT_RULES, ConversionRule, VisitorRegistry, default_registry
from richmark.conversion.exporter import ExportTraversal
from richmark.editor import (
    CodeNode,
    DecoratorNode,
    HeadingNode,
    HorizontalRuleNode,
    ImageNode,
    LineBreakNode,
    LinkNode,
    ListNode,
    ParagraphNode,
    QuoteNode,
    RootNode,
    TextFormat,
    TextNode,
    create_list_item_node,
    create_list_node,
    create_paragraph_node,
    create_text_node,
)
from richmark.exceptions import StructuralError, UnsupportedNodeError

B = TextFormat.BOLD
I = TextFormat.ITALIC  # noqa: E741
U = TextFormat.UNDERLINE


def _texts(element):
    """(text, format) pairs of the text runs under ``element``."""
    return [(child.get_text_content(), child.get_format()) for child in element.get_children()]


def _export_paragraph(*runs):
    """Export one paragraph made of (text, format) runs and return the AST paragraph."""
    root = RootNode()
    paragraph = create_paragraph_node()
    for text, mask in runs:
        paragraph.append(create_text_node(text, mask))
    root.append(paragraph)
    ast_root = editor_to_ast(root)
    assert len(ast_root.children) == 1
    return ast_root.children[0]


class _WidgetNode(DecoratorNode):
    node_type = "widget"


@pytest.mark.unit
class TestVisitorRegistry:
    """Tests for rule lookup."""

    def test_default_rules(self):
        """Test the default registry holds the default rule set in order."""
        registry = default_registry()
        assert registry.rules == DEFAULT_RULES
        assert len(registry) == 14

    def test_first_match_wins(self):
        """Test a rule registered ahead of the defaults takes precedence."""

        class LoudTextRule(ConversionRule):
            ast_type = "text"

        extra = LoudTextRule()
        registry = default_registry().with_rules(extra, before=True)
        assert registry.find_ast_rule(Text(value="x")) is extra

        appended = default_registry().with_rules(extra)
        assert appended.find_ast_rule(Text(value="x")) is not extra

    def test_unknown_ast_node(self):
        """Test an AST kind with no rule raises with the node attached."""
        node = Html(value="<div>")
        with pytest.raises(UnsupportedNodeError) as exc_info:
            default_registry().find_ast_rule(node)
        assert exc_info.value.node_type == "html"
        assert exc_info.value.node is node
        assert exc_info.value.direction == "import"

    def test_unknown_editor_node(self):
        """Test an editor kind with no rule raises."""
        with pytest.raises(UnsupportedNodeError) as exc_info:
            default_registry().find_editor_rule(_WidgetNode())
        assert exc_info.value.node_type == "widget"
        assert exc_info.value.direction == "export"

    def test_registry_is_immutable(self):
        """Test with_rules leaves the original registry unchanged."""
        registry = VisitorRegistry([])
        registry.with_rules(*DEFAULT_RULES)
        assert len(registry) == 0


@pytest.mark.unit
class TestImport:
    """Tests for the AST -> editor tree traversal."""

    def test_plain_paragraph(self, editor_root):
        """Test a paragraph of text."""
        ast_to_editor(Root(children=[Paragraph(children=[Text(value="Hello World")])]), editor_root)

        paragraph = editor_root.get_first_child()
        assert isinstance(paragraph, ParagraphNode)
        assert _texts(paragraph) == [("Hello World", 0)]

    def test_nested_formatting_accumulates(self, editor_root):
        """Test wrapper flags are ORed down to the text runs."""
        ast = Root(
            children=[
                Paragraph(
                    children=[
                        Emphasis(
                            children=[
                                Text(value="Hello "),
                                Strong(children=[Text(value="world")]),
                                Text(value=" some more"),
                            ]
                        )
                    ]
                )
            ]
        )
        ast_to_editor(ast, editor_root)
        assert _texts(editor_root.get_first_child()) == [("Hello ", I), ("world", I | B), (" some more", I)]

    def test_underline_and_inline_code(self, editor_root):
        """Test underline sets its flag and inline code becomes a CODE run."""
        ast = Root(
            children=[Paragraph(children=[Underline([Text(value="u")]), InlineCode(value="x = 1")])]
        )
        ast_to_editor(ast, editor_root)
        assert _texts(editor_root.get_first_child()) == [("u", U), ("x = 1", TextFormat.CODE)]

    def test_link_inherits_formatting(self, editor_root):
        """Test text inside a link inside strong keeps the bold flag."""
        ast = Root(
            children=[
                Paragraph(children=[Strong(children=[Link(url="/a", title="A", children=[Text(value="go")])])])
            ]
        )
        ast_to_editor(ast, editor_root)

        link = editor_root.get_first_child().get_first_child()
        assert isinstance(link, LinkNode)
        assert link.get_url() == "/a"
        assert link.get_title() == "A"
        assert _texts(link) == [("go", B)]

    def test_heading_and_blocks(self, editor_root):
        """Test headings, code, rules and images."""
        ast = Root(
            children=[
                Heading(depth=3, children=[Text(value="Title")]),
                Code(lang="js", value="const a = 1"),
                ThematicBreak(),
                Paragraph(children=[Image(url="a.png", alt="A", title="T")]),
            ]
        )
        ast_to_editor(ast, editor_root)

        heading, code, rule, paragraph = editor_root.get_children()
        assert isinstance(heading, HeadingNode) and heading.get_tag() == "h3"
        assert isinstance(code, CodeNode) and code.get_language() == "js"
        assert code.get_text_content() == "const a = 1"
        assert isinstance(rule, HorizontalRuleNode)
        image = paragraph.get_first_child()
        assert isinstance(image, ImageNode)
        assert (image.get_src(), image.get_alt_text(), image.get_title()) == ("a.png", "A", "T")

    def test_quote_folds_paragraphs(self, editor_root):
        """Test paragraphs inside a quote fold into it with a line break between."""
        ast = Root(
            children=[
                Blockquote(
                    children=[
                        Paragraph(children=[Text(value="one")]),
                        Paragraph(children=[Text(value="two")]),
                    ]
                )
            ]
        )
        ast_to_editor(ast, editor_root)

        quote = editor_root.get_first_child()
        assert isinstance(quote, QuoteNode)
        children = quote.get_children()
        assert [type(child) for child in children] == [TextNode, LineBreakNode, TextNode]
        assert quote.get_text_content() == "one\ntwo"

    def test_hard_break(self, editor_root):
        """Test a hard break becomes a line break node."""
        ast = Root(children=[Paragraph(children=[Text(value="a"), Break(), Text(value="b")])])
        ast_to_editor(ast, editor_root)
        assert isinstance(editor_root.get_first_child().get_children()[1], LineBreakNode)

    def test_nested_list_moves_to_dedicated_item(self, editor_root):
        """Test a nested list is placed in its own item after its parent item."""
        ast = Root(
            children=[
                List(
                    children=[
                        ListItem(
                            children=[
                                Paragraph(children=[Text(value="World")]),
                                List(children=[ListItem(children=[Paragraph(children=[Text(value="Nested")])])]),
                            ]
                        ),
                        ListItem(children=[Paragraph(children=[Text(value="After")])]),
                    ]
                )
            ]
        )
        ast_to_editor(ast, editor_root)

        editor_list = editor_root.get_first_child()
        assert isinstance(editor_list, ListNode)
        first, holder, after = editor_list.get_children()
        assert _texts(first) == [("World", 0)]
        assert holder.has_only_nested_list()
        assert holder.get_first_child().get_first_child().get_text_content() == "Nested"
        assert after.get_text_content() == "After"

    def test_two_nested_lists_keep_order(self, editor_root):
        """Test consecutive nested lists of one item keep their order."""
        first_nested = List(children=[ListItem(children=[Paragraph(children=[Text(value="a")])])])
        second_nested = List(ordered=True, children=[ListItem(children=[Paragraph(children=[Text(value="b")])])])
        ast = Root(
            children=[
                List(children=[ListItem(children=[Paragraph(children=[Text(value="x")]), first_nested, second_nested])])
            ]
        )
        ast_to_editor(ast, editor_root)

        _, holder_a, holder_b = editor_root.get_first_child().get_children()
        assert holder_a.get_first_child().get_list_type() == "bullet"
        assert holder_b.get_first_child().get_list_type() == "number"

    def test_ordered_list_start(self, editor_root):
        """Test an ordered list keeps its start number."""
        ast = Root(children=[List(ordered=True, start=3, children=[ListItem()])])
        ast_to_editor(ast, editor_root)

        editor_list = editor_root.get_first_child()
        assert editor_list.get_list_type() == "number"
        assert editor_list.get_start() == 3

    def test_unsupported_node_is_fatal(self, editor_root):
        """Test an unregistered kind aborts the import."""
        ast = Root(children=[Paragraph(children=[Html(value="<span>")])])
        with pytest.raises(UnsupportedNodeError):
            ast_to_editor(ast, editor_root)

    def test_failed_import_rolls_back(self, editor_root):
        """Test blocks imported before a failure are removed again."""
        existing = create_paragraph_node().append(create_text_node("kept"))
        editor_root.append(existing)
        ast = Root(
            children=[
                Paragraph(children=[Text(value="Intro paragraph")]),
                Heading(depth=2, children=[Text(value="Title")]),
                Html(value="<div>x</div>"),
            ]
        )
        with pytest.raises(UnsupportedNodeError):
            ast_to_editor(ast, editor_root)

        assert editor_root.get_children() == [existing]
        assert editor_root.get_text_content() == "kept"

    def test_block_after_text_in_quote(self, editor_root):
        """Test a block folded into a quote keeps its node and needs no separator."""
        ast = Root(
            children=[
                Blockquote(
                    children=[
                        Paragraph(children=[Text(value="a")]),
                        ThematicBreak(),
                        Paragraph(children=[Text(value="b")]),
                    ]
                )
            ]
        )
        ast_to_editor(ast, editor_root)

        quote = editor_root.get_first_child()
        assert [type(child) for child in quote.get_children()] == [TextNode, HorizontalRuleNode, TextNode]

    def test_side_tables_are_cleared(self, editor_root):
        """Test the traversal keeps no state between runs."""
        from richmark.conversion.importer import ImportTraversal

        traversal = ImportTraversal(default_registry())
        traversal.run(Root(children=[Paragraph(children=[Strong(children=[Text(value="x")])])]), editor_root)
        assert traversal.parent_of == {}
        assert traversal.formatting_of == {}


@pytest.mark.unit
class TestExport:
    """Tests for the editor tree -> AST traversal."""

    def test_empty_root(self):
        """Test an empty editor exports an empty root."""
        assert editor_to_ast(RootNode()) == Root()

    def test_adjacent_runs_share_wrappers(self):
        """Test consecutive italic runs share one emphasis wrapper."""
        paragraph = _export_paragraph(("Hello ", I), ("world", I | B), (" some more", I))
        assert paragraph == Paragraph(
            children=[
                Emphasis(
                    children=[
                        Text(value="Hello "),
                        Strong(children=[Text(value="world")]),
                        Text(value=" some more"),
                    ]
                )
            ]
        )

    def test_opened_flags_nest_inside_continued(self):
        """Test newly opened wrappers nest inside continued ones."""
        paragraph = _export_paragraph(("Hello ", B), ("world", B | I), (" ", B), ("some", B | U), (" more", B))
        assert paragraph == Paragraph(
            children=[
                Strong(
                    children=[
                        Text(value="Hello "),
                        Emphasis(children=[Text(value="world")]),
                        Text(value=" "),
                        Underline([Text(value="some")]),
                        Text(value=" more"),
                    ]
                )
            ]
        )

    def test_wrapper_order_for_combined_flags(self):
        """Test a run with several flags nests italic, bold, underline outermost first."""
        paragraph = _export_paragraph(("x", I | B | U))
        assert paragraph == Paragraph(children=[Emphasis(children=[Strong(children=[Underline([Text(value="x")])])])])

    def test_plain_runs_merge(self):
        """Test adjacent unformatted runs collapse into one text node."""
        assert _export_paragraph(("a", 0), ("b", 0)) == Paragraph(children=[Text(value="ab")])

    def test_code_run(self):
        """Test a CODE run becomes inline code and resets the transition."""
        paragraph = _export_paragraph(("a", B), ("x", B | TextFormat.CODE), ("b", B))
        assert paragraph == Paragraph(
            children=[
                Strong(children=[Text(value="a")]),
                InlineCode(value="x"),
                Strong(children=[Text(value="b")]),
            ]
        )

    def test_line_break_exports_as_newline(self):
        """Test a line break becomes a newline in the surrounding text."""
        root = RootNode()
        root.append(create_paragraph_node().append(create_text_node("a"), LineBreakNode(), create_text_node("b")))
        assert editor_to_ast(root).children[0] == Paragraph(children=[Text(value="a\nb")])

    def test_quote_gets_paragraph(self):
        """Test quote content is wrapped in a paragraph."""
        root = RootNode()
        root.append(QuoteNode().append(create_text_node("q")))
        assert editor_to_ast(root).children == [Blockquote(children=[Paragraph(children=[Text(value="q")])])]

    def test_blocks_in_list_item_stay_blocks(self):
        """Test a block after text in an item becomes a sibling of the item's paragraph."""
        root = RootNode()
        editor_list = create_list_node()
        editor_list.append(create_list_item_node().append(create_text_node("a"), HorizontalRuleNode()))
        root.append(editor_list)

        item = editor_to_ast(root).children[0].children[0]
        assert item == ListItem(spread=True, children=[Paragraph(children=[Text(value="a")]), ThematicBreak()])

    def test_blocks_in_quote_split_paragraphs(self):
        """Test quote text around a block becomes separate paragraphs without stray breaks."""
        root = RootNode()
        root.append(
            QuoteNode().append(
                create_text_node("a"),
                CodeNode("py").append(create_text_node("x = 1")),
                LineBreakNode(),
                create_text_node("b", B),
            )
        )
        assert editor_to_ast(root).children == [
            Blockquote(
                children=[
                    Paragraph(children=[Text(value="a")]),
                    Code(lang="py", value="x = 1"),
                    Paragraph(children=[Strong(children=[Text(value="b")])]),
                ]
            )
        ]

    def test_runs_export_without_sibling_lookups(self, monkeypatch):
        """Test text runs get their previous sibling from the traversal."""

        def fail(self):
            raise AssertionError("previous sibling looked up through the parent")

        monkeypatch.setattr(TextNode, "get_previous_sibling", fail)
        runs = [("a", B), ("b", B | I), ("c", 0)] * 50
        paragraph = _export_paragraph(*runs)
        assert len(paragraph.children) == 150 // 3 * 2

    def test_nested_list_reattached(self):
        """Test a nested-list-only item moves back under the previous item."""
        root = RootNode()
        outer = create_list_node()
        nested = create_list_node("number", 1)
        nested.append(create_list_item_node().append(create_text_node("n")))
        outer.append(
            create_list_item_node().append(create_text_node("a")),
            create_list_item_node().append(nested),
        )
        root.append(outer)

        ast_list = editor_to_ast(root).children[0]
        assert ast_list == List(
            ordered=False,
            spread=False,
            children=[
                ListItem(
                    children=[
                        Paragraph(children=[Text(value="a")]),
                        List(ordered=True, start=None, children=[ListItem(children=[Paragraph(children=[Text(value="n")])])]),
                    ]
                )
            ],
        )

    def test_nested_list_without_previous_item(self):
        """Test a nested-list-only first item is a structural error."""
        root = RootNode()
        outer = create_list_node()
        outer.append(create_list_item_node().append(create_list_node()))
        root.append(outer)
        with pytest.raises(StructuralError):
            editor_to_ast(root)

    def test_ordered_start(self):
        """Test start is kept only when it differs from 1."""
        root = RootNode()
        root.append(create_list_node("number", 5), create_list_node("number", 1))
        first, second = editor_to_ast(root).children
        assert first.start == 5
        assert second.start is None

    def test_unknown_editor_node(self):
        """Test an editor kind with no rule aborts the export."""
        root = RootNode()
        root.append(create_paragraph_node().append(_WidgetNode()))
        with pytest.raises(UnsupportedNodeError):
            editor_to_ast(root)

    def test_export_must_start_at_root(self):
        """Test exporting from a non-root node produces no valid root."""
        with pytest.raises(StructuralError):
            editor_to_ast(create_paragraph_node())

    def test_append_under_leaf(self):
        """Test appending under a leaf AST node is a structural error."""
        from richmark.conversion.exporter import ExportActions

        actions = ExportActions(ExportTraversal(default_registry()))
        with pytest.raises(StructuralError):
            actions.append_to_parent(Text(value="x"), Text(value="y"))

    def test_second_root(self):
        """Test a second root is rejected."""
        from richmark.conversion.exporter import ExportActions

        traversal = ExportTraversal(default_registry())
        actions = ExportActions(traversal)
        actions.append_to_parent(None, Root())
        with pytest.raises(StructuralError):
            actions.append_to_parent(None, Root())
