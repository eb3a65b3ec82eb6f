#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richmark/conversion/rules.py
"""Default conversion rules.

One rule per node family, registered in ``DEFAULT_RULES`` in this order:
root, paragraph, text, formatting, inline code, link, heading, list, list
item, blockquote, code, thematic break, image, line break.

Shape differences the rules reconcile:

- Quotes and list items hold inline content directly in the editor, so a
  paragraph inside them contributes no editor node, and exporting them adds
  the paragraph back.
- A nested list lives in the editor as the only child of a dedicated list
  item that follows the item it belongs to; in the AST it is a child of that
  item.
- Formatting wrappers in the AST are bit flags on text runs in the editor.

"""

from __future__ import annotations

from typing import Optional

from richmark.ast.nodes import (
    Blockquote,
    Code,
    Heading,
    Image,
    InlineCode,
    Link,
    List,
    ListItem,
    Node,
    Paragraph,
    Root,
    Text,
    ThematicBreak,
    merge,
    should_merge,
)
from richmark.conversion.exporter import ExportActions
from richmark.conversion.importer import ImportActions
from richmark.conversion.registry import ConversionRule, VisitorRegistry
from richmark.editor import formatting
from richmark.editor.formatting import TextFormat
from richmark.editor.nodes import (
    CodeNode,
    EditorNode,
    HeadingNode,
    HorizontalRuleNode,
    ImageNode,
    LineBreakNode,
    LinkNode,
    ListItemNode,
    ListNode,
    ParagraphNode,
    QuoteNode,
    RootNode,
    TextNode,
    as_element,
)
from richmark.exceptions import StructuralError

# Editor nodes that stand as blocks of their own inside a quote or list item
FOLDED_BLOCK_NODES = (CodeNode, HeadingNode, HorizontalRuleNode, ListNode, ParagraphNode, QuoteNode)


def export_folded_content(editor_node: EditorNode, container: Node, actions: ExportActions) -> int:
    """Export the children of a quote or list item under ``container``.

    Inline runs are gathered into paragraphs and block children become
    siblings of those paragraphs. Line breaks next to a block only separated
    folded paragraphs, so they are dropped.

    Returns
    -------
    int
        Number of block nodes appended to ``container``

    """
    blocks = 0
    run: list[tuple[EditorNode, Optional[EditorNode]]] = []

    def flush() -> None:
        nonlocal blocks
        while run and isinstance(run[-1][0], LineBreakNode):
            run.pop()
        if run:
            paragraph = actions.append_to_parent(container, Paragraph())
            for child, previous in run:
                actions.visit(child, paragraph, previous)
            blocks += 1
            run.clear()

    previous: Optional[EditorNode] = None
    after_block = False
    for child in as_element(editor_node).get_children():
        if isinstance(child, FOLDED_BLOCK_NODES):
            flush()
            actions.visit(child, container, previous)
            blocks += 1
            after_block = True
        elif not (after_block and isinstance(child, LineBreakNode)):
            run.append((child, previous))
            after_block = False
        previous = child
    flush()
    return blocks


class RootRule(ConversionRule):
    ast_type = "root"
    editor_class = RootNode

    def build_editor_node(self, ast_node: Node, parent: EditorNode, actions: ImportActions) -> None:
        actions.set_current_as_parent(parent)

    def build_ast_node(self, editor_node: EditorNode, parent: Optional[Node], actions: ExportActions) -> None:
        root = actions.append_to_parent(parent, Root())
        actions.traverse_children(editor_node, root)


class ParagraphRule(ConversionRule):
    """Paragraphs; folded into their container inside quotes and list items."""

    ast_type = "paragraph"
    editor_class = ParagraphNode

    def build_editor_node(self, ast_node: Node, parent: EditorNode, actions: ImportActions) -> None:
        if isinstance(parent, (QuoteNode, ListItemNode)):
            last = parent.get_last_child()
            if last is not None and not isinstance(last, FOLDED_BLOCK_NODES):
                parent.append(LineBreakNode())
            actions.set_current_as_parent(parent)
            return
        paragraph = ParagraphNode()
        as_element(parent).append(paragraph)
        actions.set_current_as_parent(paragraph)

    def build_ast_node(self, editor_node: EditorNode, parent: Optional[Node], actions: ExportActions) -> None:
        paragraph = actions.append_to_parent(parent, Paragraph())
        actions.traverse_children(editor_node, paragraph)


class TextRule(ConversionRule):
    """Text runs and the wrapper transitions between consecutive runs."""

    ast_type = "text"
    editor_class = TextNode

    def build_editor_node(self, ast_node: Node, parent: EditorNode, actions: ImportActions) -> None:
        assert isinstance(ast_node, Text)
        as_element(parent).append(TextNode(ast_node.value, actions.get_parent_formatting()))

    def build_ast_node(self, editor_node: EditorNode, parent: Optional[Node], actions: ExportActions) -> None:
        assert isinstance(editor_node, TextNode)
        text = editor_node.get_text_content()
        mask = editor_node.get_format()
        prev = actions.previous_sibling

        if formatting.is_code(mask):
            actions.append_to_parent(parent, InlineCode(value=text))
            return

        prev_mask = 0
        if isinstance(prev, TextNode) and not formatting.is_code(prev.get_format()):
            prev_mask = prev.get_format()

        # Continued wrappers first so they merge into the previous run's
        # wrappers at the same depth; newly opened ones nest inside them.
        current = parent
        for flag in formatting.continued_flags(prev_mask, mask):
            current = actions.append_to_parent(current, formatting.create_wrapper(flag))
        for flag in formatting.opened_flags(prev_mask, mask):
            current = actions.append_to_parent(current, formatting.create_wrapper(flag))
        actions.append_to_parent(current, Text(value=text))

    def should_merge(self, prev: Node, node: Node) -> bool:
        return isinstance(prev, Text) and isinstance(node, Text)

    def merge(self, prev: Node, node: Node) -> Node:
        return merge(prev, node)


class FormattingRule(ConversionRule):
    """Emphasis, strong and underline wrappers."""

    def match_ast(self, node: Node) -> bool:
        return formatting.flag_for_wrapper(node) is not None

    def build_editor_node(self, ast_node: Node, parent: EditorNode, actions: ImportActions) -> None:
        flag = formatting.flag_for_wrapper(ast_node)
        if flag is not None:
            actions.add_formatting(flag)

    def should_merge(self, prev: Node, node: Node) -> bool:
        return formatting.flag_for_wrapper(prev) is not None and should_merge(prev, node)

    def merge(self, prev: Node, node: Node) -> Node:
        return merge(prev, node)


class InlineCodeRule(ConversionRule):
    ast_type = "inlineCode"

    def build_editor_node(self, ast_node: Node, parent: EditorNode, actions: ImportActions) -> None:
        assert isinstance(ast_node, InlineCode)
        as_element(parent).append(TextNode(ast_node.value, TextFormat.CODE))


class LinkRule(ConversionRule):
    ast_type = "link"
    editor_class = LinkNode

    def build_editor_node(self, ast_node: Node, parent: EditorNode, actions: ImportActions) -> None:
        assert isinstance(ast_node, Link)
        link = LinkNode(ast_node.url, ast_node.title)
        as_element(parent).append(link)
        actions.set_current_as_parent(link)

    def build_ast_node(self, editor_node: EditorNode, parent: Optional[Node], actions: ExportActions) -> None:
        assert isinstance(editor_node, LinkNode)
        link = actions.append_to_parent(parent, Link(url=editor_node.get_url(), title=editor_node.get_title()))
        actions.traverse_children(editor_node, link)


class HeadingRule(ConversionRule):
    ast_type = "heading"
    editor_class = HeadingNode

    def build_editor_node(self, ast_node: Node, parent: EditorNode, actions: ImportActions) -> None:
        assert isinstance(ast_node, Heading)
        heading = HeadingNode(f"h{ast_node.depth}")  # type: ignore[arg-type]
        as_element(parent).append(heading)
        actions.set_current_as_parent(heading)

    def build_ast_node(self, editor_node: EditorNode, parent: Optional[Node], actions: ExportActions) -> None:
        assert isinstance(editor_node, HeadingNode)
        heading = actions.append_to_parent(parent, Heading(depth=int(editor_node.get_tag()[1:])))
        actions.traverse_children(editor_node, heading)


class ListRule(ConversionRule):
    """Lists; a list nested in an item moves to a dedicated sibling item."""

    ast_type = "list"
    editor_class = ListNode

    def build_editor_node(self, ast_node: Node, parent: EditorNode, actions: ImportActions) -> None:
        assert isinstance(ast_node, List)
        editor_list = ListNode("number" if ast_node.ordered else "bullet", ast_node.start or 1)

        if isinstance(parent, ListItemNode):
            # Skip dedicated items created for earlier nested lists of the
            # same item so their order is kept.
            anchor: EditorNode = parent
            following = anchor.get_next_sibling()
            while isinstance(following, ListItemNode) and following.has_only_nested_list():
                anchor = following
                following = anchor.get_next_sibling()
            holder = ListItemNode()
            anchor.insert_after(holder)
            holder.append(editor_list)
        else:
            as_element(parent).append(editor_list)
        actions.set_current_as_parent(editor_list)

    def build_ast_node(self, editor_node: EditorNode, parent: Optional[Node], actions: ExportActions) -> None:
        assert isinstance(editor_node, ListNode)
        ordered = editor_node.get_list_type() == "number"
        start = editor_node.get_start() if ordered and editor_node.get_start() != 1 else None
        ast_list = actions.append_to_parent(parent, List(ordered=ordered, start=start, spread=False))
        actions.traverse_children(editor_node, ast_list)


class ListItemRule(ConversionRule):
    ast_type = "listItem"
    editor_class = ListItemNode

    def build_editor_node(self, ast_node: Node, parent: EditorNode, actions: ImportActions) -> None:
        item = ListItemNode()
        as_element(parent).append(item)
        actions.set_current_as_parent(item)

    def build_ast_node(self, editor_node: EditorNode, parent: Optional[Node], actions: ExportActions) -> None:
        assert isinstance(editor_node, ListItemNode)
        if editor_node.has_only_nested_list():
            previous = parent.children[-1] if isinstance(parent, List) and parent.children else None
            if not isinstance(previous, ListItem):
                raise StructuralError(
                    f"List item {editor_node.get_key()} holds only a nested list but has no previous item",
                    node=editor_node,
                )
            actions.traverse_children(editor_node, previous)
            return

        item = actions.append_to_parent(parent, ListItem(spread=False))
        assert isinstance(item, ListItem)
        # Blank lines keep a block after text from reading as part of it
        item.spread = export_folded_content(editor_node, item, actions) > 1


class BlockquoteRule(ConversionRule):
    ast_type = "blockquote"
    editor_class = QuoteNode

    def build_editor_node(self, ast_node: Node, parent: EditorNode, actions: ImportActions) -> None:
        quote = QuoteNode()
        as_element(parent).append(quote)
        actions.set_current_as_parent(quote)

    def build_ast_node(self, editor_node: EditorNode, parent: Optional[Node], actions: ExportActions) -> None:
        blockquote = actions.append_to_parent(parent, Blockquote())
        export_folded_content(editor_node, blockquote, actions)


class CodeRule(ConversionRule):
    """Fenced code blocks; the editor keeps the code as plain text children."""

    ast_type = "code"
    editor_class = CodeNode

    def build_editor_node(self, ast_node: Node, parent: EditorNode, actions: ImportActions) -> None:
        assert isinstance(ast_node, Code)
        code = CodeNode(ast_node.lang)
        if ast_node.value:
            code.append(TextNode(ast_node.value))
        as_element(parent).append(code)
        actions.set_current_as_parent(code)

    def build_ast_node(self, editor_node: EditorNode, parent: Optional[Node], actions: ExportActions) -> None:
        assert isinstance(editor_node, CodeNode)
        actions.append_to_parent(parent, Code(lang=editor_node.get_language(), value=editor_node.get_text_content()))


class ThematicBreakRule(ConversionRule):
    ast_type = "thematicBreak"
    editor_class = HorizontalRuleNode

    def build_editor_node(self, ast_node: Node, parent: EditorNode, actions: ImportActions) -> None:
        as_element(parent).append(HorizontalRuleNode())

    def build_ast_node(self, editor_node: EditorNode, parent: Optional[Node], actions: ExportActions) -> None:
        actions.append_to_parent(parent, ThematicBreak())


class ImageRule(ConversionRule):
    ast_type = "image"
    editor_class = ImageNode

    def build_editor_node(self, ast_node: Node, parent: EditorNode, actions: ImportActions) -> None:
        assert isinstance(ast_node, Image)
        as_element(parent).append(ImageNode(ast_node.url, ast_node.alt, ast_node.title))

    def build_ast_node(self, editor_node: EditorNode, parent: Optional[Node], actions: ExportActions) -> None:
        assert isinstance(editor_node, ImageNode)
        image = Image(url=editor_node.get_src(), alt=editor_node.get_alt_text(), title=editor_node.get_title())
        actions.append_to_parent(parent, image)


class LineBreakRule(ConversionRule):
    """Hard breaks import as line breaks; line breaks export as a newline."""

    ast_type = "break"
    editor_class = LineBreakNode

    def build_editor_node(self, ast_node: Node, parent: EditorNode, actions: ImportActions) -> None:
        as_element(parent).append(LineBreakNode())

    def build_ast_node(self, editor_node: EditorNode, parent: Optional[Node], actions: ExportActions) -> None:
        actions.append_to_parent(parent, Text(value="\n"))


DEFAULT_RULES: tuple[ConversionRule, ...] = (
    RootRule(),
    ParagraphRule(),
    TextRule(),
    FormattingRule(),
    InlineCodeRule(),
    LinkRule(),
    HeadingRule(),
    ListRule(),
    ListItemRule(),
    BlockquoteRule(),
    CodeRule(),
    ThematicBreakRule(),
    ImageRule(),
    LineBreakRule(),
)


def default_registry() -> VisitorRegistry:
    """Return a registry holding ``DEFAULT_RULES``."""
    return VisitorRegistry(DEFAULT_RULES)
