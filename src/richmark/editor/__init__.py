#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richmark/editor/__init__.py
"""Editor tree model.

- nodes: editor node classes and ``create_*`` factories
- formatting: the text format bitmask and its wrapper mapping
- editor: ``Editor`` document session

"""

from richmark.editor.editor import Editor
from richmark.editor.formatting import WRAPPER_ORDER, TextFormat
from richmark.editor.nodes import (
    CodeNode,
    DecoratorNode,
    EditorNode,
    ElementNode,
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
    create_code_node,
    create_heading_node,
    create_horizontal_rule_node,
    create_image_node,
    create_line_break_node,
    create_link_node,
    create_list_item_node,
    create_list_node,
    create_paragraph_node,
    create_quote_node,
    create_text_node,
    node_from_json,
)

__all__ = [
    "Editor",
    "TextFormat",
    "WRAPPER_ORDER",
    "CodeNode",
    "DecoratorNode",
    "EditorNode",
    "ElementNode",
    "HeadingNode",
    "HorizontalRuleNode",
    "ImageNode",
    "LineBreakNode",
    "LinkNode",
    "ListItemNode",
    "ListNode",
    "ParagraphNode",
    "QuoteNode",
    "RootNode",
    "TextNode",
    "create_code_node",
    "create_heading_node",
    "create_horizontal_rule_node",
    "create_image_node",
    "create_line_break_node",
    "create_link_node",
    "create_list_item_node",
    "create_list_node",
    "create_paragraph_node",
    "create_quote_node",
    "create_text_node",
    "node_from_json",
]
