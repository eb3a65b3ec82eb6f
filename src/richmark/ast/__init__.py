#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richmark/ast/__init__.py
"""Generic markdown Abstract Syntax Tree (AST).

The AST is the markdown-side half of the conversion engine. It follows the
mdast vocabulary so that formatting is expressed by nested wrapper nodes
(emphasis, strong, ``<u>`` inline markup) around text leaves.

The module consists of:

- nodes: AST node classes and the adjacency-merge rule
- visitors: Visitor pattern base class for AST traversal
- serialization: JSON serialization and deserialization of AST trees

Examples
--------
    >>> from richmark.ast import Emphasis, Paragraph, Root, Text
    >>> paragraph = Paragraph()
    >>> _ = paragraph.append(Emphasis(children=[Text(value="Hello,")]))
    >>> _ = paragraph.append(Emphasis(children=[Text(value=" world!")]))
    >>> len(paragraph.children)
    1

"""

from __future__ import annotations

from richmark.ast.nodes import (
    NODE_CLASSES,
    WRAPPER_TYPES,
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
    Node,
    Paragraph,
    ParentNode,
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
from richmark.ast.visitors import NodeCounter, NodeVisitor

__all__ = [
    "NODE_CLASSES",
    "WRAPPER_TYPES",
    "Blockquote",
    "Break",
    "Code",
    "Emphasis",
    "Heading",
    "Html",
    "Image",
    "InlineCode",
    "InlineMarkup",
    "Link",
    "List",
    "ListItem",
    "Node",
    "Paragraph",
    "ParentNode",
    "Root",
    "Strong",
    "Text",
    "ThematicBreak",
    "Underline",
    "is_parent",
    "merge",
    "should_merge",
    "ast_to_dict",
    "ast_to_json",
    "dict_to_ast",
    "json_to_ast",
    "NodeCounter",
    "NodeVisitor",
]
