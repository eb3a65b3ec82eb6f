#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richmark/ast/visitors.py
"""Visitor pattern implementation for AST traversal.

This module provides the visitor base class for processing markdown AST
nodes. Visitors keep algorithms such as serialization separate from the
node classes themselves.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from richmark.ast.nodes import (
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
    Root,
    Strong,
    Text,
    ThematicBreak,
)


class NodeVisitor(ABC):
    """Abstract base class for AST node visitors.

    Subclasses implement one visit_* method per node kind. The visitor
    pattern allows algorithms to be separated from the node structure.

    Examples
    --------
    Simple visitor that collects text:

        >>> class TextCollector(NodeVisitor):
        ...     def __init__(self):
        ...         self.parts = []
        ...
        ...     def generic_visit(self, node):
        ...         for child in getattr(node, "children", []):
        ...             child.accept(self)
        ...
        ...     def visit_text(self, node):
        ...         self.parts.append(node.value)

    """

    @abstractmethod
    def visit_root(self, node: Root) -> Any:
        """Visit a Root node."""
        pass

    @abstractmethod
    def visit_paragraph(self, node: Paragraph) -> Any:
        """Visit a Paragraph node."""
        pass

    @abstractmethod
    def visit_heading(self, node: Heading) -> Any:
        """Visit a Heading node."""
        pass

    @abstractmethod
    def visit_blockquote(self, node: Blockquote) -> Any:
        """Visit a Blockquote node."""
        pass

    @abstractmethod
    def visit_list(self, node: List) -> Any:
        """Visit a List node."""
        pass

    @abstractmethod
    def visit_list_item(self, node: ListItem) -> Any:
        """Visit a ListItem node."""
        pass

    @abstractmethod
    def visit_code(self, node: Code) -> Any:
        """Visit a Code (fenced block) node."""
        pass

    @abstractmethod
    def visit_thematic_break(self, node: ThematicBreak) -> Any:
        """Visit a ThematicBreak node."""
        pass

    @abstractmethod
    def visit_html(self, node: Html) -> Any:
        """Visit an Html node."""
        pass

    @abstractmethod
    def visit_text(self, node: Text) -> Any:
        """Visit a Text node."""
        pass

    @abstractmethod
    def visit_emphasis(self, node: Emphasis) -> Any:
        """Visit an Emphasis node."""
        pass

    @abstractmethod
    def visit_strong(self, node: Strong) -> Any:
        """Visit a Strong node."""
        pass

    @abstractmethod
    def visit_inline_markup(self, node: InlineMarkup) -> Any:
        """Visit an InlineMarkup node."""
        pass

    @abstractmethod
    def visit_inline_code(self, node: InlineCode) -> Any:
        """Visit an InlineCode node."""
        pass

    @abstractmethod
    def visit_link(self, node: Link) -> Any:
        """Visit a Link node."""
        pass

    @abstractmethod
    def visit_image(self, node: Image) -> Any:
        """Visit an Image node."""
        pass

    @abstractmethod
    def visit_break(self, node: Break) -> Any:
        """Visit a Break node."""
        pass


class NodeCounter(NodeVisitor):
    """Visitor counting nodes by kind tag.

    Used for debug logging of conversion sizes.

    Examples
    --------
        >>> counter = NodeCounter()
        >>> root.accept(counter)
        >>> counter.counts["text"]
        3

    """

    def __init__(self) -> None:
        """Initialize an empty tally."""
        self.counts: dict[str, int] = {}

    @property
    def total(self) -> int:
        """Total number of nodes visited."""
        return sum(self.counts.values())

    def generic_visit(self, node: Node) -> None:
        """Count ``node`` and visit its children."""
        self.counts[node.type] = self.counts.get(node.type, 0) + 1
        for child in getattr(node, "children", []):
            child.accept(self)

    def visit_root(self, node: Root) -> None:
        self.generic_visit(node)

    def visit_paragraph(self, node: Paragraph) -> None:
        self.generic_visit(node)

    def visit_heading(self, node: Heading) -> None:
        self.generic_visit(node)

    def visit_blockquote(self, node: Blockquote) -> None:
        self.generic_visit(node)

    def visit_list(self, node: List) -> None:
        self.generic_visit(node)

    def visit_list_item(self, node: ListItem) -> None:
        self.generic_visit(node)

    def visit_code(self, node: Code) -> None:
        self.generic_visit(node)

    def visit_thematic_break(self, node: ThematicBreak) -> None:
        self.generic_visit(node)

    def visit_html(self, node: Html) -> None:
        self.generic_visit(node)

    def visit_text(self, node: Text) -> None:
        self.generic_visit(node)

    def visit_emphasis(self, node: Emphasis) -> None:
        self.generic_visit(node)

    def visit_strong(self, node: Strong) -> None:
        self.generic_visit(node)

    def visit_inline_markup(self, node: InlineMarkup) -> None:
        self.generic_visit(node)

    def visit_inline_code(self, node: InlineCode) -> None:
        self.generic_visit(node)

    def visit_link(self, node: Link) -> None:
        self.generic_visit(node)

    def visit_image(self, node: Image) -> None:
        self.generic_visit(node)

    def visit_break(self, node: Break) -> None:
        self.generic_visit(node)
