#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richmark/ast/nodes.py
"""AST node classes for the generic markdown tree.

This module defines the node hierarchy used on the markdown side of the
conversion engine. The vocabulary follows mdast: every node carries a kind
tag in its ``type`` class attribute, parent kinds own an ordered list of
``children`` and leaf kinds carry a string ``value`` or attributes only.

Node Hierarchy
--------------
All nodes inherit from the base Node class and support the visitor pattern.

Parent nodes:
    - Root, Paragraph, Heading, Blockquote, List, ListItem
    - Emphasis, Strong, InlineMarkup (formatting wrappers), Link

Leaf nodes:
    - Text, InlineCode, Code, ThematicBreak, Image, Break, Html

Adjacency merging
-----------------
``ParentNode.append`` collapses compatible consecutive siblings: two text
nodes become one text node with the concatenated value and two wrappers of
the same kind become one wrapper holding both child lists. The export
traversal applies the same rule through the conversion registry.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, fields
from typing import Any, ClassVar, Optional

from richmark.exceptions import StructuralError

# Kind tags of the formatting wrapper nodes
WRAPPER_TYPES = frozenset({"emphasis", "strong", "inlineMarkup"})


class Node(ABC):
    """Base class for all AST nodes.

    Subclasses are dataclasses; their fields are the node's attributes and,
    for parent kinds, its ``children``.

    """

    type: ClassVar[str]

    @abstractmethod
    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this node.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_* methods

        Returns
        -------
        Any
            Result from the visitor's processing

        """
        pass

    def to_dict(self) -> dict[str, Any]:
        """Return this node as a plain mdast-shaped dictionary.

        Attributes whose value is None are left out.

        Returns
        -------
        dict
            ``{"type": ..., <attributes>..., "children": [...]}``

        """
        result: dict[str, Any] = {"type": self.type}
        for f in fields(self):  # type: ignore[arg-type]
            value = getattr(self, f.name)
            if value is None:
                continue
            if f.name == "children":
                result["children"] = [child.to_dict() for child in value]
            elif isinstance(value, list):
                result[f.name] = list(value)
            else:
                result[f.name] = value
        return result


class ParentNode(Node):
    """Mixin base for nodes that own an ordered list of children."""

    children: list[Node]

    def append(self, node: Node) -> Node:
        """Append a child, merging it into the last child when compatible.

        Parameters
        ----------
        node : Node
            Node to append

        Returns
        -------
        Node
            The node now holding the appended content: either ``node`` itself
            or the previous last child it was merged into

        """
        if self.children:
            prev = self.children[-1]
            if should_merge(prev, node):
                return merge(prev, node)
        self.children.append(node)
        return node


def is_parent(node: Node) -> bool:
    """Return True if ``node`` can own children."""
    return isinstance(node, ParentNode)


def should_merge(prev: Node, node: Node) -> bool:
    """Decide whether ``node`` collapses into its previous sibling ``prev``.

    Text merges with text; emphasis, strong and inline markup merge with a
    wrapper of the same kind (and, for inline markup, the same tag name).

    """
    if prev.type != node.type:
        return False
    if prev.type == "text":
        return True
    if prev.type == "inlineMarkup":
        return getattr(prev, "name", None) == getattr(node, "name", None)
    return prev.type in WRAPPER_TYPES


def merge(prev: Node, node: Node) -> Node:
    """Merge ``node`` into ``prev`` in place and return ``prev``."""
    if isinstance(prev, Text) and isinstance(node, Text):
        prev.value += node.value
        return prev
    if isinstance(prev, ParentNode) and isinstance(node, ParentNode):
        prev.children.extend(node.children)
        return prev
    raise StructuralError(f"Cannot merge '{node.type}' into '{prev.type}'", node=node)


# ============================================================================
# Block-level Nodes
# ============================================================================


@dataclass
class Root(ParentNode):
    """Root node of a markdown tree.

    Parameters
    ----------
    children : list of Node, default = empty list
        Block-level nodes in the document

    """

    type: ClassVar[str] = "root"
    children: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this root."""
        return visitor.visit_root(self)


@dataclass
class Paragraph(ParentNode):
    """Paragraph of inline content."""

    type: ClassVar[str] = "paragraph"
    children: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_paragraph(self)


@dataclass
class Heading(ParentNode):
    """Heading with a depth between 1 and 6.

    Parameters
    ----------
    depth : int, default = 1
        Heading level (1-6)
    children : list of Node, default = empty list
        Inline content

    Raises
    ------
    ValueError
        If depth is outside 1..6

    """

    type: ClassVar[str] = "heading"
    depth: int = 1
    children: list[Node] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate the heading depth."""
        if not 1 <= self.depth <= 6:
            raise ValueError(f"Heading depth must be between 1 and 6, got {self.depth}")

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_heading(self)


@dataclass
class Blockquote(ParentNode):
    """Block quote holding block-level children."""

    type: ClassVar[str] = "blockquote"
    children: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_blockquote(self)


@dataclass
class List(ParentNode):
    """Ordered or unordered list.

    Parameters
    ----------
    ordered : bool, default = False
        Whether the list is numbered
    start : int or None, default = None
        First number of an ordered list; None means 1
    spread : bool, default = False
        Whether items are separated by blank lines (loose list)
    children : list of Node, default = empty list
        ListItem nodes

    """

    type: ClassVar[str] = "list"
    ordered: bool = False
    start: Optional[int] = None
    spread: bool = False
    children: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_list(self)


@dataclass
class ListItem(ParentNode):
    """Item of a list, holding block-level children."""

    type: ClassVar[str] = "listItem"
    spread: bool = False
    children: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_list_item(self)


@dataclass
class Code(Node):
    """Fenced code block.

    Parameters
    ----------
    lang : str or None, default = None
        Language from the fence info string
    value : str, default = ""
        Code content without the trailing newline

    """

    type: ClassVar[str] = "code"
    lang: Optional[str] = None
    value: str = ""

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_code(self)


@dataclass
class ThematicBreak(Node):
    """Thematic break (horizontal rule)."""

    type: ClassVar[str] = "thematicBreak"

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_thematic_break(self)


@dataclass
class Html(Node):
    """Raw HTML that has no dedicated node kind.

    The default conversion rules do not handle this kind, so a document
    containing it fails loudly on import instead of losing the markup.

    """

    type: ClassVar[str] = "html"
    value: str = ""

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_html(self)


# ============================================================================
# Inline Nodes
# ============================================================================


@dataclass
class Text(Node):
    """Plain text run. Soft line breaks are kept as ``"\\n"`` in the value."""

    type: ClassVar[str] = "text"
    value: str = ""

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_text(self)


@dataclass
class Emphasis(ParentNode):
    """Emphasis (italic) wrapper."""

    type: ClassVar[str] = "emphasis"
    children: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_emphasis(self)


@dataclass
class Strong(ParentNode):
    """Strong (bold) wrapper."""

    type: ClassVar[str] = "strong"
    children: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_strong(self)


@dataclass
class InlineMarkup(ParentNode):
    """Inline HTML-like element wrapping inline content, such as ``<u>``.

    Parameters
    ----------
    name : str, default = "u"
        Tag name
    attributes : list, default = empty list
        Tag attributes (kept for shape compatibility, not rendered)
    children : list of Node, default = empty list
        Inline content

    """

    type: ClassVar[str] = "inlineMarkup"
    name: str = "u"
    attributes: list[Any] = field(default_factory=list)
    children: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_inline_markup(self)


def Underline(children: list[Node] | None = None) -> InlineMarkup:  # noqa: N802
    """Create an underline wrapper (``<u>`` inline markup)."""
    return InlineMarkup(name="u", children=list(children or []))


@dataclass
class InlineCode(Node):
    """Inline code span."""

    type: ClassVar[str] = "inlineCode"
    value: str = ""

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_inline_code(self)


@dataclass
class Link(ParentNode):
    """Hyperlink wrapping inline content.

    Parameters
    ----------
    url : str, default = ""
        Link destination
    title : str or None, default = None
        Optional link title
    children : list of Node, default = empty list
        Link text

    """

    type: ClassVar[str] = "link"
    url: str = ""
    title: Optional[str] = None
    children: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_link(self)


@dataclass
class Image(Node):
    """Image reference.

    Parameters
    ----------
    url : str, default = ""
        Image source
    alt : str, default = ""
        Alternative text
    title : str or None, default = None
        Optional title

    """

    type: ClassVar[str] = "image"
    url: str = ""
    alt: str = ""
    title: Optional[str] = None

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_image(self)


@dataclass
class Break(Node):
    """Hard line break."""

    type: ClassVar[str] = "break"

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_break(self)


NODE_CLASSES: dict[str, type[Node]] = {
    cls.type: cls
    for cls in (
        Root,
        Paragraph,
        Heading,
        Blockquote,
        List,
        ListItem,
        Code,
        ThematicBreak,
        Html,
        Text,
        Emphasis,
        Strong,
        InlineMarkup,
        InlineCode,
        Link,
        Image,
        Break,
    )
}
