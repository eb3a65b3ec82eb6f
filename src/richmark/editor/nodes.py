#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richmark/editor/nodes.py
"""Editor tree node classes.

The editor tree is the live document model of a rich-text editing surface.
Its shape differs from the markdown AST in two ways:

- Formatting is a bitmask on ``TextNode`` runs (see
  ``richmark.editor.formatting``) instead of nested wrapper nodes.
- Quotes and list items hold inline content directly; there is no paragraph
  between them and their text.

Element nodes own an ordered list of children. Leaf nodes (text, line break
and the decorator nodes: horizontal rule, image) own none. Every node keeps a
reference to its parent so siblings can be navigated, and a node belongs to
at most one parent at a time: attaching it somewhere else detaches it first.

Examples
--------
    >>> from richmark.editor.nodes import create_paragraph_node, create_text_node, RootNode
    >>> root = RootNode()
    >>> _ = root.append(create_paragraph_node().append(create_text_node("Hello World")))
    >>> root.get_text_content()
    'Hello World'

"""

from __future__ import annotations

import itertools
from typing import Any, ClassVar, Iterator, Optional

from richmark.constants import HEADING_TAGS, LIST_TYPES, HeadingTag, ListType
from richmark.editor.formatting import TextFormat
from richmark.exceptions import StructuralError, UnsupportedNodeError, ValidationError

_key_counter = itertools.count(1)


class EditorNode:
    """Base class for all editor tree nodes."""

    node_type: ClassVar[str] = "node"

    def __init__(self) -> None:
        """Assign a fresh key; new nodes are detached."""
        self.key: str = str(next(_key_counter))
        self.parent: Optional[ElementNode] = None

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} key={self.key}>"

    @classmethod
    def get_type(cls) -> str:
        """Return the kind tag of this node class."""
        return cls.node_type

    def get_key(self) -> str:
        return self.key

    def get_parent(self) -> Optional[ElementNode]:
        return self.parent

    def get_index_within_parent(self) -> int:
        """Return this node's position among its siblings, or -1 if detached."""
        if self.parent is None:
            return -1
        for index, sibling in enumerate(self.parent.children):
            if sibling is self:
                return index
        return -1

    def get_previous_sibling(self) -> Optional[EditorNode]:
        index = self.get_index_within_parent()
        if index <= 0 or self.parent is None:
            return None
        return self.parent.children[index - 1]

    def get_next_sibling(self) -> Optional[EditorNode]:
        index = self.get_index_within_parent()
        if index < 0 or self.parent is None or index + 1 >= len(self.parent.children):
            return None
        return self.parent.children[index + 1]

    def get_text_content(self) -> str:
        return ""

    def remove(self) -> None:
        """Detach this node from its parent."""
        index = self.get_index_within_parent()
        if index >= 0 and self.parent is not None:
            del self.parent.children[index]
        self.parent = None

    def _require_parent(self) -> ElementNode:
        if self.parent is None:
            raise StructuralError(f"{self.get_type()} node {self.key} is not attached to a parent", node=self)
        return self.parent

    def insert_after(self, node: EditorNode) -> EditorNode:
        """Insert ``node`` as the next sibling of this node.

        Raises
        ------
        StructuralError
            If this node has no parent

        """
        parent = self._require_parent()
        node.remove()
        parent.children.insert(self.get_index_within_parent() + 1, node)
        node.parent = parent
        return node

    def insert_before(self, node: EditorNode) -> EditorNode:
        """Insert ``node`` as the previous sibling of this node.

        Raises
        ------
        StructuralError
            If this node has no parent

        """
        parent = self._require_parent()
        node.remove()
        parent.children.insert(self.get_index_within_parent(), node)
        node.parent = parent
        return node

    def replace(self, node: EditorNode) -> EditorNode:
        """Put ``node`` in this node's place and detach this node."""
        self.insert_after(node)
        self.remove()
        return node

    def export_json(self) -> dict[str, Any]:
        """Serialize this node (and its subtree) to a JSON-compatible dict."""
        return {"type": self.get_type(), "version": 1}


class ElementNode(EditorNode):
    """Editor node that owns an ordered list of children."""

    node_type: ClassVar[str] = "element"

    def __init__(self) -> None:
        super().__init__()
        self.children: list[EditorNode] = []

    def __iter__(self) -> Iterator[EditorNode]:
        return iter(list(self.children))

    def get_children(self) -> list[EditorNode]:
        """Return a snapshot of the children list."""
        return list(self.children)

    def get_children_size(self) -> int:
        return len(self.children)

    def get_first_child(self) -> Optional[EditorNode]:
        return self.children[0] if self.children else None

    def get_last_child(self) -> Optional[EditorNode]:
        return self.children[-1] if self.children else None

    def is_empty(self) -> bool:
        return not self.children

    def append(self, *nodes: EditorNode) -> ElementNode:
        """Append nodes as the last children, detaching them from any old parent.

        Returns
        -------
        ElementNode
            This node, so calls can be chained

        Raises
        ------
        StructuralError
            If a node would become its own ancestor

        """
        for node in nodes:
            ancestor: Optional[EditorNode] = self
            while ancestor is not None:
                if ancestor is node:
                    raise StructuralError(f"Cannot append {node!r} inside itself", node=node)
                ancestor = ancestor.parent
            node.remove()
            node.parent = self
            self.children.append(node)
        return self

    def clear(self) -> ElementNode:
        """Detach all children."""
        for child in self.get_children():
            child.remove()
        return self

    def get_text_content(self) -> str:
        return "".join(child.get_text_content() for child in self.children)

    def export_json(self) -> dict[str, Any]:
        result = super().export_json()
        result["children"] = [child.export_json() for child in self.children]
        return result


class RootNode(ElementNode):
    """Singleton root of a document's editor tree."""

    node_type: ClassVar[str] = "root"

    def get_text_content(self) -> str:
        return "\n\n".join(child.get_text_content() for child in self.children)

    def remove(self) -> None:
        raise StructuralError("The root node cannot be removed", node=self)

    def insert_after(self, node: EditorNode) -> EditorNode:
        raise StructuralError("Cannot insert siblings next to the root node", node=self)

    def insert_before(self, node: EditorNode) -> EditorNode:
        raise StructuralError("Cannot insert siblings next to the root node", node=self)


class ParagraphNode(ElementNode):
    node_type: ClassVar[str] = "paragraph"


class QuoteNode(ElementNode):
    """Block quote; holds inline content directly."""

    node_type: ClassVar[str] = "quote"


class HeadingNode(ElementNode):
    """Heading identified by its ``h1``..``h6`` tag."""

    node_type: ClassVar[str] = "heading"

    def __init__(self, tag: HeadingTag = "h1") -> None:
        super().__init__()
        if tag not in HEADING_TAGS:
            raise ValidationError(f"Invalid heading tag: {tag!r}", parameter_name="tag", parameter_value=tag)
        self.tag: HeadingTag = tag

    def get_tag(self) -> HeadingTag:
        return self.tag

    def export_json(self) -> dict[str, Any]:
        result = super().export_json()
        result["tag"] = self.tag
        return result


class ListNode(ElementNode):
    """Bullet or numbered list of ``ListItemNode`` children."""

    node_type: ClassVar[str] = "list"

    def __init__(self, list_type: ListType = "bullet", start: int = 1) -> None:
        super().__init__()
        if list_type not in LIST_TYPES:
            raise ValidationError(
                f"Invalid list type: {list_type!r}", parameter_name="list_type", parameter_value=list_type
            )
        self.list_type: ListType = list_type
        self.start = start

    def get_list_type(self) -> ListType:
        return self.list_type

    def get_start(self) -> int:
        return self.start

    def export_json(self) -> dict[str, Any]:
        result = super().export_json()
        result["listType"] = self.list_type
        result["start"] = self.start
        return result


class ListItemNode(ElementNode):
    """List item; holds inline content directly, or a single nested list."""

    node_type: ClassVar[str] = "listitem"

    def has_only_nested_list(self) -> bool:
        """Return True if the only child of this item is a list."""
        return len(self.children) == 1 and isinstance(self.children[0], ListNode)


class LinkNode(ElementNode):
    """Hyperlink wrapping inline content."""

    node_type: ClassVar[str] = "link"

    def __init__(self, url: str = "", title: Optional[str] = None) -> None:
        super().__init__()
        self.url = url
        self.title = title

    def get_url(self) -> str:
        return self.url

    def set_url(self, url: str) -> LinkNode:
        self.url = url
        return self

    def get_title(self) -> Optional[str]:
        return self.title

    def export_json(self) -> dict[str, Any]:
        result = super().export_json()
        result["url"] = self.url
        if self.title:
            result["title"] = self.title
        return result


class CodeNode(ElementNode):
    """Code block; its text content is the code."""

    node_type: ClassVar[str] = "code"

    def __init__(self, language: Optional[str] = None) -> None:
        super().__init__()
        self.language = language

    def get_language(self) -> Optional[str]:
        return self.language

    def set_language(self, language: Optional[str]) -> CodeNode:
        self.language = language
        return self

    def export_json(self) -> dict[str, Any]:
        result = super().export_json()
        result["language"] = self.language
        return result


class TextNode(EditorNode):
    """Run of text sharing one set of format flags.

    Parameters
    ----------
    text : str, default = ""
        Text content
    format : int, default = 0
        Bitwise-OR of ``TextFormat`` flags

    """

    node_type: ClassVar[str] = "text"

    def __init__(self, text: str = "", format: int = 0) -> None:
        super().__init__()
        self.text = text
        self.format = int(format)

    def __repr__(self) -> str:
        return f"<TextNode key={self.key} text={self.text!r} format={self.format}>"

    def get_text_content(self) -> str:
        return self.text

    def set_text_content(self, text: str) -> TextNode:
        self.text = text
        return self

    def get_format(self) -> int:
        return self.format

    def set_format(self, format: int) -> TextNode:
        self.format = int(format)
        return self

    def has_format(self, flag: TextFormat) -> bool:
        return bool(self.format & flag)

    def toggle_format(self, flag: TextFormat) -> TextNode:
        """Flip ``flag`` on this run, as a toolbar button would."""
        self.format ^= int(flag)
        return self

    def export_json(self) -> dict[str, Any]:
        result = super().export_json()
        result["text"] = self.text
        result["format"] = self.format
        return result


class LineBreakNode(EditorNode):
    """Line break inside a block."""

    node_type: ClassVar[str] = "linebreak"

    def get_text_content(self) -> str:
        return "\n"


class DecoratorNode(EditorNode):
    """Leaf node rendered by the editing surface as an opaque widget."""

    node_type: ClassVar[str] = "decorator"


class HorizontalRuleNode(DecoratorNode):
    node_type: ClassVar[str] = "horizontalrule"


class ImageNode(DecoratorNode):
    """Inline image.

    Parameters
    ----------
    src : str
        Image source URL
    alt_text : str, default = ""
        Alternative text
    title : str or None, default = None
        Optional title

    """

    node_type: ClassVar[str] = "image"

    def __init__(self, src: str, alt_text: str = "", title: Optional[str] = None) -> None:
        super().__init__()
        self.src = src
        self.alt_text = alt_text
        self.title = title

    def get_src(self) -> str:
        return self.src

    def get_alt_text(self) -> str:
        return self.alt_text

    def get_title(self) -> Optional[str]:
        return self.title

    def export_json(self) -> dict[str, Any]:
        result = super().export_json()
        result["src"] = self.src
        result["altText"] = self.alt_text
        if self.title:
            result["title"] = self.title
        return result


# ============================================================================
# Factory helpers
# ============================================================================


def create_paragraph_node() -> ParagraphNode:
    return ParagraphNode()


def create_text_node(text: str = "", format: int = 0) -> TextNode:
    return TextNode(text, format)


def create_heading_node(tag: HeadingTag = "h1") -> HeadingNode:
    return HeadingNode(tag)


def create_quote_node() -> QuoteNode:
    return QuoteNode()


def create_list_node(list_type: ListType = "bullet", start: int = 1) -> ListNode:
    return ListNode(list_type, start)


def create_list_item_node() -> ListItemNode:
    return ListItemNode()


def create_link_node(url: str, title: Optional[str] = None) -> LinkNode:
    return LinkNode(url, title)


def create_code_node(language: Optional[str] = None) -> CodeNode:
    return CodeNode(language)


def create_line_break_node() -> LineBreakNode:
    return LineBreakNode()


def create_horizontal_rule_node() -> HorizontalRuleNode:
    return HorizontalRuleNode()


def create_image_node(src: str, alt_text: str = "", title: Optional[str] = None) -> ImageNode:
    return ImageNode(src, alt_text, title)


def as_element(node: EditorNode) -> ElementNode:
    """Return ``node`` if it can own children.

    Raises
    ------
    StructuralError
        If ``node`` is a leaf

    """
    if not isinstance(node, ElementNode):
        raise StructuralError(f"Cannot append children to a {node.get_type()} node", node=node)
    return node


# ============================================================================
# JSON import
# ============================================================================


def node_from_json(data: dict[str, Any]) -> EditorNode:
    """Rebuild an editor node (and its subtree) from ``export_json`` output.

    Raises
    ------
    UnsupportedNodeError
        If ``type`` names no editor node kind
    ValidationError
        If ``data`` is not a dictionary with a ``type`` key

    """
    if not isinstance(data, dict) or "type" not in data:
        raise ValidationError("Editor node data must be a dict with a 'type' key", parameter_value=data)

    node_type = data["type"]
    node: EditorNode
    if node_type == "root":
        node = RootNode()
    elif node_type == "paragraph":
        node = ParagraphNode()
    elif node_type == "quote":
        node = QuoteNode()
    elif node_type == "heading":
        node = HeadingNode(data.get("tag", "h1"))
    elif node_type == "list":
        node = ListNode(data.get("listType", "bullet"), data.get("start", 1))
    elif node_type == "listitem":
        node = ListItemNode()
    elif node_type == "link":
        node = LinkNode(data.get("url", ""), data.get("title"))
    elif node_type == "code":
        node = CodeNode(data.get("language"))
    elif node_type == "text":
        node = TextNode(data.get("text", ""), data.get("format", 0))
    elif node_type == "linebreak":
        node = LineBreakNode()
    elif node_type == "horizontalrule":
        node = HorizontalRuleNode()
    elif node_type == "image":
        node = ImageNode(data.get("src", ""), data.get("altText", ""), data.get("title"))
    else:
        raise UnsupportedNodeError(node_type, data, direction="deserialize")

    if isinstance(node, ElementNode):
        for child in data.get("children", []):
            node.append(node_from_json(child))
    return node
