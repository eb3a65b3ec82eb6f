#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richmark/conversion/exporter.py
"""Export traversal: editor tree -> markdown AST.

Rules drive the walk: each rule appends the AST counterpart of its editor
node through ``actions.append_to_parent`` and recurses with
``actions.traverse_children``. Appending applies the adjacency merge, which
is what turns per-run wrapper nesting back into shared wrappers, e.g. two
italic runs become one ``emphasis`` node holding both texts.

"""

from __future__ import annotations

import logging
from typing import Optional

from richmark.ast.nodes import Node, ParentNode, Root
from richmark.conversion.registry import VisitorRegistry
from richmark.editor.nodes import EditorNode, ElementNode
from richmark.exceptions import StructuralError

logger = logging.getLogger(__name__)


class ExportActions:
    """Callbacks handed to ``ConversionRule.build_ast_node``."""

    def __init__(self, traversal: ExportTraversal):
        self._traversal = traversal
        self.previous_sibling: Optional[EditorNode] = None

    def append_to_parent(self, parent: Optional[Node], node: Node) -> Node:
        """Append ``node`` under ``parent`` and return the node holding it.

        With no parent, ``node`` becomes the root of the result. Otherwise,
        when a registry merge rule accepts the parent's last child and
        ``node``, ``node`` is merged into that child and the child is
        returned; rules must descend into the returned node.

        Raises
        ------
        StructuralError
            If a second root is produced, or ``parent`` cannot own children

        """
        traversal = self._traversal
        if parent is None:
            if traversal.root is not None:
                raise StructuralError("Export produced more than one root", node=node)
            if not isinstance(node, Root):
                raise StructuralError(f"Export root must be a 'root' node, got '{node.type}'", node=node)
            traversal.root = node
            return node

        if not isinstance(parent, ParentNode):
            raise StructuralError(f"Cannot append '{node.type}' under leaf node '{parent.type}'", node=node)

        if parent.children:
            prev = parent.children[-1]
            rule = traversal.registry.find_merge_rule(prev, node)
            if rule is not None:
                return rule.merge(prev, node)
        parent.children.append(node)
        return node

    def traverse_children(self, editor_node: EditorNode, ast_parent: Node) -> None:
        """Export every child of ``editor_node`` under ``ast_parent``."""
        if isinstance(editor_node, ElementNode):
            previous: Optional[EditorNode] = None
            for child in editor_node.get_children():
                self.visit(child, ast_parent, previous)
                previous = child

    def visit(self, editor_node: EditorNode, ast_parent: Optional[Node], previous: Optional[EditorNode] = None) -> None:
        """Export a single editor node under ``ast_parent``.

        ``previous`` is the editor sibling exported just before this node;
        rules read it back as ``actions.previous_sibling`` before recursing.

        """
        rule = self._traversal.registry.find_editor_rule(editor_node)
        self.previous_sibling = previous
        rule.build_ast_node(editor_node, ast_parent, self)


class ExportTraversal:
    """Walk an editor tree and build the markdown AST.

    Parameters
    ----------
    registry : VisitorRegistry
        Rules to dispatch to

    """

    def __init__(self, registry: VisitorRegistry):
        self.registry = registry
        self.root: Optional[Root] = None

    def run(self, editor_root: EditorNode) -> Root:
        """Export ``editor_root`` and return the AST root.

        Raises
        ------
        UnsupportedNodeError
            If an editor node has no export rule
        StructuralError
            If the walk produces no root or an unattachable node

        """
        self.root = None
        logger.debug(f"Export started from editor node {editor_root.get_key()}")
        try:
            ExportActions(self).visit(editor_root, None)
            root = self.root
        finally:
            self.root = None

        if root is None:
            raise StructuralError("Export produced no root node", node=editor_root)
        logger.debug(f"Export finished; AST root has {len(root.children)} block(s)")
        return root
