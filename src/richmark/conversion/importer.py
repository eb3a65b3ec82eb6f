#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richmark/conversion/importer.py
"""Import traversal: markdown AST -> editor tree.

The walk is pre-order and depth-first. For each AST node the registry picks a
rule, which builds the editor counterpart under the editor node standing in
for the AST parent. Two side tables, keyed by ``id()`` of the AST node and
scoped to a single ``run`` call, carry state between levels:

- ``parent_of`` maps an AST node to the editor node its children attach to.
  A rule sets it through ``actions.set_current_as_parent``; a rule that does
  not (formatting wrappers, paragraphs folded into a quote) leaves the node
  structurally transparent and its children attach to the inherited parent.
- ``formatting_of`` maps an AST node to the format mask its descendants
  inherit. Wrapper rules OR their flag in with ``actions.add_formatting``;
  every other node inherits its parent's mask unchanged.

"""

from __future__ import annotations

import logging
from typing import Optional

from richmark.ast.nodes import Node, Root
from richmark.conversion.registry import VisitorRegistry
from richmark.editor.formatting import TextFormat
from richmark.editor.nodes import EditorNode, ElementNode

logger = logging.getLogger(__name__)


class ImportActions:
    """Per-node callbacks handed to ``ConversionRule.build_editor_node``."""

    def __init__(self, traversal: ImportTraversal, node: Node, parent: Optional[Node]):
        self._traversal = traversal
        self._node = node
        self._parent = parent

    def set_current_as_parent(self, editor_node: EditorNode) -> None:
        """Make ``editor_node`` the attachment point for this node's children."""
        self._traversal.parent_of[id(self._node)] = editor_node

    def add_formatting(self, flag: TextFormat) -> None:
        """OR ``flag`` into the mask inherited by this node's descendants."""
        self._traversal.formatting_of[id(self._node)] = self.get_parent_formatting() | int(flag)

    def get_parent_formatting(self) -> int:
        """Return the format mask inherited from the AST parent."""
        if self._parent is None:
            return 0
        return self._traversal.formatting_of.get(id(self._parent), 0)


class ImportTraversal:
    """Walk a markdown AST and build the editor tree.

    Parameters
    ----------
    registry : VisitorRegistry
        Rules to dispatch to

    """

    def __init__(self, registry: VisitorRegistry):
        self.registry = registry
        self.parent_of: dict[int, EditorNode] = {}
        self.formatting_of: dict[int, int] = {}

    def run(self, ast_root: Root, editor_root: ElementNode) -> None:
        """Import ``ast_root`` into ``editor_root``.

        Raises
        ------
        UnsupportedNodeError
            If a node has no import rule
        StructuralError
            If a rule cannot attach a node where the tree puts it

        Notes
        -----
        The import is all or nothing: on failure every child appended to
        ``editor_root`` during this call is detached again, so the caller's
        tree is left as it was.

        """
        self.parent_of = {id(ast_root): editor_root}
        self.formatting_of = {}
        existing = editor_root.get_children_size()
        logger.debug(f"Import started into editor root {editor_root.get_key()}")
        try:
            self._visit(ast_root, None, editor_root)
        except Exception:
            for child in editor_root.get_children()[existing:]:
                child.remove()
            logger.debug(f"Import failed; rolled back editor root {editor_root.get_key()}")
            raise
        finally:
            self.parent_of = {}
            self.formatting_of = {}
        logger.debug(f"Import finished; editor root has {editor_root.get_children_size()} block(s)")

    def _visit(self, node: Node, parent: Optional[Node], editor_parent: EditorNode) -> None:
        rule = self.registry.find_ast_rule(node)
        rule.build_editor_node(node, editor_parent, ImportActions(self, node, parent))

        key = id(node)
        self.parent_of.setdefault(key, editor_parent)
        if key not in self.formatting_of:
            self.formatting_of[key] = self.formatting_of.get(id(parent), 0) if parent is not None else 0

        for child in getattr(node, "children", ()):
            self._visit(child, node, self.parent_of[key])
