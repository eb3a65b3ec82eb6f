#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richmark/conversion/registry.py
"""Conversion rules and the registry that dispatches to them.

A ``ConversionRule`` handles one family of nodes in both directions:

- import (markdown AST -> editor tree): ``match_ast`` / ``build_editor_node``
- export (editor tree -> markdown AST): ``match_editor`` / ``build_ast_node``
- adjacency merging on export: ``should_merge`` / ``merge``

``VisitorRegistry`` holds an ordered, immutable tuple of rules. Lookups scan
the rules in registration order and the first match wins, so a rule
registered ahead of the defaults overrides them. A node no rule matches is
fatal: silently dropping it would lose document content.

Adding a node kind never requires touching the traversal code; register an
extra rule with ``VisitorRegistry.with_rules``.

Examples
--------
    >>> from richmark.conversion import default_registry
    >>> registry = default_registry().with_rules(MyStrikethroughRule(), before=True)  # doctest: +SKIP

"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, ClassVar, Iterable, Iterator, Optional

from richmark.ast.nodes import Node
from richmark.editor.nodes import EditorNode
from richmark.exceptions import StructuralError, UnsupportedNodeError

if TYPE_CHECKING:
    from richmark.conversion.exporter import ExportActions
    from richmark.conversion.importer import ImportActions

logger = logging.getLogger(__name__)


class ConversionRule:
    """Base class for conversion rules.

    Subclasses set ``ast_type`` and/or ``editor_class`` for the common case
    of matching by kind, or override ``match_ast`` / ``match_editor`` for
    anything finer. The default hooks are inert, so a rule only implements
    the directions it participates in.

    Attributes
    ----------
    ast_type : str or None
        AST kind tag handled on import
    editor_class : type or None
        Editor node class handled on export (``isinstance`` test)

    """

    ast_type: ClassVar[Optional[str]] = None
    editor_class: ClassVar[Optional[type[EditorNode]]] = None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"

    def match_ast(self, node: Node) -> bool:
        return self.ast_type is not None and node.type == self.ast_type

    def build_editor_node(self, ast_node: Node, parent: EditorNode, actions: ImportActions) -> None:
        """Create the editor counterpart of ``ast_node`` under ``parent``."""
        raise NotImplementedError(f"{self!r} does not import '{ast_node.type}' nodes")

    def match_editor(self, node: EditorNode) -> bool:
        return self.editor_class is not None and isinstance(node, self.editor_class)

    def build_ast_node(self, editor_node: EditorNode, parent: Optional[Node], actions: ExportActions) -> None:
        """Create the AST counterpart of ``editor_node`` under ``parent``."""
        raise NotImplementedError(f"{self!r} does not export '{editor_node.get_type()}' nodes")

    def should_merge(self, prev: Node, node: Node) -> bool:
        return False

    def merge(self, prev: Node, node: Node) -> Node:
        raise StructuralError(f"{self!r} cannot merge '{node.type}' into '{prev.type}'", node=node)


class VisitorRegistry:
    """Ordered collection of conversion rules.

    Parameters
    ----------
    rules : iterable of ConversionRule
        Rules in lookup order

    """

    def __init__(self, rules: Iterable[ConversionRule]):
        self._rules: tuple[ConversionRule, ...] = tuple(rules)
        logger.debug(f"Registry created with {len(self._rules)} rules")

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[ConversionRule]:
        return iter(self._rules)

    def __repr__(self) -> str:
        return f"VisitorRegistry({list(self._rules)!r})"

    @property
    def rules(self) -> tuple[ConversionRule, ...]:
        return self._rules

    def find_ast_rule(self, node: Node) -> ConversionRule:
        """Return the first rule importing ``node``.

        Raises
        ------
        UnsupportedNodeError
            If no rule matches

        """
        for rule in self._rules:
            if rule.match_ast(node):
                return rule
        raise UnsupportedNodeError(node.type, node, direction="import")

    def find_editor_rule(self, node: EditorNode) -> ConversionRule:
        """Return the first rule exporting ``node``.

        Raises
        ------
        UnsupportedNodeError
            If no rule matches

        """
        for rule in self._rules:
            if rule.match_editor(node):
                return rule
        raise UnsupportedNodeError(node.get_type(), node, direction="export")

    def find_merge_rule(self, prev: Node, node: Node) -> Optional[ConversionRule]:
        """Return the first rule willing to merge ``node`` into ``prev``, if any."""
        for rule in self._rules:
            if rule.should_merge(prev, node):
                return rule
        return None

    def with_rules(self, *extra: ConversionRule, before: bool = False) -> VisitorRegistry:
        """Return a new registry with ``extra`` rules added.

        Parameters
        ----------
        *extra : ConversionRule
            Rules to register
        before : bool, default False
            Put the extra rules ahead of the existing ones so they take
            precedence

        """
        rules: list[Any] = [*extra, *self._rules] if before else [*self._rules, *extra]
        return VisitorRegistry(rules)
