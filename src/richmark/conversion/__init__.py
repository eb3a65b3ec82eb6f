#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richmark/conversion/__init__.py
"""Conversion engine between the markdown AST and the editor tree.

- registry: ``ConversionRule`` and ``VisitorRegistry``
- rules: the default rule set
- importer: AST -> editor tree traversal
- exporter: editor tree -> AST traversal

"""

from richmark.conversion.exporter import ExportActions, ExportTraversal
from richmark.conversion.importer import ImportActions, ImportTraversal
from richmark.conversion.registry import ConversionRule, VisitorRegistry
from richmark.conversion.rules import DEFAULT_RULES, default_registry

__all__ = [
    "ConversionRule",
    "VisitorRegistry",
    "DEFAULT_RULES",
    "default_registry",
    "ImportActions",
    "ImportTraversal",
    "ExportActions",
    "ExportTraversal",
]
