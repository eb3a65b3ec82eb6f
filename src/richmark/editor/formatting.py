#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richmark/editor/formatting.py
"""Formatting bitmask algebra.

Editor text runs carry their formatting as a bitwise-OR of ``TextFormat``
flags while the markdown AST nests wrapper nodes around text. This module is
the two-way mapping between the two representations:

- ``FLAG_TO_WRAPPER`` / ``flag_for_wrapper`` map flags to wrapper kinds and
  back.
- ``WRAPPER_ORDER`` fixes the nesting order of wrappers on export. Adjacent
  runs sharing a flag must produce same-kind wrappers at the same depth so
  the adjacency merge can coalesce them; changing this order changes the
  markdown produced for mixed formatting.
- ``continued_flags`` / ``opened_flags`` compute the wrapper transitions
  between a run and the run before it.

CODE is checked before everything else: a run carrying it becomes inline
code and no wrapper nesting is attempted.

"""

from __future__ import annotations

from enum import IntFlag
from typing import Callable

from richmark.ast.nodes import Emphasis, InlineMarkup, Node, ParentNode, Strong
from richmark.constants import UNDERLINE_TAG


class TextFormat(IntFlag):
    """Format flags stored on editor text nodes."""

    NONE = 0
    BOLD = 1
    ITALIC = 2
    STRIKETHROUGH = 4
    UNDERLINE = 8
    CODE = 16


# Nesting order of wrappers, outermost first
WRAPPER_ORDER: tuple[TextFormat, ...] = (TextFormat.ITALIC, TextFormat.BOLD, TextFormat.UNDERLINE)

FLAG_TO_WRAPPER: dict[TextFormat, Callable[[], ParentNode]] = {
    TextFormat.ITALIC: Emphasis,
    TextFormat.BOLD: Strong,
    TextFormat.UNDERLINE: lambda: InlineMarkup(name=UNDERLINE_TAG),
}


def create_wrapper(flag: TextFormat) -> ParentNode:
    """Create an empty wrapper node for a formatting flag.

    Raises
    ------
    KeyError
        If ``flag`` has no wrapper kind (e.g. CODE or a combination)

    """
    return FLAG_TO_WRAPPER[flag]()


def flag_for_wrapper(node: Node) -> TextFormat | None:
    """Return the formatting flag expressed by a wrapper node, if any."""
    if isinstance(node, Emphasis):
        return TextFormat.ITALIC
    if isinstance(node, Strong):
        return TextFormat.BOLD
    if isinstance(node, InlineMarkup) and node.name == UNDERLINE_TAG:
        return TextFormat.UNDERLINE
    return None


def is_code(mask: int) -> bool:
    """Return True if ``mask`` carries the CODE flag."""
    return bool(mask & TextFormat.CODE)


def continued_flags(prev_mask: int, mask: int) -> list[TextFormat]:
    """Flags set on both the previous run and this one, in ``WRAPPER_ORDER``."""
    return [flag for flag in WRAPPER_ORDER if prev_mask & mask & flag]


def opened_flags(prev_mask: int, mask: int) -> list[TextFormat]:
    """Flags set on this run but not the previous one, in ``WRAPPER_ORDER``."""
    return [flag for flag in WRAPPER_ORDER if mask & flag and not prev_mask & flag]


def describe(mask: int) -> str:
    """Human-readable flag names for ``mask``, e.g. ``"BOLD|ITALIC"``."""
    names = [flag.name for flag in TextFormat if flag and mask & flag and flag.name]
    return "|".join(names) if names else "NONE"
