#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Option dataclasses for the markdown parser and renderer."""

from richmark.options.base import BaseParserOptions, BaseRendererOptions, CloneFrozenMixin
from richmark.options.markdown import MarkdownParserOptions, MarkdownRendererOptions

__all__ = [
    "BaseParserOptions",
    "BaseRendererOptions",
    "CloneFrozenMixin",
    "MarkdownParserOptions",
    "MarkdownRendererOptions",
]
