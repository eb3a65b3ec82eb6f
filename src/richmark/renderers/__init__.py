#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Renderers turning the richmark AST into text."""

from richmark.renderers.base import BaseRenderer, InlineContentMixin
from richmark.renderers.markdown import MarkdownRenderer, render_markdown

__all__ = ["BaseRenderer", "InlineContentMixin", "MarkdownRenderer", "render_markdown"]
