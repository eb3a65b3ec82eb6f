#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Markdown text parsers producing the richmark AST."""

from richmark.parsers.markdown import MarkdownParser, markdown_to_ast

__all__ = ["MarkdownParser", "markdown_to_ast"]
