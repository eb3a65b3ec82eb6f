#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richmark/api.py
"""Entry points for moving markdown in and out of an editor tree.

The two boundary operations are :func:`import_markdown_to_editor` and
:func:`export_markdown_from_editor`. The remaining helpers expose each half
of the pipeline separately::

    markdown text --[markdown_to_ast]--> AST --[ast_to_editor]--> editor tree
    editor tree --[editor_to_ast]--> AST --[ast_to_markdown]--> markdown text

Examples
--------
    >>> from richmark import Editor, export_markdown_from_editor, import_markdown_to_editor
    >>> editor = Editor()
    >>> with editor.update() as root:
    ...     import_markdown_to_editor(root, "*Hello* World")
    >>> with editor.read() as root:
    ...     export_markdown_from_editor(root)
    '*Hello* World\\n'

"""

from __future__ import annotations

import logging
from typing import Optional

from richmark.ast.nodes import Root
from richmark.conversion.exporter import ExportTraversal
from richmark.conversion.importer import ImportTraversal
from richmark.conversion.registry import VisitorRegistry
from richmark.conversion.rules import default_registry
from richmark.editor.nodes import EditorNode, ElementNode
from richmark.options.markdown import MarkdownParserOptions, MarkdownRendererOptions
from richmark.parsers.markdown import markdown_to_ast
from richmark.renderers.markdown import render_markdown
from richmark.utils.decorators import debug_timer

logger = logging.getLogger(__name__)


def ast_to_editor(ast_root: Root, editor_root: ElementNode, registry: Optional[VisitorRegistry] = None) -> None:
    """Run the import traversal, appending the converted blocks to ``editor_root``.

    Parameters
    ----------
    ast_root : Root
        AST to import
    editor_root : ElementNode
        Editor node receiving the converted children, usually the root
    registry : VisitorRegistry, optional
        Conversion rules, defaults to :func:`default_registry`

    Raises
    ------
    UnsupportedNodeError
        If an AST node has no import rule
    StructuralError
        If the AST cannot be attached to the editor tree

    """
    ImportTraversal(registry or default_registry()).run(ast_root, editor_root)


def editor_to_ast(editor_root: EditorNode, registry: Optional[VisitorRegistry] = None) -> Root:
    """Run the export traversal and return the resulting AST root.

    Raises
    ------
    UnsupportedNodeError
        If an editor node has no export rule
    StructuralError
        If the traversal does not produce exactly one root

    """
    return ExportTraversal(registry or default_registry()).run(editor_root)


def ast_to_markdown(root: Root, options: Optional[MarkdownRendererOptions] = None) -> str:
    """Serialize an AST to markdown text."""
    return render_markdown(root, options)


def import_markdown_to_editor(
    editor_root: ElementNode,
    markdown: str,
    registry: Optional[VisitorRegistry] = None,
    parser_options: Optional[MarkdownParserOptions] = None,
) -> None:
    """Parse markdown text and import it into an editor tree.

    Parameters
    ----------
    editor_root : ElementNode
        Editor node receiving the imported blocks
    markdown : str
        Markdown text
    registry : VisitorRegistry, optional
        Conversion rules, defaults to :func:`default_registry`
    parser_options : MarkdownParserOptions, optional
        Parser configuration

    Raises
    ------
    ParsingError
        If the text cannot be tokenized into supported AST nodes; the editor
        tree is left untouched
    UnsupportedNodeError
        If the AST contains a node kind with no import rule; blocks imported
        before the failure are removed again

    """
    with debug_timer(logger, "Markdown import"):
        ast_root = markdown_to_ast(markdown, parser_options)
        ast_to_editor(ast_root, editor_root, registry)


def export_markdown_from_editor(
    editor_root: EditorNode,
    registry: Optional[VisitorRegistry] = None,
    renderer_options: Optional[MarkdownRendererOptions] = None,
) -> str:
    """Export an editor tree and serialize it to markdown text.

    Parameters
    ----------
    editor_root : EditorNode
        Editor root to export
    registry : VisitorRegistry, optional
        Conversion rules, defaults to :func:`default_registry`
    renderer_options : MarkdownRendererOptions, optional
        Serializer configuration

    Returns
    -------
    str
        Markdown text, empty for an empty document

    Raises
    ------
    UnsupportedNodeError
        If an editor node has no export rule
    StructuralError
        If the exported AST is malformed
    RenderingError
        If the serializer meets a node it cannot render

    """
    with debug_timer(logger, "Markdown export"):
        ast_root = editor_to_ast(editor_root, registry)
        return ast_to_markdown(ast_root, renderer_options)
