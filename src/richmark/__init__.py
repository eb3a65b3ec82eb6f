"""richmark - convert markdown to and from a rich-text editor tree.

richmark is a bidirectional conversion engine between an editable document
tree, where formatting lives as bit flags on text runs, and an mdast-shaped
markdown AST, where formatting is expressed with nested wrapper nodes.

Basic usage:

    >>> from richmark import Editor, export_markdown_from_editor, import_markdown_to_editor
    >>> editor = Editor()
    >>> with editor.update() as root:
    ...     import_markdown_to_editor(root, "**Hello** <u>World</u>")
    >>> with editor.read() as root:
    ...     export_markdown_from_editor(root)
    '**Hello** <u>World</u>\\n'

Conversion rules live in a ``VisitorRegistry``; pass a custom registry to
either entry point to add or override node kinds.

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# Check Python version before any imports
import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "richmark requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "0.1.0"

from richmark.api import (  # noqa: E402
    ast_to_editor,
    ast_to_markdown,
    editor_to_ast,
    export_markdown_from_editor,
    import_markdown_to_editor,
)
from richmark.conversion import ConversionRule, VisitorRegistry, default_registry  # noqa: E402
from richmark.editor import Editor, TextFormat  # noqa: E402
from richmark.exceptions import (  # noqa: E402
    ConversionError,
    DependencyError,
    ParsingError,
    RenderingError,
    RichmarkError,
    StructuralError,
    UnsupportedNodeError,
    ValidationError,
)
from richmark.options import MarkdownParserOptions, MarkdownRendererOptions  # noqa: E402
from richmark.parsers import markdown_to_ast  # noqa: E402
from richmark.renderers import render_markdown  # noqa: E402

__all__ = [
    "__version__",
    # Entry points
    "import_markdown_to_editor",
    "export_markdown_from_editor",
    "ast_to_editor",
    "editor_to_ast",
    "ast_to_markdown",
    "markdown_to_ast",
    "render_markdown",
    # Engine
    "ConversionRule",
    "VisitorRegistry",
    "default_registry",
    "Editor",
    "TextFormat",
    # Options
    "MarkdownParserOptions",
    "MarkdownRendererOptions",
    # Exceptions
    "RichmarkError",
    "ValidationError",
    "ConversionError",
    "UnsupportedNodeError",
    "StructuralError",
    "ParsingError",
    "RenderingError",
    "DependencyError",
]
