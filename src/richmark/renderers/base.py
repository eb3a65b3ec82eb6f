#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richmark/renderers/base.py
"""Base classes for AST renderers.

``BaseRenderer`` is the interface every renderer implements;
``InlineContentMixin`` provides the output-capturing helper text renderers
use to render nested inline nodes to a string.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Union

from richmark.ast.nodes import Node, Root
from richmark.exceptions import ValidationError
from richmark.options.base import BaseRendererOptions


class BaseRenderer(ABC):
    """Abstract base class for AST renderers.

    Parameters
    ----------
    options : BaseRendererOptions or None, default = None
        Format-specific rendering options

    """

    def __init__(self, options: BaseRendererOptions | None = None):
        """Initialize the renderer with optional configuration."""
        self.options = options

    @abstractmethod
    def render_to_string(self, root: Root) -> str:
        """Render an AST root to a string.

        Parameters
        ----------
        root : Root
            AST root to render

        Returns
        -------
        str
            Rendered text

        """
        pass

    def render(self, root: Root, output: Union[str, Path, IO[str]]) -> None:
        """Render an AST root and write it to a file path or text stream.

        Parameters
        ----------
        root : Root
            AST root to render
        output : str, Path or IO[str]
            Destination file path or writable text stream

        """
        text = self.render_to_string(root)
        if isinstance(output, (str, Path)):
            Path(output).write_text(text, encoding="utf-8")
        else:
            output.write(text)

    @staticmethod
    def _validate_options_type(options: BaseRendererOptions | None, expected_type: type, renderer_name: str) -> None:
        """Validate that options are of the expected type.

        Raises
        ------
        ValidationError
            If options is not None and not an instance of expected_type

        """
        if options is not None and not isinstance(options, expected_type):
            raise ValidationError(
                f"Invalid options type for {renderer_name} renderer: "
                f"expected {expected_type.__name__}, got {type(options).__name__}",
                parameter_name="options",
                parameter_value=options,
            )


class InlineContentMixin:
    """Mixin providing inline content rendering for text-based renderers.

    The implementing class must have:
    - A ``_output`` attribute (list[str]) for accumulating output
    - Visitor methods that append to ``_output``

    Examples
    --------
        >>> class MyRenderer(NodeVisitor, InlineContentMixin, BaseRenderer):
        ...     def visit_emphasis(self, node):
        ...         content = self._render_inline_content(node.children)
        ...         self._output.append(f"*{content}*")

    """

    _output: list[str]

    def _render_inline_content(self, content: list[Node]) -> str:
        """Render a list of nodes to text by temporarily capturing output.

        Parameters
        ----------
        content : list of Node
            Nodes to render

        Returns
        -------
        str
            Rendered content

        """
        saved_output = self._output
        self._output = []
        try:
            for node in content:
                node.accept(self)
            return "".join(self._output)
        finally:
            self._output = saved_output
