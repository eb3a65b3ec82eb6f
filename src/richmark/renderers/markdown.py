#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richmark/renderers/markdown.py
"""Markdown rendering from AST.

This module provides the MarkdownRenderer class which converts the richmark
AST back to markdown text. Output follows the conventions of common mdast
serializers so that markdown produced by an editor reads the way a person
would write it:

- blocks are separated by one blank line and non-empty output ends with
  exactly one newline (an empty document renders as ``""``)
- ``*emphasis*``, ``**strong**``, ``<u>underline</u>``, ``***`` breaks,
  ``*`` bullets and backtick fences by default
- container content (list items, block quotes) is rendered separately and
  then indented or prefixed line by line

"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional

from richmark.ast.nodes import (
    Blockquote,
    Break,
    Code,
    Emphasis,
    Heading,
    Html,
    Image,
    InlineCode,
    InlineMarkup,
    Link,
    List,
    ListItem,
    Node,
    Paragraph,
    Root,
    Strong,
    Text,
    ThematicBreak,
)
from richmark.ast.visitors import NodeVisitor
from richmark.exceptions import RenderingError
from richmark.options.markdown import MarkdownRendererOptions
from richmark.renderers.base import BaseRenderer, InlineContentMixin

logger = logging.getLogger(__name__)

# Characters that always need escaping in inline content
_ALWAYS_ESCAPE = "\\`*[]"
_ORDERED_MARKER = re.compile(r"(\d{1,9})([.)])(?=\s|$)")
_URL_NEEDS_BRACKETS = re.compile(r"[\s()<>]")
_BLOCK_TYPES = (Blockquote, Code, Heading, List, Paragraph, ThematicBreak)
_EDGE_WHITESPACE = " \t"


def _longest_run(text: str, char: str) -> int:
    """Length of the longest run of ``char`` in ``text``."""
    longest = current = 0
    for c in text:
        if c == char:
            current += 1
            longest = max(longest, current)
        else:
            current = 0
    return longest


def _delimit(content: str, symbol: str) -> str:
    """Wrap ``content`` in emphasis delimiters.

    Delimiters next to whitespace cannot open or close emphasis, so leading
    and trailing spaces are moved outside them.

    """
    core = content.strip(_EDGE_WHITESPACE)
    if not core:
        return content
    leading = content[: len(content) - len(content.lstrip(_EDGE_WHITESPACE))]
    trailing = content[len(content.rstrip(_EDGE_WHITESPACE)) :]
    return f"{leading}{symbol}{core}{symbol}{trailing}"


class MarkdownRenderer(NodeVisitor, InlineContentMixin, BaseRenderer):
    r"""Render AST nodes to markdown text.

    Parameters
    ----------
    options : MarkdownRendererOptions or None, default = None
        Markdown formatting options

    Examples
    --------
        >>> from richmark.ast import Paragraph, Root, Text, Underline
        >>> root = Root(children=[Paragraph(children=[Underline([Text(value="Hello, world!")])])])
        >>> MarkdownRenderer().render_to_string(root)
        '<u>Hello, world!</u>\n'

    """

    def __init__(self, options: MarkdownRendererOptions | None = None):
        """Initialize the Markdown renderer with options."""
        BaseRenderer._validate_options_type(options, MarkdownRendererOptions, "markdown")
        options = options or MarkdownRendererOptions()
        BaseRenderer.__init__(self, options)
        self.options: MarkdownRendererOptions = options
        self._output: list[str] = []
        self._list_marker_stack: list[tuple[str, bool]] = []
        self._alternate_list_marker = False
        self._at_line_start = False

    def __getattr__(self, name: str) -> Any:
        if name.startswith("visit_"):
            raise RenderingError(f"No markdown rendering for '{name[len('visit_'):]}' nodes", rendering_stage="visit")
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def render_to_string(self, root: Root) -> str:
        """Render an AST root to markdown text.

        Parameters
        ----------
        root : Root
            The root node to render

        Returns
        -------
        str
            Markdown text

        Raises
        ------
        RenderingError
            If the tree holds a node kind with no markdown rendering

        """
        self._output = []
        self._list_marker_stack = []
        self._alternate_list_marker = False

        root.accept(self)
        result = "".join(self._output)
        self._output = []

        result = result.rstrip("\n")
        return f"{result}\n" if result else ""

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _render_blocks(self, children: list[Node], separator: str) -> str:
        """Render block nodes separately and join them with ``separator``.

        Two adjacent lists of the same kind would be read back as one list,
        so every second one in a run switches to the alternate marker.

        """
        parts: list[str] = []
        previous: Optional[Node] = None
        alternate = False
        for child in children:
            if isinstance(child, List) and isinstance(previous, List) and child.ordered == previous.ordered:
                alternate = not alternate
            else:
                alternate = False
            self._alternate_list_marker = alternate
            parts.append(self._render_inline_content([child]))
            previous = child
        self._alternate_list_marker = False
        return separator.join(parts)

    def _escape_markdown(self, text: str, at_line_start: bool) -> str:
        """Escape special markdown characters with context awareness.

        - Backslash, backtick, asterisk and brackets are always escaped.
        - ``_`` is escaped only at word boundaries (``snake_case`` is safe).
        - ``<`` is escaped when it could open an HTML tag.
        - ``#``, ``>``, ``-``, ``=``, ``+`` and ordered-list markers are
          escaped only at the start of a line, where they start blocks.

        """
        if not self.options.escape_special:
            return text

        escaped_chars: list[str] = []
        line_start = at_line_start
        i = 0
        n = len(text)
        while i < n:
            char = text[i]
            if char == "\n":
                escaped_chars.append(char)
                line_start = True
                i += 1
                continue
            if char == " " and line_start:
                escaped_chars.append(char)
                i += 1
                continue

            if char in _ALWAYS_ESCAPE:
                escaped_chars.append("\\" + char)
            elif char == "_":
                prev_alnum = i > 0 and text[i - 1].isalnum()
                next_alnum = i < n - 1 and text[i + 1].isalnum()
                escaped_chars.append(char if prev_alnum and next_alnum else "\\" + char)
            elif char == "<" and i < n - 1 and (text[i + 1].isalpha() or text[i + 1] in "/!?"):
                escaped_chars.append("\\" + char)
            elif line_start and (char in "#>-=" or (char == "+" and (i == n - 1 or text[i + 1].isspace()))):
                escaped_chars.append("\\" + char)
            elif line_start and char.isdigit() and _ORDERED_MARKER.match(text, i):
                match = _ORDERED_MARKER.match(text, i)
                assert match is not None
                escaped_chars.append(f"{match.group(1)}\\{match.group(2)}")
                i = match.end()
                line_start = False
                continue
            else:
                escaped_chars.append(char)
            line_start = False
            i += 1

        return "".join(escaped_chars)

    def _format_destination(self, url: str, title: Optional[str]) -> str:
        """Format the ``(url "title")`` part of a link or image."""
        if _URL_NEEDS_BRACKETS.search(url):
            url = "<" + url.replace("<", "\\<").replace(">", "\\>") + ">"
        if title:
            escaped_title = title.replace("\\", "\\\\").replace('"', '\\"')
            return f'({url} "{escaped_title}")'
        return f"({url})"

    # ------------------------------------------------------------------
    # Block nodes
    # ------------------------------------------------------------------

    def visit_root(self, node: Root) -> None:
        self._output.append(self._render_blocks(node.children, "\n\n"))

    def visit_paragraph(self, node: Paragraph) -> None:
        """Render a Paragraph.

        Block nodes found among the children are set apart as blocks of their
        own, with the inline runs around them rendered as separate paragraphs.

        """
        if not any(isinstance(child, _BLOCK_TYPES) for child in node.children):
            self._at_line_start = True
            self._output.append(self._render_inline_content(node.children))
            return

        parts: list[str] = []
        run: list[Node] = []
        for child in [*node.children, None]:
            if child is not None and not isinstance(child, _BLOCK_TYPES):
                run.append(child)
                continue
            if run:
                self._at_line_start = True
                parts.append(self._render_inline_content(run))
                run = []
            if child is not None:
                parts.append(self._render_blocks([child], ""))
        self._output.append("\n\n".join(part for part in parts if part))

    def visit_heading(self, node: Heading) -> None:
        """Render a Heading node.

        Levels 1 and 2 use setext underlines when ``use_hash_headings`` is
        off; every other heading uses the ``#`` prefix.

        """
        self._at_line_start = False
        content = self._render_inline_content(node.children)

        if not self.options.use_hash_headings and node.depth <= 2 and content.strip():
            underline_char = "=" if node.depth == 1 else "-"
            last_line = content.split("\n")[-1]
            self._output.append(f"{content}\n{underline_char * max(3, len(last_line))}")
        elif content:
            self._output.append(f"{'#' * node.depth} {content}")
        else:
            self._output.append("#" * node.depth)

    def visit_blockquote(self, node: Blockquote) -> None:
        """Render a Blockquote by prefixing every rendered line with ``>``."""
        content = self._render_blocks(node.children, "\n\n")
        lines = content.split("\n")
        self._output.append("\n".join(f"> {line}" if line else ">" for line in lines))

    def visit_list(self, node: List) -> None:
        """Render a List node.

        Tight lists put one newline between items, spread lists a blank line.

        """
        alternate = self._alternate_list_marker
        self._alternate_list_marker = False

        items: list[str] = []
        for i, item in enumerate(node.children):
            if node.ordered:
                marker = f"{(node.start or 1) + i}{')' if alternate else '.'}"
            elif alternate:
                marker = "-" if self.options.bullet_symbol != "-" else "*"
            else:
                marker = self.options.bullet_symbol

            self._list_marker_stack.append((marker, node.spread))
            try:
                items.append(self._render_inline_content([item]))
            finally:
                self._list_marker_stack.pop()

        self._output.append(("\n\n" if node.spread else "\n").join(items))

    def visit_list_item(self, node: ListItem) -> None:
        """Render a ListItem; continuation lines are indented by the marker width."""
        marker, list_spread = self._list_marker_stack[-1] if self._list_marker_stack else ("*", False)
        separator = "\n\n" if list_spread or node.spread else "\n"
        content = self._render_blocks(node.children, separator)

        if not content:
            self._output.append(marker)
            return

        indent = " " * (len(marker) + 1)
        first, *rest = content.split("\n")
        lines = [f"{marker} {first}"]
        lines.extend(f"{indent}{line}" if line else "" for line in rest)
        self._output.append("\n".join(lines))

    def visit_code(self, node: Code) -> None:
        """Render a fenced code block.

        The fence is longer than any run of the fence character inside the
        code.

        """
        fence_char = self.options.code_fence_char
        fence_length = max(self.options.code_fence_min, _longest_run(node.value, fence_char) + 1)
        fence = fence_char * fence_length
        lang = node.lang or ""

        if node.value:
            self._output.append(f"{fence}{lang}\n{node.value}\n{fence}")
        else:
            self._output.append(f"{fence}{lang}\n{fence}")

    def visit_thematic_break(self, node: ThematicBreak) -> None:
        self._output.append(self.options.thematic_break)

    def visit_html(self, node: Html) -> None:
        self._output.append(node.value)
        self._at_line_start = node.value.endswith("\n")

    # ------------------------------------------------------------------
    # Inline nodes
    # ------------------------------------------------------------------

    def visit_text(self, node: Text) -> None:
        self._output.append(self._escape_markdown(node.value, self._at_line_start))
        if node.value:
            self._at_line_start = node.value.endswith("\n")

    def visit_emphasis(self, node: Emphasis) -> None:
        self._at_line_start = False
        content = self._render_inline_content(node.children)
        self._output.append(_delimit(content, self.options.emphasis_symbol))
        self._at_line_start = False

    def visit_strong(self, node: Strong) -> None:
        self._at_line_start = False
        content = self._render_inline_content(node.children)
        self._output.append(_delimit(content, self.options.strong_symbol))
        self._at_line_start = False

    def visit_inline_markup(self, node: InlineMarkup) -> None:
        """Render inline markup as an HTML element, e.g. ``<u>text</u>``."""
        self._at_line_start = False
        content = self._render_inline_content(node.children)
        self._output.append(f"<{node.name}>{content}</{node.name}>")
        self._at_line_start = False

    def visit_inline_code(self, node: InlineCode) -> None:
        """Render inline code with a backtick fence longer than any run inside."""
        value = node.value
        ticks = "`" * (_longest_run(value, "`") + 1)
        needs_padding = (
            value.startswith("`")
            or value.endswith("`")
            or (value.startswith(" ") and value.endswith(" ") and value.strip() != "")
        )
        pad = " " if needs_padding else ""
        self._output.append(f"{ticks}{pad}{value}{pad}{ticks}")
        self._at_line_start = False

    def visit_link(self, node: Link) -> None:
        # A "!" right before the link would turn it into an image
        if self._output and self._output[-1].endswith("!") and not self._output[-1].endswith("\\!"):
            self._output[-1] = self._output[-1][:-1] + "\\!"
        self._at_line_start = False
        content = self._render_inline_content(node.children)
        self._output.append(f"[{content}]{self._format_destination(node.url, node.title)}")
        self._at_line_start = False

    def visit_image(self, node: Image) -> None:
        alt = node.alt.replace("\\", "\\\\").replace("[", "\\[").replace("]", "\\]")
        self._output.append(f"![{alt}]{self._format_destination(node.url, node.title)}")
        self._at_line_start = False

    def visit_break(self, node: Break) -> None:
        self._output.append("\\\n")
        self._at_line_start = True


def render_markdown(root: Root, options: MarkdownRendererOptions | None = None) -> str:
    """Render an AST root to markdown text.

    Parameters
    ----------
    root : Root
        AST root node
    options : MarkdownRendererOptions or None, default = None
        Rendering options

    Returns
    -------
    str
        Markdown text

    """
    return MarkdownRenderer(options).render_to_string(root)
