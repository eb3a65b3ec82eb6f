#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richmark/parsers/markdown.py
"""Markdown to AST converter.

This module tokenizes markdown with mistune and builds the mdast-shaped tree
defined in ``richmark.ast``. Only CommonMark constructs are recognized (no
mistune plugins are enabled), plus ``<u>...</u>`` underline markup.

Token mapping
-------------
Block tokens: ``paragraph`` and ``block_text`` -> Paragraph, ``heading`` ->
Heading, ``block_code`` -> Code, ``block_quote`` -> Blockquote, ``list`` ->
List, ``list_item`` -> ListItem, ``thematic_break`` -> ThematicBreak,
``block_html`` -> Html; ``blank_line`` is dropped.

Inline tokens: ``text`` and ``softbreak`` -> Text (adjacent runs are
coalesced), ``linebreak`` -> Break, ``emphasis``/``strong``, ``codespan`` ->
InlineCode, ``link``, ``image``, ``inline_html`` -> Html, except balanced
``<u>`` / ``</u>`` pairs within one inline sequence which become an
underline InlineMarkup wrapper.

Any other token type raises ``ParsingError``: the conversion engine would
have no way to represent it.

"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional

from richmark.ast import (
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
from richmark.constants import DEPS_MARKDOWN, UNDERLINE_TAG
from richmark.exceptions import ParsingError, ValidationError
from richmark.options.markdown import MarkdownParserOptions
from richmark.utils.decorators import requires_dependencies

logger = logging.getLogger(__name__)

_OPEN_UNDERLINE = re.compile(rf"^<{UNDERLINE_TAG}\s*>$", re.IGNORECASE)
_CLOSE_UNDERLINE = re.compile(rf"^</{UNDERLINE_TAG}\s*>$", re.IGNORECASE)


class MarkdownParser:
    r"""Convert Markdown to AST representation.

    Parameters
    ----------
    options : MarkdownParserOptions or None, default = None
        Parser configuration options

    Examples
    --------
    Basic parsing:

        >>> parser = MarkdownParser()
        >>> root = parser.parse("# Hello\\n\\nThis is **bold**.")
        >>> [child.type for child in root.children]
        ['heading', 'paragraph']

    """

    def __init__(self, options: MarkdownParserOptions | None = None):
        """Initialize the Markdown parser with options."""
        if options is not None and not isinstance(options, MarkdownParserOptions):
            raise ValidationError(
                f"Expected MarkdownParserOptions, got {type(options).__name__}",
                parameter_name="options",
                parameter_value=options,
            )
        self.options: MarkdownParserOptions = options or MarkdownParserOptions()

    @requires_dependencies("markdown", DEPS_MARKDOWN)
    def parse(self, markdown_content: str) -> Root:
        """Parse Markdown text into an AST root.

        Parameters
        ----------
        markdown_content : str
            Markdown text to parse

        Returns
        -------
        Root
            AST root node

        Raises
        ------
        ParsingError
            If the text produces a token with no AST counterpart
        ValidationError
            If ``markdown_content`` is not a string

        """
        if not isinstance(markdown_content, str):
            raise ValidationError(
                f"Markdown input must be str, got {type(markdown_content).__name__}",
                parameter_name="markdown_content",
            )

        import mistune

        markdown = mistune.create_markdown(renderer=None, hard_wrap=self.options.hard_wrap)
        tokens, _state = markdown.parse(markdown_content)
        if not isinstance(tokens, list):
            raise ParsingError(f"Unexpected tokenizer output: {type(tokens).__name__}", parsing_stage="tokenizing")

        root = Root(children=self._process_tokens(tokens))
        logger.debug(f"Parsed markdown into {len(root.children)} block node(s)")
        return root

    # ------------------------------------------------------------------
    # Block tokens
    # ------------------------------------------------------------------

    def _process_tokens(self, tokens: list[dict[str, Any]]) -> list[Node]:
        """Process a list of block tokens into AST nodes."""
        nodes: list[Node] = []
        for token in tokens:
            node = self._process_token(token)
            if node is not None:
                nodes.append(node)
        return nodes

    def _process_token(self, token: dict[str, Any]) -> Node | None:
        """Process a single block token into an AST node.

        Returns None for tokens that carry no content (blank lines).

        """
        token_type = token.get("type", "")

        if token_type in ("paragraph", "block_text"):
            # block_text is used for tight list items - treat like paragraph
            return Paragraph(children=self._process_inline_tokens(token.get("children", [])))
        elif token_type == "heading":
            return self._process_heading(token)
        elif token_type == "block_code":
            return self._process_code_block(token)
        elif token_type == "block_quote":
            return Blockquote(children=self._process_tokens(token.get("children", [])))
        elif token_type == "list":
            return self._process_list(token)
        elif token_type == "thematic_break":
            return ThematicBreak()
        elif token_type == "block_html":
            return Html(value=token.get("raw", "").rstrip("\n"))
        elif token_type == "blank_line":
            return None

        raise ParsingError(f"Unsupported markdown block token: '{token_type}'", parsing_stage="block")

    def _process_heading(self, token: dict[str, Any]) -> Heading:
        attrs = token.get("attrs") or {}
        level = attrs.get("level", 1)
        if not isinstance(level, int) or not 1 <= level <= 6:
            raise ParsingError(f"Invalid heading level: {level!r}", parsing_stage="block")
        return Heading(depth=level, children=self._process_inline_tokens(token.get("children", [])))

    def _process_code_block(self, token: dict[str, Any]) -> Code:
        """Process code block token.

        The language is the first word of the info string; the value drops
        the newline that terminates the last code line.

        """
        code_content = token.get("raw", "")
        if code_content.endswith("\n"):
            code_content = code_content[:-1]

        attrs = token.get("attrs") or {}
        info_string = (attrs.get("info") or "").strip()
        language = info_string.split(maxsplit=1)[0] if info_string else None

        return Code(lang=language, value=code_content)

    def _process_list(self, token: dict[str, Any]) -> List:
        attrs = token.get("attrs") or {}
        ordered = bool(attrs.get("ordered", False))
        start = attrs.get("start") if ordered else None

        items: list[Node] = []
        for child in token.get("children", []):
            if child.get("type") != "list_item":
                raise ParsingError(f"Unexpected token inside list: '{child.get('type')}'", parsing_stage="block")
            items.append(ListItem(children=self._process_tokens(child.get("children", []))))

        return List(ordered=ordered, start=start, spread=not token.get("tight", True), children=items)

    # ------------------------------------------------------------------
    # Inline tokens
    # ------------------------------------------------------------------

    def _process_inline_tokens(self, tokens: list[dict[str, Any]]) -> list[Node]:
        """Process an inline token sequence, pairing ``<u>`` tags.

        Returns
        -------
        list of Node
            Inline AST nodes with adjacent text runs coalesced

        """
        nodes: list[Node] = []
        # (raw opening tag, nodes collected before it) per open <u>
        open_tags: list[tuple[str, list[Node]]] = []

        for token in tokens:
            if token.get("type") == "inline_html" and self.options.parse_underline:
                raw = token.get("raw", "")
                if _OPEN_UNDERLINE.match(raw):
                    open_tags.append((raw, nodes))
                    nodes = []
                    continue
                if _CLOSE_UNDERLINE.match(raw) and open_tags:
                    _, outer = open_tags.pop()
                    _append_inline(outer, InlineMarkup(name=UNDERLINE_TAG, children=nodes))
                    nodes = outer
                    continue

            _append_inline(nodes, self._process_inline_token(token))

        # Unclosed tags stay raw HTML
        while open_tags:
            raw, outer = open_tags.pop()
            _append_inline(outer, Html(value=raw))
            for node in nodes:
                _append_inline(outer, node)
            nodes = outer

        return nodes

    def _process_inline_token(self, token: dict[str, Any]) -> Node:
        token_type = token.get("type", "")
        children = token.get("children") or []

        if token_type == "text":
            return Text(value=token.get("raw", ""))
        elif token_type == "softbreak":
            return Text(value="\n")
        elif token_type == "linebreak":
            return Break()
        elif token_type == "emphasis":
            return Emphasis(children=self._process_inline_tokens(children))
        elif token_type == "strong":
            return Strong(children=self._process_inline_tokens(children))
        elif token_type == "codespan":
            return InlineCode(value=token.get("raw", ""))
        elif token_type == "link":
            attrs = token.get("attrs") or {}
            return Link(
                url=attrs.get("url", ""),
                title=attrs.get("title"),
                children=self._process_inline_tokens(children),
            )
        elif token_type == "image":
            attrs = token.get("attrs") or {}
            return Image(url=attrs.get("url", ""), alt=_plain_text(children), title=attrs.get("title"))
        elif token_type == "inline_html":
            return Html(value=token.get("raw", ""))

        raise ParsingError(f"Unsupported markdown inline token: '{token_type}'", parsing_stage="inline")


def _append_inline(nodes: list[Node], node: Node) -> None:
    """Append ``node``, folding it into a preceding text run."""
    if isinstance(node, Text) and nodes and isinstance(nodes[-1], Text):
        nodes[-1] = Text(value=nodes[-1].value + node.value)
    else:
        nodes.append(node)


def _plain_text(tokens: list[dict[str, Any]]) -> str:
    """Flatten inline tokens to their text, for image alt text."""
    parts: list[str] = []
    for token in tokens:
        if token.get("type") in ("text", "codespan"):
            parts.append(token.get("raw", ""))
        elif token.get("type") == "softbreak":
            parts.append("\n")
        elif token.get("children"):
            parts.append(_plain_text(token["children"]))
    return "".join(parts)


def markdown_to_ast(markdown_content: str, options: Optional[MarkdownParserOptions] = None) -> Root:
    r"""Convert Markdown string to AST.

    Parameters
    ----------
    markdown_content : str
        Markdown text to parse
    options : MarkdownParserOptions or None, default = None
        Parser configuration

    Returns
    -------
    Root
        AST root node

    Examples
    --------
    >>> from richmark.parsers.markdown import markdown_to_ast
    >>> root = markdown_to_ast("# Hello\\n\\nWorld")
    >>> len(root.children)
    2

    """
    return MarkdownParser(options).parse(markdown_content)
