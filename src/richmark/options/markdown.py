#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for Markdown parsing and rendering."""
# src/richmark/options/markdown.py


from __future__ import annotations

from dataclasses import dataclass, field

from richmark.constants import (
    DEFAULT_BULLET_SYMBOL,
    DEFAULT_CODE_FENCE_CHAR,
    DEFAULT_CODE_FENCE_MIN,
    DEFAULT_EMPHASIS_SYMBOL,
    DEFAULT_ESCAPE_SPECIAL,
    DEFAULT_HARD_WRAP,
    DEFAULT_PARSE_UNDERLINE,
    DEFAULT_STRONG_SYMBOL,
    DEFAULT_THEMATIC_BREAK,
    DEFAULT_USE_HASH_HEADINGS,
    BulletSymbol,
    CodeFenceChar,
    EmphasisSymbol,
    StrongSymbol,
    ThematicBreakStyle,
)
from richmark.options.base import BaseParserOptions, BaseRendererOptions


@dataclass(frozen=True)
class MarkdownParserOptions(BaseParserOptions):
    """Configuration options for Markdown-to-AST parsing.

    Parameters
    ----------
    parse_underline : bool, default True
        Turn balanced ``<u>...</u>`` inline HTML into an underline wrapper.
        When False the tags stay raw HTML.
    hard_wrap : bool, default False
        Treat every newline inside a paragraph as a hard line break.

    """

    parse_underline: bool = field(
        default=DEFAULT_PARSE_UNDERLINE,
        metadata={"help": "Parse <u>...</u> inline HTML as underline formatting", "importance": "core"},
    )
    hard_wrap: bool = field(
        default=DEFAULT_HARD_WRAP,
        metadata={"help": "Treat newlines inside paragraphs as hard line breaks", "importance": "advanced"},
    )


@dataclass(frozen=True)
class MarkdownRendererOptions(BaseRendererOptions):
    """Configuration options for AST-to-Markdown rendering.

    Parameters
    ----------
    bullet_symbol : {"*", "-", "+"}, default "*"
        Marker for unordered list items.
    emphasis_symbol : {"*", "_"}, default "*"
        Delimiter for emphasis.
    strong_symbol : {"**", "__"}, default "**"
        Delimiter for strong emphasis.
    thematic_break : {"***", "---", "___"}, default "***"
        Thematic break line.
    code_fence_char : {"`", "~"}, default "`"
        Character for code fences.
    code_fence_min : int, default 3
        Minimum code fence length.
    use_hash_headings : bool, default True
        Use ``#`` headings; when False, levels 1 and 2 use setext underlines.
    escape_special : bool, default True
        Escape characters in text that would otherwise be read as markup.

    """

    bullet_symbol: BulletSymbol = field(
        default=DEFAULT_BULLET_SYMBOL,
        metadata={"help": "Marker for unordered list items", "choices": ["*", "-", "+"], "importance": "core"},
    )
    emphasis_symbol: EmphasisSymbol = field(
        default=DEFAULT_EMPHASIS_SYMBOL,
        metadata={"help": "Symbol to use for emphasis/italic formatting", "choices": ["*", "_"], "importance": "core"},
    )
    strong_symbol: StrongSymbol = field(
        default=DEFAULT_STRONG_SYMBOL,
        metadata={"help": "Symbol to use for strong/bold formatting", "choices": ["**", "__"], "importance": "core"},
    )
    thematic_break: ThematicBreakStyle = field(
        default=DEFAULT_THEMATIC_BREAK,
        metadata={"help": "Thematic break line", "choices": ["***", "---", "___"], "importance": "advanced"},
    )
    code_fence_char: CodeFenceChar = field(
        default=DEFAULT_CODE_FENCE_CHAR,
        metadata={
            "help": "Character to use for code fences (backtick or tilde)",
            "choices": ["`", "~"],
            "importance": "advanced",
        },
    )
    code_fence_min: int = field(
        default=DEFAULT_CODE_FENCE_MIN,
        metadata={"help": "Minimum length for code fences (typically 3)", "type": int, "importance": "advanced"},
    )
    use_hash_headings: bool = field(
        default=DEFAULT_USE_HASH_HEADINGS,
        metadata={"help": "Use # syntax for headings instead of underline style", "importance": "core"},
    )
    escape_special: bool = field(
        default=DEFAULT_ESCAPE_SPECIAL,
        metadata={"help": "Escape special Markdown characters (e.g. asterisks) in text content", "importance": "core"},
    )

    def __post_init__(self) -> None:
        """Validate choice fields and the fence length.

        Raises
        ------
        ValueError
            If any field value is outside its valid range.

        """
        super().__post_init__()

        if self.bullet_symbol not in ("*", "-", "+"):
            raise ValueError(f"bullet_symbol must be one of '*', '-', '+', got {self.bullet_symbol!r}")
        if self.emphasis_symbol not in ("*", "_"):
            raise ValueError(f"emphasis_symbol must be '*' or '_', got {self.emphasis_symbol!r}")
        if self.strong_symbol not in ("**", "__"):
            raise ValueError(f"strong_symbol must be '**' or '__', got {self.strong_symbol!r}")
        if self.thematic_break not in ("***", "---", "___"):
            raise ValueError(f"thematic_break must be one of '***', '---', '___', got {self.thematic_break!r}")
        if self.code_fence_char not in ("`", "~"):
            raise ValueError(f"code_fence_char must be '`' or '~', got {self.code_fence_char!r}")
        if self.code_fence_min < 3:
            raise ValueError(f"code_fence_min must be at least 3, got {self.code_fence_min}")
