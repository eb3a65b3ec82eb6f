#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for the richmark library.

This module centralizes hardcoded values and default configuration constants
used across richmark.

Constants are organized by category:
1. Type Definitions - Literal types and type aliases
2. Markdown Output - Serializer defaults
3. Markdown Input - Parser defaults
4. Editor Tree - Kind tags used by the editor model
5. Configuration - Config file discovery and environment variables
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

EmphasisSymbol = Literal["*", "_"]
StrongSymbol = Literal["**", "__"]
BulletSymbol = Literal["*", "-", "+"]
CodeFenceChar = Literal["`", "~"]
ThematicBreakStyle = Literal["***", "---", "___"]
ListType = Literal["bullet", "number"]
HeadingTag = Literal["h1", "h2", "h3", "h4", "h5", "h6"]

# =============================================================================
# Markdown Output (serializer)
# =============================================================================

DEFAULT_BULLET_SYMBOL: BulletSymbol = "*"
DEFAULT_EMPHASIS_SYMBOL: EmphasisSymbol = "*"
DEFAULT_STRONG_SYMBOL: StrongSymbol = "**"
DEFAULT_THEMATIC_BREAK: ThematicBreakStyle = "***"
DEFAULT_CODE_FENCE_CHAR: CodeFenceChar = "`"
DEFAULT_CODE_FENCE_MIN = 3
DEFAULT_USE_HASH_HEADINGS = True
DEFAULT_ESCAPE_SPECIAL = True

# =============================================================================
# Markdown Input (parser)
# =============================================================================

DEFAULT_PARSE_UNDERLINE = True
DEFAULT_HARD_WRAP = False

# Inline HTML tags that map onto an inline markup wrapper instead of raw HTML
UNDERLINE_TAG = "u"

DEPS_MARKDOWN = [("mistune", "mistune", ">=3.0.0")]

# =============================================================================
# Editor Tree
# =============================================================================

HEADING_TAGS: tuple[HeadingTag, ...] = ("h1", "h2", "h3", "h4", "h5", "h6")
LIST_TYPES: tuple[ListType, ...] = ("bullet", "number")

# =============================================================================
# Configuration
# =============================================================================

CONFIG_FILENAMES = [".richmark.toml", ".richmark.yaml", ".richmark.yml", ".richmark.json", "pyproject.toml"]
ENV_PREFIX = "RICHMARK_"
CONFIG_SECTIONS = ("parser", "renderer")
