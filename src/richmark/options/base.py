#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richmark/options/base.py
"""Base classes for parser and renderer options.

Options are frozen dataclasses so a configured instance can be shared across
conversions; ``create_updated`` derives a modified copy.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, fields, replace
from typing import Any

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)

    @classmethod
    def field_names(cls) -> list[str]:
        """Return the names of the configurable fields."""
        return [f.name for f in fields(cls) if f.init]  # type: ignore[arg-type]

    def to_dict(self) -> dict[str, Any]:
        """Return the option values keyed by field name."""
        return {name: getattr(self, name) for name in self.field_names()}


@dataclass(frozen=True)
class BaseParserOptions(CloneFrozenMixin):
    """Base class for parser options.

    Notes
    -----
    Subclasses define format-specific parsing options as frozen dataclass
    fields and validate them in ``__post_init__``.

    """

    def __post_init__(self) -> None:
        """Validate option values; subclasses extend this."""


@dataclass(frozen=True)
class BaseRendererOptions(CloneFrozenMixin):
    """Base class for renderer options.

    Notes
    -----
    Subclasses define format-specific rendering options as frozen dataclass
    fields and validate them in ``__post_init__``.

    """

    def __post_init__(self) -> None:
        """Validate option values; subclasses extend this."""
