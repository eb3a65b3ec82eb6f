#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Shared utilities: dependency checks and timing helpers."""

from richmark.utils.decorators import debug_timer, requires_dependencies
from richmark.utils.packages import check_version_requirement, get_package_version

__all__ = ["debug_timer", "requires_dependencies", "check_version_requirement", "get_package_version"]
