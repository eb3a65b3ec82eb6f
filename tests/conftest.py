"""Pytest configuration and shared fixtures for the richmark test suite.

This module provides shared fixtures, test configuration, and utilities
that are used across the entire test suite.
"""

from typing import Callable

import pytest

from richmark import Editor, export_markdown_from_editor, import_markdown_to_editor
from richmark.editor.nodes import RootNode


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")


@pytest.fixture
def editor() -> Editor:
    """Provide a fresh, empty editor."""
    return Editor()


@pytest.fixture
def editor_root() -> RootNode:
    """Provide a detached editor root node."""
    return RootNode()


@pytest.fixture
def roundtrip() -> Callable[[str], str]:
    """Import markdown into a new editor and export it back.

    Returns
    -------
    callable
        Function mapping markdown text to the exported markdown text

    """

    def _roundtrip(markdown: str) -> str:
        editor = Editor()
        with editor.update() as root:
            import_markdown_to_editor(root, markdown)
        with editor.read() as root:
            return export_markdown_from_editor(root)

    return _roundtrip
