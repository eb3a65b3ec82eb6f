#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richmark/editor/editor.py
"""Minimal editor session.

``Editor`` owns the single root node of one document and hands it out inside
``update()`` / ``read()`` transactions. A re-entrant lock is held for the
duration of each transaction so that a conversion never observes a tree that
another thread is mutating. The conversion engine itself takes no locks.

Examples
--------
    >>> from richmark import Editor, import_markdown_to_editor
    >>> editor = Editor()
    >>> with editor.update() as root:
    ...     import_markdown_to_editor(root, "Hello World")
    >>> editor.to_json()["root"]["children"][0]["type"]
    'paragraph'

"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Any, Callable, Iterator

from richmark.editor.nodes import RootNode

logger = logging.getLogger(__name__)

UpdateListener = Callable[["Editor"], None]


class Editor:
    """Document session owning one editor tree."""

    def __init__(self) -> None:
        self._root = RootNode()
        self._lock = threading.RLock()
        self._listeners: list[UpdateListener] = []
        self._update_depth = 0

    @property
    def root(self) -> RootNode:
        """The document root. Prefer ``update()``/``read()`` for access."""
        return self._root

    @contextmanager
    def update(self) -> Iterator[RootNode]:
        """Open a write transaction on the document.

        Listeners run once the outermost update exits without an exception.

        Yields
        ------
        RootNode
            The document root

        """
        with self._lock:
            self._update_depth += 1
            try:
                yield self._root
            finally:
                self._update_depth -= 1
            if self._update_depth == 0:
                self._notify()

    @contextmanager
    def read(self) -> Iterator[RootNode]:
        """Open a read transaction on the document."""
        with self._lock:
            yield self._root

    def register_update_listener(self, listener: UpdateListener) -> Callable[[], None]:
        """Register ``listener`` to be called after each committed update.

        Returns
        -------
        callable
            Calling it unregisters the listener

        """
        self._listeners.append(listener)

        def unregister() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unregister

    def _notify(self) -> None:
        logger.debug(f"Notifying {len(self._listeners)} update listener(s)")
        for listener in list(self._listeners):
            listener(self)

    def to_json(self) -> dict[str, Any]:
        """Return the serialized editor state."""
        with self.read() as root:
            return {"root": root.export_json()}
