"""Open documents, the active editor and the project busy signal."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional

from core.editor import Document, Editor

logger = logging.getLogger(__name__)

ACTIVE_EDITOR_CHANGE = "activeEditorChange"
DOCUMENT_SAVED = "documentSaved"


class EventDispatcher:
    def __init__(self) -> None:
        self._handlers: Dict[str, List[Callable[..., Any]]] = defaultdict(list)

    def on(self, event: str, handler: Callable[..., Any]) -> None:
        self._handlers[event].append(handler)

    def trigger(self, event: str, *args: Any) -> list:
        """Call every handler for ``event`` and return their results."""
        results = []
        for handler in list(self._handlers[event]):
            results.append(handler(*args))
        logger.debug("Event %s delivered to %d handler(s)", event, len(results))
        return results


class ProjectStatus:
    """Busy flag shown while a long running action is in flight."""

    def __init__(self) -> None:
        self.busy = False
        self.message = ""
        self.history: list[tuple[bool, str]] = []

    def set_busy(self, busy: bool, message: str = "") -> None:
        self.busy = bool(busy)
        self.message = message if busy else ""
        self.history.append((self.busy, message))
        logger.debug("Project busy=%s (%s)", self.busy, message)


class Workspace(EventDispatcher):
    def __init__(self) -> None:
        super().__init__()
        self._editors: Dict[str, Editor] = {}
        self._active: Optional[Editor] = None
        self.status = ProjectStatus()

    def open(self, path: str, text: str = "", activate: bool = True) -> Editor:
        editor = self._editors.get(path)
        if editor is None:
            editor = Editor(Document(path, text))
            self._editors[path] = editor
        if activate:
            self.set_active(path)
        return editor

    def get_editor(self, path: str) -> Optional[Editor]:
        return self._editors.get(path)

    def editors(self) -> List[Editor]:
        return list(self._editors.values())

    def close(self, path: str) -> None:
        editor = self._editors.pop(path, None)
        if editor is not None and editor is self._active:
            self._active = None
            self.trigger(ACTIVE_EDITOR_CHANGE, None, editor)

    def get_active_editor(self) -> Optional[Editor]:
        return self._active

    def set_active(self, path: str) -> Editor:
        editor = self._editors[path]
        previous = self._active
        if editor is not previous:
            self._active = editor
            self.trigger(ACTIVE_EDITOR_CHANGE, editor, previous)
        return editor

    def save(self, path: str, text: Optional[str] = None) -> list:
        """Mark the document saved and notify listeners.

        Returns whatever the ``documentSaved`` handlers returned, so async
        handlers can be awaited by the caller.
        """
        editor = self._editors[path]
        if text is not None and text != editor.document.text:
            with editor.operation():
                editor.document.set_text(text)
        editor.document.is_dirty = False
        return self.trigger(DOCUMENT_SAVED, editor.document)
