# -*- coding: utf-8 -*-
from __future__ import annotations
"""In-memory text buffer with a cursor, a selection and an undo history.

Positions are ``(line, ch)`` pairs counted from zero; lines are separated by
``\\n``. Every mutation made inside :meth:`Editor.operation` becomes a single
undo step, mutations made outside one each get their own step.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from core.models import Position

logger = logging.getLogger(__name__)


class Document:
    def __init__(self, file_path: str, text: str = "") -> None:
        self.file_path = str(file_path)
        self._text = text or ""
        self.is_dirty = False

    @property
    def name(self) -> str:
        return Path(self.file_path).name

    @property
    def text(self) -> str:
        return self._text

    def set_text(self, text: str) -> None:
        self._text = text or ""
        self.is_dirty = True

    def lines(self) -> List[str]:
        return self._text.split("\n")

    def line_count(self) -> int:
        return self._text.count("\n") + 1

    def clip_pos(self, pos: Position) -> Position:
        lines = self.lines()
        line = min(max(pos.line, 0), len(lines) - 1)
        ch = min(max(pos.ch, 0), len(lines[line]))
        return Position(line, ch)

    def index_from_pos(self, pos: Position) -> int:
        pos = self.clip_pos(pos)
        lines = self.lines()
        return sum(len(l) + 1 for l in lines[:pos.line]) + pos.ch

    def pos_from_index(self, index: int) -> Position:
        index = min(max(index, 0), len(self._text))
        before = self._text[:index]
        line = before.count("\n")
        ch = index - (before.rfind("\n") + 1)
        return Position(line, ch)

    def ending_pos(self) -> Position:
        return self.pos_from_index(len(self._text))

    def get_range(self, start: Position, end: Position) -> str:
        a, b = self.index_from_pos(start), self.index_from_pos(end)
        if b < a:
            a, b = b, a
        return self._text[a:b]


@dataclass
class _Snapshot:
    text: str
    cursor: Position
    selection: Optional[Tuple[Position, Position]] = None


@dataclass
class EditorMessage:
    message: str
    pos: Position


class Editor:
    def __init__(self, document: Document) -> None:
        self.document = document
        self._cursor = Position(0, 0)
        self._anchor: Optional[Position] = None
        self._undo: List[_Snapshot] = []
        self._op_depth = 0
        self._op_snapshot: Optional[_Snapshot] = None
        self.messages: List[EditorMessage] = []

    # ---------------- identity ----------------
    @property
    def file_path(self) -> str:
        return self.document.file_path

    def get_file(self) -> Document:
        return self.document

    def get_text(self) -> str:
        return self.document.text

    # ---------------- cursor & selection ----------------
    def get_cursor_pos(self) -> Position:
        return self._cursor

    def set_cursor_pos(self, line: int, ch: int) -> None:
        self._cursor = self.document.clip_pos(Position(line, ch))
        self._anchor = None

    def get_ending_cursor_pos(self) -> Position:
        return self.document.ending_pos()

    def has_selection(self) -> bool:
        return self._anchor is not None and self._anchor != self._cursor

    def get_selection(self) -> Optional[Tuple[Position, Position]]:
        """Return ``(start, end)`` in document order, or ``None``."""
        if not self.has_selection():
            return None
        a = self.document.index_from_pos(self._anchor)
        b = self.document.index_from_pos(self._cursor)
        if a <= b:
            return self._anchor, self._cursor
        return self._cursor, self._anchor

    def get_selected_text(self) -> str:
        sel = self.get_selection()
        return self.document.get_range(*sel) if sel else ""

    def set_selection(self, start: Position, end: Position) -> None:
        self._anchor = self.document.clip_pos(start)
        self._cursor = self.document.clip_pos(end)

    def clear_selection(self) -> None:
        self._anchor = None

    # ---------------- editing ----------------
    def _snapshot(self) -> _Snapshot:
        sel = (self._anchor, self._cursor) if self._anchor is not None else None
        return _Snapshot(self.document.text, self._cursor, sel)

    @contextmanager
    def operation(self) -> Iterator["Editor"]:
        """Group every change made in the block into one undo step."""
        if self._op_depth == 0:
            self._op_snapshot = self._snapshot()
        self._op_depth += 1
        try:
            yield self
        finally:
            self._op_depth -= 1
            if self._op_depth == 0:
                before, self._op_snapshot = self._op_snapshot, None
                if before is not None and before.text != self.document.text:
                    self._undo.append(before)

    def replace_range(self, text: str, start: Position, end: Optional[Position] = None) -> None:
        doc = self.document
        a = doc.index_from_pos(start)
        b = doc.index_from_pos(end) if end is not None else a
        if b < a:
            a, b = b, a
        with self.operation():
            doc.set_text(doc.text[:a] + text + doc.text[b:])
            self._cursor = doc.pos_from_index(a + len(text))
            self._anchor = None

    def replace_selection(self, text: str, select: str = "end") -> None:
        """Replace the selection (or insert at the cursor).

        ``select="around"`` leaves the inserted text selected, anything else
        collapses the cursor to its end.
        """
        sel = self.get_selection() or (self._cursor, self._cursor)
        start_index = self.document.index_from_pos(sel[0])
        self.replace_range(text, sel[0], sel[1])
        if select == "around":
            self._anchor = self.document.pos_from_index(start_index)
            self._cursor = self.document.pos_from_index(start_index + len(text))

    def undo(self) -> bool:
        if not self._undo:
            return False
        snap = self._undo.pop()
        self.document.set_text(snap.text)
        self._cursor = snap.cursor
        self._anchor = snap.selection[0] if snap.selection else None
        return True

    @property
    def history_size(self) -> int:
        return len(self._undo)

    # ---------------- feedback ----------------
    def display_error_message_at_cursor(self, message: str) -> None:
        self.messages.append(EditorMessage(message, self._cursor))
        logger.info("%s: %s", self.document.name, message)
