"""Bounded undo and redo history for edits made to a sector buffer."""

from __future__ import annotations

import enum
from collections import deque
from dataclasses import dataclass

UNDO_STACK_SIZE = 20


class Operation(enum.Enum):
    BYTE_CHANGE = "byte_change"
    LINE_REMOVE = "line_remove"
    LINE_REPLACE = "line_replace"


@dataclass(frozen=True)
class UndoItem:
    """One recorded edit and what is needed to reverse or repeat it."""

    op: Operation
    index: int
    old_value: int = 0
    new_value: int = 0
    old_data: bytes | None = None
    new_data: bytes | None = None

    def apply_old(self, buffer: bytearray) -> None:
        if self.op is Operation.BYTE_CHANGE:
            buffer[self.index] = self.old_value
        elif self.old_data is not None:
            buffer[self.index : self.index + len(self.old_data)] = self.old_data

    def apply_new(self, buffer: bytearray) -> None:
        if self.op is Operation.BYTE_CHANGE:
            buffer[self.index] = self.new_value
        elif self.new_data is not None:
            buffer[self.index : self.index + len(self.new_data)] = self.new_data


class History:
    """Undo and redo stacks, each holding at most ``limit`` items."""

    def __init__(self, limit=UNDO_STACK_SIZE):
        if limit < 1:
            raise ValueError("History limit must be at least 1")
        self.limit = limit
        self._undo: deque[UndoItem] = deque(maxlen=limit)
        self._redo: list[UndoItem] = []

    def save(self, op, index, old_value=0, new_value=0, old_data=None, new_data=None):
        """Record an edit; when full, the oldest entry is dropped."""
        item = UndoItem(
            op=op,
            index=index,
            old_value=old_value,
            new_value=new_value,
            old_data=bytes(old_data) if old_data else None,
            new_data=bytes(new_data) if new_data else None,
        )
        self._undo.append(item)
        return item

    def undo(self, buffer: bytearray) -> bool:
        """Reverse the latest edit in ``buffer``; False when there is none."""
        if not self._undo:
            return False
        item = self._undo.pop()
        item.apply_old(buffer)
        if len(self._redo) < self.limit:
            self._redo.append(item)
        return True

    def redo(self, buffer: bytearray) -> bool:
        """Repeat the latest undone edit in ``buffer``; False when there is none."""
        if not self._redo:
            return False
        item = self._redo.pop()
        item.apply_new(buffer)
        if len(self._undo) < self.limit:
            self._undo.append(item)
        return True

    def clear_undo(self) -> None:
        self._undo.clear()

    def clear_redo(self) -> None:
        self._redo.clear()

    def clear(self) -> None:
        self.clear_undo()
        self.clear_redo()

    def undo_depth(self) -> int:
        return len(self._undo)

    def redo_depth(self) -> int:
        return len(self._redo)