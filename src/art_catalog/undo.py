"""Snapshot-based undo history.

The history is a bounded ring of full copies of a value plus a cursor. The
entry under the cursor is the live, mutable state; every other entry is a
frozen snapshot. A checkpoint copies the live state forward, so whatever the
caller mutates next can be undone by stepping the cursor back.

Checkpoint at user-gesture boundaries: each one deep-copies the whole value.
"""

from __future__ import annotations

import copy
import logging
from collections import deque
from typing import Generic, TypeVar

from art_catalog.config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class UndoStack(Generic[T]):
    """Bounded linear history of snapshots.

    ``limit`` is the number of undo steps retained. Pushing a checkpoint while
    not at the head of the history discards the redo entries first.

    Usage:
        history = UndoStack(Catalog())
        history.checkpoint()
        history.current.create_tag(Tag(name="landscape"))
        history.undo()  # tag gone
        history.redo()  # tag back
    """

    def __init__(self, value: T, *, limit: int | None = None) -> None:
        self.limit = limit if limit is not None else settings.undo_history_limit
        if self.limit < 0:
            raise ValueError("limit must be >= 0")
        self._history: deque[T] = deque([value], maxlen=self.limit + 1)
        self._cursor = 0

    @property
    def current(self) -> T:
        """The live state."""
        return self._history[self._cursor]

    @current.setter
    def current(self, value: T) -> None:
        self._history[self._cursor] = value

    def checkpoint(self) -> None:
        """Record the live state so the next mutation can be undone."""
        while len(self._history) > self._cursor + 1:
            self._history.pop()
        snapshot = copy.deepcopy(self.current)
        if len(self._history) == self._history.maxlen:
            # deque drops the oldest snapshot on append
            logger.debug("Undo history full (%d), evicting oldest checkpoint", self.limit)
        else:
            self._cursor += 1
        self._history.append(snapshot)

    def undo(self) -> bool:
        if not self.can_undo:
            return False
        self._cursor -= 1
        return True

    def redo(self) -> bool:
        if not self.can_redo:
            return False
        self._cursor += 1
        return True

    @property
    def can_undo(self) -> bool:
        return self._cursor > 0

    @property
    def can_redo(self) -> bool:
        return self._cursor < len(self._history) - 1

    @property
    def undo_depth(self) -> int:
        """Number of undo steps currently available."""
        return self._cursor

    def __len__(self) -> int:
        return len(self._history)
