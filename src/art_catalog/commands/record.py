"""Merge-aware linear history of commands applied to one target."""

from __future__ import annotations

import copy
import logging
from collections import deque
from typing import Any, Generic, TypeVar

from art_catalog.commands.base import Command, Merge
from art_catalog.config import settings

logger = logging.getLogger(__name__)

TargetT = TypeVar("TargetT")


class CommandRecord(Generic[TargetT]):
    """Applies commands to a target and keeps them for undo/redo.

    Commands at positions ``< cursor`` are applied; those at ``>= cursor``
    are undone and available for redo. Applying a new command discards the
    redo tail.

    Usage:
        record = CommandRecord(catalog.pieces)
        record.apply(Changed(piece_id, FieldCommand("description", "S")))
        record.apply(Changed(piece_id, FieldCommand("description", "Su")))
        assert len(record) == 1  # same gesture, merged
        record.undo()
    """

    def __init__(self, target: TargetT, *, limit: int | None = None) -> None:
        self.target = target
        self.limit = limit if limit is not None else settings.command_history_limit
        self._entries: deque[Command[Any]] = deque()
        self._cursor = 0

    def apply(self, command: Command[Any]) -> Merge | None:
        """Apply ``command``, merging it into the last entry when allowed.

        Returns:
            The merge outcome, or None when there was nothing to merge with.
        """
        outcome: Merge | None = None
        merged: Command[Any] | None = None
        if self._cursor and self._cursor == len(self._entries):
            # Merge into a copy; the entry is only replaced once the apply succeeds
            merged = copy.deepcopy(self._entries[-1])
            outcome = merged.merge(command)

        command.apply(self.target)

        if outcome is Merge.YES:
            self._entries[-1] = merged
            return outcome
        if outcome is Merge.ANNUL:
            self._entries.pop()
            self._cursor -= 1
            return outcome

        while len(self._entries) > self._cursor:
            self._entries.pop()
        self._entries.append(command)
        self._cursor += 1
        if len(self._entries) > self.limit:
            self._entries.popleft()
            self._cursor -= 1
            logger.debug("Command history full, evicted oldest entry")
        return outcome

    def undo(self) -> bool:
        if not self.can_undo:
            return False
        self._cursor -= 1
        self._entries[self._cursor].undo(self.target)
        return True

    def redo(self) -> bool:
        if not self.can_redo:
            return False
        self._entries[self._cursor].apply(self.target)
        self._cursor += 1
        return True

    @property
    def can_undo(self) -> bool:
        return self._cursor > 0

    @property
    def can_redo(self) -> bool:
        return self._cursor < len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
