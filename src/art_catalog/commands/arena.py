"""Container commands over an :class:`~art_catalog.arena.Arena`.

``Added`` and ``Removed`` move whole values in and out of the arena.
``Changed`` addresses one live id and delegates to an inner leaf command.

Undoing a removal re-inserts the value, which may land on a different id
than it had before. Callers re-resolve ids after any redo past a removal.
"""

from __future__ import annotations

import logging
from typing import Any, Generic, TypeVar

from art_catalog.arena import Arena, Id
from art_catalog.commands.base import Command, Merge
from art_catalog.errors import CommandError

logger = logging.getLogger(__name__)

I = TypeVar("I", bound=Id)
T = TypeVar("T")


class ArenaCommand(Generic[I, T]):
    """Base for commands whose target is an arena."""

    def apply(self, target: Arena[I, T]) -> None:
        raise NotImplementedError

    def undo(self, target: Arena[I, T]) -> None:
        raise NotImplementedError

    def merge(self, command: Any) -> Merge:
        return Merge.NO


class Added(ArenaCommand[I, T]):
    """Insert ``value``; remembers the assigned id for undo."""

    def __init__(self, value: T) -> None:
        self.value: T | None = value
        self.id: I | None = None

    def apply(self, target: Arena[I, T]) -> None:
        if self.value is None:
            raise CommandError("Added applied twice without undo")
        self.id = target.insert(self.value)
        self.value = None

    def undo(self, target: Arena[I, T]) -> None:
        if self.id is None:
            raise CommandError("undo of Added before apply")
        self.value = target.remove(self.id)
        self.id = None

    def __repr__(self) -> str:
        return f"Added(id={self.id!r}, value={self.value!r})"


class Removed(ArenaCommand[I, T]):
    """Remove the value at ``id``; remembers it for undo."""

    def __init__(self, id: I) -> None:
        self.id = id
        self.value: T | None = None

    def apply(self, target: Arena[I, T]) -> None:
        self.value = target.remove(self.id)

    def undo(self, target: Arena[I, T]) -> None:
        if self.value is None:
            raise CommandError(f"undo of Removed({self.id!r}) before apply")
        new_id = target.insert(self.value)
        if new_id != self.id:
            logger.debug("Restored %r under new id %r", self.id, new_id)
        self.id = new_id
        self.value = None

    def __repr__(self) -> str:
        return f"Removed(id={self.id!r})"


class Changed(ArenaCommand[I, T]):
    """Apply ``command`` to the value stored at ``id``."""

    def __init__(self, id: I, command: Command[Any]) -> None:
        self.id = id
        self.command = command

    def _value(self, target: Arena[I, T]) -> T:
        value = target.get(self.id)
        if value is None:
            raise CommandError(f"{self.id!r} is not live in the arena")
        return value

    def apply(self, target: Arena[I, T]) -> None:
        self.command.apply(self._value(target))

    def undo(self, target: Arena[I, T]) -> None:
        self.command.undo(self._value(target))

    def merge(self, command: Any) -> Merge:
        if not isinstance(command, Changed) or command.id != self.id:
            return Merge.NO
        return self.command.merge(command.command)

    def __repr__(self) -> str:
        return f"Changed(id={self.id!r}, command={self.command!r})"
