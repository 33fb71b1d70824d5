"""Leaf commands: edit one field, or replace a whole record.

Merge rules shared by both kinds, with ``self`` the pending command and
``command`` the incoming one:

1. ``command.to`` equals ``self.from_``: the pair is a no-op, ``ANNUL``.
2. ``command`` already recorded its own ``from_`` (it was applied on its own
   before): ``NO``.
3. Otherwise ``command`` continues the same gesture: ``self.to`` becomes
   ``command.to``, ``self.from_`` is kept, ``YES``.
"""

from __future__ import annotations

import copy
import logging
from typing import Any

from pydantic import BaseModel

from art_catalog.commands.base import UNSET, Merge
from art_catalog.errors import CommandError

logger = logging.getLogger(__name__)


def _merge_values(pending: Any, command: Any) -> Merge:
    if pending.from_ is not UNSET and command.to == pending.from_:
        outcome = Merge.ANNUL
    elif command.from_ is not UNSET:
        outcome = Merge.NO
    else:
        pending.to = command.to
        outcome = Merge.YES
    logger.debug("Merged %r into %r: %s", command, pending, outcome.value)
    return outcome


class FieldCommand:
    """Set one attribute of a target object.

    Usage:
        command = FieldCommand("description", "Sunset study")
        command.apply(piece)
        command.undo(piece)
    """

    def __init__(self, field: str, to: Any) -> None:
        self.field = field
        self.to = to
        self.from_: Any = UNSET

    def apply(self, target: Any) -> None:
        self.from_ = copy.deepcopy(getattr(target, self.field))
        setattr(target, self.field, self.to)

    def undo(self, target: Any) -> None:
        if self.from_ is UNSET:
            raise CommandError(f"undo of field {self.field!r} before apply")
        setattr(target, self.field, self.from_)

    def merge(self, command: Any) -> Merge:
        if not isinstance(command, FieldCommand) or command.field != self.field:
            return Merge.NO
        return _merge_values(self, command)

    def __repr__(self) -> str:
        return f"FieldCommand({self.field!r}, from_={self.from_!r}, to={self.to!r})"


class RecordCommand:
    """Replace every field of a pydantic record in place.

    The record object keeps its identity, so other holders of it see the new
    values.
    """

    def __init__(self, to: BaseModel) -> None:
        self.to = to
        self.from_: Any = UNSET

    @staticmethod
    def _assign(target: BaseModel, source: BaseModel) -> None:
        for name in type(source).model_fields:
            setattr(target, name, getattr(source, name))

    def apply(self, target: BaseModel) -> None:
        if type(target) is not type(self.to):
            raise CommandError(
                f"cannot replace {type(target).__name__} with {type(self.to).__name__}"
            )
        self.from_ = target.model_copy(deep=True)
        self._assign(target, self.to.model_copy(deep=True))

    def undo(self, target: BaseModel) -> None:
        if self.from_ is UNSET:
            raise CommandError(f"undo of {type(self.to).__name__} replace before apply")
        self._assign(target, self.from_)

    def merge(self, command: Any) -> Merge:
        if not isinstance(command, RecordCommand) or type(command.to) is not type(self.to):
            return Merge.NO
        return _merge_values(self, command)

    def __repr__(self) -> str:
        return f"RecordCommand(from_={self.from_!r}, to={self.to!r})"
