"""The command capability: apply, undo, merge.

A command mutates a target and remembers enough to reverse itself. A newly
issued command may fold into the previously applied one through
:meth:`Command.merge`, so that one user gesture (e.g. typing a word) becomes
a single history entry.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Protocol, TypeVar

TargetT = TypeVar("TargetT", contravariant=True)


class Merge(str, Enum):
    """Outcome of offering a new command to the last applied one."""

    YES = "yes"  # Absorbed into the last command
    NO = "no"  # Kept as a separate history entry
    ANNUL = "annul"  # The two cancel out; both leave the history


class Command(Protocol[TargetT]):
    """Protocol implemented by every command kind."""

    def apply(self, target: TargetT) -> None:
        """Mutate ``target``, recording what is needed to undo."""
        ...

    def undo(self, target: TargetT) -> None:
        """Restore ``target`` to its state before the matching :meth:`apply`.

        Raises:
            CommandError: If called without a prior apply.
        """
        ...

    def merge(self, command: Any) -> Merge:
        """Try to absorb ``command``, issued right after this one."""
        ...


class _Unset:
    """Marker for a recorded value that has not been captured yet."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()
