"""Slot-indexed arenas with stable, typed integer identities.

An :class:`Arena` hands out an :class:`Id` for every inserted value. Ids stay
valid until the value is removed; a removed slot may later be reused for a new
value, so consumers holding ids must re-check ``id in arena`` before
dereferencing.

Iteration is in ascending slot order, which is also the order of the sparse
``{int: value}`` mapping used for serialization. Gaps left by removals survive
a round trip through :meth:`Arena.to_mapping` / :meth:`Arena.from_mapping`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from art_catalog.errors import MissingEntityError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, order=True)
class Id:
    """Opaque handle naming one arena slot.

    Subclasses name the entity kind (``PieceId``, ``BlobId``...). Equality and
    ordering use the integer value only, and only between ids of the same kind.
    """

    value: int

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.value})"


I = TypeVar("I", bound=Id)
T = TypeVar("T")


class _Vacant:
    """Marker for an empty slot. A singleton, also across copies."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "<vacant>"

    def __reduce__(self) -> str:
        return "_VACANT"


_VACANT: Any = _Vacant()


class Arena(Generic[I, T]):
    """Container mapping typed ids to values.

    Usage:
        pieces: Arena[PieceId, Piece] = Arena(PieceId)
        piece_id = pieces.insert(Piece(description="sketch"))
        assert pieces[piece_id].description == "sketch"
    """

    def __init__(self, id_type: type[I]) -> None:
        self.id_type = id_type
        self._slots: list[Any] = []
        self._vacant: list[int] = []
        self._len = 0

    # ── Mutation ─────────────────────────────────────────────────────────────

    def insert(self, value: T) -> I:
        """Store ``value`` in a free slot and return its id."""
        if self._vacant:
            index = self._vacant.pop()
            self._slots[index] = value
        else:
            index = len(self._slots)
            self._slots.append(value)
        self._len += 1
        logger.debug("Inserted %s %d", self.id_type.__name__, index)
        return self.id_type(index)

    def remove(self, entity_id: I) -> T:
        """Remove and return the value stored at ``entity_id``.

        Raises:
            MissingEntityError: If ``entity_id`` is not live. Callers must
                check :meth:`contains` first.
        """
        if entity_id not in self:
            raise MissingEntityError(entity_id)
        index = entity_id.value
        value = self._slots[index]
        self._slots[index] = _VACANT
        self._vacant.append(index)
        self._len -= 1
        logger.debug("Removed %s %d", self.id_type.__name__, index)
        return value

    def replace(self, entity_id: I, value: T) -> bool:
        """Overwrite the value at a live id. Returns False if the id is absent."""
        if entity_id not in self:
            return False
        self._slots[entity_id.value] = value
        return True

    # ── Lookup ───────────────────────────────────────────────────────────────

    def contains(self, entity_id: I) -> bool:
        return entity_id in self

    def get(self, entity_id: I) -> T | None:
        if entity_id not in self:
            return None
        return self._slots[entity_id.value]

    def check(self, candidate: T, equals: Callable[[T, T], bool]) -> I | T:
        """Look for an existing value equal to ``candidate``.

        Args:
            candidate: The value that would be inserted.
            equals: Predicate called as ``equals(existing, candidate)``.

        Returns:
            The id of the first matching entry in iteration order, or
            ``candidate`` itself (unplaced) when nothing matches.
        """
        for entity_id, existing in self.items():
            if equals(existing, candidate):
                return entity_id
        return candidate

    def items(self) -> Iterator[tuple[I, T]]:
        for index, value in enumerate(self._slots):
            if value is not _VACANT:
                yield self.id_type(index), value

    def keys(self) -> Iterator[I]:
        for entity_id, _ in self.items():
            yield entity_id

    def values(self) -> Iterator[T]:
        for _, value in self.items():
            yield value

    # ── Serialization ────────────────────────────────────────────────────────

    def to_mapping(self) -> dict[int, T]:
        """Sparse ``{slot: value}`` mapping in ascending slot order."""
        return {entity_id.value: value for entity_id, value in self.items()}

    @classmethod
    def from_mapping(cls, id_type: type[I], mapping: Mapping[int, T]) -> Arena[I, T]:
        """Rebuild an arena whose ids match the keys of ``mapping``."""
        arena: Arena[I, T] = cls(id_type)
        if mapping:
            if min(mapping) < 0:
                raise ValueError(f"negative {id_type.__name__} in mapping")
            arena._slots = [_VACANT] * (max(mapping) + 1)
            for index, value in mapping.items():
                arena._slots[index] = value
            # Lowest gaps are reused first
            arena._vacant = [
                index for index in reversed(range(len(arena._slots)))
                if arena._slots[index] is _VACANT
            ]
            arena._len = len(mapping)
        return arena

    # ── Protocols ────────────────────────────────────────────────────────────

    def __getitem__(self, entity_id: I) -> T:
        if entity_id not in self:
            raise MissingEntityError(entity_id)
        return self._slots[entity_id.value]

    def __contains__(self, entity_id: object) -> bool:
        if not isinstance(entity_id, self.id_type):
            return False
        index = entity_id.value
        return 0 <= index < len(self._slots) and self._slots[index] is not _VACANT

    def __iter__(self) -> Iterator[I]:
        return self.keys()

    def __len__(self) -> int:
        return self._len

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Arena):
            return NotImplemented
        return self.id_type is other.id_type and list(self.items()) == list(other.items())

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Arena({self.id_type.__name__}, {self.to_mapping()!r})"
