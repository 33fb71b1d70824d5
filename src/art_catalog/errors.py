"""Exception hierarchy for ArtCatalog.

Not-found conditions in catalog operations are reported as ``False``/``None``
return values. The exceptions below are reserved for broken callers
(contract violations), malformed query text, and unreadable payloads.
"""

from __future__ import annotations

from collections.abc import Iterable


class CatalogError(Exception):
    """Base class for all ArtCatalog errors."""


class MissingEntityError(CatalogError, KeyError):
    """An identity that is not live was removed or dereferenced."""

    def __init__(self, entity_id: object) -> None:
        super().__init__(entity_id)
        self.entity_id = entity_id

    def __str__(self) -> str:
        return f"{type(self.entity_id).__name__} {self.entity_id} does not exist"


class CommandError(CatalogError):
    """A command was driven outside its apply/undo contract."""


class SchemaError(CatalogError, ValueError):
    """A persisted payload is not a recognised schema generation."""


class QuerySyntaxError(CatalogError, ValueError):
    """Query text could not be parsed.

    Attributes:
        query: The text that was parsed.
        position: Offset of the furthest point the parser reached.
        expected: Descriptions of what would have been accepted there.
    """

    def __init__(self, query: str, position: int, expected: Iterable[str]) -> None:
        self.query = query
        self.position = position
        self.expected = tuple(sorted(set(expected)))
        super().__init__(self._describe())

    def _describe(self) -> str:
        found = repr(self.query[self.position]) if self.position < len(self.query) else "end of query"
        if self.expected:
            return (
                f"invalid query at position {self.position}: expected "
                f"{', '.join(self.expected)}; found {found}"
            )
        return f"invalid query at position {self.position}: unexpected {found}"
