"""Three-valued evaluation of parsed searches against a catalog.

Every condition evaluates to True, False or None ("undefined"). A condition
that names a tag the catalog does not have is undefined, and so are source
and media conditions, which no current piece carries. Undefined propagates:

- ``And``/``Or``: undefined children count as True before ``all``/``any``.
- ``Negate``: the negation of undefined is undefined.
- At the top level undefined means the piece is included.

So a query term that refers to nothing never filters anything out, negated
or not.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from art_catalog.catalog import Catalog
from art_catalog.models import Piece, PieceId, TagId
from art_catalog.search.model import (
    And,
    Condition,
    DateAdded,
    DateOp,
    MediaCondition,
    Negate,
    Or,
    PriceCondition,
    PriceOp,
    PriceType,
    Search,
    SourceCondition,
    TagCondition,
    TagWithCategory,
    Test,
)
from art_catalog.search.parse import parse_query

logger = logging.getLogger(__name__)


class Evaluator:
    """Evaluates searches for pieces of one catalog.

    Tag lookups are resolved once per evaluator, so build a fresh one after
    the catalog's tags or categories change.
    """

    def __init__(self, catalog: Catalog) -> None:
        self.catalog = catalog
        self._tags: dict[tuple[str, str | None] | str, TagId | None] = {}

    def matches(self, search: Search, piece_id: PieceId) -> bool:
        """Top-level verdict: undefined counts as a match."""
        return self.evaluate(search, piece_id, self.catalog.pieces[piece_id]) is not False

    # ── Search nodes ─────────────────────────────────────────────────────────

    def evaluate(self, search: Search | Condition, piece_id: PieceId, piece: Piece) -> bool | None:
        """Three-valued result of a search node or condition for one piece."""
        if isinstance(search, And):
            return all(
                _defined_or_true(self.evaluate(child, piece_id, piece)) for child in search.children
            )
        elif isinstance(search, Or):
            return any(
                _defined_or_true(self.evaluate(child, piece_id, piece)) for child in search.children
            )
        elif isinstance(search, Negate):
            inner = self.evaluate(search.inner, piece_id, piece)
            return None if inner is None else not inner
        elif isinstance(search, Test):
            return self.evaluate(search.condition, piece_id, piece)
        elif isinstance(search, TagCondition):
            return self._tag(search, piece_id)
        elif isinstance(search, TagWithCategory):
            return self._tag_with_category(search, piece_id)
        elif isinstance(search, DateAdded):
            return _date(search, piece)
        elif isinstance(search, PriceCondition):
            return _price(search, piece)
        elif isinstance(search, (SourceCondition, MediaCondition)):
            return None
        raise TypeError(f"not a search node: {search!r}")

    # ── Conditions ───────────────────────────────────────────────────────────

    def _tag(self, condition: TagCondition, piece_id: PieceId) -> bool | None:
        key = condition.name
        if key not in self._tags:
            self._tags[key] = self.catalog.find_tag(condition.name)
        return self._carries(piece_id, self._tags[key])

    def _tag_with_category(self, condition: TagWithCategory, piece_id: PieceId) -> bool | None:
        key = (condition.name, condition.category)
        if key not in self._tags:
            self._tags[key] = self.catalog.find_tag_in_category(condition.name, condition.category)
        return self._carries(piece_id, self._tags[key])

    def _carries(self, piece_id: PieceId, tag_id: TagId | None) -> bool | None:
        if tag_id is None:
            return None
        return self.catalog.has_tag(piece_id, tag_id)


def _date(condition: DateAdded, piece: Piece) -> bool:
    if condition.op is DateOp.BEFORE:
        return piece.added <= condition.date
    return piece.added >= condition.date


def _price(condition: PriceCondition, piece: Piece) -> bool | None:
    if condition.price_type is PriceType.BASE:
        price = piece.base_price
    elif condition.price_type is PriceType.TIP:
        price = piece.tip_price
    else:
        price = piece.total_price
    if price is None:
        return None
    if condition.op is PriceOp.GREATER_EQUAL:
        return price >= condition.value
    return price <= condition.value


def _defined_or_true(value: bool | None) -> bool:
    return True if value is None else value


def evaluate(search: Search, piece_id: PieceId, catalog: Catalog) -> bool | None:
    """Raw three-valued result of ``search`` for one piece."""
    return Evaluator(catalog).evaluate(search, piece_id, catalog.pieces[piece_id])


def execute(search: Search, catalog: Catalog) -> Iterator[PieceId]:
    """Lazily yield matching pieces in ascending id order.

    The catalog must not be mutated while the iterator is being consumed.
    """
    evaluator = Evaluator(catalog)
    for piece_id, piece in catalog.pieces.items():
        if evaluator.evaluate(search, piece_id, piece) is not False:
            yield piece_id


def run_query(catalog: Catalog, query: str) -> list[PieceId]:
    """Parse ``query`` and return every matching piece.

    Raises:
        QuerySyntaxError: If ``query`` is malformed.
    """
    search = parse_query(query)
    matches = list(execute(search, catalog))
    logger.debug("Query %r matched %d of %d pieces", query, len(matches), len(catalog.pieces))
    return matches
