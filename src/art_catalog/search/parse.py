"""Parser for the search language.

Grammar, tightest binding first (``WS`` is one or more whitespace)::

    search     := and | or | paren | negate | test
    and        := item (WS item)+      item in {or, paren, negate, test}
    or         := item ('|' item)+     item in {paren, negate, test}
    paren      := '(' search ')'
    negate     := '!' (paren | negate | test)
    test       := condition

Space means AND, pipe means OR, and an OR group may not contain spaces, so
``a b|c`` reads as ``a AND (b OR c)``.

Conditions are tried in a fixed order and the first that accepts wins:
``source:<fan|commission|official>``, ``media:<image|text>``,
``<after|before>:MM/DD/YYYY``, ``<total|base|tip><>=|<=><integer>``,
``<category>:<tag>`` (empty category means "no category"), then a bare
``<tag>``. A malformed keyword literal such as ``source:bogus`` falls through
to the category form.

Alternatives backtrack. Results are memoised per (rule, offset), and the
furthest offset any alternative reached is reported on failure. Nesting deeper
than the configured limit is a syntax error at the offending "(" or "!".
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from datetime import datetime
from typing import Any

from art_catalog.config import settings
from art_catalog.errors import QuerySyntaxError
from art_catalog.models.enums import MediaType, SourceType
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

logger = logging.getLogger(__name__)

STRUCTURAL_CHARS = frozenset(":()!|>=<")

_SOURCES = {
    "fan": SourceType.FAN_CREATION,
    "commission": SourceType.COMMISSION,
    "official": SourceType.OFFICIAL,
}
_MEDIA = {"image": MediaType.IMAGE, "text": MediaType.TEXT}
_DATE_OPS = {"after": DateOp.AFTER, "before": DateOp.BEFORE}
_PRICE_TYPES = {"total": PriceType.TOTAL, "base": PriceType.BASE, "tip": PriceType.TIP}
_INTEGER = re.compile(r"[+-]?\d+")

Parsed = tuple[Any, int] | None


def _memoised(rule: Callable[[_Parser, int], Parsed]) -> Callable[[_Parser, int], Parsed]:
    name = rule.__name__

    def wrapper(self: _Parser, pos: int) -> Parsed:
        key = (name, pos)
        if key not in self._memo:
            self._memo[key] = rule(self, pos)
        return self._memo[key]

    wrapper.__name__ = name
    return wrapper


class _Parser:
    def __init__(
        self, text: str, date_format: str, max_nesting: int, query: str | None = None
    ) -> None:
        self.text = text
        self.date_format = date_format
        self.max_nesting = max_nesting
        self.query = text if query is None else query
        self.depth = 0
        self.furthest = 0
        self.expected: set[str] = set()
        self._memo: dict[tuple[str, int], Parsed] = {}

    def fail(self, pos: int, expected: str) -> None:
        if pos > self.furthest:
            self.furthest = pos
            self.expected = {expected}
        elif pos == self.furthest:
            self.expected.add(expected)

    def nest(self, pos: int) -> None:
        """Enter one level of parentheses or negation starting at ``pos``."""
        if self.depth >= self.max_nesting:
            raise QuerySyntaxError(self.query, pos, ["shallower nesting"])
        self.depth += 1

    # ── Lexical helpers ──────────────────────────────────────────────────────

    def literal(self, pos: int, token: str) -> int | None:
        if self.text.startswith(token, pos):
            return pos + len(token)
        self.fail(pos, repr(token))
        return None

    def whitespace(self, pos: int) -> int | None:
        end = pos
        while end < len(self.text) and self.text[end].isspace():
            end += 1
        if end == pos:
            self.fail(pos, "whitespace")
            return None
        return end

    def item(self, pos: int) -> tuple[str, int]:
        """Longest run free of whitespace and structural characters (may be empty)."""
        end = pos
        while end < len(self.text):
            char = self.text[end]
            if char.isspace() or char in STRUCTURAL_CHARS:
                break
            end += 1
        return self.text[pos:end], end

    def whole(self, pos: int) -> tuple[tuple[str, str], int] | None:
        """``item ':' item``."""
        lhs, pos = self.item(pos)
        after_colon = self.literal(pos, ":")
        if after_colon is None:
            return None
        rhs, pos = self.item(after_colon)
        return (lhs, rhs), pos

    def separated(
        self,
        pos: int,
        separator: Callable[[int], int | None],
        alternatives: Sequence[Callable[[int], Parsed]],
    ) -> tuple[list[Search], int] | None:
        """One or more elements separated by ``separator``.

        A separator not followed by an element is left unconsumed.
        """
        first = self.first_of(pos, alternatives)
        if first is None:
            return None
        items = [first[0]]
        pos = first[1]
        while True:
            after_separator = separator(pos)
            if after_separator is None:
                break
            element = self.first_of(after_separator, alternatives)
            if element is None:
                break
            items.append(element[0])
            pos = element[1]
        return items, pos

    @staticmethod
    def first_of(pos: int, alternatives: Sequence[Callable[[int], Parsed]]) -> Parsed:
        for alternative in alternatives:
            result = alternative(pos)
            if result is not None:
                return result
        return None

    # ── Expressions ──────────────────────────────────────────────────────────

    @_memoised
    def search(self, pos: int) -> Parsed:
        return self.first_of(pos, (self.and_, self.or_, self.paren, self.negate, self.test))

    @_memoised
    def and_(self, pos: int) -> Parsed:
        parsed = self.separated(pos, self.whitespace, (self.or_, self.paren, self.negate, self.test))
        if parsed is None or len(parsed[0]) < 2:
            return None
        return And(tuple(parsed[0])), parsed[1]

    @_memoised
    def or_(self, pos: int) -> Parsed:
        parsed = self.separated(
            pos, lambda p: self.literal(p, "|"), (self.paren, self.negate, self.test)
        )
        if parsed is None or len(parsed[0]) < 2:
            return None
        return Or(tuple(parsed[0])), parsed[1]

    @_memoised
    def paren(self, pos: int) -> Parsed:
        inner_start = self.literal(pos, "(")
        if inner_start is None:
            return None
        self.nest(pos)
        try:
            inner = self.search(inner_start)
        finally:
            self.depth -= 1
        if inner is None:
            return None
        end = self.literal(inner[1], ")")
        if end is None:
            return None
        return inner[0], end

    @_memoised
    def negate(self, pos: int) -> Parsed:
        inner_start = self.literal(pos, "!")
        if inner_start is None:
            return None
        self.nest(pos)
        try:
            inner = self.first_of(inner_start, (self.paren, self.negate, self.test))
        finally:
            self.depth -= 1
        if inner is None:
            return None
        return Negate(inner[0]), inner[1]

    @_memoised
    def test(self, pos: int) -> Parsed:
        condition = self.first_of(
            pos,
            (
                self.source,
                self.media,
                self.added,
                self.price,
                self.tag_with_category,
                self.tag,
            ),
        )
        if condition is None:
            return None
        return Test(condition[0]), condition[1]

    # ── Conditions ───────────────────────────────────────────────────────────

    def source(self, pos: int) -> Parsed:
        parsed = self.whole(pos)
        if parsed is None:
            return None
        (lhs, rhs), end = parsed
        if lhs != "source" or rhs not in _SOURCES:
            return None
        return SourceCondition(_SOURCES[rhs]), end

    def media(self, pos: int) -> Parsed:
        parsed = self.whole(pos)
        if parsed is None:
            return None
        (lhs, rhs), end = parsed
        if lhs != "media" or rhs not in _MEDIA:
            return None
        return MediaCondition(_MEDIA[rhs]), end

    def added(self, pos: int) -> Parsed:
        parsed = self.whole(pos)
        if parsed is None:
            return None
        (lhs, rhs), end = parsed
        if lhs not in _DATE_OPS:
            return None
        try:
            day = datetime.strptime(rhs, self.date_format).date()
        except ValueError:
            return None
        return DateAdded(_DATE_OPS[lhs], day), end

    def price(self, pos: int) -> Parsed:
        price_type, pos = self.item(pos)
        for token, op in ((">=", PriceOp.GREATER_EQUAL), ("<=", PriceOp.LESSER_EQUAL)):
            value_start = self.literal(pos, token)
            if value_start is not None:
                break
        else:
            return None
        value, end = self.item(value_start)
        if price_type not in _PRICE_TYPES or not _INTEGER.fullmatch(value):
            return None
        return PriceCondition(_PRICE_TYPES[price_type], op, int(value)), end

    def tag_with_category(self, pos: int) -> Parsed:
        parsed = self.whole(pos)
        if parsed is None:
            return None
        (category, name), end = parsed
        return TagWithCategory(category if category.strip() else None, name), end

    def tag(self, pos: int) -> Parsed:
        name, end = self.item(pos)
        if not name:
            self.fail(pos, "tag name")
            return None
        return TagCondition(name), end


def parse_query(
    text: str, *, date_format: str | None = None, max_nesting: int | None = None
) -> Search:
    """Parse a whole query.

    Surrounding whitespace is ignored; everything in between must be consumed.
    Parentheses and negations may nest at most ``max_nesting`` levels deep
    (``settings.query_max_nesting`` by default).

    Raises:
        QuerySyntaxError: With the offset (into ``text``) of the furthest
            failure and the alternatives expected there.
    """
    stripped = text.rstrip()
    start = len(stripped) - len(stripped.lstrip())
    parser = _Parser(
        stripped,
        date_format or settings.query_date_format,
        max_nesting if max_nesting is not None else settings.query_max_nesting,
        query=text,
    )

    try:
        result = parser.search(start)
    except RecursionError:
        raise QuerySyntaxError(text, parser.furthest, ["shallower nesting"]) from None
    if result is not None and result[1] == len(stripped):
        logger.debug("Parsed %r as %r", text, result[0])
        return result[0]

    if result is not None:
        parser.fail(result[1], "end of query")
    raise QuerySyntaxError(text, parser.furthest, parser.expected)


def parse_condition(text: str, *, date_format: str | None = None) -> Condition:
    """Parse a single condition, e.g. ``"after:10/25/2011"``."""
    parser = _Parser(text, date_format or settings.query_date_format, settings.query_max_nesting)
    result = parser.test(0)
    if result is None or result[1] != len(text):
        if result is not None:
            parser.fail(result[1], "end of query")
        raise QuerySyntaxError(text, parser.furthest, parser.expected)
    return result[0].condition
