"""Search language: parsing, three-valued evaluation and result summaries."""

from art_catalog.search.execute import Evaluator, evaluate, execute, run_query
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
from art_catalog.search.parse import parse_condition, parse_query
from art_catalog.search.summary import SpendingSummary, summarize

__all__ = [
    "And",
    "Condition",
    "DateAdded",
    "DateOp",
    "Evaluator",
    "MediaCondition",
    "Negate",
    "Or",
    "PriceCondition",
    "PriceOp",
    "PriceType",
    "Search",
    "SourceCondition",
    "SpendingSummary",
    "TagCondition",
    "TagWithCategory",
    "Test",
    "evaluate",
    "execute",
    "parse_condition",
    "parse_query",
    "run_query",
    "summarize",
]
