"""Syntax tree of the search language."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Union

from art_catalog.models.enums import MediaType, SourceType


class DateOp(str, Enum):
    BEFORE = "before"
    AFTER = "after"


class PriceType(str, Enum):
    TOTAL = "total"
    BASE = "base"
    TIP = "tip"


class PriceOp(str, Enum):
    GREATER_EQUAL = ">="
    LESSER_EQUAL = "<="


@dataclass(frozen=True)
class TagCondition:
    """Bare ``name``: the piece carries the tag called ``name``."""

    name: str


@dataclass(frozen=True)
class TagWithCategory:
    """``category:name``. ``category`` is None for the ``:name`` form."""

    category: str | None
    name: str


@dataclass(frozen=True)
class DateAdded:
    """``after:MM/DD/YYYY`` or ``before:MM/DD/YYYY``, both inclusive."""

    op: DateOp
    date: date


@dataclass(frozen=True)
class SourceCondition:
    source: SourceType


@dataclass(frozen=True)
class MediaCondition:
    media: MediaType


@dataclass(frozen=True)
class PriceCondition:
    """``base>=20``, ``tip<=5``, ``total>=100``..."""

    price_type: PriceType
    op: PriceOp
    value: int


Condition = Union[
    TagCondition,
    TagWithCategory,
    DateAdded,
    SourceCondition,
    MediaCondition,
    PriceCondition,
]


@dataclass(frozen=True)
class And:
    children: tuple[Search, ...]


@dataclass(frozen=True)
class Or:
    children: tuple[Search, ...]


@dataclass(frozen=True)
class Negate:
    inner: Search


@dataclass(frozen=True)
class Test:
    condition: Condition


Search = Union[And, Or, Negate, Test]
