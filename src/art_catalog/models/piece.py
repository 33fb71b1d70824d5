"""Piece model: one catalogued work."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field

from art_catalog.arena import Id


class PieceId(Id):
    """Identity of a :class:`Piece` in the catalog."""


class Piece(BaseModel):
    """A catalogued piece of art.

    Prices are whole units of currency. Either may be unset for pieces that
    were not paid for.
    """

    external_id: str | None = None
    description: str = ""
    added: date = Field(default_factory=date.today)
    base_price: int | None = None
    tip_price: int | None = None

    @property
    def total_price(self) -> int | None:
        """Base plus tip, or None when neither is set."""
        if self.base_price is None and self.tip_price is None:
            return None
        return (self.base_price or 0) + (self.tip_price or 0)
