"""Spending summary over a set of pieces (usually a query result)."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from art_catalog.catalog import Catalog
from art_catalog.models import PieceId


@dataclass(frozen=True)
class SpendingSummary:
    """Totals and averages for a group of pieces.

    Missing prices count as zero. Averages are integer divisions over the
    piece count, including pieces without a price.
    """

    piece_count: int = 0
    blob_count: int = 0
    base_total: int = 0
    tip_total: int = 0

    @property
    def total_spent(self) -> int:
        return self.base_total + self.tip_total

    @property
    def tip_percentage(self) -> int:
        """Tips as a whole-number percentage of the total spent."""
        if self.total_spent == 0:
            return 0
        return self.tip_total * 100 // self.total_spent

    @property
    def average_price(self) -> int:
        return self.base_total // self.piece_count if self.piece_count else 0

    @property
    def average_tip(self) -> int:
        return self.tip_total // self.piece_count if self.piece_count else 0


def summarize(catalog: Catalog, piece_ids: Iterable[PieceId]) -> SpendingSummary:
    """Summarize the live pieces among ``piece_ids``.

    Each blob is counted once per piece it is attached to.
    """
    piece_count = blob_count = base_total = tip_total = 0
    for piece_id in piece_ids:
        piece = catalog.pieces.get(piece_id)
        if piece is None:
            continue
        piece_count += 1
        blob_count += sum(1 for _ in catalog.blobs_for_piece(piece_id))
        base_total += piece.base_price or 0
        tip_total += piece.tip_price or 0
    return SpendingSummary(
        piece_count=piece_count,
        blob_count=blob_count,
        base_total=base_total,
        tip_total=tip_total,
    )
