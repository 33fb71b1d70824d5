"""Earlier-generation piece model.

The first schema generation classified pieces by source and media type and
recorded a full timestamp. It is only read, never written: see
:func:`art_catalog.catalog.legacy.migrate_legacy`.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from art_catalog.arena import Id
from art_catalog.models.enums import MediaType, SourceType


class LegacyPieceId(Id):
    """Identity of a :class:`LegacyPiece`."""


class LegacyPiece(BaseModel):
    """A piece as stored by the first schema generation."""

    name: str = "New Piece"
    source_type: SourceType = SourceType.COMMISSION
    media_type: MediaType = MediaType.IMAGE
    added: datetime = Field(default_factory=datetime.now)
    base_price: int | None = None
    tip_price: int | None = None
