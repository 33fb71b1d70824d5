"""Self-contained export of a single piece."""

from __future__ import annotations

from pydantic import BaseModel, Field

from art_catalog.models.blob import Blob
from art_catalog.models.category import Category
from art_catalog.models.piece import Piece
from art_catalog.models.tag import Tag


class ContainedPiece(BaseModel):
    """A piece together with its blobs and its (tag, category) pairs."""

    piece: Piece
    blobs: list[Blob] = Field(default_factory=list)
    tags: list[tuple[Tag, Category | None]] = Field(default_factory=list)
