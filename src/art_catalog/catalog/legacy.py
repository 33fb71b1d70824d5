"""Earlier schema generation and its one-way migration."""

from __future__ import annotations

import logging

from art_catalog.arena import Arena
from art_catalog.catalog.catalog import Catalog
from art_catalog.models import (
    Blob,
    BlobId,
    Category,
    CategoryId,
    LegacyPiece,
    LegacyPieceId,
    Piece,
    PieceId,
    Tag,
    TagId,
)

logger = logging.getLogger(__name__)


class LegacyCatalog:
    """Catalog as held by the first schema generation.

    Only what migration needs: the arenas, the raw relation sets and enough
    builders to assemble one.
    """

    def __init__(self) -> None:
        self.pieces: Arena[LegacyPieceId, LegacyPiece] = Arena(LegacyPieceId)
        self.blobs: Arena[BlobId, Blob] = Arena(BlobId)
        self.tags: Arena[TagId, Tag] = Arena(TagId)
        self.categories: Arena[CategoryId, Category] = Arena(CategoryId)

        self.media: set[tuple[LegacyPieceId, BlobId]] = set()
        self.piece_tags: set[tuple[LegacyPieceId, TagId]] = set()
        self.tag_category: dict[TagId, CategoryId] = {}

    def create_piece(self, piece: LegacyPiece) -> LegacyPieceId:
        return self.pieces.insert(piece)

    def attach_blob(self, piece: LegacyPieceId, blob: BlobId) -> bool:
        if (piece, blob) in self.media:
            return False
        self.media.add((piece, blob))
        return True

    def attach_tag(self, piece: LegacyPieceId, tag: TagId) -> bool:
        if (piece, tag) in self.piece_tags:
            return False
        self.piece_tags.add((piece, tag))
        return True


def migrate_legacy(legacy: LegacyCatalog) -> Catalog:
    """Convert a first-generation catalog into the current one.

    - Blob, tag and category arenas are copied unchanged.
    - Each piece's name becomes its description; source and media types
      are dropped; the timestamp becomes a calendar date; prices carry over.
    - Relation tuples are relabelled from the old piece id kind to the new
      one. Every id keeps its integer value.
    """
    catalog = Catalog()
    catalog.pieces = Arena.from_mapping(
        PieceId,
        {
            piece_id.value: Piece(
                description=piece.name,
                added=piece.added.date(),
                base_price=piece.base_price,
                tip_price=piece.tip_price,
            )
            for piece_id, piece in legacy.pieces.items()
        },
    )
    catalog.blobs = Arena.from_mapping(BlobId, legacy.blobs.to_mapping())
    catalog.tags = Arena.from_mapping(TagId, legacy.tags.to_mapping())
    catalog.categories = Arena.from_mapping(CategoryId, legacy.categories.to_mapping())

    dangling = 0
    for piece, blob in sorted(legacy.media):
        if not catalog.attach_blob(PieceId(piece.value), blob):
            dangling += 1
    for piece, tag in sorted(legacy.piece_tags):
        if not catalog.attach_tag(PieceId(piece.value), tag):
            dangling += 1
    for tag, category in sorted(legacy.tag_category.items()):
        if not catalog.attach_category(tag, category):
            dangling += 1
    if dangling:
        logger.warning("Dropped %d legacy relation tuples referencing missing entities", dangling)

    logger.info(
        "Migrated legacy catalog: %d pieces, %d blobs, %d tags, %d categories",
        len(catalog.pieces),
        len(catalog.blobs),
        len(catalog.tags),
        len(catalog.categories),
    )
    return catalog
