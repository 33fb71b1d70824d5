"""Entity models for ArtCatalog."""

from art_catalog.models.blob import Blob, BlobId, content_hash
from art_catalog.models.category import Category, CategoryId
from art_catalog.models.contained import ContainedPiece
from art_catalog.models.enums import BlobType, MediaType, SourceType
from art_catalog.models.legacy import LegacyPiece, LegacyPieceId
from art_catalog.models.piece import Piece, PieceId
from art_catalog.models.tag import Tag, TagId

__all__ = [
    "Blob",
    "BlobId",
    "BlobType",
    "Category",
    "CategoryId",
    "ContainedPiece",
    "LegacyPiece",
    "LegacyPieceId",
    "MediaType",
    "Piece",
    "PieceId",
    "SourceType",
    "Tag",
    "TagId",
    "content_hash",
]
