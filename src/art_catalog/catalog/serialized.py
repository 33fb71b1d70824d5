"""Persisted form of the catalog.

Arenas persist as sparse ``{id: record}`` maps so gaps left by deletions
survive a reload. Relations persist as sorted pairs. Blob bytes are never
persisted; each blob records the storage name its bytes live under.

Two schema generations exist, told apart by ``schema_version``. Generation 1
payloads are migrated on load.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Annotated, Literal

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from art_catalog.arena import Arena
from art_catalog.catalog.catalog import Catalog
from art_catalog.catalog.legacy import LegacyCatalog, migrate_legacy
from art_catalog.errors import SchemaError
from art_catalog.models import (
    Blob,
    BlobId,
    BlobType,
    Category,
    CategoryId,
    LegacyPiece,
    LegacyPieceId,
    Piece,
    PieceId,
    Tag,
    TagId,
)
from art_catalog.models.blob import HASH_BITS

logger = logging.getLogger(__name__)

CURRENT_SCHEMA_VERSION = 2


class StoredBlob(BaseModel):
    """Blob metadata as persisted. The bytes live on disk at ``storage_name``."""

    file_name: str
    hash: int = Field(ge=0, lt=2**HASH_BITS)
    blob_type: BlobType
    added: date
    storage_name: str

    @classmethod
    def from_blob(cls, blob_id: BlobId, blob: Blob) -> StoredBlob:
        return cls(
            file_name=blob.file_name,
            hash=blob.hash,
            blob_type=blob.blob_type,
            added=blob.added,
            storage_name=blob.storage_name(blob_id),
        )

    def to_blob(self) -> Blob:
        return Blob(
            file_name=self.file_name,
            hash=self.hash,
            blob_type=self.blob_type,
            added=self.added,
        )


class _RelationsMixin(BaseModel):
    blobs: dict[int, StoredBlob] = Field(default_factory=dict)
    tags: dict[int, Tag] = Field(default_factory=dict)
    categories: dict[int, Category] = Field(default_factory=dict)

    media: list[tuple[int, int]] = Field(default_factory=list)
    piece_tags: list[tuple[int, int]] = Field(default_factory=list)
    tag_category: dict[int, int] = Field(default_factory=dict)

    def _shared_arenas(
        self,
    ) -> tuple[Arena[BlobId, Blob], Arena[TagId, Tag], Arena[CategoryId, Category]]:
        return (
            Arena.from_mapping(BlobId, {k: v.to_blob() for k, v in self.blobs.items()}),
            Arena.from_mapping(TagId, {k: v.model_copy(deep=True) for k, v in self.tags.items()}),
            Arena.from_mapping(
                CategoryId, {k: v.model_copy(deep=True) for k, v in self.categories.items()}
            ),
        )


class SerializedCatalog(_RelationsMixin):
    """Current (second) schema generation."""

    schema_version: Literal[2] = CURRENT_SCHEMA_VERSION
    pieces: dict[int, Piece] = Field(default_factory=dict)

    @classmethod
    def from_catalog(cls, catalog: Catalog) -> SerializedCatalog:
        return cls(
            pieces={k: v.model_copy(deep=True) for k, v in catalog.pieces.to_mapping().items()},
            blobs={
                blob_id.value: StoredBlob.from_blob(blob_id, blob)
                for blob_id, blob in catalog.blobs.items()
            },
            tags={k: v.model_copy(deep=True) for k, v in catalog.tags.to_mapping().items()},
            categories={
                k: v.model_copy(deep=True) for k, v in catalog.categories.to_mapping().items()
            },
            media=[(piece.value, blob.value) for piece, blob in catalog.media],
            piece_tags=[(piece.value, tag.value) for piece, tag in catalog.piece_tags],
            tag_category={
                tag.value: category.value for tag, category in catalog.tag_category.items()
            },
        )

    def to_catalog(self) -> Catalog:
        catalog = Catalog()
        catalog.pieces = Arena.from_mapping(
            PieceId, {k: v.model_copy(deep=True) for k, v in self.pieces.items()}
        )
        catalog.blobs, catalog.tags, catalog.categories = self._shared_arenas()

        dangling = 0
        for piece, blob in self.media:
            if not catalog.attach_blob(PieceId(piece), BlobId(blob)):
                dangling += 1
        for piece, tag in self.piece_tags:
            if not catalog.attach_tag(PieceId(piece), TagId(tag)):
                dangling += 1
        for tag, category in self.tag_category.items():
            if not catalog.attach_category(TagId(tag), CategoryId(category)):
                dangling += 1
        if dangling:
            logger.warning("Dropped %d relation tuples referencing missing entities", dangling)
        return catalog


class LegacySerializedCatalog(_RelationsMixin):
    """First schema generation: pieces carry source and media types."""

    schema_version: Literal[1]
    pieces: dict[int, LegacyPiece] = Field(default_factory=dict)

    def to_legacy_catalog(self) -> LegacyCatalog:
        legacy = LegacyCatalog()
        legacy.pieces = Arena.from_mapping(
            LegacyPieceId, {k: v.model_copy(deep=True) for k, v in self.pieces.items()}
        )
        legacy.blobs, legacy.tags, legacy.categories = self._shared_arenas()
        legacy.media = {(LegacyPieceId(piece), BlobId(blob)) for piece, blob in self.media}
        legacy.piece_tags = {(LegacyPieceId(piece), TagId(tag)) for piece, tag in self.piece_tags}
        legacy.tag_category = {
            TagId(tag): CategoryId(category) for tag, category in self.tag_category.items()
        }
        return legacy


AnySerializedCatalog = Annotated[
    SerializedCatalog | LegacySerializedCatalog,
    Field(discriminator="schema_version"),
]

_adapter: TypeAdapter[SerializedCatalog | LegacySerializedCatalog] = TypeAdapter(
    AnySerializedCatalog
)


def dumps_catalog(catalog: Catalog, *, indent: int | None = 2) -> str:
    """Serialize ``catalog`` to JSON in the current schema generation."""
    return catalog.to_serialized().model_dump_json(indent=indent)


def loads_catalog(text: str | bytes) -> Catalog:
    """Load a catalog of either schema generation from JSON.

    Raises:
        SchemaError: If the payload is not a valid catalog of a known
            generation.
    """
    try:
        payload = _adapter.validate_json(text)
    except ValidationError as exc:
        raise SchemaError(f"not a catalog payload: {exc}") from exc

    try:
        if isinstance(payload, LegacySerializedCatalog):
            logger.info("Migrating schema generation %d catalog", payload.schema_version)
            return migrate_legacy(payload.to_legacy_catalog())
        return payload.to_catalog()
    except ValueError as exc:
        raise SchemaError(f"inconsistent catalog payload: {exc}") from exc
