"""In-memory relational catalog of pieces, blobs, tags and categories.

Four arenas hold the entities. Three relations link them:

- media: Piece <-> Blob, many-to-many
- piece_tags: Piece <-> Tag, many-to-many
- tag_category: Tag -> Category, at most one category per tag

Every relation tuple refers to live entities. Deleting an entity cascades to
every tuple that mentions it, so no dangling check is needed at read time.

The catalog does no locking. A wrapper that shares it between threads must
keep writers exclusive.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from art_catalog.arena import Arena, Id
from art_catalog.models import (
    Blob,
    BlobId,
    BlobType,
    Category,
    CategoryId,
    ContainedPiece,
    Piece,
    PieceId,
    Tag,
    TagId,
)

if TYPE_CHECKING:
    from art_catalog.catalog.serialized import SerializedCatalog

logger = logging.getLogger(__name__)

_RECORD_TYPES: dict[type[Id], type[BaseModel]] = {
    PieceId: Piece,
    BlobId: Blob,
    TagId: Tag,
    CategoryId: Category,
}


class Catalog:
    """The relational catalog.

    Usage:
        catalog = Catalog()
        piece = catalog.create_piece(Piece(description="Harbour at dusk"))
        tag = catalog.create_tag(Tag(name="harbour"))
        catalog.attach_tag(piece, tag)
        assert list(catalog.tags_for_piece(piece)) == [tag]
    """

    def __init__(self) -> None:
        self.pieces: Arena[PieceId, Piece] = Arena(PieceId)
        self.blobs: Arena[BlobId, Blob] = Arena(BlobId)
        self.tags: Arena[TagId, Tag] = Arena(TagId)
        self.categories: Arena[CategoryId, Category] = Arena(CategoryId)

        self._media: set[tuple[PieceId, BlobId]] = set()
        self._piece_tags: set[tuple[PieceId, TagId]] = set()
        self._tag_category: dict[TagId, CategoryId] = {}

    # ── Creation ─────────────────────────────────────────────────────────────

    def create_piece(self, piece: Piece) -> PieceId:
        return self.pieces.insert(piece)

    def create_blob(self, blob: Blob) -> BlobId:
        return self.blobs.insert(blob)

    def create_tag(self, tag: Tag) -> TagId:
        return self.tags.insert(tag)

    def create_category(self, category: Category) -> CategoryId:
        return self.categories.insert(category)

    def insert_blob_deduplicated(self, blob: Blob) -> tuple[BlobId, bool]:
        """Insert ``blob`` unless a blob with the same content already exists.

        Returns:
            Tuple of (blob id, created flag). The flag is False when an
            existing blob was reused.
        """
        found = self.blobs.check(blob, Blob.same_content)
        if isinstance(found, BlobId):
            logger.debug("Reusing %r for %s", found, blob.file_name)
            return found, False
        return self.blobs.insert(found), True

    # ── Relations ────────────────────────────────────────────────────────────

    def attach_blob(self, piece: PieceId, blob: BlobId) -> bool:
        """Link a blob to a piece. False if either is missing or already linked."""
        if piece not in self.pieces or blob not in self.blobs:
            return False
        return _add(self._media, (piece, blob))

    def detach_blob(self, piece: PieceId, blob: BlobId) -> bool:
        return _discard(self._media, (piece, blob))

    def attach_tag(self, piece: PieceId, tag: TagId) -> bool:
        """Tag a piece. False if either is missing or the piece already has it."""
        if piece not in self.pieces or tag not in self.tags:
            return False
        return _add(self._piece_tags, (piece, tag))

    def detach_tag(self, piece: PieceId, tag: TagId) -> bool:
        return _discard(self._piece_tags, (piece, tag))

    def attach_category(self, tag: TagId, category: CategoryId | None) -> bool:
        """Set or clear the category of a tag.

        ``None`` clears the mapping. Returns True if the mapping changed.
        """
        if category is None:
            return self.detach_category(tag)
        if tag not in self.tags or category not in self.categories:
            return False
        if self._tag_category.get(tag) == category:
            return False
        self._tag_category[tag] = category
        return True

    def detach_category(self, tag: TagId) -> bool:
        return self._tag_category.pop(tag, None) is not None

    # ── Derived lookups ──────────────────────────────────────────────────────

    def blobs_for_piece(self, piece: PieceId) -> Iterator[BlobId]:
        return (blob for p, blob in sorted(self._media) if p == piece)

    def pieces_for_blob(self, blob: BlobId) -> Iterator[PieceId]:
        return (piece for piece, b in sorted(self._media) if b == blob)

    def tags_for_piece(self, piece: PieceId) -> Iterator[TagId]:
        return (tag for p, tag in sorted(self._piece_tags) if p == piece)

    def pieces_for_tag(self, tag: TagId) -> Iterator[PieceId]:
        return (piece for piece, t in sorted(self._piece_tags) if t == tag)

    def tags_for_category(self, category: CategoryId) -> Iterator[TagId]:
        return (tag for tag, c in sorted(self._tag_category.items()) if c == category)

    def has_blob(self, piece: PieceId, blob: BlobId) -> bool:
        return (piece, blob) in self._media

    def has_tag(self, piece: PieceId, tag: TagId) -> bool:
        return (piece, tag) in self._piece_tags

    def category_for_tag(self, tag: TagId) -> CategoryId | None:
        return self._tag_category.get(tag)

    def primary_blob_for_piece(self, piece: PieceId) -> BlobId | None:
        """First canon blob attached to ``piece``, if any."""
        return next(
            (
                blob
                for blob in self.blobs_for_piece(piece)
                if self.blobs[blob].blob_type is BlobType.CANON
            ),
            None,
        )

    def find_tag(self, name: str) -> TagId | None:
        """First tag named ``name`` in iteration order."""
        return next((tag_id for tag_id, tag in self.tags.items() if tag.name == name), None)

    def find_tag_in_category(self, name: str, category: str | None) -> TagId | None:
        """First tag named ``name`` whose category is named ``category``.

        ``category=None`` only matches tags without a category.
        """
        for tag_id, tag in self.tags.items():
            if tag.name != name:
                continue
            category_id = self.category_for_tag(tag_id)
            category_name = self.categories[category_id].name if category_id is not None else None
            if category_name == category:
                return tag_id
        return None

    def storage_for(self, blob: BlobId) -> str | None:
        """On-disk storage name for a live blob."""
        record = self.blobs.get(blob)
        return record.storage_name(blob) if record is not None else None

    def contained_piece(self, piece: PieceId) -> ContainedPiece | None:
        """Export ``piece`` with its blobs and (tag, category) pairs."""
        record = self.pieces.get(piece)
        if record is None:
            return None
        tags: list[tuple[Tag, Category | None]] = []
        for tag_id in self.tags_for_piece(piece):
            category_id = self.category_for_tag(tag_id)
            category = self.categories[category_id] if category_id is not None else None
            tags.append((self.tags[tag_id], category))
        return ContainedPiece(
            piece=record,
            blobs=[self.blobs[blob] for blob in self.blobs_for_piece(piece)],
            tags=tags,
        )

    # ── Relation snapshots ───────────────────────────────────────────────────

    @property
    def media(self) -> list[tuple[PieceId, BlobId]]:
        return sorted(self._media)

    @property
    def piece_tags(self) -> list[tuple[PieceId, TagId]]:
        return sorted(self._piece_tags)

    @property
    def tag_category(self) -> dict[TagId, CategoryId]:
        return dict(sorted(self._tag_category.items()))

    # ── Generic access by id kind ────────────────────────────────────────────

    def _arena_for(self, entity_id: Id) -> Arena[Any, Any]:
        arenas: dict[type[Id], Arena[Any, Any]] = {
            PieceId: self.pieces,
            BlobId: self.blobs,
            TagId: self.tags,
            CategoryId: self.categories,
        }
        try:
            return arenas[type(entity_id)]
        except KeyError:
            raise TypeError(f"catalog has no arena for {type(entity_id).__name__}") from None

    def exists(self, entity_id: Id) -> bool:
        return entity_id in self._arena_for(entity_id)

    def get(self, entity_id: Id) -> Any:
        return self._arena_for(entity_id).get(entity_id)

    def __getitem__(self, entity_id: Id) -> Any:
        return self._arena_for(entity_id)[entity_id]

    def edit(self, entity_id: Id, record: BaseModel) -> bool:
        """Replace the whole record at ``entity_id``. False if absent."""
        arena = self._arena_for(entity_id)
        expected = _RECORD_TYPES[type(entity_id)]
        if not isinstance(record, expected):
            raise TypeError(f"{entity_id!r} holds a {expected.__name__}, got {type(record).__name__}")
        return arena.replace(entity_id, record)

    def delete(self, entity_id: Id) -> bool:
        """Delete an entity and every relation tuple mentioning it.

        Returns False without effect if the id is not live.
        """
        if isinstance(entity_id, PieceId):
            return self._delete_piece(entity_id)
        elif isinstance(entity_id, BlobId):
            return self._delete_blob(entity_id)
        elif isinstance(entity_id, TagId):
            return self._delete_tag(entity_id)
        elif isinstance(entity_id, CategoryId):
            return self._delete_category(entity_id)
        raise TypeError(f"cannot delete {type(entity_id).__name__}")

    def _delete_piece(self, entity_id: PieceId) -> bool:
        if entity_id not in self.pieces:
            return False
        self.pieces.remove(entity_id)
        dropped = _drop(self._media, lambda pair: pair[0] == entity_id)
        dropped += _drop(self._piece_tags, lambda pair: pair[0] == entity_id)
        logger.debug("Deleted %r, dropped %d relation tuples", entity_id, dropped)
        return True

    def _delete_blob(self, entity_id: BlobId) -> bool:
        if entity_id not in self.blobs:
            return False
        self.blobs.remove(entity_id)
        dropped = _drop(self._media, lambda pair: pair[1] == entity_id)
        logger.debug("Deleted %r, dropped %d relation tuples", entity_id, dropped)
        return True

    def _delete_tag(self, entity_id: TagId) -> bool:
        if entity_id not in self.tags:
            return False
        self.tags.remove(entity_id)
        dropped = _drop(self._piece_tags, lambda pair: pair[1] == entity_id)
        if self._tag_category.pop(entity_id, None) is not None:
            dropped += 1
        logger.debug("Deleted %r, dropped %d relation tuples", entity_id, dropped)
        return True

    def _delete_category(self, entity_id: CategoryId) -> bool:
        if entity_id not in self.categories:
            return False
        self.categories.remove(entity_id)
        orphaned = [tag for tag, category in self._tag_category.items() if category == entity_id]
        for tag in orphaned:
            del self._tag_category[tag]
        logger.debug("Deleted %r, dropped %d relation tuples", entity_id, len(orphaned))
        return True

    # ── Serialization ────────────────────────────────────────────────────────

    def to_serialized(self) -> SerializedCatalog:
        from art_catalog.catalog.serialized import SerializedCatalog

        return SerializedCatalog.from_catalog(self)

    @classmethod
    def from_serialized(cls, data: SerializedCatalog) -> Catalog:
        return data.to_catalog()

    # ── Protocols ────────────────────────────────────────────────────────────

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Catalog):
            return NotImplemented
        return (
            self.pieces == other.pieces
            and self.blobs == other.blobs
            and self.tags == other.tags
            and self.categories == other.categories
            and self._media == other._media
            and self._piece_tags == other._piece_tags
            and self._tag_category == other._tag_category
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"Catalog(pieces={len(self.pieces)}, blobs={len(self.blobs)}, "
            f"tags={len(self.tags)}, categories={len(self.categories)})"
        )


def _add(relation: set[Any], pair: tuple[Any, Any]) -> bool:
    if pair in relation:
        return False
    relation.add(pair)
    return True


def _discard(relation: set[Any], pair: tuple[Any, Any]) -> bool:
    if pair not in relation:
        return False
    relation.discard(pair)
    return True


def _drop(relation: set[Any], matches: Callable[[Any], bool]) -> int:
    doomed = {pair for pair in relation if matches(pair)}
    relation.difference_update(doomed)
    return len(doomed)
