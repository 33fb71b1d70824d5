"""Blob model: one stored media file attached to pieces."""

from __future__ import annotations

import hashlib
from datetime import date

from pydantic import BaseModel, Field

from art_catalog.arena import Id
from art_catalog.models.enums import BlobType

HASH_BITS = 64


def content_hash(data: bytes) -> int:
    """Unsigned 64-bit content hash used for de-duplication.

    Not cryptographic: equal hashes are confirmed by comparing bytes.
    """
    return int.from_bytes(hashlib.blake2b(data, digest_size=HASH_BITS // 8).digest(), "big")


class BlobId(Id):
    """Identity of a :class:`Blob` in the catalog."""


class Blob(BaseModel):
    """Metadata for a media file, plus its bytes while in memory.

    ``data`` is an immutable buffer shared with any consumer (e.g. a
    thumbnail task); edits replace the whole buffer. It is never persisted:
    the bytes live on disk under :meth:`storage_name`.
    """

    file_name: str
    hash: int = Field(default=0, ge=0, lt=2**HASH_BITS)
    blob_type: BlobType = BlobType.CANON
    added: date = Field(default_factory=date.today)
    data: bytes = Field(default=b"", exclude=True, repr=False)

    @classmethod
    def from_bytes(
        cls,
        file_name: str,
        data: bytes,
        *,
        blob_type: BlobType = BlobType.CANON,
        added: date | None = None,
    ) -> Blob:
        """Build a blob whose hash is computed from ``data``."""
        return cls(
            file_name=file_name,
            hash=content_hash(data),
            blob_type=blob_type,
            added=added or date.today(),
            data=data,
        )

    def storage_name(self, blob_id: BlobId) -> str:
        """On-disk file name: ``"[<id>] <file_name>"``."""
        return f"[{blob_id}] {self.file_name}"

    def same_content(self, other: Blob) -> bool:
        """Hash-then-bytes equality used to reuse an existing blob."""
        return self.hash == other.hash and self.data == other.data
