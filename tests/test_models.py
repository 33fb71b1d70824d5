"""Tests for entity models and enums."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from pydantic import ValidationError

from art_catalog.models import (
    Blob,
    BlobId,
    BlobType,
    Category,
    MediaType,
    Piece,
    PieceId,
    SourceType,
    TagId,
    content_hash,
)

if TYPE_CHECKING:
    from conftest import MakePiece


class TestPiece:
    """Price arithmetic on pieces."""

    def test_total_combines_base_and_tip(self, make_piece: MakePiece) -> None:
        assert make_piece(base_price=40, tip_price=10).total_price == 50

    def test_total_with_one_price(self, make_piece: MakePiece) -> None:
        assert make_piece(base_price=40).total_price == 40
        assert make_piece(tip_price=7).total_price == 7

    def test_total_without_prices_is_none(self, make_piece: MakePiece) -> None:
        assert make_piece().total_price is None

    def test_defaults(self) -> None:
        piece = Piece()
        assert piece.description == ""
        assert piece.external_id is None


class TestBlob:
    """Content hashing and storage naming."""

    def test_hash_is_64_bit_and_stable(self) -> None:
        value = content_hash(b"pixels")
        assert 0 <= value < 2**64
        assert value == content_hash(b"pixels")
        assert value != content_hash(b"other pixels")

    def test_from_bytes(self) -> None:
        blob = Blob.from_bytes("a.png", b"pixels", blob_type=BlobType.RAW)
        assert blob.hash == content_hash(b"pixels")
        assert blob.blob_type is BlobType.RAW
        assert blob.data == b"pixels"

    def test_same_content_compares_bytes(self) -> None:
        first = Blob.from_bytes("a.png", b"pixels")
        renamed = Blob.from_bytes("b.png", b"pixels")
        collision = Blob(file_name="c.png", hash=first.hash, data=b"different")
        assert first.same_content(renamed)
        assert not first.same_content(collision)

    def test_storage_name(self) -> None:
        assert Blob(file_name="final.png").storage_name(BlobId(3)) == "[3] final.png"

    def test_data_is_not_dumped(self) -> None:
        assert "data" not in Blob.from_bytes("a.png", b"pixels").model_dump()

    def test_hash_range_validated(self) -> None:
        with pytest.raises(ValidationError):
            Blob(file_name="a.png", hash=-1)


class TestCategory:
    """Colour channels."""

    def test_normalized_color(self) -> None:
        category = Category(name="outfit", color=(255, 0, 51, 255))
        assert category.normalized_color == (1.0, 0.0, 0.2, 1.0)

    def test_channel_out_of_range(self) -> None:
        with pytest.raises(ValidationError):
            Category(color=(256, 0, 0, 0))


class TestIds:
    """Typed identities."""

    def test_kinds_do_not_compare_equal(self) -> None:
        assert PieceId(1) != TagId(1)
        assert PieceId(1) == PieceId(1)

    def test_display(self) -> None:
        assert str(PieceId(4)) == "4"
        assert repr(PieceId(4)) == "PieceId(4)"
        assert int(BlobId(2)) == 2


class TestEnumLabels:
    """Human-readable enum labels."""

    def test_blob_type(self) -> None:
        assert BlobType.DRAFT.label == "Draft"

    def test_source_type(self) -> None:
        assert SourceType.FAN_CREATION.label == "Fan Creation"
        assert SourceType.COMMISSION.label == "Commission"

    def test_media_type(self) -> None:
        assert MediaType.TEXT.label == "Text"
