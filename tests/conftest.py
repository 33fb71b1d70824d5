"""Shared pytest fixtures for ArtCatalog tests."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date

import pytest

from art_catalog.catalog import Catalog
from art_catalog.models import (
    Blob,
    BlobId,
    BlobType,
    Category,
    CategoryId,
    Piece,
    PieceId,
    Tag,
    TagId,
)

# Type aliases for factory fixtures
MakePiece = Callable[..., Piece]
MakeBlob = Callable[..., Blob]
MakeTag = Callable[..., Tag]
MakeCategory = Callable[..., Category]


@pytest.fixture
def make_piece() -> MakePiece:
    """Factory fixture for creating Piece instances."""

    def _make(
        *,
        description: str = "Test piece",
        added: date = date(2021, 6, 15),
        base_price: int | None = None,
        tip_price: int | None = None,
        external_id: str | None = None,
    ) -> Piece:
        return Piece(
            description=description,
            added=added,
            base_price=base_price,
            tip_price=tip_price,
            external_id=external_id,
        )

    return _make


@pytest.fixture
def make_blob() -> MakeBlob:
    """Factory fixture for creating Blob instances with real content hashes."""

    def _make(
        *,
        file_name: str = "image.png",
        data: bytes = b"\x89PNG test",
        blob_type: BlobType = BlobType.CANON,
        added: date = date(2021, 6, 15),
    ) -> Blob:
        return Blob.from_bytes(file_name, data, blob_type=blob_type, added=added)

    return _make


@pytest.fixture
def make_tag() -> MakeTag:
    """Factory fixture for creating Tag instances."""

    def _make(*, name: str = "tag", description: str = "") -> Tag:
        return Tag(name=name, description=description, added=date(2021, 6, 15))

    return _make


@pytest.fixture
def make_category() -> MakeCategory:
    """Factory fixture for creating Category instances."""

    def _make(*, name: str = "category", color: tuple[int, int, int, int] = (255, 0, 0, 255)) -> Category:
        return Category(name=name, color=color, added=date(2021, 6, 15))

    return _make


@dataclass
class SampleCatalog:
    """A small catalog with known ids, shared by query and CLI tests.

    ``yumi`` wears ``casual`` on the first piece and ``teaching`` on the
    second; the third piece is untagged. ``outfit:casual`` is categorised,
    ``teaching`` is not.
    """

    catalog: Catalog
    first: PieceId
    second: PieceId
    third: PieceId
    yumi: TagId
    casual: TagId
    teaching: TagId
    outfit: CategoryId
    canon: BlobId
    draft: BlobId


@pytest.fixture
def sample(
    make_piece: MakePiece,
    make_blob: MakeBlob,
    make_tag: MakeTag,
    make_category: MakeCategory,
) -> SampleCatalog:
    catalog = Catalog()
    first = catalog.create_piece(
        make_piece(description="Yumi casual", added=date(2011, 10, 20), base_price=40, tip_price=10)
    )
    second = catalog.create_piece(
        make_piece(description="Yumi teaching", added=date(2011, 10, 25), base_price=60)
    )
    third = catalog.create_piece(make_piece(description="Untitled", added=date(2011, 11, 1)))

    yumi = catalog.create_tag(make_tag(name="yumi_lovelace"))
    casual = catalog.create_tag(make_tag(name="casual_outfit"))
    teaching = catalog.create_tag(make_tag(name="teaching_outfit"))
    outfit = catalog.create_category(make_category(name="outfit"))
    catalog.attach_category(casual, outfit)

    catalog.attach_tag(first, yumi)
    catalog.attach_tag(first, casual)
    catalog.attach_tag(second, yumi)
    catalog.attach_tag(second, teaching)

    canon = catalog.create_blob(make_blob(file_name="final.png", data=b"final"))
    draft = catalog.create_blob(
        make_blob(file_name="sketch.png", data=b"sketch", blob_type=BlobType.DRAFT)
    )
    catalog.attach_blob(first, draft)
    catalog.attach_blob(first, canon)
    catalog.attach_blob(second, canon)

    return SampleCatalog(
        catalog=catalog,
        first=first,
        second=second,
        third=third,
        yumi=yumi,
        casual=casual,
        teaching=teaching,
        outfit=outfit,
        canon=canon,
        draft=draft,
    )
