"""Enumerations for the ArtCatalog data model."""

from enum import Enum


class BlobType(str, Enum):
    """Role a blob plays for the pieces it is attached to."""

    CANON = "canon"  # Representative image for a piece
    VARIANT = "variant"
    RAW = "raw"
    DRAFT = "draft"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class SourceType(str, Enum):
    """Where a piece came from. Only carried by the legacy schema."""

    FAN_CREATION = "fan_creation"
    OFFICIAL = "official"
    COMMISSION = "commission"

    @property
    def label(self) -> str:
        return {
            SourceType.FAN_CREATION: "Fan Creation",
            SourceType.OFFICIAL: "Official",
            SourceType.COMMISSION: "Commission",
        }[self]


class MediaType(str, Enum):
    """How a piece is encoded. Only carried by the legacy schema."""

    IMAGE = "image"
    TEXT = "text"

    @property
    def label(self) -> str:
        return self.value.capitalize()
