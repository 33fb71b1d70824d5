"""Relational catalog, its persisted form and the legacy migration."""

from art_catalog.catalog.catalog import Catalog
from art_catalog.catalog.legacy import LegacyCatalog, migrate_legacy
from art_catalog.catalog.serialized import (
    CURRENT_SCHEMA_VERSION,
    LegacySerializedCatalog,
    SerializedCatalog,
    StoredBlob,
    dumps_catalog,
    loads_catalog,
)
from art_catalog.catalog.storage import read_catalog, write_catalog

__all__ = [
    "CURRENT_SCHEMA_VERSION",
    "Catalog",
    "LegacyCatalog",
    "LegacySerializedCatalog",
    "SerializedCatalog",
    "StoredBlob",
    "dumps_catalog",
    "loads_catalog",
    "migrate_legacy",
    "read_catalog",
    "write_catalog",
]
