"""Whole-file persistence of a catalog with atomic writes."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from art_catalog.catalog.catalog import Catalog
from art_catalog.catalog.serialized import dumps_catalog, loads_catalog

logger = logging.getLogger(__name__)


def atomic_write_text(path: Path, data: str) -> None:
    """Atomically write *data* into *path*.

    The temporary file is removed if the write or the swap fails.
    """
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        with tmp_path.open("w", encoding="utf-8") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        tmp_path.replace(path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise


def read_catalog(path: Path) -> Catalog:
    """Load the catalog stored at *path* (either schema generation)."""
    catalog = loads_catalog(path.read_text(encoding="utf-8"))
    logger.info("Loaded %r from %s", catalog, path)
    return catalog


def write_catalog(path: Path, catalog: Catalog) -> None:
    """Persist *catalog* at *path* in the current schema generation."""
    atomic_write_text(path, dumps_catalog(catalog))
    logger.info("Saved %r to %s", catalog, path)
