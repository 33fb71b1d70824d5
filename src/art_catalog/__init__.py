"""ArtCatalog: in-memory art catalog with mergeable undo and tag search."""

__version__ = "0.1.0"
