"""Tag model."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field

from art_catalog.arena import Id


class TagId(Id):
    """Identity of a :class:`Tag` in the catalog."""


class Tag(BaseModel):
    """A label attached to pieces, optionally grouped under a category."""

    name: str = "New Tag"
    description: str = ""
    added: date = Field(default_factory=date.today)
    links: list[str] = Field(default_factory=list)
