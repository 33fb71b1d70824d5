"""Tag category model."""

from __future__ import annotations

from datetime import date
from typing import Annotated

from pydantic import BaseModel, Field

from art_catalog.arena import Id

Channel = Annotated[int, Field(ge=0, le=255)]


class CategoryId(Id):
    """Identity of a :class:`Category` in the catalog."""


class Category(BaseModel):
    """A named, coloured grouping of tags. Each tag has at most one."""

    name: str = "New Category"
    color: tuple[Channel, Channel, Channel, Channel] = (0, 0, 0, 0)
    added: date = Field(default_factory=date.today)

    @property
    def normalized_color(self) -> tuple[float, float, float, float]:
        """RGBA in the 0-1 range, for rendering."""
        r, g, b, a = self.color
        return (r / 255.0, g / 255.0, b / 255.0, a / 255.0)
