"""Length-aware page of search results."""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field

from meiliscout.models.collection import ModelCollection


class Paginator(BaseModel):
    """One page of models plus the totals needed to render page links."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    items: ModelCollection = Field(description="Models on the current page, in engine order")
    total: int = Field(ge=0, description="Total number of matching documents")
    per_page: int = Field(ge=1, description="Page size")
    current_page: int = Field(ge=1, description="1-based page number")

    @property
    def last_page(self) -> int:
        return max(math.ceil(self.total / self.per_page), 1)

    @property
    def has_more_pages(self) -> bool:
        return self.current_page < self.last_page

    @property
    def first_item(self) -> int | None:
        """1-based position of the first item on this page, ``None`` when empty."""
        if not self.items:
            return None
        return (self.current_page - 1) * self.per_page + 1
