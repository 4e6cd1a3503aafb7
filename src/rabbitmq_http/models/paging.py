"""Paged collection responses.

The list endpoints for queues, exchanges, connections and a few others
accept ``page``/``page_size`` query parameters and then answer with an
envelope instead of a bare array. :class:`PageRequest` builds the query and
:class:`Page` decodes the envelope.
"""

from __future__ import annotations

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

MAX_PAGE_SIZE = 500
"""Largest ``page_size`` the management API accepts."""

T = TypeVar("T")


class PageRequest(BaseModel):
    """Which page to fetch, optionally narrowed by a name filter.

    Example::

        PageRequest(page=2, page_size=50, name="^orders", use_regex=True)
    """

    model_config = ConfigDict(frozen=True)

    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=100, ge=1, le=MAX_PAGE_SIZE)
    name: Optional[str] = None
    use_regex: bool = False

    def query(self) -> list[tuple[str, object]]:
        """Query parameters in the order the broker documents them."""
        params: list[tuple[str, object]] = [
            ("page", self.page),
            ("page_size", self.page_size),
        ]
        if self.name is not None:
            params.append(("name", self.name))
            params.append(("use_regex", self.use_regex))
        return params

    def next(self) -> PageRequest:
        return self.model_copy(update={"page": self.page + 1})


class Page(BaseModel, Generic[T]):
    """One page of a collection.

    ``items`` holds ``page_size`` elements on every page except the last.
    ``filtered_count`` is the number of items matching the name filter
    across all pages; ``total_count`` ignores the filter.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    items: list[T] = Field(default_factory=list)
    page: int = 1
    page_count: int = 1
    page_size: int = 100
    item_count: int = 0
    filtered_count: int = 0
    total_count: int = 0
    name_filter: Optional[str] = Field(default=None, exclude=True)

    @property
    def is_last(self) -> bool:
        return self.page >= self.page_count

    def __len__(self) -> int:
        return len(self.items)
