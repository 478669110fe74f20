"""List-query contracts.

- :class:`QuerySpec`: declarative search/filter/sort/page request.
- :class:`QueryPage`: one page of results plus totals.

``QuerySpec`` performs no range checks of its own. The engine validates
``page_size`` and ``page_index`` so that a bad request surfaces as
:class:`~reviewkit.core.errors.InvalidQuerySpec` rather than as a model
validation error.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, Field

from reviewkit.core.settings import load_settings

#: Filter value meaning "do not filter on this field".
ALL = "all"

R = TypeVar("R")

SortDirection = Literal["asc", "desc"]


def _default_page_size() -> int:
    return load_settings().default_page_size


class QuerySpec(BaseModel):
    """Transient query built by the caller for one call to the engine."""

    term: str = ""
    filters: dict[str, Any] = Field(default_factory=dict)
    sort_field: str | None = None
    sort_direction: SortDirection = "asc"
    page_size: int = Field(default_factory=_default_page_size)
    page_index: int = 1


@dataclass(frozen=True, slots=True)
class QueryPage(Generic[R]):
    """One page of a filtered, sorted record set.

    Attributes
    ----------
    page : tuple[R, ...]
        Records on this page, in sorted order.
    total_count : int
        Number of records matching the term and filters (all pages).
    total_pages : int
        ``ceil(total_count / page_size)``, never less than 1.
    page_index : int
        1-based index of this page as requested.
    page_size : int
        Requested page size.
    """

    page: tuple[R, ...]
    total_count: int
    total_pages: int
    page_index: int
    page_size: int

    @property
    def has_next_page(self) -> bool:
        return self.page_index < self.total_pages

    @property
    def has_previous_page(self) -> bool:
        return self.page_index > 1

    def records(self) -> Sequence[R]:
        """Return the page as a list (convenience for rendering code)."""
        return list(self.page)


__all__ = ["ALL", "QuerySpec", "QueryPage", "SortDirection"]
