"""Page request / page result used by the active-contracts query."""
import math
from enum import StrEnum
from typing import Callable, Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")
U = TypeVar("U")

MAX_PAGE_SIZE = 1000


class ContractSortField(StrEnum):
    LAST_MODIFIED = "last_modified"
    START_DATE = "start_date"
    END_DATE = "end_date"
    COST_AMOUNT = "cost_amount"


class PageRequest(BaseModel):
    """Zero-based page number and page size, plus the ordering to page over."""

    page: int = Field(default=0, ge=0)
    size: int = Field(default=20, gt=0, le=MAX_PAGE_SIZE)
    sort: ContractSortField = ContractSortField.LAST_MODIFIED
    descending: bool = True

    model_config = {"frozen": True}

    @property
    def offset(self) -> int:
        return self.page * self.size


class Page(BaseModel, Generic[T]):
    items: list[T]
    page: int = Field(..., ge=0)
    size: int = Field(..., gt=0)
    total_elements: int = Field(..., ge=0)

    model_config = {"arbitrary_types_allowed": True}

    @classmethod
    def of(cls, items: list[T], request: PageRequest, total_elements: int) -> "Page[T]":
        return cls(items=items, page=request.page, size=request.size, total_elements=total_elements)

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_elements / self.size)

    @property
    def is_first(self) -> bool:
        return self.page == 0

    @property
    def is_last(self) -> bool:
        return self.page + 1 >= self.total_pages

    def map(self, fn: Callable[[T], U]) -> "Page[U]":
        return Page(
            items=[fn(item) for item in self.items],
            page=self.page,
            size=self.size,
            total_elements=self.total_elements,
        )
