"""Pagination types shared by list endpoints.

Paginated[T]  : plain dataclass returned by services (not serializable).
PaginationMeta: Pydantic model for the ``pagination`` block of a response.
"""

import math
from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


@dataclass
class Paginated(Generic[T]):
    """A page of items plus the total matching the same filters.

    Services return this and routers convert it; services don't know about
    serialization.
    """

    items: list[T]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


class PaginationMeta(BaseModel):
    """``{page, limit, total, totalPages}``"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    page: int
    limit: int
    total: int
    total_pages: int

    @classmethod
    def from_page(cls, page: Paginated[T]) -> "PaginationMeta":
        return cls(page=page.page, limit=page.limit, total=page.total, total_pages=page.total_pages)
