"""List envelope shared by the paged endpoints."""

import math
from typing import Generic, TypeVar

from pydantic import BaseModel

ItemT = TypeVar("ItemT")


class Pagination(BaseModel):
    page: int
    limit: int
    offset: int
    total: int
    total_pages: int

    @classmethod
    def build(cls, total: int, limit: int, offset: int) -> "Pagination":
        return cls(
            page=offset // limit + 1,
            limit=limit,
            offset=offset,
            total=total,
            total_pages=math.ceil(total / limit),
        )


class Page(BaseModel, Generic[ItemT]):
    items: list[ItemT]
    pagination: Pagination
