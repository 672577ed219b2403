"""
Tea API — Pagination
Every list route slices the same way and reports the same metadata.
"""

import math
from dataclasses import dataclass
from typing import Generic, Sequence, TypeVar

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    data: list[T]
    page: int
    limit: int
    total: int
    total_pages: int

    def to_dict(self) -> dict:
        return {
            "data": [item.to_dict() for item in self.data],
            "pagination": {
                "page": self.page,
                "limit": self.limit,
                "total": self.total,
                "totalPages": self.total_pages,
            },
        }


def paginate(items: Sequence[T], page: int, limit: int) -> Page[T]:
    """
    Slice ``items`` to one page. A page past the end is empty, never an error.
    Callers sort beforehand when they need an order other than insertion.
    """
    total = len(items)
    start = (page - 1) * limit
    return Page(
        data=list(items[start:start + limit]),
        page=page,
        limit=limit,
        total=total,
        total_pages=math.ceil(total / limit),
    )
