"""Page/limit handling shared by the list endpoints"""

import math

from fastapi import Query
from pydantic import BaseModel

MAX_PAGE_SIZE = 1000
# Keeps the computed OFFSET inside a 64-bit integer
MAX_PAGE = 1_000_000


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    totalPages: int


class PageParams:
    """Query parameters `page` and `limit`, bound to SQL as parameters"""

    def __init__(
        self,
        page: int = Query(1, ge=1, le=MAX_PAGE),
        limit: int = Query(10, ge=1, le=MAX_PAGE_SIZE),
    ):
        self.page = page
        self.limit = limit

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def build(self, total: int) -> Pagination:
        return Pagination(
            page=self.page,
            limit=self.limit,
            total=total,
            totalPages=math.ceil(total / self.limit) if self.limit else 0,
        )
