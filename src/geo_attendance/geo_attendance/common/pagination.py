from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, Sequence, TypeVar

from ..core.constants import DEFAULT_PAGE, DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from .validators import parse_positive_int

T = TypeVar("T")


@dataclass(frozen=True)
class PageRequest:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_PAGE_LIMIT

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @classmethod
    def from_args(cls, args) -> "PageRequest":
        page = parse_positive_int(args.get("page"), "page", DEFAULT_PAGE)
        limit = parse_positive_int(args.get("limit"), "limit", DEFAULT_PAGE_LIMIT)
        return cls(page=page, limit=min(limit, MAX_PAGE_LIMIT))


@dataclass(frozen=True)
class Page(Generic[T]):
    items: Sequence[T]
    total: int
    request: PageRequest

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.request.limit) if self.total else 0

    def pagination(self) -> dict:
        return {"current": self.request.page, "pages": self.pages, "total": self.total}
