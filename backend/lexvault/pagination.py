"""Page/per_page query parameters shared by the list endpoints."""

from dataclasses import dataclass
from typing import Optional

from fastapi import Query

from .config import get_settings


@dataclass
class PageParams:
    page: int
    per_page: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page

    def total_pages(self, total: int) -> int:
        return (total + self.per_page - 1) // self.per_page


def page_params(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    per_page: Optional[int] = Query(None, ge=1, description="Results per page (capped at MAX_PAGE_SIZE)")
) -> PageParams:
    """Resolve pagination, falling back to DEFAULT_PAGE_SIZE and capping at MAX_PAGE_SIZE."""
    settings = get_settings()
    if per_page is None:
        per_page = settings.DEFAULT_PAGE_SIZE
    return PageParams(page=page, per_page=min(per_page, settings.MAX_PAGE_SIZE))
