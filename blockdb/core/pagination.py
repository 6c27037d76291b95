"""Pagination par numéro de page (pas de curseur) avec le total"""

from typing import Any, List
from sqlalchemy.orm import Query
from blockdb.core.config import settings
from blockdb.core.errors import InvalidState
from blockdb.schemas.pagination import PageMeta


class PaginationResult:
    def __init__(self, items: List[Any], meta: PageMeta):
        self.items = items
        self.meta = meta


def paginate(query: Query, page: int = 1, per_page: int = None) -> PaginationResult:
    # pas de snapshot entre deux pages: une insertion entre deux appels décale les pages
    if per_page is None:
        per_page = settings.ROWS_DEFAULT_PAGE_SIZE
    if page < 1:
        raise InvalidState("Page must be >= 1", {"page": page})
    if per_page < 1 or per_page > settings.ROWS_MAX_PAGE_SIZE:
        raise InvalidState(
            f"Page size must be between 1 and {settings.ROWS_MAX_PAGE_SIZE}",
            {"per_page": per_page}
        )

    total = query.order_by(None).count()
    items = query.offset((page - 1) * per_page).limit(per_page).all()

    meta = PageMeta(
        page=page,
        per_page=per_page,
        total=total,
        has_next_page=page * per_page < total,
        has_prev_page=page > 1
    )
    return PaginationResult(items, meta)
