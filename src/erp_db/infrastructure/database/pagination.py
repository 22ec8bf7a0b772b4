"""
Pagination helpers for list endpoints.

Turns raw ``page``/``limit`` query-string values into a bounded
page/limit/offset triple and wraps a page of rows into the response
envelope list endpoints serialize as JSON.

Parsing never raises: malformed input degrades to the caller's defaults
and then to page 1 / limit 10. The limit is always capped at 100 so a
client cannot request an unbounded result set.
"""

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from erp_db.application.config import MAX_PAGE_LIMIT

T = TypeVar("T")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


@dataclass(frozen=True)
class PaginationOptions:
    """Bounded pagination request. ``offset`` is always ``(page - 1) * limit``."""

    page: int
    limit: int
    offset: int


@dataclass(frozen=True)
class PaginatedResult(Generic[T]):
    """Uniform envelope for one page of results."""

    data: list[T]
    total: int
    page: int
    limit: int
    pages: int
    has_next: bool
    has_prev: bool

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON response shape."""
        return {
            "data": list(self.data),
            "total": self.total,
            "page": self.page,
            "limit": self.limit,
            "pages": self.pages,
            "hasNext": self.has_next,
            "hasPrev": self.has_prev,
        }


def _coerce_int(value: Any) -> int | None:
    """
    Coerce a raw query value to an int.

    Returns None for absent, non-numeric or non-finite input. Fractions
    are truncated toward zero.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        number = value
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None

    if not math.isfinite(number):
        return None
    return int(number)


def _first(value: Any) -> Any:
    # Repeated query parameters arrive as lists (?page=2&page=3)
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        return value[0] if value else None
    return value


def parse_pagination(
    page: Any = None,
    limit: Any = None,
    defaults: Mapping[str, Any] | None = None,
    *,
    max_limit: int = MAX_PAGE_LIMIT,
) -> PaginationOptions:
    """
    Parse pagination from raw query values.

    Args:
        page: Raw ``page`` query value (string, number or None)
        limit: Raw ``limit`` query value (string, number or None)
        defaults: Optional ``{"page": ..., "limit": ...}`` overrides
        max_limit: Upper bound for ``limit``; never above 100

    Returns:
        PaginationOptions with page >= 1, 1 <= limit <= max_limit

    Example:
        >>> parse_pagination("2", "25")
        PaginationOptions(page=2, limit=25, offset=25)
    """
    defaults = defaults or {}
    ceiling = max(1, min(MAX_PAGE_LIMIT, max_limit))

    parsed_page = _coerce_int(_first(page))
    if not parsed_page:
        parsed_page = _coerce_int(defaults.get("page")) or DEFAULT_PAGE
    parsed_page = max(1, parsed_page)

    parsed_limit = _coerce_int(_first(limit))
    if parsed_limit is None or parsed_limit < 1:
        parsed_limit = _coerce_int(defaults.get("limit"))
        if parsed_limit is None or parsed_limit < 1:
            parsed_limit = DEFAULT_LIMIT
    parsed_limit = max(1, min(ceiling, parsed_limit))

    return PaginationOptions(
        page=parsed_page,
        limit=parsed_limit,
        offset=(parsed_page - 1) * parsed_limit,
    )


def parse_pagination_from_query(
    query: Mapping[str, Any],
    defaults: Mapping[str, Any] | None = None,
    *,
    max_limit: int = MAX_PAGE_LIMIT,
) -> PaginationOptions:
    """Parse pagination straight from a request's query mapping."""
    return parse_pagination(query.get("page"), query.get("limit"), defaults, max_limit=max_limit)


def create_paginated_result(
    data: Sequence[T],
    total: int,
    page: int,
    limit: int,
) -> PaginatedResult[T]:
    """
    Create paginated response.

    Args:
        data: Result rows for the current page
        total: Total row count across all pages
        page: Current page
        limit: Items per page, as produced by ``parse_pagination`` (>= 1)

    Returns:
        PaginatedResult with ``pages = ceil(total / limit)``

    Example:
        >>> create_paginated_result(rows, total=47, page=2, limit=10).pages
        5
    """
    pages = math.ceil(total / limit)

    return PaginatedResult(
        data=list(data),
        total=total,
        page=page,
        limit=limit,
        pages=pages,
        has_next=page < pages,
        has_prev=page > 1,
    )
