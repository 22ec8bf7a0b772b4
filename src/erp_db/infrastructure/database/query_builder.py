"""
SQL fragment builders for list endpoints.

Route handlers compose these in request order: a WHERE clause from a flat
filter mapping, an ORDER BY clause from a sort parameter, then the final
SELECT (and COUNT) statement. Filter values are always parameterized;
only identifiers are interpolated, and only after validation.

Usage Example:
    clause = build_where_clause({"status": "active", "role": None})
    order_by = build_order_by(query.get("sort"), "DESC")
    sql = build_select_query("users", clause.where, page.limit, page.offset, order_by)
    rows = await adapter.fetch_all(sql, *clause.params)
"""

import logging
from collections.abc import Collection, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from erp_db.application.interfaces.exceptions import InvalidIdentifierError
from erp_db.infrastructure.security.input_sanitizer import InputSanitizer

logger = logging.getLogger(__name__)

DEFAULT_ORDER_BY = "ORDER BY created_at DESC"
SORT_DIRECTIONS = ("ASC", "DESC")


@dataclass(frozen=True)
class WhereClause:
    """
    Parameterized WHERE clause.

    ``params[i]`` binds the i-th placeholder in ``where``; the two must
    never be reordered independently.
    """

    where: str = ""
    params: list[Any] = field(default_factory=list)

    def __iter__(self) -> Iterator[Any]:
        # Allows ``where, params = build_where_clause(...)``
        return iter((self.where, self.params))

    def __bool__(self) -> bool:
        return bool(self.where)


def build_where_clause(
    filters: Mapping[str, Any],
    *,
    allowed_columns: Collection[str] | None = None,
    placeholder: str = "?",
) -> WhereClause:
    """
    Build WHERE clause from filters.

    Entries whose value is None are skipped ("no filter on this field"),
    so ``IS NULL`` conditions cannot be expressed here.

    Args:
        filters: Column name to filter value, in the order conditions should appear
        allowed_columns: Optional allow-list of filterable columns
        placeholder: Bind placeholder of the target driver

    Returns:
        WhereClause with one param per placeholder, in source order

    Raises:
        InvalidIdentifierError: If a key is not a safe identifier or not allow-listed

    Example:
        >>> build_where_clause({"status": "active", "role": "admin"})
        WhereClause(where='WHERE status = ? AND role = ?', params=['active', 'admin'])
    """
    conditions: list[str] = []
    params: list[Any] = []

    for key, value in filters.items():
        if value is None:
            continue

        column = InputSanitizer.sanitize_sql_identifier(key)
        if allowed_columns is not None and column not in allowed_columns:
            raise InvalidIdentifierError(column, "column is not filterable")

        conditions.append(f"{column} = {placeholder}")
        params.append(value)

    return WhereClause(
        where=f"WHERE {' AND '.join(conditions)}" if conditions else "",
        params=params,
    )


def build_order_by(sort_by: str | None, order: str = "ASC") -> str:
    """
    Build ORDER BY clause.

    An invalid column or direction never raises: a warning is logged and
    ``ORDER BY created_at DESC`` is returned instead, discarding the
    requested direction too.

    Args:
        sort_by: Sort column
        order: ASC or DESC (case-insensitive)

    Returns:
        ORDER BY clause

    Example:
        >>> build_order_by("created_at", "DESC")
        'ORDER BY created_at DESC'
    """
    if not sort_by or not InputSanitizer.is_safe_identifier(sort_by):
        logger.warning(f"Invalid sort column {str(sort_by)[:50]!r}, using default")
        return DEFAULT_ORDER_BY

    direction = order.upper() if isinstance(order, str) else ""
    if direction not in SORT_DIRECTIONS:
        logger.warning(f"Invalid sort direction {str(order)[:10]!r}, using default")
        return DEFAULT_ORDER_BY

    return f"ORDER BY {sort_by} {direction}"


def build_select_query(
    table: str,
    where: str = "",
    limit: int = 10,
    offset: int = 0,
    order_by: str = "",
) -> str:
    """
    Build complete query with pagination.

    ``table`` is interpolated as given; validate it with ``safe_identifier``
    first.

    Args:
        table: Table name
        where: WHERE clause (optional)
        limit: Limit
        offset: Offset
        order_by: ORDER BY clause (optional)

    Returns:
        Complete SELECT query

    Example:
        >>> build_select_query("users", "WHERE status = ?", 10, 0, "ORDER BY created_at DESC")
        'SELECT * FROM users WHERE status = ? ORDER BY created_at DESC LIMIT 10 OFFSET 0'
    """
    parts = [
        f"SELECT * FROM {table}",
        where.strip() if where else "",
        order_by.strip() if order_by else "",
        f"LIMIT {limit}",
        f"OFFSET {offset}",
    ]

    return " ".join(part for part in parts if part)


def build_count_query(table: str, where: str = "") -> str:
    """
    Build the row count query matching a ``build_select_query`` call.

    The count is exposed as the ``count`` column.
    """
    parts = [f"SELECT COUNT(*) AS count FROM {table}", where.strip() if where else ""]

    return " ".join(part for part in parts if part)
