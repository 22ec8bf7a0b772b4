"""
Paginated Query Service - list endpoint orchestration.

Composes the query helpers in the order a list route handler uses them:
parse pagination, validate the table, build the WHERE and ORDER BY
clauses, count, fetch one page, wrap the envelope. Both database calls
go through the retry executor.
"""

# Standard library imports
import logging
from collections.abc import Collection, Mapping
from typing import Any

# Local imports
from erp_db.application.config import DatabaseUtilsConfig
from erp_db.application.interfaces.database import IDatabaseAdapter
from erp_db.infrastructure.database.pagination import (
    PaginatedResult,
    create_paginated_result,
    parse_pagination,
)
from erp_db.infrastructure.database.query_builder import (
    DEFAULT_ORDER_BY,
    build_count_query,
    build_order_by,
    build_select_query,
    build_where_clause,
)
from erp_db.infrastructure.resilience.retry import retry_operation
from erp_db.infrastructure.security.input_sanitizer import safe_identifier

logger = logging.getLogger(__name__)


class PaginatedQueryService:
    """
    Serve paginated, filtered and sorted reads of one table.

    Example:
        >>> service = PaginatedQueryService(adapter)
        >>> result = await service.fetch_page(
        ...     "customers",
        ...     filters={"status": request.query.get("status")},
        ...     page=request.query.get("page"),
        ...     limit=request.query.get("limit"),
        ...     sort_by=request.query.get("sort"),
        ...     order=request.query.get("order", "ASC"),
        ... )
        >>> return result.to_dict()
    """

    def __init__(self, adapter: IDatabaseAdapter, config: DatabaseUtilsConfig | None = None) -> None:
        """
        Initialize the service.

        Args:
            adapter: Database adapter used for the count and page queries
            config: Pagination and retry defaults
        """
        self.adapter = adapter
        self.config = config or DatabaseUtilsConfig()

    async def fetch_page(
        self,
        table: str,
        filters: Mapping[str, Any] | None = None,
        page: Any = None,
        limit: Any = None,
        sort_by: str | None = None,
        order: str = "ASC",
        allowed_columns: Collection[str] | None = None,
    ) -> PaginatedResult[dict[str, Any]]:
        """
        Fetch one page of ``table``.

        Args:
            table: Table name, validated before use
            filters: Column equality filters; None values are ignored
            page: Raw page query value
            limit: Raw limit query value
            sort_by: Sort column; invalid or missing falls back to ``created_at DESC``
            order: ASC or DESC
            allowed_columns: Optional allow-list for filter keys

        Returns:
            PaginatedResult of row dicts

        Raises:
            InvalidIdentifierError: If the table or a filter key is unsafe
            RepositoryError: If the database calls keep failing after retries
        """
        table = safe_identifier(table)

        pagination_config = self.config.pagination
        options = parse_pagination(
            page,
            limit,
            {"page": pagination_config.default_page, "limit": pagination_config.default_limit},
            max_limit=pagination_config.max_limit,
        )

        clause = build_where_clause(
            filters or {},
            allowed_columns=allowed_columns,
            placeholder=self.adapter.placeholder,
        )
        order_by = build_order_by(sort_by, order) if sort_by else DEFAULT_ORDER_BY

        count_sql = build_count_query(table, clause.where)
        select_sql = build_select_query(table, clause.where, options.limit, options.offset, order_by)

        retry_settings = self.config.retry
        count_row = await retry_operation(
            lambda: self.adapter.fetch_one(count_sql, *clause.params),
            retry_settings.max_retries,
            retry_settings.initial_delay_ms,
        )
        rows = await retry_operation(
            lambda: self.adapter.fetch_all(select_sql, *clause.params),
            retry_settings.max_retries,
            retry_settings.initial_delay_ms,
        )

        total = int(count_row["count"]) if count_row else 0
        logger.debug(f"Listed {table}: page {options.page}, {len(rows)} of {total} rows")
        return create_paginated_result(rows, total, options.page, options.limit)
