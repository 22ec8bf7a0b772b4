"""
Database Infrastructure Module

Pagination, SQL fragment builders and error normalization used by route
handlers, plus the psycopg3 adapter that implements ``IDatabaseAdapter``.
"""

from .adapter import PostgreSQLAdapter, translate_integrity_error
from .errors import DatabaseErrorKind, classify_database_error, format_database_error
from .pagination import (
    PaginatedResult,
    PaginationOptions,
    create_paginated_result,
    parse_pagination,
    parse_pagination_from_query,
)
from .query_builder import (
    DEFAULT_ORDER_BY,
    WhereClause,
    build_count_query,
    build_order_by,
    build_select_query,
    build_where_clause,
)

__all__ = [
    "PostgreSQLAdapter",
    "translate_integrity_error",
    "DatabaseErrorKind",
    "classify_database_error",
    "format_database_error",
    "PaginatedResult",
    "PaginationOptions",
    "create_paginated_result",
    "parse_pagination",
    "parse_pagination_from_query",
    "DEFAULT_ORDER_BY",
    "WhereClause",
    "build_count_query",
    "build_order_by",
    "build_select_query",
    "build_where_clause",
]
