"""
ERP database access utilities.

Primitives route handlers use to turn query parameters into safe SQL
fragments, paginate result sets, retry transient failures, batch large
operation lists and run multi-step writes as one unit.

Example:
    from erp_db import build_select_query, build_where_clause, parse_pagination

    page = parse_pagination(query.get("page"), query.get("limit"))
    clause = build_where_clause({"status": query.get("status")})
    sql = build_select_query("users", clause.where, page.limit, page.offset)
"""

from erp_db.application.interfaces.exceptions import (
    ForeignKeyViolationError,
    IntegrityError,
    InvalidIdentifierError,
    NotNullViolationError,
    RepositoryError,
    UniqueViolationError,
)
from erp_db.infrastructure.database.errors import (
    DatabaseErrorKind,
    classify_database_error,
    format_database_error,
)
from erp_db.infrastructure.database.pagination import (
    PaginatedResult,
    PaginationOptions,
    create_paginated_result,
    parse_pagination,
)
from erp_db.infrastructure.database.query_builder import (
    WhereClause,
    build_count_query,
    build_order_by,
    build_select_query,
    build_where_clause,
)
from erp_db.infrastructure.repositories.saga import SagaCoordinator, SagaStep
from erp_db.infrastructure.repositories.unit_of_work import (
    TransactionScope,
    run_in_transaction,
    transaction_pattern,
)
from erp_db.infrastructure.resilience.batch import batch_operations
from erp_db.infrastructure.resilience.retry import retry_operation
from erp_db.infrastructure.security.input_sanitizer import safe_identifier

__version__ = "0.1.0"

__all__ = [
    # Pagination
    "PaginationOptions",
    "PaginatedResult",
    "parse_pagination",
    "create_paginated_result",
    # Query building
    "WhereClause",
    "build_where_clause",
    "build_order_by",
    "build_select_query",
    "build_count_query",
    "safe_identifier",
    # Errors
    "DatabaseErrorKind",
    "classify_database_error",
    "format_database_error",
    "RepositoryError",
    "InvalidIdentifierError",
    "IntegrityError",
    "UniqueViolationError",
    "ForeignKeyViolationError",
    "NotNullViolationError",
    # Execution
    "retry_operation",
    "batch_operations",
    "transaction_pattern",
    "TransactionScope",
    "run_in_transaction",
    "SagaCoordinator",
    "SagaStep",
]
