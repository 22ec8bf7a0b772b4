"""
Database error normalization for API responses.

Maps exceptions raised by database calls to a stable ``{"error", "details"}``
shape so clients get actionable categories without seeing engine internals.

Classification prefers typed information decided at the driver boundary
(the adapter's ``UniqueViolationError`` and friends, or a driver
``sqlstate``) and only falls back to SQLite message text when neither is
present.
"""

from enum import Enum
from typing import Any

from erp_db.application.interfaces.exceptions import (
    ForeignKeyViolationError,
    NotNullViolationError,
    UniqueViolationError,
)


class DatabaseErrorKind(Enum):
    """Stable categories of database failures."""

    UNIQUE_VIOLATION = "unique_violation"
    FOREIGN_KEY_VIOLATION = "foreign_key_violation"
    NOT_NULL_VIOLATION = "not_null_violation"
    UNKNOWN = "unknown"


# Checked in this order; the first match wins
_TYPED_KINDS: tuple[tuple[type[Exception], DatabaseErrorKind], ...] = (
    (UniqueViolationError, DatabaseErrorKind.UNIQUE_VIOLATION),
    (ForeignKeyViolationError, DatabaseErrorKind.FOREIGN_KEY_VIOLATION),
    (NotNullViolationError, DatabaseErrorKind.NOT_NULL_VIOLATION),
)

# SQLSTATE class 23 codes (PostgreSQL and other ANSI drivers)
_SQLSTATE_KINDS = {
    "23505": DatabaseErrorKind.UNIQUE_VIOLATION,
    "23503": DatabaseErrorKind.FOREIGN_KEY_VIOLATION,
    "23502": DatabaseErrorKind.NOT_NULL_VIOLATION,
}

# SQLite message text
_MESSAGE_KINDS = (
    ("UNIQUE constraint failed", DatabaseErrorKind.UNIQUE_VIOLATION),
    ("FOREIGN KEY constraint failed", DatabaseErrorKind.FOREIGN_KEY_VIOLATION),
    ("NOT NULL constraint failed", DatabaseErrorKind.NOT_NULL_VIOLATION),
)


def _causes(error: BaseException) -> list[BaseException]:
    chain = []
    seen: set[int] = set()
    current: BaseException | None = error
    while current is not None and id(current) not in seen:
        chain.append(current)
        seen.add(id(current))
        current = current.__cause__
    return chain


def classify_database_error(error: Any) -> DatabaseErrorKind:
    """
    Classify a raised value into a ``DatabaseErrorKind``.

    Args:
        error: Anything caught from a database call

    Returns:
        The matching kind, or ``UNKNOWN``
    """
    if not isinstance(error, Exception):
        return DatabaseErrorKind.UNKNOWN

    chain = _causes(error)

    for exc in chain:
        for exc_type, kind in _TYPED_KINDS:
            if isinstance(exc, exc_type):
                return kind

    for exc in chain:
        sqlstate = getattr(exc, "sqlstate", None)
        if sqlstate in _SQLSTATE_KINDS:
            return _SQLSTATE_KINDS[sqlstate]

    message = str(error)
    for needle, kind in _MESSAGE_KINDS:
        if needle in message:
            return kind

    return DatabaseErrorKind.UNKNOWN


def format_database_error(error: Any) -> dict[str, str]:
    """
    Format database error for API response.

    Args:
        error: Database error

    Returns:
        ``{"error": ...}`` with an optional ``"details"`` entry
    """
    if not isinstance(error, Exception):
        return {"error": "Unknown database error"}

    kind = classify_database_error(error)
    message = str(error)

    if kind is DatabaseErrorKind.UNIQUE_VIOLATION:
        return {
            "error": "Duplicate entry",
            "details": "This record already exists",
        }

    if kind is DatabaseErrorKind.FOREIGN_KEY_VIOLATION:
        return {
            "error": "Invalid reference",
            "details": "Referenced record does not exist",
        }

    if kind is DatabaseErrorKind.NOT_NULL_VIOLATION:
        return {
            "error": "Missing required field",
            "details": message,
        }

    return {"error": message}
