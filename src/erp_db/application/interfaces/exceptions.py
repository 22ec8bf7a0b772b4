"""
Database Utility Exception Definitions

Defines exceptions raised by the database access layer and by the
driver adapters that sit underneath it. Route handlers catch these and
hand them to the error normalizer before building an API response.
"""

# Standard library imports
from typing import Any


class RepositoryError(Exception):
    """Base exception for database access operations."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class InvalidIdentifierError(RepositoryError):
    """Raised when a table or column name is not a safe SQL identifier."""

    def __init__(self, identifier: Any, reason: str | None = None) -> None:
        message = f"Invalid identifier: {identifier}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)
        self.identifier = identifier


class IntegrityError(RepositoryError):
    """Raised when database integrity constraint is violated."""

    def __init__(self, constraint: str, message: str | None = None) -> None:
        msg = f"Integrity constraint '{constraint}' violated"
        if message:
            msg += f": {message}"
        super().__init__(msg)
        self.constraint = constraint
        self.detail = message


class UniqueViolationError(IntegrityError):
    """Raised when an insert or update collides with a unique constraint."""

    pass


class ForeignKeyViolationError(IntegrityError):
    """Raised when a row references a record that does not exist."""

    pass


class NotNullViolationError(IntegrityError):
    """Raised when a required column receives NULL."""

    pass


class TransactionError(RepositoryError):
    """Base exception for transaction operations."""

    pass


class TransactionNotActiveError(TransactionError):
    """Raised when operation requires active transaction but none exists."""

    def __init__(self) -> None:
        super().__init__("No active transaction")


class TransactionAlreadyActiveError(TransactionError):
    """Raised when attempting to start transaction when one is already active."""

    def __init__(self) -> None:
        super().__init__("Transaction is already active")


class TransactionCommitError(TransactionError):
    """Raised when transaction commit fails."""

    def __init__(self, cause: Exception | None = None) -> None:
        super().__init__("Transaction commit failed", cause)


class TransactionRollbackError(TransactionError):
    """Raised when transaction rollback fails."""

    def __init__(self, cause: Exception | None = None) -> None:
        super().__init__("Transaction rollback failed", cause)


class ConnectionError(RepositoryError):
    """Raised when database connection fails."""

    def __init__(self, message: str = "Database connection failed") -> None:
        super().__init__(message)


class TimeoutError(RepositoryError):
    """Raised when a database operation times out."""

    def __init__(self, operation: str, timeout_seconds: float) -> None:
        super().__init__(f"Operation '{operation}' timed out after {timeout_seconds} seconds")
        self.operation = operation
        self.timeout_seconds = timeout_seconds


class ConfigurationError(Exception):
    """Raised when configuration-related errors occur."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause
