"""
Application Interfaces - Database Contracts

This module defines the interface contracts that the infrastructure layer
must implement. The utility layer depends on these, never on a concrete driver.
"""

from .database import IDatabaseAdapter
from .exceptions import (
    ConfigurationError,
    ConnectionError,
    ForeignKeyViolationError,
    IntegrityError,
    InvalidIdentifierError,
    NotNullViolationError,
    RepositoryError,
    TimeoutError,
    TransactionAlreadyActiveError,
    TransactionCommitError,
    TransactionError,
    TransactionNotActiveError,
    TransactionRollbackError,
    UniqueViolationError,
)

__all__ = [
    # Adapter interface
    "IDatabaseAdapter",
    # Exceptions
    "RepositoryError",
    "InvalidIdentifierError",
    "IntegrityError",
    "UniqueViolationError",
    "ForeignKeyViolationError",
    "NotNullViolationError",
    "TransactionError",
    "TransactionNotActiveError",
    "TransactionAlreadyActiveError",
    "TransactionCommitError",
    "TransactionRollbackError",
    "ConnectionError",
    "TimeoutError",
    "ConfigurationError",
]
