"""
Database Adapter Interface

Defines the contract the utility layer expects from a database driver.
Query builders produce SQL text and bind values; an adapter executes them.
"""

# Standard library imports
from abc import abstractmethod
from typing import Any, Protocol


class IDatabaseAdapter(Protocol):
    """
    Async database adapter interface.

    Implementations translate driver exceptions into the exceptions defined
    in ``erp_db.application.interfaces.exceptions`` so that callers never
    depend on driver-specific error types or message text.
    """

    # Bind placeholder emitted by query builders ("?" for SQLite, "%s" for psycopg)
    placeholder: str

    @property
    @abstractmethod
    def has_active_transaction(self) -> bool:
        """Check if this adapter holds an open transaction."""
        ...

    @abstractmethod
    async def execute_query(self, query: str, *args: Any) -> str:
        """
        Execute a SQL statement that doesn't return rows.

        Args:
            query: SQL query string
            *args: Bind values, in placeholder order

        Returns:
            Driver status string

        Raises:
            IntegrityError: If a constraint is violated
            RepositoryError: If execution fails
        """
        ...

    @abstractmethod
    async def fetch_one(self, query: str, *args: Any) -> dict[str, Any] | None:
        """Fetch a single row, or None when the query matches nothing."""
        ...

    @abstractmethod
    async def fetch_all(self, query: str, *args: Any) -> list[dict[str, Any]]:
        """Fetch every row the query returns."""
        ...

    @abstractmethod
    async def begin_transaction(self) -> "IDatabaseAdapter":
        """
        Begin a database transaction.

        Returns:
            An adapter bound to the new transaction. Statements meant to be
            part of the transaction, and the commit or rollback, go through
            it; the adapter this was called on is not affected.

        Raises:
            TransactionError: If transaction cannot be started
        """
        ...

    @abstractmethod
    async def commit_transaction(self) -> None:
        """
        Commit the current transaction.

        Raises:
            TransactionError: If commit fails or no active transaction
        """
        ...

    @abstractmethod
    async def rollback_transaction(self) -> None:
        """Rollback the current transaction."""
        ...
