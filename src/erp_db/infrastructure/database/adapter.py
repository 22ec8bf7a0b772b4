"""
PostgreSQL Database Adapter

Provides async database operations using psycopg3 for ERP route handlers.
This is the boundary closest to the driver: psycopg exceptions are turned
into the typed exceptions of ``erp_db.application.interfaces.exceptions``
here, so the error normalizer never has to parse PostgreSQL message text.
"""

# Standard library imports
import builtins
import logging
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import AsyncExitStack, asynccontextmanager
from typing import Any

# Third-party imports
import psycopg
from psycopg import AsyncConnection, AsyncCursor, errors
from psycopg.rows import dict_row
from psycopg_pool import AsyncConnectionPool

# Local imports
from erp_db.application.interfaces.exceptions import (
    ConnectionError,
    ForeignKeyViolationError,
    IntegrityError,
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

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0

_INTEGRITY_ERRORS: tuple[tuple[type[psycopg.Error], type[IntegrityError]], ...] = (
    (errors.UniqueViolation, UniqueViolationError),
    (errors.ForeignKeyViolation, ForeignKeyViolationError),
    (errors.NotNullViolation, NotNullViolationError),
)


def translate_integrity_error(error: psycopg.IntegrityError) -> IntegrityError:
    """
    Map a psycopg integrity error to the matching typed exception.

    Args:
        error: Integrity error raised by psycopg

    Returns:
        UniqueViolationError, ForeignKeyViolationError, NotNullViolationError,
        or a plain IntegrityError for other constraint kinds
    """
    diag = getattr(error, "diag", None)
    constraint = (
        getattr(diag, "constraint_name", None) or getattr(diag, "column_name", None) or "unknown"
    )

    for driver_type, exc_type in _INTEGRITY_ERRORS:
        if isinstance(error, driver_type):
            return exc_type(constraint, str(error))

    return IntegrityError(constraint, str(error))


class PostgreSQLAdapter:
    """
    PostgreSQL database adapter using psycopg3.

    Implements ``IDatabaseAdapter``. Queries use ``%s`` placeholders, so
    pass ``placeholder=adapter.placeholder`` to ``build_where_clause``.

    A pool-backed adapter is safe to share between requests: every call
    checks out its own connection. ``begin_transaction`` returns a separate
    adapter bound to one dedicated connection; only calls made through that
    adapter run inside the transaction.
    """

    placeholder = "%s"

    def __init__(self, pool: AsyncConnectionPool) -> None:
        """
        Initialize adapter with connection pool.

        Args:
            pool: psycopg3 async connection pool, owned by the caller
        """
        self._pool = pool
        self._connection: AsyncConnection | None = None
        self._transaction: psycopg.AsyncTransaction | None = None
        self._exit_stack: AsyncExitStack | None = None

    @property
    def pool(self) -> AsyncConnectionPool:
        """Get the connection pool."""
        return self._pool

    @property
    def has_active_transaction(self) -> bool:
        """Check if this adapter holds an open transaction."""
        return self._transaction is not None

    @asynccontextmanager
    async def acquire_connection(self) -> AsyncGenerator[AsyncConnection, None]:
        """
        Acquire a database connection.

        Transaction-bound adapters yield their dedicated connection; all
        others check one out of the pool for the duration of the block.

        Yields:
            Database connection

        Raises:
            ConnectionError: If connection cannot be acquired
            TimeoutError: If acquisition times out
        """
        if self._connection is not None:
            yield self._connection
            return

        async with AsyncExitStack() as stack:
            connection = await self._checkout(stack, "acquire_connection")
            # Errors raised by the caller's block are not acquisition errors
            yield connection

    async def _checkout(self, stack: AsyncExitStack, operation: str) -> AsyncConnection:
        try:
            return await stack.enter_async_context(self._pool.connection())
        except psycopg.OperationalError as e:
            logger.error(f"Failed to acquire connection: {e}")
            raise ConnectionError(f"Failed to acquire database connection: {e}") from e
        except builtins.TimeoutError as e:
            logger.error(f"Connection acquisition timed out: {e}")
            raise TimeoutError(operation, DEFAULT_TIMEOUT) from e

    async def _run(
        self,
        action: str,
        query: str,
        args: tuple[Any, ...],
        read: Callable[[AsyncCursor[dict[str, Any]]], Awaitable[Any]] | None = None,
    ) -> Any:
        """
        Run one statement on a pooled (or transaction-bound) connection.

        Returns the result of ``read(cursor)``, or the status string when
        ``read`` is None.
        """
        try:
            async with self.acquire_connection() as conn, conn.cursor(row_factory=dict_row) as cur:
                await cur.execute(query, args)
                if read is None:
                    result = f"EXECUTE {cur.rowcount}"
                else:
                    result = await read(cur)
        except psycopg.IntegrityError as e:
            logger.error(f"Constraint violated during {action}: {e} | Query: {query[:100]}")
            raise translate_integrity_error(e) from e
        except psycopg.Error as e:
            logger.error(f"{action.capitalize()} failed: {e} | Query: {query[:100]}")
            raise RepositoryError(f"{action.capitalize()} query failed: {e}", e) from e

        logger.debug(f"{action.capitalize()}: {query[:100]}")
        return result

    async def execute_query(self, query: str, *args: Any) -> str:
        """
        Execute a statement that doesn't return rows.

        Returns:
            ``"EXECUTE <rowcount>"``

        Raises:
            IntegrityError: If a constraint is violated (typed subclass when known)
            RepositoryError: If the driver fails
        """
        return await self._run("execute", query, args)

    async def fetch_one(self, query: str, *args: Any) -> dict[str, Any] | None:
        """Fetch the first row as a dict, or None. ``INSERT ... RETURNING`` works too."""
        return await self._run("fetch one", query, args, lambda cur: cur.fetchone())

    async def fetch_all(self, query: str, *args: Any) -> list[dict[str, Any]]:
        """Fetch every row as a list of dicts."""
        return await self._run("fetch all", query, args, lambda cur: cur.fetchall())

    async def begin_transaction(self) -> "PostgreSQLAdapter":
        """
        Begin a transaction on a dedicated connection.

        Returns:
            A new adapter bound to the transaction. Run the transaction's
            statements and ``commit_transaction``/``rollback_transaction``
            through it; this adapter is left untouched.

        Raises:
            TransactionAlreadyActiveError: If called on a transaction-bound adapter
            TransactionError: If transaction cannot be started
        """
        if self.has_active_transaction:
            raise TransactionAlreadyActiveError()

        bound = PostgreSQLAdapter(self._pool)
        stack = AsyncExitStack()
        try:
            connection = await bound._checkout(stack, "begin_transaction")
            transaction = connection.transaction()
            await transaction.__aenter__()
        except (ConnectionError, TimeoutError, psycopg.Error) as e:
            logger.error(f"Failed to start transaction: {e}")
            await stack.aclose()
            raise TransactionError(f"Failed to start transaction: {e}", e) from e

        bound._connection = connection
        bound._transaction = transaction
        bound._exit_stack = stack
        logger.debug("Transaction started")
        return bound

    async def commit_transaction(self) -> None:
        """
        Commit the transaction and release its connection.

        Raises:
            TransactionNotActiveError: If no transaction is open
            TransactionCommitError: If commit fails
        """
        if self._transaction is None:
            raise TransactionNotActiveError()

        try:
            await self._transaction.__aexit__(None, None, None)
            logger.debug("Transaction committed")
        except psycopg.Error as e:
            logger.error(f"Failed to commit transaction: {e}")
            raise TransactionCommitError(e) from e
        finally:
            await self._release()

    async def rollback_transaction(self) -> None:
        """
        Rollback the transaction and release its connection.

        Raises:
            TransactionRollbackError: If rollback fails
        """
        if self._transaction is None:
            logger.warning("No active transaction to rollback")
            return

        try:
            await self._transaction.__aexit__(Exception, Exception(), None)
            logger.debug("Transaction rolled back")
        except psycopg.Error as e:
            logger.error(f"Failed to rollback transaction: {e}")
            raise TransactionRollbackError(e) from e
        finally:
            await self._release()

    async def _release(self) -> None:
        """Return the dedicated connection to the pool."""
        stack = self._exit_stack
        self._exit_stack = None
        self._connection = None
        self._transaction = None

        if stack is not None:
            try:
                await stack.aclose()
            except Exception as e:
                logger.warning(f"Failed to release connection: {e}")

    def __str__(self) -> str:
        """String representation of the adapter."""
        pool_info = f"Pool(max_size={self._pool.max_size})"
        tx_info = "with active transaction" if self.has_active_transaction else "no transaction"
        return f"PostgreSQLAdapter({pool_info}, {tx_info})"
