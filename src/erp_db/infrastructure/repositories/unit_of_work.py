"""
Unit of Work Implementations

Two ways of running a multi-statement write as one unit:

- ``transaction_pattern`` runs operations strictly in order and, on the first
  failure, hands the error and the number of completed operations to a
  caller-supplied compensation handler before re-raising. Nothing is rolled
  back by the database; the handler decides what "undo" means.
- ``TransactionScope`` wraps the operations in a native database transaction
  when the adapter supports one (begin/commit/rollback).

Use the native scope whenever every step shares one database; keep the
compensation pattern for work that spans systems.
"""

# Standard library imports
import inspect
import logging
from collections.abc import Awaitable, Callable, Sequence
from functools import partial
from types import TracebackType
from typing import TypeVar

# Local imports
from erp_db.application.interfaces.database import IDatabaseAdapter
from erp_db.application.interfaces.exceptions import TransactionError

logger = logging.getLogger(__name__)

T = TypeVar("T")

ErrorHandler = Callable[[Exception, int], Awaitable[None] | None]


async def transaction_pattern(
    operations: Sequence[Callable[[], Awaitable[T]]],
    on_error: ErrorHandler | None = None,
) -> list[T]:
    """
    Transaction-like pattern for multiple operations.

    Operation ``i + 1`` starts only after operation ``i`` has finished.
    Either every result is returned, or the first error is raised; no
    partial results escape.

    Args:
        operations: Zero-argument async callables, run in order
        on_error: Compensation handler called as ``on_error(error, completed_count)``

    Returns:
        Results in order

    Raises:
        Exception: The error of the first failing operation, even when
            ``on_error`` itself fails

    Example:
        >>> results = await transaction_pattern(
        ...     [
        ...         lambda: adapter.execute_query("INSERT INTO users VALUES (%s, %s)", "alice", "a@x"),
        ...         lambda: adapter.execute_query("INSERT INTO users VALUES (%s, %s)", "bob", "b@x"),
        ...     ],
        ...     on_error=delete_inserted_users,
        ... )
    """
    results: list[T] = []

    try:
        for operation in operations:
            results.append(await operation())
    except Exception as error:
        completed = len(results)
        logger.warning(f"Operation {completed + 1} of {len(operations)} failed: {error}")

        if on_error is not None:
            try:
                outcome = on_error(error, completed)
                if inspect.isawaitable(outcome):
                    await outcome
            except Exception as handler_error:
                logger.error(f"Compensation handler failed: {handler_error}")
        raise

    return results


class TransactionScope:
    """
    Native transaction around a block of work.

    Begins a transaction on entry and yields the transaction-bound adapter.
    Commits on clean exit and rolls back when the block raises. The block's
    exception always propagates. Statements must go through the yielded
    adapter; calls on the original adapter run outside the transaction.

    Example:
        >>> async with TransactionScope(adapter) as tx:
        ...     await tx.execute_query("INSERT INTO orders ...", ...)
        ...     await tx.execute_query("INSERT INTO order_lines ...", ...)
    """

    def __init__(self, adapter: IDatabaseAdapter) -> None:
        """
        Initialize the scope.

        Args:
            adapter: Adapter exposing begin/commit/rollback
        """
        self.adapter = adapter
        self._transaction: IDatabaseAdapter | None = None

    async def __aenter__(self) -> IDatabaseAdapter:
        try:
            self._transaction = await self.adapter.begin_transaction()
        except TransactionError:
            raise
        except Exception as e:
            logger.error(f"Failed to begin transaction: {e}")
            raise TransactionError(f"Failed to begin transaction: {e}", e) from e
        logger.debug("Transaction scope started")
        return self._transaction

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> bool:
        transaction = self._transaction
        self._transaction = None
        if transaction is None:
            return False

        if exc_type is None:
            # No exception occurred, commit the transaction
            try:
                await transaction.commit_transaction()
                logger.debug("Transaction scope committed")
            except Exception as commit_error:
                logger.error(f"Failed to commit in transaction scope: {commit_error}")
                try:
                    await transaction.rollback_transaction()
                except Exception as rollback_error:
                    logger.error(f"Failed to rollback after commit error: {rollback_error}")
                raise
        else:
            # Exception occurred, rollback the transaction
            try:
                await transaction.rollback_transaction()
                logger.debug("Transaction scope rolled back")
            except Exception as rollback_error:
                logger.error(f"Failed to rollback in transaction scope: {rollback_error}")
                # Don't suppress the original exception

        return False  # Don't suppress exceptions


async def run_in_transaction(
    adapter: IDatabaseAdapter,
    operations: Sequence[Callable[[IDatabaseAdapter], Awaitable[T]]],
) -> list[T]:
    """
    Run operations in order inside one native transaction.

    Args:
        adapter: Adapter exposing begin/commit/rollback
        operations: Async callables taking the transaction-bound adapter

    Returns:
        Results in order; on failure the transaction is rolled back and the
        error re-raised

    Example:
        >>> await run_in_transaction(
        ...     adapter,
        ...     [
        ...         lambda tx: tx.execute_query("INSERT INTO orders (id) VALUES (%s)", 7),
        ...         lambda tx: tx.execute_query("INSERT INTO order_lines (order_id) VALUES (%s)", 7),
        ...     ],
        ... )
    """
    async with TransactionScope(adapter) as transaction:
        return await transaction_pattern([partial(op, transaction) for op in operations])
