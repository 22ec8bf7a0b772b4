"""
Chunked execution of large operation lists.

Operations inside a chunk run concurrently on the event loop; chunks run
one after another. Results come back in input order.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

from erp_db.application.config import BatchConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def batch_operations(
    operations: Sequence[Callable[[], Awaitable[T]]],
    batch_size: int = 10,
) -> list[T]:
    """
    Batch database operations.

    The first failure in a chunk is raised immediately. Other operations of
    that chunk are not cancelled and may still be running when the caller
    sees the error; later chunks are never started.

    Args:
        operations: Zero-argument async callables
        batch_size: Operations per chunk

    Returns:
        Results in input order

    Raises:
        ValueError: If batch_size is less than 1

    Example:
        >>> names = ["alice", "bob", "charlie"]
        >>> results = await batch_operations(
        ...     [lambda n=n: adapter.execute_query("INSERT INTO users VALUES (%s)", n) for n in names],
        ...     2,  # Process 2 at a time
        ... )
    """
    if batch_size < 1:
        raise ValueError("batch_size must be at least 1")

    results: list[T] = []
    total = len(operations)

    for start in range(0, total, batch_size):
        batch = operations[start : start + batch_size]
        logger.debug(f"Running batch {start // batch_size + 1} ({len(batch)} of {total} operations)")
        batch_results = await asyncio.gather(*(op() for op in batch))
        results.extend(batch_results)

    return results


async def batch_with_config(
    operations: Sequence[Callable[[], Awaitable[T]]],
    config: BatchConfig,
) -> list[T]:
    """Run ``batch_operations`` with the chunk size of a ``BatchConfig``."""
    return await batch_operations(operations, config.batch_size)
