"""
Resilience Infrastructure Package

Provides:
- Retry with exponential backoff for database calls
- Chunked concurrent execution of operation lists
"""

from .batch import batch_operations, batch_with_config
from .retry import (
    ExponentialBackoff,
    RetryConfig,
    retry,
    retry_operation,
    retry_with_config,
)

__all__ = [
    "batch_operations",
    "batch_with_config",
    "ExponentialBackoff",
    "RetryConfig",
    "retry",
    "retry_operation",
    "retry_with_config",
]
