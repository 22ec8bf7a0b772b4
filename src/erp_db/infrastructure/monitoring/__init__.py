"""
Monitoring Infrastructure Package

Structured logging with correlation ids and trace context.
"""

from .logging import (
    CorrelationFilter,
    DatabaseJSONFormatter,
    correlation_context,
    generate_correlation_id,
    get_correlation_id,
    setup_structured_logging,
)

__all__ = [
    "CorrelationFilter",
    "DatabaseJSONFormatter",
    "correlation_context",
    "generate_correlation_id",
    "get_correlation_id",
    "setup_structured_logging",
]
