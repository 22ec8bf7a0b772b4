"""
Multi-step write helpers.

- transaction_pattern: sequential operations with a compensation callback
- TransactionScope / run_in_transaction: native begin/commit/rollback
- SagaCoordinator: per-step compensation in reverse order
"""

from .saga import SagaContext, SagaCoordinator, SagaState, SagaStep
from .unit_of_work import TransactionScope, run_in_transaction, transaction_pattern

__all__ = [
    "SagaContext",
    "SagaCoordinator",
    "SagaState",
    "SagaStep",
    "TransactionScope",
    "run_in_transaction",
    "transaction_pattern",
]
