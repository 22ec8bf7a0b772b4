"""
Saga Coordinator

Runs a multi-step process where every step may carry its own compensating
action. When a step fails, the steps that already completed are compensated
in reverse order and the original error is re-raised.

This is the cross-system counterpart of ``TransactionScope``: use it when
the steps touch resources that cannot share one database transaction.
"""

# Standard library imports
import logging
import uuid
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class SagaState(Enum):
    """Lifecycle of a saga."""

    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    COMPENSATING = "COMPENSATING"


@dataclass
class SagaContext:
    """Progress of one saga run."""

    saga_id: str
    process_id: str
    state: SagaState = SagaState.PENDING
    data: dict[str, Any] = field(default_factory=dict)
    current_step: int = 0
    executed_steps: list[str] = field(default_factory=list)
    compensation_errors: list[tuple[str, Exception]] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass(frozen=True)
class SagaStep:
    """
    One step of a saga.

    ``execute`` receives the running context and its return value is stored
    in ``context.data[name]``. ``compensate`` undoes the step.
    """

    name: str
    execute: Callable[[SagaContext], Awaitable[Any]]
    compensate: Callable[[SagaContext], Awaitable[Any]] | None = None


class SagaCoordinator:
    """
    In-process saga orchestrator.

    Keeps the contexts of runs that are in progress or failed so they can be
    inspected with ``pending()``. Completed runs are dropped.
    """

    def __init__(self) -> None:
        self._sagas: dict[str, SagaContext] = {}

    async def run(
        self,
        process_id: str,
        steps: Sequence[SagaStep],
        initial_data: dict[str, Any] | None = None,
    ) -> SagaContext:
        """
        Execute steps in order, compensating on failure.

        Args:
            process_id: Caller-defined name of the business process
            steps: Steps to run
            initial_data: Seed for ``context.data``

        Returns:
            The completed context

        Raises:
            Exception: The error of the failing step, after compensation
        """
        context = SagaContext(
            saga_id=str(uuid.uuid4()),
            process_id=process_id,
            data=dict(initial_data or {}),
        )
        self._sagas[context.saga_id] = context
        logger.debug(f"Saga {context.saga_id} ({process_id}) started with {len(steps)} steps")

        for index, step in enumerate(steps):
            context.current_step = index
            try:
                result = await step.execute(context)
            except Exception as error:
                context.state = SagaState.FAILED
                logger.warning(f"Saga {context.saga_id} step '{step.name}' failed: {error}")
                await self.compensate(context, steps)
                raise

            context.data[step.name] = result
            context.executed_steps.append(step.name)

        context.state = SagaState.COMPLETED
        del self._sagas[context.saga_id]
        logger.debug(f"Saga {context.saga_id} completed")
        return context

    async def compensate(self, context: SagaContext, steps: Sequence[SagaStep]) -> None:
        """
        Run compensating actions for executed steps, most recent first.

        Compensation errors are logged and recorded on the context; they
        never stop the remaining compensations.
        """
        # Steps run in order, so the executed ones are the first len(executed_steps)
        executed = list(steps)[: len(context.executed_steps)]
        context.state = SagaState.COMPENSATING

        for step in reversed(executed):
            if step.compensate is None:
                continue
            try:
                await step.compensate(context)
                logger.debug(f"Saga {context.saga_id} compensated step '{step.name}'")
            except Exception as e:
                logger.error(f"Saga {context.saga_id} compensation of '{step.name}' failed: {e}")
                context.compensation_errors.append((step.name, e))

        context.state = SagaState.FAILED

    def get(self, saga_id: str) -> SagaContext | None:
        return self._sagas.get(saga_id)

    def pending(self) -> list[SagaContext]:
        """List sagas that did not complete."""
        return [ctx for ctx in self._sagas.values() if ctx.state != SagaState.COMPLETED]
