"""
Unit tests for the sequential unit of work and the native transaction scope.
"""

# Standard library imports
import asyncio
from unittest.mock import AsyncMock, MagicMock

# Third-party imports
import pytest

# Local imports
from erp_db.application.interfaces.exceptions import (
    TransactionAlreadyActiveError,
    TransactionError,
)
from erp_db.infrastructure.repositories.unit_of_work import (
    TransactionScope,
    run_in_transaction,
    transaction_pattern,
)


@pytest.fixture
def mock_tx():
    """Mock transaction-bound adapter."""
    tx = AsyncMock()
    tx.commit_transaction = AsyncMock()
    tx.rollback_transaction = AsyncMock()
    return tx


@pytest.fixture
def mock_adapter(mock_tx):
    """Mock adapter whose transactions are bound to ``mock_tx``."""
    adapter = AsyncMock()
    adapter.begin_transaction = AsyncMock(return_value=mock_tx)
    return adapter


@pytest.mark.unit
class TestTransactionPattern:
    """Test transaction_pattern."""

    @pytest.mark.asyncio
    async def test_all_succeed(self):
        """Test results come back in order."""
        operations = [AsyncMock(return_value=i) for i in range(3)]

        results = await transaction_pattern(operations)

        assert results == [0, 1, 2]

    @pytest.mark.asyncio
    async def test_operations_run_sequentially(self):
        """Test each operation starts after the previous one finished."""
        events = []
        in_flight = 0
        max_in_flight = 0

        def make(index):
            async def operation():
                nonlocal in_flight, max_in_flight
                in_flight += 1
                max_in_flight = max(max_in_flight, in_flight)
                events.append(f"start {index}")
                # Yield to the loop so a concurrent runner would interleave here
                await asyncio.sleep(0)
                events.append(f"end {index}")
                in_flight -= 1
                return index

            return operation

        await transaction_pattern([make(i) for i in range(3)])

        assert events == ["start 0", "end 0", "start 1", "end 1", "start 2", "end 2"]
        assert max_in_flight == 1

    @pytest.mark.asyncio
    async def test_failure_stops_and_reports_completed_count(self):
        """Test the handler receives the error and the completed count."""
        error = RuntimeError("second insert failed")
        op3 = AsyncMock(return_value=3)
        on_error = MagicMock(return_value=None)

        with pytest.raises(RuntimeError) as exc_info:
            await transaction_pattern(
                [AsyncMock(return_value=1), AsyncMock(side_effect=error), op3],
                on_error,
            )

        assert exc_info.value is error
        on_error.assert_called_once_with(error, 1)
        op3.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_async_handler_is_awaited(self):
        """Test coroutine handlers are awaited before re-raising."""
        on_error = AsyncMock()

        with pytest.raises(ValueError):
            await transaction_pattern([AsyncMock(side_effect=ValueError("bad"))], on_error)

        on_error.assert_awaited_once()
        assert on_error.await_args.args[1] == 0

    @pytest.mark.asyncio
    async def test_failing_handler_does_not_mask_error(self):
        """Test the original error escapes even when compensation fails."""
        error = RuntimeError("insert failed")
        on_error = AsyncMock(side_effect=Exception("compensation failed"))

        with pytest.raises(RuntimeError) as exc_info:
            await transaction_pattern([AsyncMock(side_effect=error)], on_error)

        assert exc_info.value is error

    @pytest.mark.asyncio
    async def test_no_handler(self):
        """Test errors propagate without a handler."""
        with pytest.raises(KeyError):
            await transaction_pattern([AsyncMock(side_effect=KeyError("id"))])

    @pytest.mark.asyncio
    async def test_empty_operations(self):
        """Test an empty list returns an empty list."""
        assert await transaction_pattern([]) == []


@pytest.mark.unit
class TestTransactionScope:
    """Test TransactionScope."""

    @pytest.mark.asyncio
    async def test_commit_on_success(self, mock_adapter, mock_tx):
        """Test a clean block commits through the transaction-bound adapter."""
        async with TransactionScope(mock_adapter) as tx:
            assert tx is mock_tx

        mock_adapter.begin_transaction.assert_awaited_once()
        mock_tx.commit_transaction.assert_awaited_once()
        mock_tx.rollback_transaction.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rollback_on_error(self, mock_adapter, mock_tx):
        """Test a raising block rolls back and the error propagates."""
        with pytest.raises(ValueError, match="boom"):
            async with TransactionScope(mock_adapter):
                raise ValueError("boom")

        mock_tx.rollback_transaction.assert_awaited_once()
        mock_tx.commit_transaction.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rollback_failure_keeps_original_error(self, mock_adapter, mock_tx):
        """Test a failing rollback does not replace the block's error."""
        mock_tx.rollback_transaction.side_effect = TransactionError("rollback failed")

        with pytest.raises(ValueError, match="boom"):
            async with TransactionScope(mock_adapter):
                raise ValueError("boom")

    @pytest.mark.asyncio
    async def test_commit_failure_rolls_back(self, mock_adapter, mock_tx):
        """Test a failed commit is rolled back and re-raised."""
        mock_tx.commit_transaction.side_effect = TransactionError("commit failed")

        with pytest.raises(TransactionError, match="commit failed"):
            async with TransactionScope(mock_adapter):
                pass

        mock_tx.rollback_transaction.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_begin_failure_is_wrapped(self, mock_adapter):
        """Test unexpected begin errors become TransactionError."""
        mock_adapter.begin_transaction.side_effect = OSError("socket closed")

        with pytest.raises(TransactionError, match="Failed to begin transaction"):
            async with TransactionScope(mock_adapter):
                pass

    @pytest.mark.asyncio
    async def test_begin_transaction_error_passes_through(self, mock_adapter):
        """Test transaction errors from begin are not re-wrapped."""
        mock_adapter.begin_transaction.side_effect = TransactionAlreadyActiveError()

        with pytest.raises(TransactionAlreadyActiveError):
            async with TransactionScope(mock_adapter):
                pass

    @pytest.mark.asyncio
    async def test_scopes_get_separate_transactions(self, mock_adapter):
        """Test concurrent scopes on one adapter never share a transaction."""
        first_tx, second_tx = AsyncMock(), AsyncMock()
        mock_adapter.begin_transaction.side_effect = [first_tx, second_tx]

        async with TransactionScope(mock_adapter) as first:
            async with TransactionScope(mock_adapter) as second:
                assert first is not second

        first_tx.commit_transaction.assert_awaited_once()
        second_tx.commit_transaction.assert_awaited_once()


@pytest.mark.unit
class TestRunInTransaction:
    """Test run_in_transaction."""

    @pytest.mark.asyncio
    async def test_commits_results(self, mock_adapter, mock_tx):
        """Test successful operations commit."""
        results = await run_in_transaction(
            mock_adapter, [AsyncMock(return_value="a"), AsyncMock(return_value="b")]
        )

        assert results == ["a", "b"]
        mock_tx.commit_transaction.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_operations_receive_transaction_adapter(self, mock_adapter, mock_tx):
        """Test each operation is handed the transaction-bound adapter."""
        op = AsyncMock(return_value=None)

        await run_in_transaction(mock_adapter, [op, op])

        assert op.await_count == 2
        assert all(call.args == (mock_tx,) for call in op.await_args_list)

    @pytest.mark.asyncio
    async def test_rolls_back_on_failure(self, mock_adapter, mock_tx):
        """Test a failing operation rolls the transaction back."""
        with pytest.raises(RuntimeError):
            await run_in_transaction(mock_adapter, [AsyncMock(side_effect=RuntimeError("x"))])

        mock_tx.rollback_transaction.assert_awaited_once()
        mock_tx.commit_transaction.assert_not_awaited()
