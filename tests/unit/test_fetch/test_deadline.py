"""Unit tests for the deadline guard."""

import asyncio

import pytest

from http_utils.fetch.timeout import DeadlineExceeded, with_timeout


async def _answer(delay: float, value: str = "done") -> str:
    await asyncio.sleep(delay)
    return value


class TestWithTimeout:
    """Tests for with_timeout."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_no_deadline_awaits_operation(self) -> None:
        """Test that None disables the deadline."""
        assert await with_timeout(None, _answer(0.01)) == "done"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_fast_operation_returns_result(self) -> None:
        """Test that an operation finishing in time returns its result."""
        assert await with_timeout(1000, _answer(0.0, "fast")) == "fast"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_slow_operation_raises(self) -> None:
        """Test that the deadline fires for a slow operation."""
        with pytest.raises(DeadlineExceeded) as exc_info:
            await with_timeout(20, _answer(1.0))

        assert exc_info.value.milliseconds == 20

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_slow_operation_is_cancelled(self) -> None:
        """Test that the guarded operation does not keep running."""
        finished = asyncio.Event()

        async def operation() -> None:
            await asyncio.sleep(0.1)
            finished.set()

        with pytest.raises(DeadlineExceeded):
            await with_timeout(10, operation())
        await asyncio.sleep(0.2)

        assert not finished.is_set()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_operation_errors_propagate(self) -> None:
        """Test that the operation's own errors pass through."""

        async def operation() -> None:
            msg = "boom"
            raise ValueError(msg)

        with pytest.raises(ValueError, match="boom"):
            await with_timeout(1000, operation())

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_inner_timeout_is_not_a_deadline(self) -> None:
        """Test that a TimeoutError from the operation is re-raised as is."""

        async def operation() -> None:
            raise TimeoutError

        with pytest.raises(TimeoutError) as exc_info:
            await with_timeout(1000, operation())

        assert not isinstance(exc_info.value, DeadlineExceeded)
