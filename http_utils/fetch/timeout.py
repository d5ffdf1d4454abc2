"""Deadline guard for in-flight coroutines."""

import asyncio
from collections.abc import Awaitable
from typing import TypeVar


T = TypeVar("T")


class DeadlineExceeded(Exception):  # noqa: N818
    """Raised when the deadline fires before the guarded operation completes.

    Kept apart from ``TimeoutError`` so callers can tell an expired deadline
    from an operation that timed out on its own.
    """

    def __init__(self, milliseconds: int) -> None:
        self.milliseconds = milliseconds
        super().__init__(f"Deadline of {milliseconds} ms exceeded")


async def with_timeout(milliseconds: int | None, operation: Awaitable[T]) -> T:
    """Await an operation, racing it against an optional deadline.

    When the deadline fires first the operation is cancelled and
    ``DeadlineExceeded`` is raised. The timer is released on every exit path.

    Args:
        milliseconds: Deadline in milliseconds, or None for no deadline.
        operation: The awaitable to run.

    Returns:
        The operation's result.

    Raises:
        DeadlineExceeded: If the deadline fired first.
    """
    if milliseconds is None:
        return await operation

    try:
        async with asyncio.timeout(milliseconds / 1000) as deadline:
            return await operation
    except TimeoutError as e:
        if deadline.expired():
            raise DeadlineExceeded(milliseconds) from e
        raise
