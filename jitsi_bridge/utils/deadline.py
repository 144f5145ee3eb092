import asyncio
from typing import Awaitable, TypeVar

from jitsi_bridge.errors import OperationTimeoutError

T = TypeVar("T")


async def with_deadline(awaitable: Awaitable[T], timeout: float, operation: str) -> T:
    """Await ``awaitable``, raising ``OperationTimeoutError`` after ``timeout`` seconds."""
    try:
        async with asyncio.timeout(timeout):
            return await awaitable
    except TimeoutError as exc:
        raise OperationTimeoutError(operation, timeout) from exc
