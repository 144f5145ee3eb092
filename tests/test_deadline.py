import asyncio

import pytest

from jitsi_bridge.errors import OperationTimeoutError
from jitsi_bridge.utils.deadline import with_deadline


async def answer(delay: float) -> int:
    await asyncio.sleep(delay)
    return 42


async def test_result_within_deadline():
    assert await with_deadline(answer(0), 1, "answer") == 42


async def test_deadline_exceeded():
    with pytest.raises(OperationTimeoutError) as info:
        await with_deadline(answer(1), 0.01, "answer")
    assert info.value.operation == "answer"
    assert info.value.message == "answer timed out after 0.01s"
