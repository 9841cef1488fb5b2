import asyncio

import pytest

from clipscribe.errors import OperationCancelled
from clipscribe.waiting import Wake, cancellable, next_wake


async def test_next_wake_ticks():
    assert await next_wake(0, 10) is Wake.TICK


async def test_next_wake_times_out_when_budget_spent():
    assert await next_wake(0, 0) is Wake.TIMEOUT


async def test_next_wake_times_out_before_long_interval():
    assert await next_wake(10, 0.01) is Wake.TIMEOUT


async def test_next_wake_cancel_already_set_wins_over_timeout():
    cancel = asyncio.Event()
    cancel.set()

    assert await next_wake(0, 0, cancel) is Wake.CANCELLED


async def test_next_wake_cancel_interrupts_wait():
    cancel = asyncio.Event()
    asyncio.get_running_loop().call_later(0.01, cancel.set)

    assert await next_wake(10, 10, cancel) is Wake.CANCELLED


async def test_cancellable_returns_result():
    async def work():
        return "done"

    assert await cancellable(work(), asyncio.Event(), "Work") == "done"


async def test_cancellable_without_event_just_awaits():
    async def work():
        return 42

    assert await cancellable(work(), None, "Work") == 42


async def test_cancellable_raises_when_cancelled_in_flight():
    cancel = asyncio.Event()
    asyncio.get_running_loop().call_later(0.01, cancel.set)

    with pytest.raises(OperationCancelled, match="Upload cancelled"):
        await cancellable(asyncio.sleep(10), cancel, "Upload")


async def test_cancellable_pre_set_never_starts_work():
    cancel = asyncio.Event()
    cancel.set()
    started = False

    async def work():
        nonlocal started
        started = True

    with pytest.raises(OperationCancelled):
        await cancellable(work(), cancel, "AI request")

    assert started is False


def _stray_tasks() -> list[asyncio.Task]:
    current = asyncio.current_task()
    return [t for t in asyncio.all_tasks() if t is not current and not t.done()]


async def test_next_wake_cleans_up_when_caller_cancelled():
    cancel = asyncio.Event()
    waiter = asyncio.create_task(next_wake(60, 300, cancel))
    await asyncio.sleep(0.01)

    waiter.cancel()
    with pytest.raises(asyncio.CancelledError):
        await waiter

    assert _stray_tasks() == []
    assert not cancel.is_set()


async def test_cancellable_cleans_up_when_caller_cancelled():
    waiter = asyncio.create_task(cancellable(asyncio.sleep(60), asyncio.Event(), "Upload"))
    await asyncio.sleep(0.01)

    waiter.cancel()
    with pytest.raises(asyncio.CancelledError):
        await waiter

    assert _stray_tasks() == []
