"""Cancellation-aware waiting primitives for the async workflows."""
import asyncio
import contextlib
import inspect
from enum import Enum
from typing import Awaitable, Optional, TypeVar

from clipscribe.constants import MSG_CANCELLED
from clipscribe.errors import OperationCancelled

T = TypeVar("T")


class Wake(Enum):
    TICK = "tick"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"


async def _drain(task: asyncio.Future) -> None:
    task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await task


async def next_wake(
    interval: float,
    remaining: float,
    cancel: Optional[asyncio.Event] = None,
) -> Wake:
    """Wait for whichever comes first: the next tick, the deadline, or cancel.

    ``remaining`` is what is left of the overall budget. Cancel wins ties.
    """
    if cancel is not None and cancel.is_set():
        return Wake.CANCELLED
    if remaining <= 0:
        return Wake.TIMEOUT

    tick = asyncio.ensure_future(asyncio.sleep(interval))
    watchers = {tick}
    stop = None
    if cancel is not None:
        stop = asyncio.ensure_future(cancel.wait())
        watchers.add(stop)

    try:
        done, pending = await asyncio.wait(
            watchers, timeout=remaining, return_when=asyncio.FIRST_COMPLETED
        )
    except asyncio.CancelledError:
        for task in watchers:
            await _drain(task)
        raise
    for task in pending:
        await _drain(task)

    match (stop is not None and stop in done, tick in done):
        case (True, _):
            return Wake.CANCELLED
        case (False, True):
            return Wake.TICK
        case _:
            return Wake.TIMEOUT


async def cancellable(
    awaitable: Awaitable[T],
    cancel: Optional[asyncio.Event],
    what: str,
) -> T:
    """Await ``awaitable`` unless ``cancel`` fires first.

    On cancel the in-flight exchange is torn down and ``OperationCancelled``
    is raised.
    """
    if cancel is None:
        return await awaitable
    if cancel.is_set():
        if inspect.iscoroutine(awaitable):
            awaitable.close()
        raise OperationCancelled(MSG_CANCELLED % what)

    work = asyncio.ensure_future(awaitable)
    stop = asyncio.ensure_future(cancel.wait())
    try:
        done, _ = await asyncio.wait({work, stop}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        await _drain(work)
        await _drain(stop)
        raise

    if work in done:
        await _drain(stop)
        return work.result()
    await _drain(work)
    raise OperationCancelled(MSG_CANCELLED % what)
