"""Thread-pool bridge that keeps collectors and frame parsing off the UI loop."""

from __future__ import annotations

import asyncio
import atexit
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Any, Callable, TypeVar

from rainfetch.services.snapshots import CATEGORIES

T = TypeVar("T")

# One slot per cache category plus one for frame-file parsing.
IO_WORKERS = len(CATEGORIES) + 1
_POLL_S = 0.1

_IO_EXECUTOR = ThreadPoolExecutor(
    max_workers=IO_WORKERS, thread_name_prefix="rainfetch-io"
)


@atexit.register
def _shutdown_io_executor() -> None:
    _IO_EXECUTOR.shutdown(wait=False, cancel_futures=True)


async def _await_future(future: asyncio.Future[T]) -> T:
    # Executor completions can miss the loop wakeup on some platforms; poll.
    while True:
        try:
            return await asyncio.wait_for(asyncio.shield(future), timeout=_POLL_S)
        except asyncio.TimeoutError:
            continue


async def run_blocking(func: Callable[..., T], /, *args: Any, **kwargs: Any) -> T:
    """Await ``func(*args, **kwargs)`` run on the shared IO pool.

    Cancelling the awaiting task abandons the call; the worker thread runs it
    to completion and its result is discarded.
    """
    if not callable(func):
        raise TypeError("func must be callable")
    loop = asyncio.get_running_loop()
    call = partial(func, *args, **kwargs) if kwargs else partial(func, *args)
    return await _await_future(loop.run_in_executor(_IO_EXECUTOR, call))
