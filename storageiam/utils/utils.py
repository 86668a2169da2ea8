import asyncio
import os
from typing import Awaitable, Optional, TypeVar

T = TypeVar('T')  # pylint: disable=invalid-name


def first_extant_file(*files: Optional[str]) -> Optional[str]:
    for f in files:
        if f is not None and os.path.isfile(f):
            return f
    return None


def async_to_blocking(coro: Awaitable[T]) -> T:
    """Run `coro` to completion on a fresh event loop."""
    loop = asyncio.new_event_loop()
    task = loop.create_task(coro)  # type: ignore
    try:
        return loop.run_until_complete(task)
    finally:
        if not task.done():
            task.cancel()
        loop.close()
