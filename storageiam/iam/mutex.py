import asyncio
import contextlib
import logging
from collections import defaultdict
from typing import AsyncIterator, DefaultDict

log = logging.getLogger(__name__)


class MutexKV:
    """Named asyncio locks, one per key, created on first use."""

    def __init__(self):
        self.locks: DefaultDict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    @contextlib.asynccontextmanager
    async def lock(self, key: str) -> AsyncIterator[None]:
        log.debug(f'locking {key!r}')
        async with self.locks[key]:
            log.debug(f'locked {key!r}')
            yield
        log.debug(f'unlocked {key!r}')
