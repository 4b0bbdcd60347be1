"""
Single-use shutdown primitive.
"""

import asyncio
from typing import Any, Awaitable, Callable, Optional


class CloseOnce:
    """
    Runs an async close callable at most once.

    The first caller starts the close; every caller, concurrent or later,
    awaits the same completion and sees the same outcome. The check-and-set
    happens without an intervening await, so it is atomic on the event loop.
    """

    def __init__(self, close: Callable[[], Awaitable[Any]]) -> None:
        self._close = close
        self._future: Optional['asyncio.Future[Any]'] = None

    @property
    def started(self) -> bool:
        return self._future is not None

    @property
    def done(self) -> bool:
        return self._future is not None and self._future.done()

    async def run(self) -> None:
        if self._future is None:
            self._future = asyncio.ensure_future(self._close())
        # A cancelled caller must not abort a close other callers wait on
        await asyncio.shield(self._future)
