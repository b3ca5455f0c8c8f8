"""Debounce for search input: only the last call within the delay runs."""

import asyncio
from typing import Any, Awaitable, Callable, Optional

DEFAULT_DELAY_SECONDS = 0.25


class Debouncer:
    def __init__(self, callback: Callable[..., Awaitable[Any]], delay: float = DEFAULT_DELAY_SECONDS):
        """
        Args:
            callback: Coroutine function to run once input settles
            delay: Quiet period in seconds
        """
        self.callback = callback
        self.delay = delay
        self._task: Optional[asyncio.Task] = None

    def trigger(self, *args, **kwargs) -> asyncio.Task:
        """
        Schedule callback(*args, **kwargs) after the delay, cancelling any
        call still waiting. Must be called from a running event loop.
        """
        self.cancel()
        self._task = asyncio.get_running_loop().create_task(self._run(args, kwargs))
        return self._task

    async def _run(self, args, kwargs) -> Any:
        await asyncio.sleep(self.delay)
        return await self.callback(*args, **kwargs)

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()
