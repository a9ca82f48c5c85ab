"""
Client: debounced callbacks on the asyncio event loop.
"""

import asyncio
import logging
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)


class Debouncer:
    """Run an async callback once a quiet period has passed.

    Every `trigger()` restarts the timer, so a burst of triggers produces a
    single call, `delay` seconds after the last one.

    Args:
        callback: Coroutine function to run.
        delay: Quiet period in seconds.
        on_error: Called with any exception the callback raises.
    """

    def __init__(
        self,
        callback: Callable[[], Awaitable[None]],
        delay: float,
        on_error: Callable[[Exception], None] | None = None,
    ):
        self.callback = callback
        self.delay = delay
        self.on_error = on_error
        self._handle: asyncio.TimerHandle | None = None
        self._task: asyncio.Task | None = None

    @property
    def pending(self) -> bool:
        """Whether a fire is scheduled but has not started yet."""
        return self._handle is not None

    def trigger(self) -> None:
        """Schedule a fire after the delay, replacing any scheduled one.

        Must be called from a running event loop.
        """
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire)

    def cancel(self) -> None:
        """Drop the scheduled fire, if any. A fire already running continues."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    async def flush(self) -> None:
        """Cancel the timer and run the callback now."""
        self.cancel()
        await self._run()

    async def wait(self) -> None:
        """Wait for a fire that is currently running."""
        if self._task is not None:
            await asyncio.shield(self._task)

    def _fire(self) -> None:
        self._handle = None
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        try:
            await self.callback()
        except Exception as e:
            logger.warning(f"Debounced callback failed: {e}")
            if self.on_error is None:
                raise
            self.on_error(e)
