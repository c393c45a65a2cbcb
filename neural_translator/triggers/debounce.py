"""
Debounced input trigger: fires once the text has been quiet for a period.
"""

import asyncio
from typing import Awaitable, Callable, Optional

from neural_translator.config.config import config
from neural_translator.utils.logging import trigger_logger as logger

TextHandler = Callable[[str], Awaitable[object]]


class DebouncedTrigger:
    """Restarts a timer on every change and calls ``handler`` with the latest
    text when the timer expires. Blank text never reaches the handler."""

    def __init__(self, handler: TextHandler, debounce_ms: int = None):
        self.handler = handler
        self.debounce_ms = debounce_ms if debounce_ms is not None else config.orchestration.debounce_ms
        self._pending_text: Optional[str] = None
        self._timer: Optional[asyncio.Task] = None
        self._handler_tasks = set()

    @property
    def is_pending(self) -> bool:
        return self._timer is not None and not self._timer.done()

    def notify(self, text: str) -> None:
        """Record a text change and restart the quiet period."""
        self.cancel()
        if not text or not text.strip():
            return
        self._pending_text = text
        self._timer = asyncio.create_task(self._wait_and_fire())

    def cancel(self) -> None:
        """Drop the pending event without firing it."""
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None
        self._pending_text = None

    async def flush(self) -> None:
        """Fire the pending event now instead of waiting for the timer."""
        text = self._pending_text
        self.cancel()
        if text is not None:
            await self._fire(text)

    async def _wait_and_fire(self):
        try:
            await asyncio.sleep(self.debounce_ms / 1000)
        except asyncio.CancelledError:
            return
        text = self._pending_text
        self._pending_text = None
        self._timer = None
        if text is not None:
            # run detached so a later notify() cannot cancel an in-flight request
            task = asyncio.create_task(self._fire(text))
            self._handler_tasks.add(task)
            task.add_done_callback(self._handler_tasks.discard)

    async def _fire(self, text: str):
        logger.debug("Debounce period elapsed", event="debounce_fire", metadata={"length": len(text)})
        try:
            await self.handler(text)
        except Exception as e:
            logger.error(f"Debounced handler failed: {str(e)}", event="debounce_fire", exc_info=True)

    async def wait_idle(self) -> None:
        """Wait for the pending timer and any handlers it started."""
        if self._timer is not None:
            await asyncio.gather(self._timer, return_exceptions=True)
        if self._handler_tasks:
            await asyncio.gather(*list(self._handler_tasks), return_exceptions=True)
