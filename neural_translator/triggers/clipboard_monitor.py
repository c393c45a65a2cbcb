"""
Clipboard polling trigger used in auto-translate mode.
"""

import asyncio
from typing import Awaitable, Callable, Optional

from neural_translator.config.config import config
from neural_translator.models.interfaces import ClipboardProvider
from neural_translator.utils.exceptions import ClipboardError
from neural_translator.utils.logging import trigger_logger as logger


class ClipboardMonitor:
    """Polls the clipboard and reports each new non-blank snapshot once."""

    def __init__(self, clipboard: ClipboardProvider, handler: Callable[[str], Awaitable[object]],
                 interval_seconds: float = None):
        self.clipboard = clipboard
        self.handler = handler
        self.interval_seconds = (
            interval_seconds if interval_seconds is not None
            else config.orchestration.clipboard_poll_interval_seconds
        )
        self._last_seen: Optional[str] = None
        self._handler_tasks = set()
        self._monitoring_task = None
        self._is_monitoring = False

    @property
    def is_running(self) -> bool:
        return self._is_monitoring

    async def start(self):
        """Start polling. The current clipboard content is taken as already seen."""
        if self._is_monitoring:
            logger.warning("Clipboard monitoring is already running")
            return

        try:
            self._last_seen = await self.clipboard.get_text()
        except ClipboardError as e:
            logger.warning(f"Initial clipboard read failed: {e.message}", event="clipboard_poll")
            self._last_seen = None

        self._is_monitoring = True
        self._monitoring_task = asyncio.create_task(self._monitoring_loop())
        logger.info("Clipboard monitoring started")

    async def stop(self):
        if not self._is_monitoring:
            return

        self._is_monitoring = False
        if self._monitoring_task:
            self._monitoring_task.cancel()
            try:
                await self._monitoring_task
            except asyncio.CancelledError:
                pass
            self._monitoring_task = None

        logger.info("Clipboard monitoring stopped")

    async def poll_once(self) -> bool:
        """Read the clipboard once; returns True when a new snapshot was dispatched.

        The handler runs as a separate task so a slow translation never delays
        the next poll.
        """
        current = await self.clipboard.get_text()
        if current == self._last_seen or not current.strip():
            return False

        self._last_seen = current
        logger.debug("Clipboard changed", event="clipboard_changed", metadata={"length": len(current)})
        task = asyncio.create_task(self._dispatch(current))
        self._handler_tasks.add(task)
        task.add_done_callback(self._handler_tasks.discard)
        return True

    async def _dispatch(self, text: str):
        try:
            await self.handler(text)
        except Exception as e:
            logger.error(f"Clipboard handler failed: {str(e)}", event="clipboard_changed", exc_info=True)

    async def wait_idle(self) -> None:
        """Wait for handlers started by earlier polls."""
        if self._handler_tasks:
            await asyncio.gather(*list(self._handler_tasks), return_exceptions=True)

    async def _monitoring_loop(self):
        while self._is_monitoring:
            try:
                await self.poll_once()
                await asyncio.sleep(self.interval_seconds)
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"Error in clipboard monitoring loop: {str(e)}", exc_info=True)
                await asyncio.sleep(self.interval_seconds)
