"""
Keyboard shortcut events and the double-copy detector that produces them.
"""

import time
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, Optional

from neural_translator.config.config import config
from neural_translator.models.interfaces import ClipboardProvider
from neural_translator.utils.exceptions import ClipboardError
from neural_translator.utils.logging import trigger_logger as logger

TRANSLATE_SHORTCUT = "translate-shortcut"
LANGUAGE_SWAP = "language-swap"
CLEAR_TEXT = "clear-text"
COPY_RESULT = "copy-result"

SHORTCUT_EVENTS = (TRANSLATE_SHORTCUT, LANGUAGE_SWAP, CLEAR_TEXT, COPY_RESULT)


@dataclass
class DoubleTapDetector:
    """Turns two copy taps inside the timeout window into one event.

    A second tap arriving sooner than ``min_interval_ms`` is treated as key
    repeat and ignored. A tap after the window starts a new sequence.
    """

    timeout_ms: int = field(default_factory=lambda: config.shortcuts.double_tap_timeout_ms)
    min_interval_ms: int = field(default_factory=lambda: config.shortcuts.min_tap_interval_ms)
    now: Callable[[], float] = time.monotonic
    _first_tap: Optional[float] = field(default=None, init=False)

    def register(self, timestamp: float = None) -> bool:
        """Record a tap at ``timestamp`` seconds. Returns True on a double tap."""
        current = self.now() if timestamp is None else timestamp

        if self._first_tap is not None:
            elapsed_ms = (current - self._first_tap) * 1000
            if self.min_interval_ms < elapsed_ms <= self.timeout_ms:
                self._first_tap = None
                return True
            if elapsed_ms <= self.min_interval_ms:
                return False

        self._first_tap = current
        return False

    def reset(self) -> None:
        self._first_tap = None


class ShortcutHandler:
    """Dispatches payload-less shortcut events to their actions."""

    def __init__(self, clipboard: ClipboardProvider, on_translate: Callable[[str], Awaitable[object]],
                 actions: Dict[str, Callable[[], Awaitable[object]]] = None,
                 detector: DoubleTapDetector = None):
        self.clipboard = clipboard
        self.on_translate = on_translate
        self.actions = dict(actions or {})
        self.detector = detector or DoubleTapDetector()

    async def translate_clipboard(self) -> bool:
        """Read the clipboard and hand non-blank text to the orchestrator."""
        try:
            text = await self.clipboard.get_text()
        except ClipboardError as e:
            logger.warning(f"Shortcut clipboard read failed: {e.message}", event=TRANSLATE_SHORTCUT)
            return False

        if not text.strip():
            logger.debug("Clipboard is empty, ignoring shortcut", event=TRANSLATE_SHORTCUT)
            return False

        await self.on_translate(text)
        return True

    async def dispatch(self, event: str) -> bool:
        """Run the action bound to ``event``. Returns False for unbound events."""
        if event not in SHORTCUT_EVENTS:
            raise ValueError(f"Unknown shortcut event: {event}")

        logger.debug(f"Shortcut event {event}", event="shortcut")
        if event == TRANSLATE_SHORTCUT:
            return await self.translate_clipboard()

        action = self.actions.get(event)
        if action is None:
            return False
        await action()
        return True

    async def on_copy_tap(self, timestamp: float = None) -> bool:
        """Feed one copy keystroke; a double tap triggers a translation."""
        if not self.detector.register(timestamp):
            return False
        logger.info("Double copy detected", event="double_tap")
        return await self.dispatch(TRANSLATE_SHORTCUT)
