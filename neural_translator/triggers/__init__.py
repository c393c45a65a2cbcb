"""
Trigger sources that start orchestration passes.
"""

from .clipboard import PyperclipClipboard
from .clipboard_monitor import ClipboardMonitor
from .debounce import DebouncedTrigger
from .shortcuts import (
    CLEAR_TEXT,
    COPY_RESULT,
    LANGUAGE_SWAP,
    TRANSLATE_SHORTCUT,
    DoubleTapDetector,
    ShortcutHandler
)

__all__ = [
    "PyperclipClipboard",
    "ClipboardMonitor",
    "DebouncedTrigger",
    "DoubleTapDetector",
    "ShortcutHandler",
    "TRANSLATE_SHORTCUT",
    "LANGUAGE_SWAP",
    "CLEAR_TEXT",
    "COPY_RESULT"
]
