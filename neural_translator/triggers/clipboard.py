"""
System clipboard access through pyperclip.
"""

import asyncio

import pyperclip

from neural_translator.models.interfaces import ClipboardProvider
from neural_translator.utils.exceptions import ClipboardError


class PyperclipClipboard(ClipboardProvider):
    """pyperclip calls block, so they run in a worker thread."""

    async def get_text(self) -> str:
        try:
            text = await asyncio.to_thread(pyperclip.paste)
        except pyperclip.PyperclipException as e:
            raise ClipboardError(f"Unable to read clipboard: {str(e)}")
        return text or ""

    async def set_text(self, text: str) -> None:
        try:
            await asyncio.to_thread(pyperclip.copy, text)
        except pyperclip.PyperclipException as e:
            raise ClipboardError(f"Unable to write clipboard: {str(e)}")
