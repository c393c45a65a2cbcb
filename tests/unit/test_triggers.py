"""
Unit tests for trigger sources: debounce, clipboard polling and shortcuts.
"""

import asyncio
from unittest.mock import AsyncMock, patch

import pyperclip
import pytest

from neural_translator.triggers.clipboard import PyperclipClipboard
from neural_translator.triggers.clipboard_monitor import ClipboardMonitor
from neural_translator.triggers.debounce import DebouncedTrigger
from neural_translator.triggers.shortcuts import (
    CLEAR_TEXT,
    COPY_RESULT,
    LANGUAGE_SWAP,
    TRANSLATE_SHORTCUT,
    DoubleTapDetector,
    ShortcutHandler,
)
from neural_translator.utils.exceptions import ClipboardError


class TestDebouncedTrigger:
    """Test the quiet-period timer."""

    @pytest.mark.asyncio
    async def test_rapid_edits_fire_once_with_latest_text(self):
        handler = AsyncMock()
        trigger = DebouncedTrigger(handler, debounce_ms=30)

        for text in ("H", "He", "Hel", "Hell", "Hello"):
            trigger.notify(text)
            await asyncio.sleep(0.005)

        assert handler.await_count == 0
        await asyncio.sleep(0.06)
        await trigger.wait_idle()

        handler.assert_awaited_once_with("Hello")

    @pytest.mark.asyncio
    async def test_separate_pauses_fire_separately(self):
        handler = AsyncMock()
        trigger = DebouncedTrigger(handler, debounce_ms=10)

        trigger.notify("first")
        await asyncio.sleep(0.04)
        trigger.notify("second")
        await asyncio.sleep(0.04)
        await trigger.wait_idle()

        assert [call.args[0] for call in handler.await_args_list] == ["first", "second"]

    @pytest.mark.asyncio
    async def test_blank_text_cancels_pending(self):
        handler = AsyncMock()
        trigger = DebouncedTrigger(handler, debounce_ms=10)

        trigger.notify("Hello")
        trigger.notify("   ")
        await asyncio.sleep(0.03)

        handler.assert_not_awaited()
        assert not trigger.is_pending

    @pytest.mark.asyncio
    async def test_cancel_and_flush(self):
        handler = AsyncMock()
        trigger = DebouncedTrigger(handler, debounce_ms=1000)

        trigger.notify("Hello")
        assert trigger.is_pending
        await trigger.flush()

        handler.assert_awaited_once_with("Hello")
        assert not trigger.is_pending

        trigger.notify("Bye")
        trigger.cancel()
        await trigger.flush()
        assert handler.await_count == 1

    @pytest.mark.asyncio
    async def test_handler_errors_are_contained(self):
        handler = AsyncMock(side_effect=RuntimeError("boom"))
        trigger = DebouncedTrigger(handler, debounce_ms=1)

        trigger.notify("Hello")
        await asyncio.sleep(0.02)
        await trigger.wait_idle()

        handler.assert_awaited_once()


class TestClipboardMonitor:
    """Test compare-and-set polling."""

    @pytest.mark.asyncio
    async def test_poll_reports_changes_once(self, make_clipboard):
        clipboard = make_clipboard("initial")
        handler = AsyncMock()
        monitor = ClipboardMonitor(clipboard, handler, interval_seconds=60)
        monitor._last_seen = "initial"

        assert await monitor.poll_once() is False

        clipboard.text = "new text"
        assert await monitor.poll_once() is True
        assert await monitor.poll_once() is False
        await monitor.wait_idle()

        handler.assert_awaited_once_with("new text")

    @pytest.mark.asyncio
    async def test_blank_clipboard_keeps_previous_snapshot(self, make_clipboard):
        clipboard = make_clipboard("A")
        handler = AsyncMock()
        monitor = ClipboardMonitor(clipboard, handler, interval_seconds=60)

        assert await monitor.poll_once() is True
        clipboard.text = "  "
        assert await monitor.poll_once() is False
        assert monitor._last_seen == "A"
        clipboard.text = "A"
        assert await monitor.poll_once() is False
        await monitor.wait_idle()

        handler.assert_awaited_once_with("A")

    @pytest.mark.asyncio
    async def test_slow_handler_does_not_block_polling(self, make_clipboard):
        clipboard = make_clipboard("first")
        release = asyncio.Event()
        seen = []

        async def slow_handler(text):
            seen.append(text)
            await release.wait()

        monitor = ClipboardMonitor(clipboard, slow_handler, interval_seconds=60)

        assert await monitor.poll_once() is True
        clipboard.text = "second"
        assert await asyncio.wait_for(monitor.poll_once(), timeout=1) is True
        await asyncio.sleep(0)

        assert seen == ["first", "second"]
        release.set()
        await monitor.wait_idle()

    @pytest.mark.asyncio
    async def test_handler_errors_stay_inside_dispatch(self, make_clipboard):
        handler = AsyncMock(side_effect=RuntimeError("boom"))
        monitor = ClipboardMonitor(make_clipboard("text"), handler, interval_seconds=60)

        assert await monitor.poll_once() is True
        await monitor.wait_idle()

        handler.assert_awaited_once_with("text")

    @pytest.mark.asyncio
    async def test_start_ignores_existing_content(self, make_clipboard):
        clipboard = make_clipboard("already there")
        handler = AsyncMock()
        monitor = ClipboardMonitor(clipboard, handler, interval_seconds=0.01)

        await monitor.start()
        await asyncio.sleep(0.03)
        clipboard.text = "copied later"
        await asyncio.sleep(0.03)
        await monitor.stop()
        await monitor.wait_idle()

        handler.assert_awaited_once_with("copied later")
        assert not monitor.is_running

    @pytest.mark.asyncio
    async def test_stop_halts_polling(self, make_clipboard):
        clipboard = make_clipboard("")
        handler = AsyncMock()
        monitor = ClipboardMonitor(clipboard, handler, interval_seconds=0.01)

        await monitor.start()
        await monitor.stop()
        clipboard.text = "after stop"
        await asyncio.sleep(0.03)

        handler.assert_not_awaited()


class TestDoubleTapDetector:
    """Test tap timing windows."""

    def test_double_tap_within_window(self):
        detector = DoubleTapDetector(timeout_ms=300, min_interval_ms=50)

        assert detector.register(1.0) is False
        assert detector.register(1.2) is True

    def test_key_repeat_is_ignored(self):
        detector = DoubleTapDetector(timeout_ms=300, min_interval_ms=50)

        detector.register(1.0)
        assert detector.register(1.01) is False
        assert detector.register(1.1) is True

    def test_slow_second_tap_restarts_sequence(self):
        detector = DoubleTapDetector(timeout_ms=300, min_interval_ms=50)

        detector.register(1.0)
        assert detector.register(1.5) is False
        assert detector.register(1.6) is True

    def test_third_tap_starts_new_sequence(self):
        detector = DoubleTapDetector(timeout_ms=300, min_interval_ms=50)

        detector.register(1.0)
        detector.register(1.1)
        assert detector.register(1.2) is False

    def test_uses_clock_when_no_timestamp(self):
        ticks = iter([10.0, 10.1])
        detector = DoubleTapDetector(timeout_ms=300, min_interval_ms=50, now=lambda: next(ticks))

        assert detector.register() is False
        assert detector.register() is True


class TestShortcutHandler:
    """Test shortcut dispatch."""

    @pytest.mark.asyncio
    async def test_translate_shortcut_reads_clipboard(self, make_clipboard):
        on_translate = AsyncMock()
        handler = ShortcutHandler(make_clipboard("Hello"), on_translate)

        assert await handler.dispatch(TRANSLATE_SHORTCUT) is True
        on_translate.assert_awaited_once_with("Hello")

    @pytest.mark.asyncio
    async def test_translate_shortcut_ignores_blank_clipboard(self, make_clipboard):
        on_translate = AsyncMock()
        handler = ShortcutHandler(make_clipboard("   "), on_translate)

        assert await handler.dispatch(TRANSLATE_SHORTCUT) is False
        on_translate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_clipboard_failure_is_reported(self, make_clipboard):
        clipboard = make_clipboard()
        clipboard.get_text = AsyncMock(side_effect=ClipboardError("no display"))
        on_translate = AsyncMock()
        handler = ShortcutHandler(clipboard, on_translate)

        assert await handler.dispatch(TRANSLATE_SHORTCUT) is False
        on_translate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_bound_actions(self, make_clipboard):
        swap, clear, copy = AsyncMock(), AsyncMock(), AsyncMock()
        handler = ShortcutHandler(
            make_clipboard(), AsyncMock(),
            actions={LANGUAGE_SWAP: swap, CLEAR_TEXT: clear, COPY_RESULT: copy}
        )

        for event in (LANGUAGE_SWAP, CLEAR_TEXT, COPY_RESULT):
            assert await handler.dispatch(event) is True

        swap.assert_awaited_once()
        clear.assert_awaited_once()
        copy.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unbound_and_unknown_events(self, make_clipboard):
        handler = ShortcutHandler(make_clipboard(), AsyncMock())

        assert await handler.dispatch(CLEAR_TEXT) is False
        with pytest.raises(ValueError):
            await handler.dispatch("open-settings")

    @pytest.mark.asyncio
    async def test_double_copy_triggers_translation(self, make_clipboard):
        on_translate = AsyncMock()
        handler = ShortcutHandler(
            make_clipboard("copied"), on_translate,
            detector=DoubleTapDetector(timeout_ms=300, min_interval_ms=50)
        )

        assert await handler.on_copy_tap(5.0) is False
        assert await handler.on_copy_tap(5.15) is True
        on_translate.assert_awaited_once_with("copied")


class TestPyperclipClipboard:
    """Test the pyperclip adapter without touching the real clipboard."""

    @pytest.mark.asyncio
    async def test_get_and_set(self):
        clipboard = PyperclipClipboard()
        with patch("neural_translator.triggers.clipboard.pyperclip.paste", return_value="hi"), \
                patch("neural_translator.triggers.clipboard.pyperclip.copy") as copy:
            assert await clipboard.get_text() == "hi"
            await clipboard.set_text("bye")

        copy.assert_called_once_with("bye")

    @pytest.mark.asyncio
    async def test_missing_mechanism_raises_clipboard_error(self):
        clipboard = PyperclipClipboard()
        failure = pyperclip.PyperclipException("no clipboard mechanism")
        with patch("neural_translator.triggers.clipboard.pyperclip.paste", side_effect=failure):
            with pytest.raises(ClipboardError):
                await clipboard.get_text()
