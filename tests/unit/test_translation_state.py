"""
Unit tests for the observable translation state.
"""

import pytest

from neural_translator.models.languages import AUTO
from neural_translator.services.translation_state import TranslationState


class TestTranslationState:
    def test_update_reports_changed_fields(self):
        state = TranslationState()
        seen = []
        state.subscribe(lambda s, changed: seen.append(changed))

        changed = state.update(input_text="Hello", source_language=AUTO)

        assert changed == {"input_text"}
        assert seen == [{"input_text"}]

    def test_no_notification_without_change(self):
        state = TranslationState()
        seen = []
        state.subscribe(lambda s, changed: seen.append(changed))

        state.update(input_text="")

        assert seen == []

    def test_unknown_field_rejected(self):
        with pytest.raises(AttributeError):
            TranslationState().update(colour="blue")

    def test_unsubscribe(self):
        state = TranslationState()
        seen = []
        unsubscribe = state.subscribe(lambda s, changed: seen.append(changed))

        unsubscribe()
        state.update(input_text="Hello")

        assert seen == []

    def test_failing_listener_does_not_block_others(self):
        state = TranslationState()
        seen = []

        def broken(s, changed):
            raise RuntimeError("render failed")

        state.subscribe(broken)
        state.subscribe(lambda s, changed: seen.append(changed))

        state.update(translated_text="こんにちは")

        assert seen == [{"translated_text"}]
        assert state.translated_text == "こんにちは"

    def test_can_swap(self):
        state = TranslationState()
        assert not state.can_swap

        state.update(source_language="English")
        assert state.can_swap
