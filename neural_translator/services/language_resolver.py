"""
Language pair resolution for translation requests.
"""

from typing import Optional

from neural_translator.models.interfaces import ResolvedPair
from neural_translator.models.languages import (
    AUTO,
    FALLBACK_TARGET,
    SUPPORTED_LANGUAGES,
    is_auto,
)
from neural_translator.utils.exceptions import LanguageResolutionError


class LanguagePairResolver:
    """Computes the effective (source, target) pair for a request.

    The resolver is pure: it never detects languages itself and never
    mutates state. ``detected`` carries a fresh detection result when the
    declared source was ``Auto``.
    """

    def __init__(self, fallback_target: str = FALLBACK_TARGET):
        self.fallback_target = fallback_target

    def resolve(self, declared_from: str, current_to: str, native_language: str,
                detected: Optional[str] = None) -> ResolvedPair:
        if is_auto(declared_from):
            if is_auto(detected):
                raise LanguageResolutionError(
                    "Source language is Auto and no detected language was supplied",
                    details={"declared_from": AUTO, "current_to": current_to},
                )
            source = detected
        elif declared_from != current_to:
            # Manual mode with distinct languages passes through unchanged
            return ResolvedPair(effective_from=declared_from, effective_to=current_to)
        else:
            source = declared_from

        target = self._target_for(source, native_language)
        return ResolvedPair(effective_from=source, effective_to=target)

    def _target_for(self, source: str, native_language: str) -> str:
        if source == native_language:
            target = self.fallback_target
        else:
            # English and every third language go to the native language
            target = native_language

        if target == source:
            # Native language is the fallback target itself
            target = next(tag for tag in SUPPORTED_LANGUAGES if tag != source)
        return target
