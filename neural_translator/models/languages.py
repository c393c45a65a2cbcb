"""
Language catalog and the script-based detection heuristic.
"""

from dataclasses import dataclass
from typing import Dict, Optional

AUTO = "Auto"
FALLBACK_TARGET = "English"


@dataclass(frozen=True)
class Language:
    tag: str
    native_name: str
    iso_code: str


LANGUAGES = [
    Language("Japanese", "日本語", "ja"),
    Language("English", "English", "en"),
    Language("Chinese", "中文", "zh"),
    Language("Korean", "한국어", "ko"),
    Language("Spanish", "Español", "es"),
    Language("French", "Français", "fr"),
    Language("German", "Deutsch", "de"),
]

SUPPORTED_LANGUAGES = [language.tag for language in LANGUAGES]

_BY_TAG: Dict[str, Language] = {language.tag.lower(): language for language in LANGUAGES}
_BY_CODE: Dict[str, Language] = {language.iso_code: language for language in LANGUAGES}

# Frequent Chinese function characters that rarely appear in Japanese prose
_CHINESE_MARKERS = frozenset("的是在有了和")


def is_auto(tag: Optional[str]) -> bool:
    return tag is None or tag == AUTO


def normalize_language(value: str) -> str:
    """Map an ISO 639-1 code or a tag in any case onto the catalog tag.

    Unknown values are returned unchanged so callers can pass through
    languages the catalog does not list.
    """
    if not value:
        return value
    key = value.strip()
    if key == AUTO:
        return AUTO
    language = _BY_TAG.get(key.lower()) or _BY_CODE.get(key.lower().split("-")[0])
    return language.tag if language else key


def iso_code(tag: str) -> Optional[str]:
    language = _BY_TAG.get(tag.lower())
    return language.iso_code if language else None


def _is_kana(ch: str) -> bool:
    return "\u3040" <= ch <= "\u30ff"


def _is_cjk_ideograph(ch: str) -> bool:
    return "\u4e00" <= ch <= "\u9faf"


def _is_hangul(ch: str) -> bool:
    return "\uac00" <= ch <= "\ud7af"


def detect_script_language(text: str) -> str:
    """Guess the language of ``text`` from the scripts it uses."""
    has_kana = any(_is_kana(ch) for ch in text)
    has_ideographs = any(_is_cjk_ideograph(ch) for ch in text)

    if has_kana or has_ideographs:
        if not has_kana and any(ch in _CHINESE_MARKERS for ch in text):
            return "Chinese"
        return "Japanese"

    if any(_is_hangul(ch) for ch in text):
        return "Korean"

    return "English"
