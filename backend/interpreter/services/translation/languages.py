"""
Supported translation languages.

Each language carries the code the translator expects and the locale the
speech device should switch to when speaking translated text.
"""

from enum import Enum
from typing import Optional


class Language(Enum):
    """Language options: (display name, translation code, speech locale)."""

    NONE = ("None (Original)", "", "en-US")
    ENGLISH = ("English", "en", "en-US")
    SPANISH = ("Spanish (Español)", "es", "es")
    FRENCH = ("French (Français)", "fr", "fr")
    GERMAN = ("German (Deutsch)", "de", "de")
    ITALIAN = ("Italian (Italiano)", "it", "it")
    PORTUGUESE = ("Portuguese (Português)", "pt", "pt")
    CHINESE = ("Chinese Simplified (中文)", "zh", "zh-CN")
    JAPANESE = ("Japanese (日本語)", "ja", "ja")
    KOREAN = ("Korean (한국어)", "ko", "ko")
    ARABIC = ("Arabic (العربية)", "ar", "ar")
    RUSSIAN = ("Russian (Русский)", "ru", "ru")
    HINDI = ("Hindi (हिन्दी)", "hi", "hi")

    def __init__(self, display_name: str, code: str, locale: str):
        self.display_name = display_name
        self.code = code
        self.locale = locale

    @classmethod
    def from_code(cls, code: Optional[str]) -> "Language":
        """
        Look up a language by code or locale ("es", "es-ES", "ZH").

        Unknown or empty codes map to NONE.
        """
        if not code:
            return cls.NONE
        short = code.strip().lower()[:2]
        for language in cls:
            if language.code and language.code == short:
                return language
        return cls.NONE
