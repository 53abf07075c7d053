"""
Translation Module

This module contains all translation-related services:
- Language: Supported languages with translator codes and speech locales
- TranslationGateway: Language preparation and pass-through-on-failure translation
- get_translator: Process-wide translator (GCP when configured, else None)

Usage:
    from interpreter.services.translation import TranslationGateway, Language, get_translator
"""

import logging
from typing import Optional

from interpreter.config.settings import settings
from interpreter.services.protocols import TranslatorProtocol
from interpreter.services.translation.gateway import TranslationGateway
from interpreter.services.translation.languages import Language

logger = logging.getLogger(__name__)

# Global translator instance (lazy initialization)
_translator: Optional[TranslatorProtocol] = None
_translator_resolved = False


def get_translator() -> Optional[TranslatorProtocol]:
    """
    Get or create the global translator.

    Returns None when no translation backend is configured; gateways built on
    None always pass the original text through.
    """
    global _translator, _translator_resolved
    if not _translator_resolved:
        _translator_resolved = True
        if settings.GOOGLE_PROJECT_ID:
            from interpreter.services.translation.gcp import GCPTranslationService

            try:
                _translator = GCPTranslationService()
            except Exception as e:
                logger.error(f"❌ Failed to initialize GCP translation: {e}")
        else:
            logger.info("GOOGLE_PROJECT_ID not set, translation disabled")
    return _translator


__all__ = [
    "Language",
    "TranslationGateway",
    "get_translator",
]
