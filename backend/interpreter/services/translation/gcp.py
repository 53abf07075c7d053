"""
GCP Translation Service

Google Cloud Translation (v3) implementation of TranslatorProtocol.
"""

import logging
import os
from typing import Optional, Set

from google.cloud import translate

from interpreter.config.constants import GCP_TRANSLATE_LOCATION
from interpreter.config.settings import settings
from interpreter.services.exceptions import TranslationUnavailable

logger = logging.getLogger(__name__)


class GCPTranslationService:
    """Handles translation operations."""

    def __init__(self, project_id: Optional[str] = None, location: str = GCP_TRANSLATE_LOCATION):
        self.project_id = project_id or settings.GOOGLE_PROJECT_ID
        if not self.project_id:
            raise RuntimeError(
                "GOOGLE_PROJECT_ID is not set. Please update backend/.env accordingly."
            )
        self.location = location
        self._ensure_credentials()
        self._client = translate.TranslationServiceClient()
        self._supported: Optional[Set[str]] = None

    @property
    def parent(self) -> str:
        return f"projects/{self.project_id}/locations/{self.location}"

    def _ensure_credentials(self):
        """Ensure Google credentials are set in environment."""
        if settings.GOOGLE_APPLICATION_CREDENTIALS and "GOOGLE_APPLICATION_CREDENTIALS" not in os.environ:
            creds_path = settings.GOOGLE_APPLICATION_CREDENTIALS
            if not os.path.exists(creds_path):
                possible_paths = [
                    os.path.join("interpreter", "config", os.path.basename(creds_path)),
                    os.path.join(os.getcwd(), "interpreter", "config", os.path.basename(creds_path))
                ]

                for path in possible_paths:
                    if os.path.exists(path):
                        creds_path = path
                        break

            os.environ["GOOGLE_APPLICATION_CREDENTIALS"] = creds_path

    def prepare(self, source_lang: str, target_lang: str) -> None:
        """Check that both languages are supported by the Translation API."""
        if self._supported is None:
            response = self._client.get_supported_languages(request={"parent": self.parent})
            self._supported = {lang.language_code.lower() for lang in response.languages}
            logger.info(f"[GCPTranslation] {len(self._supported)} supported languages")

        base_codes = {code.split("-")[0] for code in self._supported}
        for code in (source_lang, target_lang):
            if code.lower() not in self._supported and code.lower() not in base_codes:
                raise TranslationUnavailable(f"Language '{code}' is not supported by GCP Translation")

    def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        """Translate text from source to target language."""
        response = self._client.translate_text(
            request={
                "parent": self.parent,
                "contents": [text],
                "mime_type": "text/plain",
                "source_language_code": source_lang,
                "target_language_code": target_lang,
            }
        )

        if not response.translations:
            return ""

        return response.translations[0].translated_text
