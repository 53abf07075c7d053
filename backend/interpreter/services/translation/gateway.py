"""
Translation Gateway - Language selection, preparation and fault-tolerant translation.

Wraps a blocking TranslatorProtocol implementation for use from asyncio:
- select_language() performs the one-time "ensure ready" step per language pair
- translate() runs the translator in the gateway's own thread pool under a timeout.
  A timed-out call keeps its worker until the backend returns, so at most
  max_concurrent_translations backend calls are ever outstanding
- Every failure mode (disabled, error, timeout, empty result) degrades to
  pass-through: the original text is returned and the caller keeps going

Usage:
    gateway = TranslationGateway(get_translator(), timeout_sec=5.0)
    await gateway.select_language(Language.SPANISH)

    text_to_speak = await gateway.translate("Hello there.")
"""

import asyncio
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, Optional, Set, Tuple

from interpreter.config.constants import (
    DEFAULT_MAX_CONCURRENT_TRANSLATIONS,
    DEFAULT_SPEECH_LOCALE,
    DEFAULT_TRANSLATION_TIMEOUT_SEC,
)
from interpreter.services.exceptions import TranslationFailure, TranslationUnavailable
from interpreter.services.metrics import translation_latency, translations_total
from interpreter.services.protocols import TranslatorProtocol
from interpreter.services.translation.languages import Language

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]


class TranslationGateway:
    """
    Async front for a blocking translator.

    The gateway is shared by every session of a connection; the active
    language pair is read once per sentence when its translation starts.
    """

    def __init__(
        self,
        translator: Optional[TranslatorProtocol],
        *,
        timeout_sec: float = DEFAULT_TRANSLATION_TIMEOUT_SEC,
        max_concurrent_translations: int = DEFAULT_MAX_CONCURRENT_TRANSLATIONS,
    ):
        self._translator = translator
        self._timeout_sec = timeout_sec
        self._executor = ThreadPoolExecutor(
            max_workers=max(1, max_concurrent_translations), thread_name_prefix="translate"
        )
        self._source = Language.ENGLISH
        self._target = Language.NONE
        self._ready_pairs: Set[Tuple[str, str]] = set()
        self._prepare_locks: Dict[Tuple[str, str], asyncio.Lock] = {}
        self._selection = 0

    @property
    def current_language(self) -> Language:
        return self._target

    @property
    def source_language(self) -> Language:
        return self._source

    @property
    def target_locale(self) -> str:
        """Speech locale matching the current target language."""
        if self._target is Language.NONE:
            return DEFAULT_SPEECH_LOCALE
        return self._target.locale

    def is_enabled(self) -> bool:
        """Whether translate() will actually call the translator."""
        if self._translator is None or self._target is Language.NONE:
            return False
        if self._source is self._target:
            return False
        return (self._source.code, self._target.code) in self._ready_pairs

    def close(self):
        """Release the translation workers; queued calls that never started are dropped."""
        self._executor.shutdown(wait=False, cancel_futures=True)

    async def select_language(
        self,
        target: Language,
        source: Language = Language.ENGLISH,
        on_progress: Optional[ProgressCallback] = None,
    ) -> bool:
        """
        Select and prepare the active language pair.

        Translation is disabled while preparation runs, so sentences finalized
        in the meantime are spoken untranslated.

        Args:
            target: Language to translate into (NONE disables translation)
            source: Language of the transcript
            on_progress: Optional status callback ("Preparing...", "Translation ready")

        Returns:
            True if the selection is active, False if preparation failed
            or a newer selection superseded this one
        """
        progress = on_progress or (lambda message: None)
        self._selection += 1
        generation = self._selection

        if target is Language.NONE:
            self._target = Language.NONE
            logger.info("[TranslationGateway] Translation disabled")
            return True

        if source is target:
            self._source, self._target = source, target
            logger.info(
                f"[TranslationGateway] Source and target are both {source.display_name}, "
                f"no translation needed"
            )
            return True

        if self._translator is None:
            self._target = Language.NONE
            logger.warning("[TranslationGateway] No translator configured, speaking original text")
            progress("Translation unavailable")
            return False

        # Disable until the new pair is ready
        self._target = Language.NONE

        try:
            await self._ensure_ready(source, target, progress)
        except TranslationUnavailable as e:
            logger.error(f"[TranslationGateway] {e}")
            if generation == self._selection:
                self._source, self._target = Language.ENGLISH, Language.NONE
            progress(f"Translation unavailable: {target.display_name}")
            return False

        if generation != self._selection:
            logger.debug(f"[TranslationGateway] Selection of {target.display_name} superseded")
            return False

        self._source, self._target = source, target
        logger.info(f"[TranslationGateway] Ready: {source.display_name} -> {target.display_name}")
        progress("Translation ready")
        return True

    async def _ensure_ready(self, source: Language, target: Language, progress: ProgressCallback):
        pair = (source.code, target.code)
        lock = self._prepare_locks.setdefault(pair, asyncio.Lock())

        async with lock:
            if pair in self._ready_pairs:
                logger.debug(f"[TranslationGateway] Pair {pair} already prepared")
                return

            progress("Preparing translation model...")
            loop = asyncio.get_running_loop()
            try:
                await loop.run_in_executor(None, self._translator.prepare, source.code, target.code)
            except Exception as e:
                raise TranslationUnavailable(
                    f"Could not prepare {source.code} -> {target.code}: {e}"
                ) from e

            self._ready_pairs.add(pair)

    async def translate(self, text: str) -> str:
        """
        Translate text into the current target language.

        Returns:
            Translated text, or the original text if translation is disabled,
            fails, or times out
        """
        if not text:
            return text

        if not self.is_enabled():
            translations_total.labels(status="disabled").inc()
            return text

        try:
            translation = await self.translate_or_raise(text)
        except TranslationFailure as e:
            logger.warning(f"[TranslationGateway] {e}, using original text")
            return text

        translations_total.labels(status="success").inc()
        return translation

    async def translate_or_raise(self, text: str) -> str:
        """
        Translate text, raising TranslationFailure instead of degrading.

        Raises:
            TranslationFailure: On translator error, timeout or empty result
        """
        source, target = self._source, self._target
        language_pair = f"{source.code}-{target.code}"
        loop = asyncio.get_running_loop()
        start_time = time.monotonic()

        try:
            translation = await asyncio.wait_for(
                loop.run_in_executor(
                    self._executor, self._translator.translate, text, source.code, target.code
                ),
                timeout=self._timeout_sec,
            )
        except asyncio.TimeoutError as e:
            translations_total.labels(status="timeout").inc()
            raise TranslationFailure(
                f"Translation timed out after {self._timeout_sec}s: '{text[:30]}'"
            ) from e
        except Exception as e:
            translations_total.labels(status="error").inc()
            raise TranslationFailure(f"Translation error for '{text[:30]}': {e}") from e
        finally:
            translation_latency.labels(language_pair=language_pair).observe(
                time.monotonic() - start_time
            )

        if not translation:
            translations_total.labels(status="error").inc()
            raise TranslationFailure(f"Empty translation for '{text[:30]}'")

        logger.debug(f"[TranslationGateway] [{language_pair}] '{text[:30]}' -> '{translation[:30]}'")
        return translation
