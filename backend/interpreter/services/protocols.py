"""
Protocol definitions for the interpreter's external collaborators.

This module defines interfaces (Python Protocols) that allow:
- Swapping implementations (e.g., GCP -> local model -> pass-through)
- Testing without real API credentials or audio hardware
- Clear contracts between the core and its collaborators

Usage:
    from interpreter.services.protocols import TranslatorProtocol

    def interpret(translator: TranslatorProtocol, text: str):
        translator.prepare("en", "es")
        return translator.translate(text, "en", "es")
"""

from typing import Protocol


class TranslatorProtocol(Protocol):
    """
    Interface for translation engines.

    Both methods are blocking; the core runs them in a thread pool.
    """

    def prepare(self, source_lang: str, target_lang: str) -> None:
        """
        Make a language pair ready for translation (model/resource preparation).

        Called once per language pair before the first translate() call.

        Args:
            source_lang: Source language code (e.g., "en")
            target_lang: Target language code (e.g., "es")

        Raises:
            Exception: If the pair cannot be prepared
        """
        ...

    def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        """
        Translate text from source to target language.

        Args:
            text: Text to translate
            source_lang: Source language code (e.g., "en")
            target_lang: Target language code (e.g., "es")

        Returns:
            Translated text
        """
        ...


class SpeechDeviceProtocol(Protocol):
    """
    Interface for speech output devices.

    The device renders utterances in the order enqueue_utterance() is called
    and reports progress through the SpeechOutput event callbacks.
    """

    def is_ready(self) -> bool:
        """Whether the device is initialized and can accept utterances."""
        ...

    def set_voice(self, locale: str) -> bool:
        """
        Switch the output voice.

        Args:
            locale: BCP-47 locale (e.g., "es", "zh-CN")

        Returns:
            False if the locale is not supported by the device
        """
        ...

    def enqueue_utterance(self, text: str, utterance_id: str) -> None:
        """Append an utterance to the device's FIFO playback queue."""
        ...

    def stop(self) -> None:
        """Stop the current utterance and clear the playback queue."""
        ...
