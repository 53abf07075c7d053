"""
Speech Output - Voice selection and utterance bookkeeping over a speech device.

SpeechOutput is the only object that talks to a SpeechDeviceProtocol. It:
- Switches the device voice only when the requested locale changes
- Refuses to speak when the device is not initialized (SpeechDeviceUnavailable)
- Tracks utterances between enqueue and the device's done/error events
- Reports human-readable status changes ("TTS: es") to an optional callback

Usage:
    output = SpeechOutput(device, on_status=print)
    output.ensure_voice("es")
    output.speak("Hola.", "utt-1")

    # wired to the device's progress events
    output.on_utterance_start("utt-1")
    output.on_utterance_done("utt-1")
"""

import logging
import threading
from typing import Callable, List, Optional

from interpreter.services.exceptions import SpeechDeviceUnavailable
from interpreter.services.metrics import utterances_total
from interpreter.services.protocols import SpeechDeviceProtocol

logger = logging.getLogger(__name__)

StatusCallback = Callable[[str], None]
UtteranceCallback = Callable[[str, str], None]  # (utterance_id, event)


class SpeechOutput:
    """
    Stateful wrapper around a speech output device.

    Thread-safe: device progress events may arrive from the device's own
    thread, so utterance bookkeeping is guarded by a lock.
    """

    def __init__(
        self,
        device: SpeechDeviceProtocol,
        on_status: Optional[StatusCallback] = None,
        on_utterance_event: Optional[UtteranceCallback] = None,
    ):
        self._device = device
        self._on_status = on_status
        self._on_utterance_event = on_utterance_event
        self._current_locale: Optional[str] = None
        self._pending: List[str] = []
        self._speaking: Optional[str] = None
        self._lock = threading.Lock()

    @property
    def device(self) -> SpeechDeviceProtocol:
        return self._device

    @property
    def current_locale(self) -> Optional[str]:
        return self._current_locale

    @property
    def speaking(self) -> Optional[str]:
        """Utterance id currently being rendered, if any."""
        with self._lock:
            return self._speaking

    @property
    def pending_utterances(self) -> List[str]:
        """Utterance ids enqueued and not yet done or failed."""
        with self._lock:
            return list(self._pending)

    def is_ready(self) -> bool:
        return self._device.is_ready()

    def ensure_voice(self, locale: str) -> bool:
        """
        Switch the device voice if it differs from the current one.

        Returns:
            False if the device is not ready or does not support the locale
        """
        if not self._device.is_ready():
            logger.warning("[SpeechOutput] Device not ready, cannot set voice")
            return False

        if locale == self._current_locale:
            return True

        if not self._device.set_voice(locale):
            logger.warning(f"[SpeechOutput] Voice {locale} not supported")
            self._status(f"TTS: {locale} not available")
            return False

        self._current_locale = locale
        logger.info(f"[SpeechOutput] Voice set to {locale}")
        self._status(f"TTS: {locale}")
        return True

    def speak(self, text: str, utterance_id: str):
        """
        Enqueue an utterance on the device.

        Raises:
            SpeechDeviceUnavailable: If the device is not initialized
        """
        if not self._device.is_ready():
            utterances_total.labels(outcome="dropped").inc()
            raise SpeechDeviceUnavailable(f"Speech device not ready, dropping {utterance_id}")

        logger.info(f"🔊 [SpeechOutput] {utterance_id}: '{text[:50]}'")
        with self._lock:
            self._pending.append(utterance_id)
        self._device.enqueue_utterance(text, utterance_id)
        utterances_total.labels(outcome="enqueued").inc()

    def stop(self):
        """Stop the current utterance and drop everything queued on the device."""
        with self._lock:
            dropped = len(self._pending)
            self._pending.clear()
            self._speaking = None
        self._device.stop()
        if dropped:
            logger.info(f"[SpeechOutput] Stopped, discarded {dropped} pending utterances")

    def reset_voice(self):
        """Forget the current voice so the next ensure_voice() always switches."""
        self._current_locale = None

    # ------------------------------------------------------------------
    # Device progress events
    # ------------------------------------------------------------------

    def on_utterance_start(self, utterance_id: str):
        with self._lock:
            self._speaking = utterance_id
        utterances_total.labels(outcome="started").inc()
        logger.debug(f"[SpeechOutput] Started: {utterance_id}")
        self._notify(utterance_id, "start")

    def on_utterance_done(self, utterance_id: str):
        self._finish(utterance_id)
        utterances_total.labels(outcome="done").inc()
        logger.debug(f"[SpeechOutput] Finished: {utterance_id}")
        self._notify(utterance_id, "done")

    def on_utterance_error(self, utterance_id: str):
        self._finish(utterance_id)
        utterances_total.labels(outcome="error").inc()
        logger.error(f"[SpeechOutput] Error: {utterance_id}")
        self._notify(utterance_id, "error")

    def _finish(self, utterance_id: str):
        with self._lock:
            if utterance_id in self._pending:
                self._pending.remove(utterance_id)
            if self._speaking == utterance_id:
                self._speaking = None

    def _notify(self, utterance_id: str, event: str):
        if self._on_utterance_event is not None:
            self._on_utterance_event(utterance_id, event)

    def _status(self, message: str):
        if self._on_status is not None:
            self._on_status(message)
