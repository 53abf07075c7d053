"""
Ordered Dispatch Queue - Concurrent translation, strictly ordered speech.

Finalized sentences arrive in sequence order. Each one starts translating as
soon as it is submitted (bounded by a semaphore), but a single consumer task
speaks them strictly in submission order: a slow translation holds back every
later sentence, never the other way round.

Architecture:
    submit(#1) ─> translate #1 ─┐
    submit(#2) ─> translate #2 ─┼─> FIFO of tasks ─> consumer ─> set_voice? ─> speak
    submit(#3) ─> translate #3 ─┘     (awaits each task's translation in order)

Failure policy:
- Translation failure, timeout or a disabled translator: pass-through text
- Unexpected error inside the translation step: task FAILED, pass-through text,
  still spoken in order
- Speech device not ready: utterance dropped, status reported, queue continues

Usage:
    queue = OrderedDispatchQueue(gateway, speech_output, max_concurrent_translations=4)
    queue.start()
    for sentence in finalizer.update(snapshot):
        queue.submit(sentence)
    await queue.drain()
"""

import asyncio
import logging
from typing import Callable, Optional, Set

from interpreter.config.constants import DEFAULT_MAX_CONCURRENT_TRANSLATIONS, UTTERANCE_ID_PREFIX
from interpreter.services.dispatch.task import DispatchState, DispatchTask, SentenceResult
from interpreter.services.exceptions import SessionStateError, SpeechDeviceUnavailable
from interpreter.services.metrics import translations_total
from interpreter.services.segmentation.finalizer import FinalizedSentence
from interpreter.services.speech.output import SpeechOutput
from interpreter.services.translation.gateway import TranslationGateway

logger = logging.getLogger(__name__)

SentenceCallback = Callable[[SentenceResult], None]
StatusCallback = Callable[[str], None]


class OrderedDispatchQueue:
    """
    Per-session queue between asynchronous translation and ordered speech.

    Must be used from a single event loop. The consumer task is the only code
    path that calls SpeechOutput.speak().
    """

    def __init__(
        self,
        gateway: TranslationGateway,
        speech: SpeechOutput,
        *,
        max_concurrent_translations: int = DEFAULT_MAX_CONCURRENT_TRANSLATIONS,
        utterance_prefix: str = UTTERANCE_ID_PREFIX,
        on_sentence: Optional[SentenceCallback] = None,
        on_status: Optional[StatusCallback] = None,
    ):
        self._gateway = gateway
        self._speech = speech
        self._semaphore = asyncio.Semaphore(max(1, max_concurrent_translations))
        self._utterance_prefix = utterance_prefix
        self._on_sentence = on_sentence
        self._on_status = on_status

        self._queue: asyncio.Queue = asyncio.Queue()
        self._consumer: Optional[asyncio.Task] = None
        self._translations: Set[asyncio.Task] = set()
        self._last_sequence: Optional[int] = None
        self._draining = False
        self._closed = False

        self._submitted = 0
        self._spoken = 0
        self._dropped = 0

    @property
    def is_running(self) -> bool:
        return self._consumer is not None and not self._consumer.done()

    @property
    def pending(self) -> int:
        """Sentences submitted but not yet spoken or dropped."""
        if self._closed:
            return 0
        return self._submitted - self._spoken - self._dropped

    def start(self):
        """Start the ordered consumer task."""
        if self._closed:
            raise SessionStateError("Dispatch queue was cancelled")
        if self._consumer is None:
            self._consumer = asyncio.create_task(self._run())

    def submit(self, sentence: FinalizedSentence) -> DispatchTask:
        """
        Accept a finalized sentence and start its translation immediately.

        Raises:
            SessionStateError: If the queue is draining or cancelled
            ValueError: If sequence numbers are not strictly increasing
        """
        if self._closed or self._draining:
            raise SessionStateError(
                f"Dispatch queue no longer accepts sentences (#{sentence.sequence_number})"
            )
        if self._last_sequence is not None and sentence.sequence_number <= self._last_sequence:
            raise ValueError(
                f"Sentence #{sentence.sequence_number} submitted after #{self._last_sequence}"
            )
        self._last_sequence = sentence.sequence_number

        task = DispatchTask(sentence=sentence)
        task.translation = asyncio.create_task(self._translate(task))
        self._translations.add(task.translation)
        task.translation.add_done_callback(self._translations.discard)

        self._queue.put_nowait(task)
        self._submitted += 1
        logger.debug(f"[DispatchQueue] Submitted #{sentence.sequence_number}: '{sentence.text[:40]}'")
        return task

    async def drain(self):
        """Speak everything submitted so far, then stop the consumer."""
        if self._consumer is None or self._consumer.done():
            return
        if not self._draining:
            self._draining = True
            self._queue.put_nowait(None)
        await asyncio.wait({self._consumer})
        logger.info(f"[DispatchQueue] Drained ({self._spoken} spoken, {self._dropped} dropped)")

    async def cancel(self):
        """
        Discard everything pending without speaking it.

        Outstanding translations are cancelled; results that arrive late are
        ignored and no further speak calls are made.
        """
        if self._closed:
            return
        self._closed = True

        tasks = list(self._translations)
        if self._consumer is not None and not self._consumer.done():
            tasks.append(self._consumer)
        for task in tasks:
            task.cancel()

        discarded = 0
        while not self._queue.empty():
            if self._queue.get_nowait() is not None:
                discarded += 1

        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        logger.info(
            f"[DispatchQueue] Cancelled ({len(tasks)} tasks stopped, {discarded} queued sentences discarded)"
        )

    def stats(self) -> dict:
        return {
            "submitted": self._submitted,
            "spoken": self._spoken,
            "dropped": self._dropped,
            "pending": self.pending,
            "translating": len(self._translations),
        }

    async def _translate(self, task: DispatchTask):
        async with self._semaphore:
            task.state = DispatchState.TRANSLATING
            text = task.sentence.text
            try:
                task.translation_applied = self._gateway.is_enabled()
                if task.translation_applied:
                    task.voice_locale = self._gateway.target_locale
                task.translated_text = await self._gateway.translate(text)
                task.state = DispatchState.TRANSLATED
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.exception(f"[DispatchQueue] Translation step failed for #{task.sequence_number}")
                translations_total.labels(status="failed_task").inc()
                task.translated_text = text
                task.error = str(e)
                task.state = DispatchState.FAILED

    async def _run(self):
        logger.debug("[DispatchQueue] Consumer started")
        while True:
            task = await self._queue.get()
            if task is None:
                break
            await task.translation
            if self._closed:
                break
            self._speak(task)
        logger.debug("[DispatchQueue] Consumer stopped")

    def _speak(self, task: DispatchTask):
        utterance_id = f"{self._utterance_prefix}-{task.sequence_number}"
        text = task.text_to_speak

        try:
            if task.translation_applied and task.voice_locale:
                self._speech.ensure_voice(task.voice_locale)
            self._speech.speak(text, utterance_id)
        except SpeechDeviceUnavailable as e:
            logger.warning(f"[DispatchQueue] {e}")
            self._dropped += 1
            self._status("TTS not ready")
            return
        except Exception:
            logger.exception(f"[DispatchQueue] Failed to speak #{task.sequence_number}")
            self._dropped += 1
            return

        task.state = DispatchState.SPOKEN
        self._spoken += 1

        if self._on_sentence is not None:
            result = SentenceResult(
                original=task.sentence.text,
                translated=task.translated_text if task.translation_applied else None,
                sequence_number=task.sequence_number,
                utterance_id=utterance_id,
            )
            try:
                self._on_sentence(result)
            except Exception:
                logger.exception("[DispatchQueue] Sentence callback failed")

    def _status(self, message: str):
        if self._on_status is not None:
            self._on_status(message)
