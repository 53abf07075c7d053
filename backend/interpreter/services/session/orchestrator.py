import asyncio
import json
import logging
from typing import Optional, Set

from fastapi import WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from interpreter.config.settings import settings
from interpreter.schemas.events import (
    ClearEvent,
    DeviceReadyEvent,
    ErrorNotification,
    SelectLanguageEvent,
    SentenceNotification,
    SessionStateNotification,
    SnapshotEvent,
    StartEvent,
    StatusNotification,
    StopEvent,
    UtteranceEvent,
    client_event_adapter,
)
from interpreter.services.dispatch import SentenceResult
from interpreter.services.protocols import TranslatorProtocol
from interpreter.services.session.controller import SessionController, SessionState
from interpreter.services.speech import SpeechOutput, WebSocketSpeechDevice
from interpreter.services.translation import Language, TranslationGateway

logger = logging.getLogger(__name__)

# Orchestrators with an open connection, for health reporting
_active_orchestrators: Set["InterpretationOrchestrator"] = set()


def get_active_connection_count() -> int:
    return len(_active_orchestrators)


def get_active_session_count() -> int:
    return sum(1 for o in _active_orchestrators if o.controller.state is not SessionState.IDLE)


class InterpretationOrchestrator:
    """
    Orchestrates one /ws/interpret connection.
    Handles:
    - Wiring recognizer snapshots into a SessionController
    - Using the client as the speech output device
    - Out-of-band language preparation
    - Cleanup on disconnect
    """

    def __init__(self, websocket: WebSocket, translator: Optional[TranslatorProtocol] = None):
        self.websocket = websocket
        self.device = WebSocketSpeechDevice(websocket)
        self.gateway = TranslationGateway(
            translator,
            timeout_sec=settings.TRANSLATION_TIMEOUT_SEC,
            max_concurrent_translations=settings.MAX_CONCURRENT_TRANSLATIONS,
        )
        self.speech = SpeechOutput(self.device, on_status=self._send_status)
        self.controller = SessionController(
            self.gateway,
            self.speech,
            max_concurrent_translations=settings.MAX_CONCURRENT_TRANSLATIONS,
            on_sentence=self._send_sentence,
            on_status=self._send_status,
            on_state_change=self._send_state,
        )
        self._background: Set[asyncio.Task] = set()

    async def run(self):
        """
        Main entry point for handling a WebSocket connection.
        """
        await self.websocket.accept()
        self.device.start()
        _active_orchestrators.add(self)
        logger.info("[Orchestrator] Client connected")

        if settings.TARGET_LANGUAGE:
            self._spawn(self._select_language(SelectLanguageEvent(
                target_language=settings.TARGET_LANGUAGE,
                source_language=settings.SOURCE_LANGUAGE,
            )))

        try:
            await self._message_loop()
        except WebSocketDisconnect:
            logger.info("[Orchestrator] Client disconnected")
        except Exception as e:
            logger.error(f"[Orchestrator] Error during message loop: {e}")
        finally:
            await self._cleanup()

    async def _message_loop(self):
        while True:
            raw = await self.websocket.receive_text()
            try:
                event = client_event_adapter.validate_python(json.loads(raw))
            except (json.JSONDecodeError, ValidationError) as e:
                logger.warning(f"[Orchestrator] Invalid client event: {e}")
                self.device.send(ErrorNotification(detail=f"Invalid event: {raw[:100]}"))
                continue
            await self._handle_event(event)

    async def _handle_event(self, event):
        if isinstance(event, SnapshotEvent):
            await self.controller.on_snapshot(event.text)
        elif isinstance(event, UtteranceEvent):
            self._handle_utterance(event)
        elif isinstance(event, StartEvent):
            await self.controller.start()
        elif isinstance(event, StopEvent):
            # Drain in the background so clear/utterance events are still read
            self._spawn(self.controller.stop())
        elif isinstance(event, ClearEvent):
            await self.controller.clear()
        elif isinstance(event, SelectLanguageEvent):
            self._spawn(self._select_language(event))
        elif isinstance(event, DeviceReadyEvent):
            self.device.mark_ready(event.voices)
            self.speech.reset_voice()
            self._send_status("TTS ready")
            if self.gateway.is_enabled():
                self.speech.ensure_voice(self.gateway.target_locale)

    def _handle_utterance(self, event: UtteranceEvent):
        if event.status == "start":
            self.speech.on_utterance_start(event.utterance_id)
        elif event.status == "done":
            self.speech.on_utterance_done(event.utterance_id)
        else:
            self.speech.on_utterance_error(event.utterance_id)

    async def _select_language(self, event: SelectLanguageEvent):
        target = Language.from_code(event.target_language)
        if target is Language.NONE and event.target_language:
            self.device.send(ErrorNotification(detail=f"Unsupported language: {event.target_language}"))
            return

        source = Language.from_code(event.source_language)
        if source is Language.NONE:
            source = Language.ENGLISH

        ready = await self.gateway.select_language(target, source, on_progress=self._send_status)
        if ready and self.gateway.is_enabled() and self.speech.is_ready():
            self.speech.ensure_voice(self.gateway.target_locale)

    def _spawn(self, coro):
        task = asyncio.create_task(coro)
        self._background.add(task)
        task.add_done_callback(self._on_background_done)

    def _on_background_done(self, task: asyncio.Task):
        self._background.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"[Orchestrator] Background task failed: {error}", exc_info=error)
            self.device.send(ErrorNotification(detail=f"Internal error: {error}"))

    async def _cleanup(self):
        _active_orchestrators.discard(self)
        for task in list(self._background):
            task.cancel()
        if self._background:
            await asyncio.gather(*self._background, return_exceptions=True)
        await self.controller.clear()
        self.gateway.close()
        await self.device.close()
        logger.info("[Orchestrator] Connection cleaned up")

    # ------------------------------------------------------------------
    # Outbound notifications
    # ------------------------------------------------------------------

    def _send_sentence(self, result: SentenceResult):
        self.device.send(SentenceNotification(
            original=result.original,
            translated=result.translated,
            sequence_number=result.sequence_number,
        ))

    def _send_status(self, message: str):
        self.device.send(StatusNotification(message=message))

    def _send_state(self, state: SessionState, session_id: Optional[str]):
        self.device.send(SessionStateNotification(state=state.value, session_id=session_id))
