"""
Speech device implementations.

- WebSocketSpeechDevice: the connected client renders audio. All server -> client
  messages go through one FIFO writer task, so speak commands and sentence
  notifications reach the client in the order they were issued.
- LoggingSpeechDevice: logs utterances instead of rendering them (replay script).
"""

import asyncio
import logging
from typing import List, Optional, Set, Tuple

from fastapi import WebSocket
from pydantic import BaseModel

from interpreter.config.constants import (
    WEBSOCKET_OUTBOUND_QUEUE_SIZE,
    WEBSOCKET_WRITER_SHUTDOWN_TIMEOUT_SEC,
)
from interpreter.schemas.events import SetVoiceCommand, SpeakCommand, StopSpeechCommand
from interpreter.services.exceptions import SpeechDeviceUnavailable

logger = logging.getLogger(__name__)


class WebSocketSpeechDevice:
    """Speech device backed by a WebSocket client."""

    def __init__(self, websocket: WebSocket, max_queue: int = WEBSOCKET_OUTBOUND_QUEUE_SIZE):
        self._websocket = websocket
        self._outbound: asyncio.Queue = asyncio.Queue(maxsize=max_queue)
        self._writer: Optional[asyncio.Task] = None
        self._ready = False
        self._closed = False
        self._voices: Optional[Set[str]] = None

    def start(self):
        """Start the outbound writer task."""
        if self._writer is None:
            self._writer = asyncio.create_task(self._run_writer())

    async def close(self):
        """Flush queued messages and stop the writer."""
        self._closed = True
        if self._writer is None:
            return
        try:
            self._outbound.put_nowait(None)
        except asyncio.QueueFull:
            self._writer.cancel()
        try:
            await asyncio.wait_for(self._writer, timeout=WEBSOCKET_WRITER_SHUTDOWN_TIMEOUT_SEC)
        except (asyncio.TimeoutError, asyncio.CancelledError):
            pass
        self._writer = None

    def mark_ready(self, voices: List[str]):
        """Client reported its speech engine initialized."""
        self._ready = True
        self._voices = {v.lower() for v in voices} if voices else None
        logger.info(f"[WebSocketSpeechDevice] Ready (voices: {sorted(self._voices) if self._voices else 'any'})")

    def is_ready(self) -> bool:
        return self._ready and not self._closed

    def supports(self, locale: str) -> bool:
        if self._voices is None:
            return True
        locale = locale.lower()
        return locale in self._voices or locale.split("-")[0] in self._voices

    def set_voice(self, locale: str) -> bool:
        if not self.supports(locale):
            return False
        self.send(SetVoiceCommand(locale=locale))
        return True

    def enqueue_utterance(self, text: str, utterance_id: str):
        if not self.send(SpeakCommand(utterance_id=utterance_id, text=text)):
            raise SpeechDeviceUnavailable(f"Outbound queue unavailable, dropping {utterance_id}")

    def stop(self):
        self.send(StopSpeechCommand())

    def send(self, event: BaseModel) -> bool:
        """Queue an event for the client. Returns False if it was dropped."""
        if self._closed:
            return False
        try:
            self._outbound.put_nowait(event.model_dump())
        except asyncio.QueueFull:
            logger.warning(f"[WebSocketSpeechDevice] Outbound queue full, dropping {event.type}")
            return False
        return True

    async def _run_writer(self):
        while True:
            message = await self._outbound.get()
            if message is None:
                break
            try:
                await self._websocket.send_json(message)
            except Exception as e:
                logger.warning(f"[WebSocketSpeechDevice] Send failed, closing writer: {e}")
                self._closed = True
                break


class LoggingSpeechDevice:
    """Speech device that logs utterances; always ready."""

    def __init__(self, voices: Optional[List[str]] = None):
        self._voices = set(voices) if voices else None
        self.locale: Optional[str] = None
        self.spoken: List[Tuple[str, str, Optional[str]]] = []

    def is_ready(self) -> bool:
        return True

    def set_voice(self, locale: str) -> bool:
        if self._voices is not None and locale not in self._voices:
            return False
        self.locale = locale
        return True

    def enqueue_utterance(self, text: str, utterance_id: str):
        self.spoken.append((utterance_id, text, self.locale))
        logger.info(f"🔊 [{self.locale or 'default'}] {utterance_id}: {text}")

    def stop(self):
        logger.info("🛑 Speech stopped")
