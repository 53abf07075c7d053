"""
Session Controller - Recording lifecycle for the interpretation pipeline.

States:
    IDLE ──start──> ACTIVE ──stop──> FINALIZING ──drained──> IDLE
      ^                │                  │
      └─────clear──────┴──────clear───────┘

- start: cancel whatever the previous session still had in flight, stop the
  speech device, open a fresh Session (new finalizer, sequence back to 0,
  new dispatch queue)
- stop: refuse new snapshots, flush the last partial sentence, drain the queue
- clear: valid from any state; cancel without speaking what is pending

Snapshots arriving while not ACTIVE are dropped silently.

Usage:
    controller = SessionController(gateway, speech_output)
    await controller.start()
    await controller.on_snapshot("Hello there. How are")
    await controller.stop()
"""

import asyncio
import concurrent.futures
import logging
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from interpreter.config.constants import MIN_SENTENCE_LENGTH, UTTERANCE_ID_PREFIX
from interpreter.config.settings import settings
from interpreter.services.dispatch import OrderedDispatchQueue, SentenceResult
from interpreter.services.exceptions import InvalidSnapshot, SessionStateError
from interpreter.services.metrics import active_sessions_gauge, snapshots_dropped
from interpreter.services.segmentation import FinalizedSentence, SentenceFinalizer
from interpreter.services.speech.output import SpeechOutput
from interpreter.services.translation.gateway import TranslationGateway

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"
    FINALIZING = "finalizing"


StateCallback = Callable[[SessionState, Optional[str]], None]


@dataclass
class Session:
    """One recording: its segmentation state and its dispatch queue."""
    session_id: str
    finalizer: SentenceFinalizer
    dispatch: OrderedDispatchQueue
    state: SessionState = SessionState.ACTIVE
    started_at: float = field(default_factory=time.time)

    @property
    def next_sequence(self) -> int:
        return self.finalizer.next_sequence


class SessionController:
    """
    Coordinates start/stop/clear against concurrent snapshot updates.

    All coroutine methods must run on one event loop. Recognizer callbacks
    delivered on other threads go through on_snapshot_threadsafe().
    """

    def __init__(
        self,
        gateway: TranslationGateway,
        speech: SpeechOutput,
        *,
        max_concurrent_translations: int = settings.MAX_CONCURRENT_TRANSLATIONS,
        min_sentence_length: int = MIN_SENTENCE_LENGTH,
        on_sentence: Optional[Callable[[SentenceResult], None]] = None,
        on_status: Optional[Callable[[str], None]] = None,
        on_state_change: Optional[StateCallback] = None,
    ):
        self._gateway = gateway
        self._speech = speech
        self._max_concurrent_translations = max_concurrent_translations
        self._min_sentence_length = min_sentence_length
        self._on_sentence = on_sentence
        self._on_status = on_status
        self._on_state_change = on_state_change

        self._session: Optional[Session] = None
        self._state = SessionState.IDLE
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def session(self) -> Optional[Session]:
        return self._session

    async def start(self) -> Session:
        """Open a fresh session, cancelling anything left from the previous one."""
        self._loop = asyncio.get_running_loop()

        previous = self._session
        self._session = None
        if previous is not None:
            logger.info(f"[SessionController] Replacing session {previous.session_id}")
            await self._discard(previous)
        self._speech.stop()

        session_id = uuid.uuid4().hex[:8]
        dispatch = OrderedDispatchQueue(
            self._gateway,
            self._speech,
            max_concurrent_translations=self._max_concurrent_translations,
            utterance_prefix=f"{UTTERANCE_ID_PREFIX}-{session_id}",
            on_sentence=self._on_sentence,
            on_status=self._on_status,
        )
        session = Session(
            session_id=session_id,
            finalizer=SentenceFinalizer(self._min_sentence_length),
            dispatch=dispatch,
        )
        dispatch.start()

        self._session = session
        active_sessions_gauge.inc()
        self._set_state(SessionState.ACTIVE, session)
        logger.info(f"🎤 [SessionController] Session {session_id} started")
        return session

    async def on_snapshot(self, snapshot: str) -> List[FinalizedSentence]:
        """
        Feed a recognizer snapshot into the active session.

        Returns:
            Sentences finalized by this snapshot (empty when dropped)
        """
        try:
            session = self._active_session()
        except InvalidSnapshot as e:
            snapshots_dropped.inc()
            logger.debug(f"[SessionController] {e}")
            return []

        # No await between finalizing and submitting: sequence order is submit order
        sentences = session.finalizer.update(snapshot)
        for sentence in sentences:
            session.dispatch.submit(sentence)
        return sentences

    def on_snapshot_threadsafe(self, snapshot: str) -> concurrent.futures.Future:
        """Schedule on_snapshot() on the controller's loop from any thread."""
        if self._loop is None:
            raise SessionStateError("Controller has no event loop yet, call start() first")
        return asyncio.run_coroutine_threadsafe(self.on_snapshot(snapshot), self._loop)

    async def stop(self):
        """Flush the remaining text and speak everything pending."""
        session = self._session
        if session is None or self._state is not SessionState.ACTIVE:
            logger.debug(f"[SessionController] stop() ignored in state {self._state.value}")
            return

        self._set_state(SessionState.FINALIZING, session)
        for sentence in session.finalizer.flush():
            session.dispatch.submit(sentence)

        await session.dispatch.drain()

        # clear() or start() may have replaced the session while draining
        if self._session is session:
            self._session = None
            active_sessions_gauge.dec()
            self._set_state(SessionState.IDLE, session)
            logger.info(f"🛑 [SessionController] Session {session.session_id} finished")

    async def clear(self):
        """Discard the session without draining; stop speech immediately."""
        session = self._session
        self._session = None
        if session is not None:
            await self._discard(session)
            logger.info(f"🧹 [SessionController] Session {session.session_id} cleared")
        self._speech.stop()
        self._set_state(SessionState.IDLE, session)

    def stats(self) -> dict:
        session = self._session
        return {
            "state": self._state.value,
            "session_id": session.session_id if session else None,
            "next_sequence": session.next_sequence if session else 0,
            "dispatch": session.dispatch.stats() if session else None,
        }

    def _active_session(self) -> Session:
        session = self._session
        if session is None or self._state is not SessionState.ACTIVE:
            raise InvalidSnapshot(f"Snapshot dropped, session is {self._state.value}")
        return session

    async def _discard(self, session: Session):
        await session.dispatch.cancel()
        active_sessions_gauge.dec()

    def _set_state(self, state: SessionState, session: Optional[Session]):
        self._state = state
        if session is not None:
            session.state = state
        if self._on_state_change is not None:
            self._on_state_change(state, session.session_id if session else None)
