"""
WebSocket Event Schemas

Pydantic models for type-safe WebSocket event handling on /ws/interpret.

Client -> server events carry recognizer snapshots, session commands and the
speech device's progress reports. Server -> client events are speech device
commands plus per-sentence and status notifications.
"""

from typing import Annotated, List, Literal, Optional, Union
from pydantic import BaseModel, Field, TypeAdapter


# =============================================================================
# Client -> Server Events
# =============================================================================

class WebSocketEventBase(BaseModel):
    """Base model for all WebSocket events."""
    type: str


class DeviceReadyEvent(WebSocketEventBase):
    """Client's speech engine is initialized; optional list of supported voices."""
    type: Literal["device_ready"] = "device_ready"
    voices: List[str] = Field(default_factory=list)


class SelectLanguageEvent(WebSocketEventBase):
    """Choose the translation target (empty = speak the original)."""
    type: Literal["select_language"] = "select_language"
    target_language: str = ""
    source_language: str = "en"


class StartEvent(WebSocketEventBase):
    """Recording started: open a fresh session."""
    type: Literal["start"] = "start"


class SnapshotEvent(WebSocketEventBase):
    """Full transcript so far, as produced by the recognizer."""
    type: Literal["snapshot"] = "snapshot"
    text: str


class StopEvent(WebSocketEventBase):
    """Recording stopped: flush the last sentence and drain."""
    type: Literal["stop"] = "stop"


class ClearEvent(WebSocketEventBase):
    """Discard the session without speaking what is pending."""
    type: Literal["clear"] = "clear"


class UtteranceEvent(WebSocketEventBase):
    """Speech device progress report for one utterance."""
    type: Literal["utterance"] = "utterance"
    utterance_id: str
    status: Literal["start", "done", "error"]


ClientEvent = Annotated[
    Union[
        DeviceReadyEvent,
        SelectLanguageEvent,
        StartEvent,
        SnapshotEvent,
        StopEvent,
        ClearEvent,
        UtteranceEvent,
    ],
    Field(discriminator="type"),
]

client_event_adapter = TypeAdapter(ClientEvent)


# =============================================================================
# Server -> Client Events
# =============================================================================

class SetVoiceCommand(WebSocketEventBase):
    type: Literal["set_voice"] = "set_voice"
    locale: str


class SpeakCommand(WebSocketEventBase):
    type: Literal["speak"] = "speak"
    utterance_id: str
    text: str


class StopSpeechCommand(WebSocketEventBase):
    type: Literal["stop_speech"] = "stop_speech"


class SentenceNotification(WebSocketEventBase):
    """A finalized sentence as it is handed to the speech device."""
    type: Literal["sentence"] = "sentence"
    original: str
    translated: Optional[str] = None
    sequence_number: int


class StatusNotification(WebSocketEventBase):
    type: Literal["status"] = "status"
    message: str


class SessionStateNotification(WebSocketEventBase):
    type: Literal["session_state"] = "session_state"
    state: str
    session_id: Optional[str] = None


class ErrorNotification(WebSocketEventBase):
    type: Literal["error"] = "error"
    detail: str
