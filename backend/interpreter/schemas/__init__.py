"""
Schemas Package

Pydantic models for WebSocket events.
"""

from interpreter.schemas.events import (
    WebSocketEventBase,
    DeviceReadyEvent,
    SelectLanguageEvent,
    StartEvent,
    SnapshotEvent,
    StopEvent,
    ClearEvent,
    UtteranceEvent,
    ClientEvent,
    SetVoiceCommand,
    SpeakCommand,
    StopSpeechCommand,
    SentenceNotification,
    StatusNotification,
    SessionStateNotification,
    ErrorNotification,
)

__all__ = [
    "WebSocketEventBase",
    "DeviceReadyEvent",
    "SelectLanguageEvent",
    "StartEvent",
    "SnapshotEvent",
    "StopEvent",
    "ClearEvent",
    "UtteranceEvent",
    "ClientEvent",
    "SetVoiceCommand",
    "SpeakCommand",
    "StopSpeechCommand",
    "SentenceNotification",
    "StatusNotification",
    "SessionStateNotification",
    "ErrorNotification",
]
