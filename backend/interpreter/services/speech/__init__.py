"""
Speech output module.

Provides SpeechOutput (voice switching, utterance tracking) and the speech
devices it can drive.
"""
from .output import SpeechOutput
from .devices import LoggingSpeechDevice, WebSocketSpeechDevice

__all__ = ["SpeechOutput", "LoggingSpeechDevice", "WebSocketSpeechDevice"]
