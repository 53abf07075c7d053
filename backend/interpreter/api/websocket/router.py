"""
WebSocket Router - Real-time Interpretation Endpoint

This is the thin routing layer that delegates to InterpretationOrchestrator
for all WebSocket session management.
"""
from fastapi import APIRouter, WebSocket

from interpreter.services.session import InterpretationOrchestrator
from interpreter.services.translation import get_translator

router = APIRouter()


@router.websocket("/ws/interpret")
async def ws_endpoint(websocket: WebSocket):
    """
    WebSocket endpoint for simultaneous interpretation.

    The client is both the recognizer (it sends transcript snapshots) and the
    speech output device (it renders speak commands and reports progress).

    Client Message Types (JSON):
        - device_ready: Speech engine initialized, optional supported voices
        - select_language: Prepare a translation target (out of band)
        - start / stop / clear: Recording lifecycle
        - snapshot: Full transcript so far
        - utterance: start/done/error progress for an utterance id

    Server Message Types (JSON):
        - set_voice, speak, stop_speech: Speech device commands
        - sentence: Finalized sentence with its translation
        - status, session_state, error: Notifications
    """
    orchestrator = InterpretationOrchestrator(websocket, translator=get_translator())
    await orchestrator.run()
