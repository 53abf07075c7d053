"""
Session management module.

Provides the SessionController state machine and the InterpretationOrchestrator
that drives it from a WebSocket connection.
"""
from .controller import Session, SessionController, SessionState
from .orchestrator import InterpretationOrchestrator

__all__ = ["Session", "SessionController", "SessionState", "InterpretationOrchestrator"]
