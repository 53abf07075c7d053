"""
WebSocket API module.

Provides the WebSocket router for real-time interpretation.
"""
from .router import router

__all__ = ["router"]
