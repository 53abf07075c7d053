"""
Dispatch Module

Carries finalized sentences through translation to speech, in order:
- DispatchTask / DispatchState: per-sentence lifecycle
- OrderedDispatchQueue: concurrent translation, single ordered speaker
- SentenceResult: per-sentence observability event

Usage:
    from interpreter.services.dispatch import OrderedDispatchQueue
"""

from interpreter.services.dispatch.task import DispatchState, DispatchTask, SentenceResult
from interpreter.services.dispatch.queue import OrderedDispatchQueue

__all__ = [
    "DispatchState",
    "DispatchTask",
    "SentenceResult",
    "OrderedDispatchQueue",
]
