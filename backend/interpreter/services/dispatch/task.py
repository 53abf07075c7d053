"""
Dispatch task model.

A DispatchTask carries one FinalizedSentence through
PENDING -> TRANSLATING -> TRANSLATED (or FAILED) -> SPOKEN.
"""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from interpreter.services.segmentation.finalizer import FinalizedSentence


class DispatchState(str, Enum):
    PENDING = "pending"
    TRANSLATING = "translating"
    TRANSLATED = "translated"
    SPOKEN = "spoken"
    FAILED = "failed"


@dataclass
class DispatchTask:
    """
    Transient per-sentence work item owned by the dispatch queue.

    Attributes:
        sentence: The finalized sentence being processed
        state: Current position in the task lifecycle
        translated_text: Text to speak (the original on pass-through)
        translation_applied: Whether a translator was active for this sentence
        voice_locale: Speech locale to switch to before speaking, if translated
        error: Description of the failure that forced pass-through, if any
        translation: The asyncio task producing translated_text
    """
    sentence: FinalizedSentence
    state: DispatchState = DispatchState.PENDING
    translated_text: Optional[str] = None
    translation_applied: bool = False
    voice_locale: Optional[str] = None
    error: Optional[str] = None
    translation: Optional[asyncio.Task] = field(default=None, repr=False)

    @property
    def sequence_number(self) -> int:
        return self.sentence.sequence_number

    @property
    def text_to_speak(self) -> str:
        return self.translated_text or self.sentence.text


@dataclass(frozen=True)
class SentenceResult:
    """Per-sentence observability event, emitted when a sentence is spoken."""
    original: str
    translated: Optional[str]
    sequence_number: int
    utterance_id: str
