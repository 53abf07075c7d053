"""
Sentence Finalizer - Incremental sentence segmentation over revisable snapshots.

The recognizer delivers a replaceable snapshot of everything transcribed so far
on each update, and may rewrite earlier text between updates. The finalizer
keeps one SegmentationState per session and turns that stream into an ordered
sequence of FinalizedSentence values.

Flow:
    snapshot N-1 ─┐
                  ├─> stable prefix ─> scan for . ? ! ─> FinalizedSentence(seq)
    snapshot N  ──┘                      │
                                         └─> eager tail (ends with . ? !)

Rules:
- Sentence boundaries are only taken from the stable prefix of two consecutive
  snapshots.
- A trailing sentence that already ends with terminal punctuation is finalized
  eagerly, even beyond the stable prefix. It is never retracted if a later
  snapshot revises it.
- flush() finalizes whatever remains when recording stops.

Usage:
    finalizer = SentenceFinalizer()
    for sentence in finalizer.update(snapshot):
        dispatch_queue.submit(sentence)
"""

import logging
import threading
from dataclasses import dataclass, replace
from typing import List

from interpreter.config.constants import MIN_SENTENCE_LENGTH, SENTENCE_ENDINGS
from interpreter.services.metrics import sentences_finalized
from interpreter.services.segmentation.diff import stable_prefix_length

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FinalizedSentence:
    """
    A sentence ready for translation and speech.

    Attributes:
        text: Trimmed sentence text (terminal punctuation included)
        sequence_number: Monotonic counter, the sole ordering key for output
    """
    text: str
    sequence_number: int


@dataclass
class SegmentationState:
    """
    Mutable segmentation state, owned by a single SentenceFinalizer.

    Invariant: 0 <= processed_offset <= len(previous_snapshot)
    """
    previous_snapshot: str = ""
    processed_offset: int = 0


class SentenceFinalizer:
    """
    Turns successive transcript snapshots into finalized sentences.

    Thread-safe: every operation runs under one lock, so recognizer callbacks
    delivered from arbitrary threads are serialized. The critical section never
    blocks on I/O.
    """

    def __init__(self, min_sentence_length: int = MIN_SENTENCE_LENGTH):
        self._min_length = min_sentence_length
        self._state = SegmentationState()
        self._next_sequence = 0
        self._lock = threading.Lock()

    @property
    def state(self) -> SegmentationState:
        """Copy of the current segmentation state."""
        with self._lock:
            return replace(self._state)

    @property
    def next_sequence(self) -> int:
        """Sequence number the next finalized sentence will receive."""
        with self._lock:
            return self._next_sequence

    def update(self, snapshot: str) -> List[FinalizedSentence]:
        """
        Process a new full transcript snapshot.

        Args:
            snapshot: Everything transcribed so far

        Returns:
            Newly finalized sentences, in sequence order
        """
        if not snapshot:
            return []

        with self._lock:
            state = self._state

            # First snapshot: nothing to diff against yet
            if not state.previous_snapshot:
                state.previous_snapshot = snapshot
                state.processed_offset = 0
                return []

            # A revision may shrink the snapshot below what was already processed
            if state.processed_offset > len(snapshot):
                logger.debug(
                    f"[Finalizer] Snapshot shrank below processed offset "
                    f"({len(snapshot)} < {state.processed_offset}), clamping"
                )
                state.processed_offset = len(snapshot)

            finalized: List[FinalizedSentence] = []
            stable_end = stable_prefix_length(state.previous_snapshot, snapshot)

            cursor = state.processed_offset
            while cursor < stable_end:
                boundary = self._find_boundary(snapshot, cursor, stable_end)
                if boundary == -1:
                    break

                candidate = snapshot[cursor:boundary + 1].strip()
                if len(candidate) >= self._min_length:
                    finalized.append(self._emit(candidate, "stable"))
                else:
                    logger.debug(f"[Finalizer] Skipping short fragment: '{candidate}'")
                cursor = boundary + 1
                state.processed_offset = cursor

            # Eager tail: the unstable remainder already reads as a full sentence
            tail = snapshot[state.processed_offset:].strip()
            if len(tail) >= self._min_length and tail[-1] in SENTENCE_ENDINGS:
                logger.debug(f"[Finalizer] Finalizing trailing sentence eagerly: '{tail}'")
                finalized.append(self._emit(tail, "eager_tail"))
                state.processed_offset = len(snapshot)

            state.previous_snapshot = snapshot
            return finalized

    def flush(self) -> List[FinalizedSentence]:
        """
        Finalize the unprocessed remainder of the last snapshot.

        Called when recording stops: the remainder becomes one sentence whether
        or not it ends with terminal punctuation.
        """
        with self._lock:
            state = self._state
            if state.processed_offset >= len(state.previous_snapshot):
                return []

            remainder = state.previous_snapshot[state.processed_offset:].strip()
            state.processed_offset = len(state.previous_snapshot)

            if len(remainder) < self._min_length:
                return []

            logger.info(f"[Finalizer] Flushing last sentence: '{remainder[:50]}'")
            return [self._emit(remainder, "flush")]

    def reset(self):
        """Discard all segmentation state and restart numbering at 0."""
        with self._lock:
            self._state = SegmentationState()
            self._next_sequence = 0

    def _emit(self, text: str, trigger: str) -> FinalizedSentence:
        sentence = FinalizedSentence(text=text, sequence_number=self._next_sequence)
        self._next_sequence += 1
        sentences_finalized.labels(trigger=trigger).inc()
        logger.debug(f"[Finalizer] #{sentence.sequence_number} ({trigger}): '{text}'")
        return sentence

    @staticmethod
    def _find_boundary(text: str, start: int, end: int) -> int:
        for i in range(start, end):
            if text[i] in SENTENCE_ENDINGS:
                return i
        return -1
