"""
Segmentation Module

Turns revisable transcript snapshots into ordered, finalized sentences:
- stable_prefix_length: Diff engine for consecutive snapshots
- SentenceFinalizer: Per-session segmentation state machine

Usage:
    from interpreter.services.segmentation import SentenceFinalizer, FinalizedSentence
"""

from interpreter.services.segmentation.diff import stable_prefix_length
from interpreter.services.segmentation.finalizer import (
    FinalizedSentence,
    SegmentationState,
    SentenceFinalizer,
)

__all__ = [
    "stable_prefix_length",
    "FinalizedSentence",
    "SegmentationState",
    "SentenceFinalizer",
]
