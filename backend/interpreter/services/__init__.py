"""Business Logic Services.

This package contains all service modules that implement the core
logic of the Real-Time Interpreter.

Service Categories:
- Segmentation: Stable-prefix diffing, sentence finalization
- Dispatch: Concurrent translation with strictly ordered speech
- Translation: Language selection, preparation, pass-through on failure
- Speech: Voice switching, utterance tracking, speech devices
- Session: Recording lifecycle and WebSocket orchestration

External integrations:
- translation.gcp: Google Cloud Translation
"""
