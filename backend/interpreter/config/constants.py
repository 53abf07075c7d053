"""
Application-wide constants for segmentation, dispatch and speech output.

This file centralizes the magic numbers of the interpretation pipeline
so they can be tuned in one place.

Note: Environment-dependent settings (languages, timeouts, credentials) belong
in settings.py. This file is for operational parameters that rarely change
between environments.
"""

# ==============================================================================
# SENTENCE SEGMENTATION
# ==============================================================================

# Characters that terminate a sentence
SENTENCE_ENDINGS: frozenset[str] = frozenset({".", "?", "!"})

# Minimum trimmed sentence length to speak (avoids speaking stray fragments)
MIN_SENTENCE_LENGTH: int = 3

# ==============================================================================
# TRANSLATION
# ==============================================================================

# Fallback per-translation timeout when no settings value is supplied (seconds)
DEFAULT_TRANSLATION_TIMEOUT_SEC: float = 5.0

# Fallback bound on concurrently outstanding translations
DEFAULT_MAX_CONCURRENT_TRANSLATIONS: int = 4

# GCP Translation location
GCP_TRANSLATE_LOCATION: str = "global"

# ==============================================================================
# SPEECH OUTPUT
# ==============================================================================

# Prefix for utterance ids handed to the speech device
UTTERANCE_ID_PREFIX: str = "utt"

# Locale used when no translation target is active
DEFAULT_SPEECH_LOCALE: str = "en-US"

# ==============================================================================
# WEBSOCKET
# ==============================================================================

# Max outbound messages buffered for a client before speak calls are refused
WEBSOCKET_OUTBOUND_QUEUE_SIZE: int = 256

# Seconds to wait for the outbound writer to flush on disconnect
WEBSOCKET_WRITER_SHUTDOWN_TIMEOUT_SEC: float = 1.0

# ==============================================================================
# METRICS & MONITORING
# ==============================================================================

# Prometheus metrics server port
METRICS_SERVER_PORT: int = 8001
