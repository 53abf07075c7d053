"""Prometheus metrics instrumentation for the interpretation pipeline.

Exposes metrics for monitoring segmentation throughput, translation latency
and speech output outcomes. Metrics are exposed via HTTP on port 8001
(configurable).

Metrics exported:
- interpreter_sentences_finalized_total: Counter of finalized sentences by trigger
- interpreter_translations_total: Counter of translations by status
- interpreter_translation_latency_seconds: Histogram of translation call time
- interpreter_utterances_total: Counter of utterances by outcome
- interpreter_snapshots_dropped_total: Counter of snapshots ignored outside ACTIVE
- interpreter_active_sessions: Gauge of sessions currently ACTIVE or FINALIZING

Usage:
    from interpreter.services.metrics import start_metrics_server, translations_total

    start_metrics_server(port=8001)
    translations_total.labels(status='success').inc()
"""

from prometheus_client import Histogram, Counter, Gauge, start_http_server
import logging

logger = logging.getLogger(__name__)

# Sentence finalization
sentences_finalized = Counter(
    'interpreter_sentences_finalized_total',
    'Total sentences finalized from transcript snapshots',
    labelnames=['trigger']  # trigger: stable, eager_tail, flush
)

# Translation outcomes
translations_total = Counter(
    'interpreter_translations_total',
    'Total translation attempts',
    labelnames=['status']  # status: success, error, timeout, disabled, failed_task
)

translation_latency = Histogram(
    'interpreter_translation_latency_seconds',
    'Time spent waiting for the translator',
    labelnames=['language_pair']
)

# Speech output
utterances_total = Counter(
    'interpreter_utterances_total',
    'Total utterances by outcome',
    labelnames=['outcome']  # outcome: enqueued, started, done, error, dropped
)

# Session lifecycle
snapshots_dropped = Counter(
    'interpreter_snapshots_dropped_total',
    'Snapshots received while no session was ACTIVE'
)

active_sessions_gauge = Gauge(
    'interpreter_active_sessions',
    'Number of sessions currently ACTIVE or FINALIZING'
)


def start_metrics_server(port: int = 8001):
    """Start Prometheus metrics HTTP server."""
    try:
        start_http_server(port)
        logger.info(f"✅ Metrics server started on port {port}")
    except Exception as e:
        logger.error(f"❌ Failed to start metrics server: {e}")
