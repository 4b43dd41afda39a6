"""Prometheus metrics for Parley.

Provides metrics for message processing, persona resolution, AI latency
and transport session health.
"""

from prometheus_client import Counter, Gauge, Histogram

# Pipeline metrics
MESSAGES_PROCESSED = Counter(
    "parley_messages_processed_total",
    "Total number of inbound messages run through the pipeline",
    labelnames=["mode", "outcome"],
)

PIPELINE_STEP_LATENCY = Histogram(
    "parley_pipeline_step_latency_seconds",
    "Latency of individual pipeline steps",
    labelnames=["step"],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)

AI_LATENCY = Histogram(
    "parley_ai_latency_seconds",
    "Latency of AI completion calls",
    labelnames=["model"],
    buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0),
)

ERRORS = Counter(
    "parley_errors_total",
    "Total number of pipeline errors",
    labelnames=["error_type"],
)

# Persona metrics
PERSONA_RESOLUTIONS = Counter(
    "parley_persona_resolutions_total",
    "Persona resolutions by source",
    labelnames=["source"],
)

PERSONA_DEGRADED = Counter(
    "parley_persona_degraded_total",
    "Persona resolutions that fell back after a collaborator failure",
    labelnames=["stage"],
)

# Thread metrics
ACTIVE_THREADS = Gauge(
    "parley_threads",
    "Number of conversation threads held in memory",
)

# Session metrics
SESSION_TRANSITIONS = Counter(
    "parley_session_transitions_total",
    "Transport session state transitions",
    labelnames=["from_state", "to_state"],
)

SESSION_RECONNECTS = Counter(
    "parley_session_reconnects_total",
    "Transport session reconnect attempts",
    labelnames=["trigger"],
)

SESSION_RECONNECTS_EXHAUSTED = Counter(
    "parley_session_reconnects_exhausted_total",
    "Times the reconnect ceiling was reached",
)

FALLBACK_NOTICES = Counter(
    "parley_fallback_notices_total",
    "Static fallback notices sent after pipeline failures",
    labelnames=["delivered"],
)
