"""Observability helpers for the BBBank API.

Request IDs bound into structlog contextvars, in-memory HTTP/service metrics and
a process-local telemetry event buffer that custom events are tracked into.
"""

