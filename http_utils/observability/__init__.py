"""Observability module for logging, metrics and redaction."""

from http_utils.observability.logging import (
    bind_run_context,
    clear_run_context,
    configure_logging,
    resolve_level,
)
from http_utils.observability.metrics import FetchMetrics
from http_utils.observability.redact import (
    is_sensitive_header,
    redact_headers,
    redact_url_credentials,
)


__all__ = [
    "FetchMetrics",
    "bind_run_context",
    "clear_run_context",
    "configure_logging",
    "is_sensitive_header",
    "redact_headers",
    "redact_url_credentials",
    "resolve_level",
]
