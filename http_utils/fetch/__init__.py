"""HTTP fetch engine with auth, deadlines, accept rules and streaming.

This module provides:
- Status code accept rules (literals and half-open ranges)
- Header line parsing
- A deadline guard for in-flight requests
- The request execution engine with fan-out and cron scheduling
- A writer interface for downstream consumers
"""

from http_utils.fetch.config import ExecutionConfig
from http_utils.fetch.engine import HttpFetch, http_fetch
from http_utils.fetch.headers import parse_headers
from http_utils.fetch.loader import ConfigLoadError, load_execution_config, load_options
from http_utils.fetch.state_machine import (
    RequestState,
    RequestStateMachine,
    RequestStateTransitionError,
)
from http_utils.fetch.status import status_code_accepted, validate_status_rules
from http_utils.fetch.timeout import DeadlineExceeded, with_timeout
from http_utils.fetch.writer import StreamWriter, Writer, WriterClosedError


__all__ = [
    # Engine
    "HttpFetch",
    "http_fetch",
    # Config
    "ExecutionConfig",
    "ConfigLoadError",
    "load_execution_config",
    "load_options",
    # Building blocks
    "parse_headers",
    "status_code_accepted",
    "validate_status_rules",
    "with_timeout",
    "DeadlineExceeded",
    # State machine
    "RequestState",
    "RequestStateMachine",
    "RequestStateTransitionError",
    # Writer
    "Writer",
    "StreamWriter",
    "WriterClosedError",
]
