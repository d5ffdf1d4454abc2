"""Fetch HTTP endpoints and stream their bodies into a pipeline."""

from http_utils.auth import HttpBasicAuth, NoAuth, OAuth2PasswordAuth, create_auth
from http_utils.errors import HttpUtilsError, HttpUtilsErrorType
from http_utils.fetch import ExecutionConfig, HttpFetch, StreamWriter, Writer, http_fetch
from http_utils.scheduler import CronJob, cronify


__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Engine
    "HttpFetch",
    "http_fetch",
    "ExecutionConfig",
    "Writer",
    "StreamWriter",
    # Auth
    "HttpBasicAuth",
    "NoAuth",
    "OAuth2PasswordAuth",
    "create_auth",
    # Scheduling
    "CronJob",
    "cronify",
    # Errors
    "HttpUtilsError",
    "HttpUtilsErrorType",
]
