"""Metrics collection for the fetch engine."""

from dataclasses import dataclass, field
from typing import ClassVar

from http_utils.errors import HttpUtilsErrorType


@dataclass
class FetchMetrics:
    """Metrics for fetch operations.

    Singleton class that tracks request counts by status, failures by
    error type, bytes handed to the writer, and scheduler activity.
    """

    http_requests_total: dict[int, int] = field(default_factory=dict)
    http_failures_total: dict[str, int] = field(default_factory=dict)
    http_bytes_total: int = 0
    http_timeouts_total: int = 0
    http_duration_ms_total: float = 0.0
    http_request_count: int = 0
    writer_failures_total: int = 0
    cron_ticks_total: int = 0

    _instance: ClassVar["FetchMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "FetchMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_response(self, status_code: int) -> None:
        """Record a response status code."""
        self.http_requests_total[status_code] = (
            self.http_requests_total.get(status_code, 0) + 1
        )
        self.http_request_count += 1

    def record_bytes(self, count: int) -> None:
        """Record bytes pushed downstream."""
        self.http_bytes_total += count

    def record_failure(self, error_type: HttpUtilsErrorType | str) -> None:
        """Record a failed request.

        Args:
            error_type: Classification of the failure, or the exception
                class name for failures outside the error taxonomy.
        """
        key = error_type.value if isinstance(error_type, HttpUtilsErrorType) else error_type
        self.http_failures_total[key] = self.http_failures_total.get(key, 0) + 1
        if error_type == HttpUtilsErrorType.TIME_OUT_ERROR:
            self.http_timeouts_total += 1

    def record_writer_failure(self) -> None:
        """Record a push the downstream writer rejected."""
        self.writer_failures_total += 1

    def record_cron_tick(self) -> None:
        """Record a scheduled invocation."""
        self.cron_ticks_total += 1

    def record_duration(self, duration_ms: float) -> None:
        """Record request duration in milliseconds."""
        self.http_duration_ms_total += duration_ms

    def to_dict(self) -> dict[str, int | float | dict[str, int] | dict[int, int]]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "http_requests_total": dict(self.http_requests_total),
            "http_failures_total": dict(self.http_failures_total),
            "http_bytes_total": self.http_bytes_total,
            "http_timeouts_total": self.http_timeouts_total,
            "http_duration_ms_total": self.http_duration_ms_total,
            "http_request_count": self.http_request_count,
            "writer_failures_total": self.writer_failures_total,
            "cron_ticks_total": self.cron_ticks_total,
        }

    @property
    def avg_duration_ms(self) -> float:
        """Calculate average request duration.

        Returns:
            Average duration in milliseconds.
        """
        if self.http_request_count == 0:
            return 0.0
        return self.http_duration_ms_total / self.http_request_count
