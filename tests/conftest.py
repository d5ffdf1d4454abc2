from collections.abc import Iterator

import pytest
import structlog

from http_utils.observability.metrics import FetchMetrics
from tests.helpers.transport import RecordingWriter


@pytest.fixture(autouse=True)
def reset_observability() -> Iterator[None]:
    """Give every test fresh metrics and an empty log context."""
    FetchMetrics.reset()
    yield
    FetchMetrics.reset()
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def writer() -> RecordingWriter:
    """Writer that records everything pushed to it."""
    return RecordingWriter()
