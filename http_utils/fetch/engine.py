"""Request execution engine: fetch endpoints and stream bodies downstream."""

import asyncio
import time
from collections.abc import AsyncIterator, Awaitable, Callable, Mapping, Sequence
from contextlib import asynccontextmanager
from typing import Any

import httpx
import structlog

from http_utils.auth import Auth, create_auth
from http_utils.constants import COMPONENT_FETCH, HTTP_STATUS_UNAUTHORIZED
from http_utils.errors import (
    ConnectionFailedError,
    CredentialIssueError,
    GenericFetchError,
    HttpUtilsError,
    IllegalParametersError,
    NoBodyInResponseError,
    StatusCodeNotAcceptedError,
    TimeOutError,
    UnauthorizedError,
)
from http_utils.fetch.config import ExecutionConfig
from http_utils.fetch.headers import parse_headers
from http_utils.fetch.state_machine import RequestState, RequestStateMachine
from http_utils.fetch.status import status_code_accepted
from http_utils.fetch.timeout import DeadlineExceeded, with_timeout
from http_utils.fetch.writer import Writer
from http_utils.observability.metrics import FetchMetrics
from http_utils.observability.redact import redact_headers, redact_url_credentials
from http_utils.scheduler.cron import CronJob, cronify


logger = structlog.get_logger()


class HttpFetch:
    """Fetches one or more URLs and streams their bodies to a writer.

    Everything that can be validated is validated in the constructor:
    options, headers, URLs and auth settings. Nothing is sent until
    ``produce`` is awaited, so a host can wire up every pipeline stage first.

    Provides:
    - Per-request authorization right before each send
    - Optional deadline per request
    - Accept rules for response status codes
    - Chunked streaming of text bodies, or whole-body binary delivery
    - Concurrent fan-out with a shared fatal/non-fatal error policy
    - Optional cron scheduling of the whole cycle
    """

    def __init__(
        self,
        urls: str | Sequence[str],
        writer: Writer,
        config: ExecutionConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            urls: One URL or a list of URLs, fetched concurrently.
            writer: Downstream writer receiving the bodies.
            config: Execution options; defaults apply when None.
            client: Transport used for every request and token exchange.
                When None, a client is opened for each cycle.

        Raises:
            IllegalParametersError: If no URL is given, a URL is malformed,
                or the auth settings are incomplete.
            InvalidHeadersError: If a header line is malformed.
        """
        url_list = [urls] if isinstance(urls, str) else list(urls)
        if not url_list:
            msg = "At least one URL is required."
            raise IllegalParametersError(msg)

        self._config = config or ExecutionConfig()
        self._writer = writer
        self._client = client
        self._auth: Auth = create_auth(self._config.auth, client)
        self._metrics = FetchMetrics.get_instance()

        headers = parse_headers(self._config.headers)
        self._requests = tuple(
            self._build_request(self._config.method, url, headers) for url in url_list
        )

        self._log = logger.bind(
            component=COMPONENT_FETCH,
            method=self._config.method,
            request_count=len(self._requests),
        )
        self._log.debug(
            "fetch_initialized",
            headers=redact_headers(headers),
            cron=self._config.cron,
            timeout_ms=self._config.timeout_milliseconds,
        )

    @property
    def config(self) -> ExecutionConfig:
        """Get the execution options."""
        return self._config

    @property
    def auth(self) -> Auth:
        """Get the auth strategy shared by all requests."""
        return self._auth

    @property
    def requests(self) -> tuple[httpx.Request, ...]:
        """Get the prepared requests, one per URL."""
        return self._requests

    async def produce(self) -> CronJob | None:
        """Run every request once, or arm the cron schedule.

        Returns:
            The armed job when a cron expression is configured, else None.

        Raises:
            HttpUtilsError: The first failure of a fatal run, after every
                request has settled.
            InvalidCronExpressionError: If the cron expression is invalid.
        """
        if self._config.cron:
            scheduled = cronify(
                self._execute_all,
                self._config.cron,
                run_on_init=self._config.run_on_init,
            )
            return await scheduled()

        await self._execute_all()
        return None

    async def execute_one(self, request: httpx.Request) -> None:
        """Execute a single request and stream its body to the writer.

        Raises:
            HttpUtilsError: If any step of the request fails.
        """
        async with self._session() as client:
            await self._execute(client, request, standalone=True)

    async def _execute_all(self) -> None:
        async with self._session() as client:
            outcomes = await asyncio.gather(
                *(self._execute_guarded(client, request) for request in self._requests)
            )

        fatal = [error for error in outcomes if error is not None]
        if fatal:
            for extra in fatal[1:]:
                self._log.error("request_failed", fatal=True, error=str(extra))
            raise fatal[0]

        if self._config.close_on_end:
            await self._writer.close()

    async def _execute_guarded(
        self, client: httpx.AsyncClient, request: httpx.Request
    ) -> Exception | None:
        """Run one request, routing its failure through the error policy.

        Returns:
            The failure when errors are fatal, otherwise None.
        """
        try:
            await self._execute(client, request)
        except Exception as e:  # noqa: BLE001
            if self._config.errors_are_fatal:
                return e
            self._log.error(
                "request_failed",
                url=redact_url_credentials(str(request.url)),
                fatal=False,
                error=str(e),
                error_type=e.error_type.value if isinstance(e, HttpUtilsError) else None,
            )
        return None

    async def _execute(
        self,
        client: httpx.AsyncClient,
        request: httpx.Request,
        *,
        standalone: bool = False,
    ) -> None:
        """Run one request through its lifecycle.

        Only a standalone request closes the writer on an empty body; a
        batch run closes it once after every request has settled.
        """
        url = redact_url_credentials(str(request.url))
        state = RequestStateMachine(url)
        log = self._log.bind(url=url)
        start_time_ns = time.perf_counter_ns()

        log.debug("request_started")
        try:
            state.transition_to(RequestState.AUTHORIZING)
            await self._auth.authorize(request)

            state.transition_to(RequestState.SENDING)
            response = await self._send(client, request, state)
            try:
                state.transition_to(RequestState.STATUS_CHECKING)
                self._check_status(response.status_code)
                await self._forward_body(response, state, log, standalone=standalone)
            finally:
                await response.aclose()

            state.transition_to(RequestState.DONE)
        except Exception as e:
            state.fail()
            self._metrics.record_failure(
                e.error_type if isinstance(e, HttpUtilsError) else type(e).__name__
            )
            raise
        finally:
            self._metrics.record_duration((time.perf_counter_ns() - start_time_ns) / 1_000_000)

        log.info("request_complete", status_code=response.status_code)

    async def _send(
        self,
        client: httpx.AsyncClient,
        request: httpx.Request,
        state: RequestStateMachine,
    ) -> httpx.Response:
        timeout_ms = self._config.timeout_milliseconds
        try:
            response = await with_timeout(timeout_ms, self._send_request(client, request))
        except DeadlineExceeded as e:
            state.transition_to(RequestState.TIMED_OUT)
            raise TimeOutError(timeout_ms) from e

        state.transition_to(RequestState.AWAITING_RESPONSE)
        self._metrics.record_response(response.status_code)
        return response

    @staticmethod
    async def _send_request(client: httpx.AsyncClient, request: httpx.Request) -> httpx.Response:
        try:
            return await client.send(request, stream=True)
        except httpx.HTTPError as e:
            raise GenericFetchError(e) from e

    def _check_status(self, status_code: int) -> None:
        if status_code_accepted(status_code, self._config.accept_status_codes):
            return

        if status_code == HTTP_STATUS_UNAUTHORIZED:
            if self._auth.provides_credentials:
                raise CredentialIssueError()
            raise UnauthorizedError()

        raise StatusCodeNotAcceptedError(status_code)

    async def _forward_body(
        self,
        response: httpx.Response,
        state: RequestStateMachine,
        log: structlog.stdlib.BoundLogger,
        *,
        standalone: bool,
    ) -> None:
        if self._config.output_as_buffer:
            body = await self._read_all(response)
            if not body:
                await self._handle_empty_body(state, standalone=standalone)
                return
            state.transition_to(RequestState.STREAMING_BODY)
            await self._push(body, log)
            return

        chunks = response.aiter_text()
        chunk = await self._next_chunk(chunks)
        if chunk is None:
            await self._handle_empty_body(state, standalone=standalone)
            return

        state.transition_to(RequestState.STREAMING_BODY)
        while chunk is not None:
            if not await self._push(chunk, log):
                break
            chunk = await self._next_chunk(chunks)

    async def _handle_empty_body(self, state: RequestStateMachine, *, standalone: bool) -> None:
        state.transition_to(RequestState.BODY_EMPTY)
        if not self._config.body_can_be_empty:
            raise NoBodyInResponseError()

        # Batch runs close once in _execute_all; a recurring source never closes here.
        if standalone and not self._config.is_recurring and self._config.close_on_end:
            await self._writer.close()

    @staticmethod
    async def _read_all(response: httpx.Response) -> bytes:
        try:
            return await response.aread()
        except httpx.HTTPError as e:
            raise ConnectionFailedError() from e

    @staticmethod
    async def _next_chunk(chunks: AsyncIterator[str]) -> str | None:
        """Return the next non-empty chunk, or None once the body is drained."""
        try:
            while True:
                chunk = await anext(chunks)
                if chunk:
                    return chunk
        except StopAsyncIteration:
            return None
        except httpx.HTTPError as e:
            raise ConnectionFailedError() from e

    async def _push(self, data: str | bytes, log: structlog.stdlib.BoundLogger) -> bool:
        """Hand data to the writer; writer failures are logged, not raised.

        Returns:
            True if the writer accepted the data.
        """
        try:
            await self._writer.push(data)
        except Exception as e:  # noqa: BLE001
            self._metrics.record_writer_failure()
            log.warning("writer_push_failed", error=str(e), exc_info=True)
            return False

        size = len(data.encode("utf-8")) if isinstance(data, str) else len(data)
        self._metrics.record_bytes(size)
        return True

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
            return
        async with httpx.AsyncClient() as client:
            yield client

    @staticmethod
    def _build_request(method: str, url: str, headers: httpx.Headers) -> httpx.Request:
        try:
            return httpx.Request(method, url, headers=headers)
        except httpx.InvalidURL as e:
            msg = f"Invalid URL: '{url}'"
            raise IllegalParametersError(msg) from e


def http_fetch(
    urls: str | Sequence[str],
    writer: Writer,
    options: ExecutionConfig | Mapping[str, Any] | None = None,
    client: httpx.AsyncClient | None = None,
) -> Callable[[], Awaitable[CronJob | None]]:
    """Build an engine and return its run operation.

    The engine is constructed immediately, so configuration errors surface
    here rather than when the returned operation is awaited.

    Args:
        urls: One URL or a list of URLs.
        writer: Downstream writer.
        options: Execution options as a model or a plain mapping.
        client: Optional transport shared by all requests.

    Returns:
        Zero-argument coroutine function that runs the engine.
    """
    if isinstance(options, ExecutionConfig):
        config = options
    else:
        config = ExecutionConfig.model_validate(dict(options or {}))
    return HttpFetch(urls, writer, config, client).produce
