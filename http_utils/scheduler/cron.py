"""Cron scheduling for zero-argument coroutine functions."""

import asyncio
from collections.abc import Awaitable, Callable
from datetime import datetime

import structlog
from croniter import croniter

from http_utils.constants import COMPONENT_CRON
from http_utils.errors import InvalidCronExpressionError
from http_utils.observability.metrics import FetchMetrics


logger = structlog.get_logger()

Operation = Callable[[], Awaitable[None]]


def parse_cron(expression: str) -> croniter:
    """Parse a cron expression, starting from the current local time.

    Five-field expressions are read as standard cron; six-field expressions
    carry a leading seconds field.

    An expression that parses but can never fire, such as the 31st of
    February, is rejected as well.

    Raises:
        InvalidCronExpressionError: If the expression cannot be parsed or
            never matches a date.
    """
    if not expression or not expression.strip():
        raise InvalidCronExpressionError(expression)
    fields = expression.strip()
    start = datetime.now().astimezone()
    try:
        croniter(fields, start, second_at_beginning=True).get_next(datetime)
        return croniter(fields, start, second_at_beginning=True)
    except ValueError as e:
        raise InvalidCronExpressionError(expression) from e


class CronJob:
    """A running schedule that invokes an operation on every cron tick.

    Each tick runs as its own task, so a slow invocation never delays the
    next tick. The first failure that escapes a tick stops the job and is
    re-raised from ``wait``.
    """

    def __init__(self, operation: Operation, schedule: croniter, expression: str) -> None:
        """Initialize the job. Nothing runs until ``start``.

        Args:
            operation: Coroutine function invoked on each tick.
            schedule: Parsed cron schedule.
            expression: Original expression, for logging.
        """
        self._operation = operation
        self._schedule = schedule
        self._expression = expression
        self._loop_task: asyncio.Task[None] | None = None
        self._ticks: set[asyncio.Task[None]] = set()
        self._stopped = asyncio.Event()
        self._failure: Exception | None = None
        self._metrics = FetchMetrics.get_instance()
        self._log = logger.bind(component=COMPONENT_CRON, cron=expression)

    @property
    def running(self) -> bool:
        """Whether the schedule is still armed."""
        return self._loop_task is not None and not self._stopped.is_set()

    @property
    def failure(self) -> Exception | None:
        """The failure that stopped the job, if any."""
        return self._failure

    def start(self, run_on_init: bool = False) -> None:
        """Arm the schedule, optionally firing once right away."""
        self._loop_task = asyncio.create_task(
            self._run(), name=f"cron[{self._expression}]"
        )
        self._log.info("cron_job_armed", run_on_init=run_on_init)
        if run_on_init:
            self._launch()

    def stop(self) -> None:
        """Cancel the schedule and any tick still in flight."""
        if self._stopped.is_set():
            return
        self._stopped.set()

        current = asyncio.current_task()
        if self._loop_task is not None and self._loop_task is not current:
            self._loop_task.cancel()

        for task in list(self._ticks):
            if task is not current:
                task.cancel()

        self._log.info("cron_job_stopped", failed=self._failure is not None)

    async def wait(self) -> None:
        """Wait until the job stops.

        Raises:
            Exception: The failure that stopped the job, if any.
        """
        await self._stopped.wait()
        if self._failure is not None:
            raise self._failure

    async def _run(self) -> None:
        try:
            while True:
                next_fire: datetime = self._schedule.get_next(datetime)
                delay = (next_fire - datetime.now(next_fire.tzinfo)).total_seconds()
                await asyncio.sleep(max(delay, 0.0))
                self._launch()
        except Exception as e:
            self._log.exception("cron_loop_failed", error=str(e))
            if self._failure is None:
                self._failure = e
            self.stop()

    def _launch(self) -> None:
        task = asyncio.create_task(self._tick())
        self._ticks.add(task)
        task.add_done_callback(self._ticks.discard)

    async def _tick(self) -> None:
        self._metrics.record_cron_tick()
        self._log.debug("cron_tick")
        try:
            await self._operation()
        except Exception as e:
            self._log.exception("cron_tick_failed", error=str(e))
            if self._failure is None:
                self._failure = e
            self.stop()


def cronify(
    operation: Operation,
    cron_expression: str,
    run_on_init: bool = False,
) -> Callable[[], Awaitable[CronJob]]:
    """Wrap an operation so that invoking it arms a cron schedule instead.

    The expression is not parsed here; it is parsed when the returned
    coroutine function is awaited, which resolves as soon as the schedule is
    armed without waiting for any tick.

    Args:
        operation: Coroutine function to run on each tick.
        cron_expression: Cron expression, optionally with a seconds field.
        run_on_init: Also run the operation once immediately.

    Returns:
        Coroutine function that arms the schedule and returns its job.

    Raises:
        InvalidCronExpressionError: When the returned function is awaited
            with an unparsable expression.
    """

    async def scheduled() -> CronJob:
        schedule = parse_cron(cron_expression)
        job = CronJob(operation, schedule, cron_expression)
        job.start(run_on_init=run_on_init)
        return job

    return scheduled
