"""CLI commands for the HTTP fetch engine."""

import asyncio
import logging
import sys
import uuid
from pathlib import Path

import click
import structlog
from pydantic import ValidationError

from http_utils.constants import COMPONENT_CLI
from http_utils.errors import HttpUtilsError
from http_utils.fetch.config import ExecutionConfig
from http_utils.fetch.engine import HttpFetch
from http_utils.fetch.loader import ConfigLoadError, load_execution_config
from http_utils.fetch.writer import StreamWriter
from http_utils.observability.logging import (
    bind_run_context,
    clear_run_context,
    configure_logging,
    resolve_level,
)
from http_utils.observability.metrics import FetchMetrics
from http_utils.settings import AppSettings, get_settings


logger = structlog.get_logger()


def _setup_logging(settings: AppSettings, verbose: bool, console_logs: bool) -> str:
    """Configure logging and bind a fresh run id.

    Returns:
        The run id.
    """
    level = logging.DEBUG if verbose else resolve_level(settings.log_level)
    configure_logging(level=level, json_format=settings.json_logs and not console_logs)

    run_id = str(uuid.uuid4())
    bind_run_context(run_id)
    return run_id


def _build_config(  # noqa: PLR0913
    settings: AppSettings,
    options_path: Path | None,
    method: str | None,
    headers: tuple[str, ...],
    accept: tuple[str, ...],
    timeout_ms: int | None,
    cron: str | None,
    run_on_init: bool,
    no_close_on_end: bool,
    body_can_be_empty: bool,
    non_fatal: bool,
    binary: bool,
    auth_type: str | None,
    username: str | None,
    password: str | None,
    token_endpoint: str | None,
) -> ExecutionConfig:
    """Merge the options file with command-line overrides.

    Flags that were not given leave the file's values untouched.
    """
    overrides: dict[str, object] = {}
    if method:
        overrides["method"] = method
    if headers:
        overrides["headers"] = list(headers)
    if accept:
        overrides["accept_status_codes"] = list(accept)
    if timeout_ms is not None:
        overrides["timeout_milliseconds"] = timeout_ms
    if cron:
        overrides["cron"] = cron
    if run_on_init:
        overrides["run_on_init"] = True
    if no_close_on_end:
        overrides["close_on_end"] = False
    if body_can_be_empty:
        overrides["body_can_be_empty"] = True
    if non_fatal:
        overrides["errors_are_fatal"] = False
    if binary:
        overrides["output_as_buffer"] = True
    if auth_type:
        auth: dict[str, str] = {"type": auth_type, **settings.credentials()}
        if username:
            auth["username"] = username
        if password:
            auth["password"] = password
        if token_endpoint:
            auth["endpoint"] = token_endpoint
        overrides["auth"] = auth

    if options_path is not None:
        return load_execution_config(options_path, overrides)
    return ExecutionConfig.model_validate(overrides)


async def _produce(engine: HttpFetch) -> None:
    job = await engine.produce()
    if job is not None:
        await job.wait()


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _option_decorators(func: click.decorators.FC) -> click.decorators.FC:
    """Options shared by ``fetch`` and ``validate``."""
    decorators = [
        click.argument("urls", nargs=-1, required=True),
        click.option(
            "--options",
            "options_path",
            type=click.Path(exists=True, dir_okay=False, path_type=Path),
            help="YAML file with execution options.",
        ),
        click.option("--method", "-X", help="HTTP method (default: GET)."),
        click.option(
            "--header",
            "-H",
            "headers",
            multiple=True,
            help="Request header in 'key: value' format. Repeatable.",
        ),
        click.option(
            "--accept",
            multiple=True,
            help="Accepted status code or range such as 200-300. Repeatable.",
        ),
        click.option("--timeout-ms", type=click.IntRange(min=1), help="Per-request deadline."),
        click.option("--cron", help="Cron expression for recurring fetches."),
        click.option(
            "--run-on-init", is_flag=True, help="With --cron, also fetch immediately."
        ),
        click.option(
            "--no-close-on-end",
            is_flag=True,
            help="Keep the output open after all requests finish.",
        ),
        click.option(
            "--body-can-be-empty", is_flag=True, help="Accept responses without a body."
        ),
        click.option(
            "--non-fatal",
            is_flag=True,
            help="Log failed requests instead of aborting the run.",
        ),
        click.option("--binary", is_flag=True, help="Write bodies as raw bytes."),
        click.option(
            "--auth",
            "auth_type",
            type=click.Choice(["basic", "oauth2"]),
            help="Authentication strategy.",
        ),
        click.option("--username", help="Username (or HTTP_UTILS_USERNAME)."),
        click.option("--password", help="Password (or HTTP_UTILS_PASSWORD)."),
        click.option("--token-endpoint", help="OAuth2 token endpoint."),
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func


@click.group()
@click.version_option(version="0.1.0")
def cli() -> None:
    """Fetch HTTP endpoints and stream their bodies to stdout."""


@cli.command()
@_option_decorators
@click.option("--console-logs", is_flag=True, help="Human-readable instead of JSON logs.")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging.")
def fetch(  # noqa: PLR0913
    urls: tuple[str, ...],
    options_path: Path | None,
    method: str | None,
    headers: tuple[str, ...],
    accept: tuple[str, ...],
    timeout_ms: int | None,
    cron: str | None,
    run_on_init: bool,
    no_close_on_end: bool,
    body_can_be_empty: bool,
    non_fatal: bool,
    binary: bool,
    auth_type: str | None,
    username: str | None,
    password: str | None,
    token_endpoint: str | None,
    console_logs: bool,
    verbose: bool,
) -> None:
    """Fetch URLS and write their bodies to stdout.

    With --cron the command keeps running and fetches on every tick until
    interrupted or until a fatal error occurs.
    """
    settings = get_settings()
    run_id = _setup_logging(settings, verbose, console_logs)
    log = logger.bind(component=COMPONENT_CLI, command="fetch", run_id=run_id)

    try:
        config = _build_config(
            settings, options_path, method, headers, accept, timeout_ms, cron,
            run_on_init, no_close_on_end, body_can_be_empty, non_fatal, binary,
            auth_type, username, password, token_endpoint,
        )
        stream = sys.stdout.buffer if config.output_as_buffer else sys.stdout
        writer = StreamWriter(stream, binary=config.output_as_buffer)
        engine = HttpFetch(list(urls), writer, config)
    except (HttpUtilsError, ConfigLoadError, ValidationError) as e:
        _fail(str(e))
        return

    log.info("fetch_run_started", url_count=len(urls), cron=config.cron)
    try:
        asyncio.run(_produce(engine))
    except HttpUtilsError as e:
        log.error("fetch_run_failed", **e.to_dict())
        _fail(str(e))
    except KeyboardInterrupt:
        log.info("fetch_run_interrupted")
    finally:
        log.info("fetch_run_finished", metrics=FetchMetrics.get_instance().to_dict())
        clear_run_context()


@cli.command()
@_option_decorators
def validate(  # noqa: PLR0913
    urls: tuple[str, ...],
    options_path: Path | None,
    method: str | None,
    headers: tuple[str, ...],
    accept: tuple[str, ...],
    timeout_ms: int | None,
    cron: str | None,
    run_on_init: bool,
    no_close_on_end: bool,
    body_can_be_empty: bool,
    non_fatal: bool,
    binary: bool,
    auth_type: str | None,
    username: str | None,
    password: str | None,
    token_endpoint: str | None,
) -> None:
    """Validate options for URLS without sending any request."""
    settings = get_settings()
    configure_logging(json_format=False)

    try:
        config = _build_config(
            settings, options_path, method, headers, accept, timeout_ms, cron,
            run_on_init, no_close_on_end, body_can_be_empty, non_fatal, binary,
            auth_type, username, password, token_endpoint,
        )
        engine = HttpFetch(list(urls), StreamWriter(sys.stdout), config)
    except (HttpUtilsError, ConfigLoadError, ValidationError) as e:
        _fail(str(e))
        return

    click.echo("Options are valid!")
    click.echo(f"  Requests: {len(engine.requests)}")
    click.echo(f"  Method: {config.method}")
    click.echo(f"  Accept: {', '.join(config.accept_status_codes)}")
    click.echo(f"  Schedule: {config.cron or 'once'}")
