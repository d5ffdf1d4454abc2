"""Configuration models for the fetch engine."""

from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    PositiveInt,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from http_utils.auth.config import AuthConfig
from http_utils.constants import DEFAULT_ACCEPT_STATUS_CODES, DEFAULT_METHOD
from http_utils.errors import IllegalParametersError
from http_utils.fetch.status import validate_status_rules


class ExecutionConfig(BaseModel):
    """How every configured request is executed.

    All fields are optional. Contradictory combinations are rejected here,
    once, so nothing has to be re-validated while requests run. Keys may be
    given in snake_case or in the camelCase used by pipeline descriptions.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    method: str = DEFAULT_METHOD
    headers: tuple[str, ...] = ()
    accept_status_codes: tuple[str, ...] = DEFAULT_ACCEPT_STATUS_CODES
    close_on_end: bool = True
    body_can_be_empty: bool = False
    timeout_milliseconds: PositiveInt | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "timeout_milliseconds", "timeoutMilliseconds", "timeOutMilliseconds"
        ),
    )
    auth: AuthConfig | None = None
    cron: str | None = None
    run_on_init: bool = False
    errors_are_fatal: bool = True
    output_as_buffer: bool = False

    @model_validator(mode="before")
    @classmethod
    def default_close_on_end_for_cron(cls, data: Any) -> Any:
        """A recurring source keeps its output open unless told otherwise."""
        if not isinstance(data, dict) or not data.get("cron"):
            return data
        if "close_on_end" in data or "closeOnEnd" in data:
            return data
        return {**data, "close_on_end": False}

    @field_validator("method")
    @classmethod
    def normalize_method(cls, v: str) -> str:
        """Upper-case the HTTP method."""
        method = v.strip().upper()
        if not method:
            msg = "HTTP method must not be empty"
            raise IllegalParametersError(msg)
        return method

    @field_validator("accept_status_codes")
    @classmethod
    def validate_accept_status_codes(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Fall back to the default rules and check that every rule parses."""
        rules = v or DEFAULT_ACCEPT_STATUS_CODES
        validate_status_rules(rules)
        return rules

    @model_validator(mode="after")
    def check_conflicts(self) -> "ExecutionConfig":
        """Reject option combinations that can never work."""
        if self.method == "HEAD" and not self.body_can_be_empty:
            msg = "Cannot use HEAD method with bodyCanBeEmpty set to false"
            raise IllegalParametersError(msg)

        if self.cron and self.close_on_end:
            msg = "Cannot close stream when using cron."
            raise IllegalParametersError(msg)

        return self

    @property
    def is_recurring(self) -> bool:
        """Whether requests are repeated on a cron schedule."""
        return bool(self.cron)
