"""Error types for the HTTP fetch engine."""

from enum import Enum


class HttpUtilsErrorType(str, Enum):
    """Classification of HTTP utils errors.

    - STATUS_CODE_NOT_ACCEPTED: Response status rejected by the accept rules
    - NO_BODY_IN_RESPONSE: Response had no body while one was required
    - INVALID_STATUS_CODE_RANGE: Malformed accept rule
    - INVALID_HEADERS: Malformed "key: value" header line
    - GENERIC_FETCH_ERROR: Transport-level failure while sending
    - ILLEGAL_PARAMETERS: Contradictory or incomplete configuration
    - CONNECTION_ERROR: Failure while reading the response body
    - TIME_OUT_ERROR: Request exceeded the configured deadline
    - UNAUTHORIZED_ERROR: 401 without credentials, or no token issued
    - CREDENTIAL_ISSUE: 401 although credentials were sent
    - OAUTH2_TOKEN_ERROR: Token endpoint answered with a non-2xx status
    - INVALID_CRON_EXPRESSION: Cron expression could not be parsed
    """

    STATUS_CODE_NOT_ACCEPTED = "STATUS_CODE_NOT_ACCEPTED"
    NO_BODY_IN_RESPONSE = "NO_BODY_IN_RESPONSE"
    INVALID_STATUS_CODE_RANGE = "INVALID_STATUS_CODE_RANGE"
    INVALID_HEADERS = "INVALID_HEADERS"
    GENERIC_FETCH_ERROR = "GENERIC_FETCH_ERROR"
    ILLEGAL_PARAMETERS = "ILLEGAL_PARAMETERS"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    TIME_OUT_ERROR = "TIME_OUT_ERROR"
    UNAUTHORIZED_ERROR = "UNAUTHORIZED_ERROR"
    CREDENTIAL_ISSUE = "CREDENTIAL_ISSUE"
    OAUTH2_TOKEN_ERROR = "OAUTH2_TOKEN_ERROR"
    INVALID_CRON_EXPRESSION = "INVALID_CRON_EXPRESSION"


class HttpUtilsError(Exception):
    """Base exception for the fetch engine.

    Provides structured error information for logging.
    """

    error_type: HttpUtilsErrorType

    def __init__(
        self,
        message: str,
        details: dict[str, str | int | None] | None = None,
    ) -> None:
        """Initialize the error.

        Args:
            message: Human-readable error message.
            details: Additional structured error details.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, str | dict[str, str | int | None]]:
        """Convert error to dictionary for logging.

        Returns:
            Dictionary representation of the error.
        """
        return {
            "error_type": self.error_type.value,
            "message": self.message,
            "details": self.details,
        }


class StatusCodeNotAcceptedError(HttpUtilsError):
    """Response status code is not matched by any accept rule."""

    error_type = HttpUtilsErrorType.STATUS_CODE_NOT_ACCEPTED

    def __init__(self, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(
            f"Status code {status_code} not accepted",
            details={"status_code": status_code},
        )


class NoBodyInResponseError(HttpUtilsError):
    """Response carried no body and an empty body is not allowed."""

    error_type = HttpUtilsErrorType.NO_BODY_IN_RESPONSE

    def __init__(self) -> None:
        super().__init__("No body in response")


class InvalidStatusCodeRangeError(HttpUtilsError):
    """An accept rule is neither an integer nor an integer range."""

    error_type = HttpUtilsErrorType.INVALID_STATUS_CODE_RANGE

    def __init__(self, rule: str | None = None) -> None:
        self.rule = rule
        super().__init__("Invalid status code range", details={"rule": rule})


class InvalidHeadersError(HttpUtilsError):
    """A header line is missing its key or its value."""

    error_type = HttpUtilsErrorType.INVALID_HEADERS

    def __init__(self, line: str | None = None) -> None:
        self.line = line
        super().__init__("Invalid headers", details={"line": line})


class GenericFetchError(HttpUtilsError):
    """Transport failure (DNS, refused connection, TLS) while sending."""

    error_type = HttpUtilsErrorType.GENERIC_FETCH_ERROR

    def __init__(self, cause: BaseException) -> None:
        self.cause = cause
        super().__init__(
            f"Generic fetch error: {cause}",
            details={"cause": type(cause).__name__},
        )


class IllegalParametersError(HttpUtilsError):
    """Configuration is contradictory or incomplete."""

    error_type = HttpUtilsErrorType.ILLEGAL_PARAMETERS

    def __init__(self, info: str | None = None) -> None:
        super().__init__(info or "Illegal parameters")


class ConnectionFailedError(HttpUtilsError):
    """The connection broke while the response body was being read."""

    error_type = HttpUtilsErrorType.CONNECTION_ERROR

    def __init__(self) -> None:
        super().__init__("Connection error")


class TimeOutError(HttpUtilsError):
    """Request exceeded its time limit."""

    error_type = HttpUtilsErrorType.TIME_OUT_ERROR

    def __init__(self, milliseconds: int | None) -> None:
        self.milliseconds = milliseconds
        super().__init__(
            f"Request exceeded time limit of {milliseconds} ms",
            details={"timeout_ms": milliseconds},
        )


class UnauthorizedError(HttpUtilsError):
    """Endpoint refused an unauthenticated request."""

    error_type = HttpUtilsErrorType.UNAUTHORIZED_ERROR

    def __init__(self) -> None:
        super().__init__("Unauthorized")


class CredentialIssueError(HttpUtilsError):
    """Endpoint refused the credentials that were sent."""

    error_type = HttpUtilsErrorType.CREDENTIAL_ISSUE

    def __init__(self) -> None:
        super().__init__("Credentials are invalid or have insufficient access")


class OAuth2TokenError(HttpUtilsError):
    """Token endpoint did not answer with a 2xx status."""

    error_type = HttpUtilsErrorType.OAUTH2_TOKEN_ERROR

    def __init__(self, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(
            "An issue occurred while retrieving the OAuth2 token. "
            f"Response with status code {status_code}.",
            details={"status_code": status_code},
        )


class InvalidCronExpressionError(HttpUtilsError):
    """Cron expression could not be parsed."""

    error_type = HttpUtilsErrorType.INVALID_CRON_EXPRESSION

    def __init__(self, expression: str | None = None) -> None:
        self.expression = expression
        super().__init__(
            "The provided cron job expression is invalid",
            details={"expression": expression},
        )
