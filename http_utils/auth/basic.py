"""HTTP Basic authentication."""

import base64

import httpx

from http_utils.auth.base import AUTHORIZATION_HEADER
from http_utils.errors import IllegalParametersError


class HttpBasicAuth:
    """Attaches ``Authorization: Basic base64(username:password)``."""

    def __init__(self, username: str | None, password: str | None) -> None:
        """Initialize the strategy.

        Args:
            username: Account name.
            password: Account password.

        Raises:
            IllegalParametersError: If either value is missing.
        """
        if not username:
            msg = "Username is required for HTTP Basic Auth."
            raise IllegalParametersError(msg)
        if not password:
            msg = "Password is required for HTTP Basic Auth."
            raise IllegalParametersError(msg)

        self._username = username
        self._password = password

    @property
    def provides_credentials(self) -> bool:
        """Basic auth always sends credentials."""
        return True

    def encode(self) -> str:
        """Build the Authorization header value."""
        raw = f"{self._username}:{self._password}".encode()
        return "Basic " + base64.b64encode(raw).decode("ascii")

    async def authorize(self, request: httpx.Request) -> None:
        """Set the Basic Authorization header."""
        request.headers[AUTHORIZATION_HEADER] = self.encode()

    def check(self, request: httpx.Request) -> bool:
        """Check that the request carries exactly these credentials."""
        return request.headers.get(AUTHORIZATION_HEADER) == self.encode()
