"""Protocol interface for authentication strategies."""

from typing import Protocol, runtime_checkable

import httpx


AUTHORIZATION_HEADER = "Authorization"


@runtime_checkable
class Auth(Protocol):
    """Strategy that attaches credentials to an outgoing request.

    ``authorize`` runs right before every send, so strategies that obtain
    short-lived tokens present a fresh credential each time.
    """

    @property
    def provides_credentials(self) -> bool:
        """Whether requests carry credentials after ``authorize``."""
        ...

    async def authorize(self, request: httpx.Request) -> None:
        """Attach credentials to the request in place.

        Raises:
            HttpUtilsError: If credentials could not be obtained.
        """
        ...

    def check(self, request: httpx.Request) -> bool:
        """Check whether a request carries this strategy's credentials.

        Used by test servers to decide between serving and answering 401.
        """
        ...


class NoAuth:
    """Sends requests without credentials."""

    @property
    def provides_credentials(self) -> bool:
        """No credentials are ever attached."""
        return False

    async def authorize(self, request: httpx.Request) -> None:  # noqa: ARG002
        """Leave the request untouched."""
        return

    def check(self, request: httpx.Request) -> bool:
        """Accept only requests without an Authorization header."""
        return AUTHORIZATION_HEADER not in request.headers
