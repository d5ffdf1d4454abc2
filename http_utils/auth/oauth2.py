"""OAuth2 resource-owner password credentials grant."""

import httpx
import structlog

from http_utils.auth.base import AUTHORIZATION_HEADER
from http_utils.constants import (
    COMPONENT_AUTH,
    FORM_CONTENT_TYPE,
    HTTP_STATUS_OK_MAX,
    HTTP_STATUS_OK_MIN,
    OAUTH2_GRANT_TYPE,
)
from http_utils.errors import (
    GenericFetchError,
    IllegalParametersError,
    OAuth2TokenError,
    UnauthorizedError,
)
from http_utils.observability.redact import redact_url_credentials


logger = structlog.get_logger()

BEARER_PREFIX = "Bearer "


class OAuth2PasswordAuth:
    """Exchanges a username and password for a bearer token on every call.

    Tokens are not cached. Each ``authorize`` performs a new
    token exchange so an expired token is never sent.
    """

    def __init__(
        self,
        username: str | None,
        password: str | None,
        endpoint: str | None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the strategy.

        Args:
            username: Resource owner name.
            password: Resource owner password.
            endpoint: Token endpoint URL.
            client: Client used for the token exchange. When None, a client
                is opened for each exchange.

        Raises:
            IllegalParametersError: If a required value is missing.
        """
        if not username:
            msg = "Username is required for OAuth2 password grant."
            raise IllegalParametersError(msg)
        if not password:
            msg = "Password is required for OAuth2 password grant."
            raise IllegalParametersError(msg)
        if not endpoint:
            msg = "Endpoint is required for OAuth2 password grant."
            raise IllegalParametersError(msg)

        self._username = username
        self._password = password
        self._endpoint = endpoint
        self._client = client
        self._log = logger.bind(
            component=COMPONENT_AUTH,
            subcomponent="oauth2",
            endpoint=redact_url_credentials(endpoint),
        )

    @property
    def provides_credentials(self) -> bool:
        """A bearer token is always attached."""
        return True

    @property
    def endpoint(self) -> str:
        """Token endpoint URL."""
        return self._endpoint

    async def authorize(self, request: httpx.Request) -> None:
        """Fetch a fresh token and set ``Authorization: Bearer <token>``.

        Raises:
            GenericFetchError: If the token endpoint could not be reached.
            OAuth2TokenError: If the token endpoint answered with non-2xx.
            UnauthorizedError: If the response holds no access token.
        """
        response = await self._request_token()

        if not HTTP_STATUS_OK_MIN <= response.status_code < HTTP_STATUS_OK_MAX:
            self._log.warning("oauth2_token_request_failed", status_code=response.status_code)
            raise OAuth2TokenError(response.status_code)

        token = self._extract_token(response)
        if not token:
            self._log.warning("oauth2_token_missing")
            raise UnauthorizedError()

        request.headers[AUTHORIZATION_HEADER] = BEARER_PREFIX + token
        self._log.debug("oauth2_token_acquired")

    def check(self, request: httpx.Request) -> bool:
        """Check that the request carries a non-empty bearer token.

        Tokens are not cached, so only the header shape can be verified here;
        the issuing server decides whether the token itself is valid.
        """
        header = request.headers.get(AUTHORIZATION_HEADER, "")
        return header.startswith(BEARER_PREFIX) and bool(header[len(BEARER_PREFIX) :].strip())

    async def _request_token(self) -> httpx.Response:
        form = {
            "grant_type": OAUTH2_GRANT_TYPE,
            "username": self._username,
            "password": self._password,
        }
        headers = {"Content-Type": FORM_CONTENT_TYPE}

        try:
            if self._client is not None:
                return await self._client.post(self._endpoint, data=form, headers=headers)
            async with httpx.AsyncClient() as client:
                return await client.post(self._endpoint, data=form, headers=headers)
        except httpx.HTTPError as e:
            self._log.warning("oauth2_token_network_error", error=str(e))
            raise GenericFetchError(e) from e

    @staticmethod
    def _extract_token(response: httpx.Response) -> str | None:
        try:
            data = response.json()
        except ValueError:
            return None
        if not isinstance(data, dict):
            return None
        token = data.get("access_token")
        return str(token) if token else None
