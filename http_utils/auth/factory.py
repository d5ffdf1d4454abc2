"""Factory for building auth strategies from configuration."""

import httpx
import structlog

from http_utils.auth.base import Auth, NoAuth
from http_utils.auth.basic import HttpBasicAuth
from http_utils.auth.config import AuthConfig
from http_utils.auth.oauth2 import OAuth2PasswordAuth
from http_utils.constants import COMPONENT_AUTH
from http_utils.errors import IllegalParametersError


logger = structlog.get_logger()

AUTH_TYPE_BASIC = "basic"
AUTH_TYPE_OAUTH2 = "oauth2"


def create_auth(
    config: AuthConfig | None,
    client: httpx.AsyncClient | None = None,
) -> Auth:
    """Resolve an auth configuration into a strategy instance.

    Args:
        config: Auth settings, or None for unauthenticated requests.
        client: Client shared with the engine, used for token exchanges.

    Returns:
        A strategy that is reused for every request.

    Raises:
        IllegalParametersError: If the type is unknown or a field is missing.
    """
    log = logger.bind(component=COMPONENT_AUTH, subcomponent="factory")

    if config is None:
        return NoAuth()

    if config.type == AUTH_TYPE_BASIC:
        log.debug("auth_created", auth_type=AUTH_TYPE_BASIC)
        return HttpBasicAuth(config.username, config.password)

    if config.type == AUTH_TYPE_OAUTH2:
        log.debug("auth_created", auth_type=AUTH_TYPE_OAUTH2)
        return OAuth2PasswordAuth(
            config.username,
            config.password,
            config.endpoint,
            client=client,
        )

    msg = f"Unknown auth type: '{config.type}'"
    raise IllegalParametersError(msg)
