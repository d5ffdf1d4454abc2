"""Authentication strategies for outgoing requests."""

from http_utils.auth.base import AUTHORIZATION_HEADER, Auth, NoAuth
from http_utils.auth.basic import HttpBasicAuth
from http_utils.auth.factory import AUTH_TYPE_BASIC, AUTH_TYPE_OAUTH2, create_auth
from http_utils.auth.oauth2 import OAuth2PasswordAuth


__all__ = [
    "AUTHORIZATION_HEADER",
    "AUTH_TYPE_BASIC",
    "AUTH_TYPE_OAUTH2",
    "Auth",
    "HttpBasicAuth",
    "NoAuth",
    "OAuth2PasswordAuth",
    "create_auth",
]
