"""Constants shared across the fetch engine.

Centralizes HTTP and logging constants to avoid duplication across modules.
"""

# HTTP Status Code Ranges
HTTP_STATUS_OK_MIN = 200
HTTP_STATUS_OK_MAX = 300
HTTP_STATUS_UNAUTHORIZED = 401

# Accept rules used when none are configured
DEFAULT_ACCEPT_STATUS_CODES = ("200-300",)

# Status checked once at construction to validate the accept rules
STATUS_RULE_SENTINEL = 0

DEFAULT_METHOD = "GET"

# OAuth2 password grant
OAUTH2_GRANT_TYPE = "password"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

# Log component names
COMPONENT_FETCH = "fetch"
COMPONENT_AUTH = "auth"
COMPONENT_CRON = "cron"
COMPONENT_CLI = "cli"
