"""Configuration model for authentication strategies."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field


class AuthConfig(BaseModel):
    """Authentication settings as written in a pipeline description.

    The ``type`` tag selects the strategy (``basic`` or ``oauth2``). Required
    fields are checked when the strategy is built, so that each missing
    field gets its own message.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Annotated[str, Field(description="Strategy tag: basic or oauth2")]
    username: str | None = None
    password: str | None = Field(default=None, repr=False)
    endpoint: str | None = Field(
        default=None, description="Token endpoint for the OAuth2 password grant"
    )
