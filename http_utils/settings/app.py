"""Application settings powered by Pydantic BaseSettings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Centralized environment configuration."""

    model_config = SettingsConfigDict(
        env_prefix="HTTP_UTILS_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = Field(default="INFO")
    json_logs: bool = Field(default=True)
    username: str | None = Field(default=None)
    password: str | None = Field(default=None)

    def credentials(self) -> dict[str, str]:
        """Return the credential fields that are set, for auth config merging."""
        values = {"username": self.username, "password": self.password}
        return {key: value for key, value in values.items() if value}


def get_settings() -> AppSettings:
    """Get a settings instance."""
    return AppSettings()
