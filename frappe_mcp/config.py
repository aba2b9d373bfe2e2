"""Environment-based configuration using pydantic-settings.

All values are read from environment variables (or a local ``.env`` file):

    FRAPPE_URL=https://erp.example.com
    FRAPPE_API_KEY=...
    FRAPPE_API_SECRET=...
    FRAPPE_USERNAME=...        # optional, legacy password channel
    FRAPPE_PASSWORD=...
    FRAPPE_TEAM_NAME=...       # sent as X-Press-Team
    MCP_LOG_LEVEL=DEBUG
"""

from typing import Literal

from pydantic import AliasChoices, Field, PositiveFloat, PositiveInt, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Server configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Frappe backend
    frappe_url: str = Field(default="http://localhost:8000", description="Frappe site URL")
    frappe_api_key: SecretStr | None = Field(default=None, description="API key (token auth)")
    frappe_api_secret: SecretStr | None = Field(default=None, description="API secret (token auth)")
    frappe_username: str | None = Field(default=None, description="Username for password auth")
    frappe_password: SecretStr | None = Field(
        default=None, description="Password for password auth"
    )
    frappe_team_name: str = Field(default="", description="Value for the X-Press-Team header")
    frappe_timeout: PositiveFloat = Field(
        default=30.0, description="Per-request timeout in seconds"
    )

    # Password session lifetime
    auth_ttl_seconds: PositiveInt = Field(default=1800, description="Login session TTL in seconds")

    # Usage hints
    static_hints_dir: str = Field(
        default="static_hints", description="Directory of JSON hint files"
    )

    # Server
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        validation_alias=AliasChoices("MCP_LOG_LEVEL", "LOG_LEVEL"),
    )
    host: str = Field(default="127.0.0.1", validation_alias=AliasChoices("MCP_HOST", "HOST"))
    port: PositiveInt = Field(default=0xCAF1, validation_alias=AliasChoices("MCP_PORT", "PORT"))
    debug: bool = False
    cors_allowed_origins: str = Field(default="*", description="Comma-separated CORS origins")

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_allowed_origins.split(",") if o.strip()]


settings = Settings()
