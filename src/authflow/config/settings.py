"""Authentication flow configuration using pydantic-settings"""

from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration from AUTHFLOW_* environment variables"""

    model_config = SettingsConfigDict(
        env_prefix="AUTHFLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Callback handling
    callback_path: str = Field(
        default="callback",
        description="Callback sub-path relative to the mount prefix",
    )
    mount_prefix: str = Field(
        default="",
        description="Path prefix the authentication middleware is bound to",
    )
    public_address: Optional[str] = Field(
        default=None,
        description="Externally visible base URL (inferred from requests when unset)",
    )
    client_name_parameter: str = Field(
        default="client_name",
        description="Request parameter naming the client on callback",
    )
    default_url: str = Field(
        default="/",
        description="Redirect target when no requested URL is stored in the session",
    )

    # Session cookie
    session_secret: str = Field(
        default="change-me-in-production",
        description="Secret key signing the session cookie",
    )
    session_cookie: str = Field(
        default="authflow_session",
        description="Session cookie name",
    )
    session_max_age: int = Field(
        default=14 * 24 * 60 * 60,
        description="Session cookie lifetime in seconds (2 weeks)",
    )
    session_https_only: bool = Field(
        default=False,
        description="Only send the session cookie over HTTPS",
    )

    # Server Configuration
    host: str = Field(
        default="0.0.0.0",
        description="Bind host",
    )
    port: int = Field(
        default=8080,
        description="Bind port",
    )

    # CORS Configuration
    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173,http://localhost:8080",
        description="Comma-separated list of allowed CORS origins",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins into list"""
        return [origin.strip() for origin in self.cors_origins.split(",")]


# Singleton settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create settings singleton"""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
