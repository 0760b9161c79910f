"""Application configuration for the token server."""
from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Any, Literal

from pydantic import Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

_CREDENTIAL_ENV_NAMES = {
    "agora_app_id": "AGORA_APP_ID",
    "agora_app_certificate": "AGORA_APP_CERTIFICATE",
}


class StartupConfigurationError(RuntimeError):
    """Raised when the process cannot start because app credentials are missing."""


class Settings(BaseSettings):
    """Runtime configuration, read once at process start."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    app_env: str = Field(default="development")
    log_level: Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"] = Field(default="INFO")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000, ge=1, le=65535)
    cors_allow_origins: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["*"])

    agora_app_id: str = Field(..., min_length=1)
    agora_app_certificate: SecretStr = Field(...)

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("agora_app_id", mode="before")
    @classmethod
    def _strip_app_id(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("agora_app_certificate", mode="before")
    @classmethod
    def _require_certificate(cls, value: object) -> object:
        """Blank certificates count as missing."""

        if isinstance(value, SecretStr):
            value = value.get_secret_value()
        if isinstance(value, str):
            value = value.strip()
            if not value:
                raise ValueError("AGORA_APP_CERTIFICATE must not be empty")
        return value

    @field_validator("cors_allow_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: object) -> object:
        """Allow comma-separated env values for CORS origins."""

        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value


def load_settings(**overrides: Any) -> Settings:
    """Build settings from the environment, failing loudly on missing credentials.

    The raised error names the offending variables but never echoes their
    values, since pydantic's own message includes the rejected input.
    """

    try:
        return Settings(**overrides)
    except ValidationError as exc:
        fields = sorted({str(error["loc"][0]) for error in exc.errors() if error.get("loc")})
        names = [_CREDENTIAL_ENV_NAMES.get(field, field.upper()) for field in fields]
        message = (
            "AGORA_APP_ID and AGORA_APP_CERTIFICATE must be set in environment variables "
            f"(invalid or missing: {', '.join(names)})"
        )
        raise StartupConfigurationError(message) from None


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""

    return load_settings()
