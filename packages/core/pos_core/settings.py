from __future__ import annotations

import logging
from urllib.parse import urlparse

from pydantic import Field
from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

log = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Settings loaded from environment variables (and optional .env)."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_ENV: str = Field(default="local")
    LOG_LEVEL: str = Field(default="INFO")

    POS_API_BASE_URL: str = Field(default="http://localhost:8000")
    POS_TOKEN_PATH: str = Field(default="/api/token/")
    POS_TOKEN_REFRESH_PATH: str = Field(default="/api/token/refresh/")
    POS_LOGOUT_PATH: str = Field(default="/api/auth/logout/")

    POS_HTTP_CONNECT_TIMEOUT: float = Field(default=5.0)
    POS_HTTP_READ_TIMEOUT: float = Field(default=30.0)

    POS_SESSION_FILE: str = Field(default="")
    POS_LOW_STOCK_DEFAULT: int = Field(default=0)

    @model_validator(mode="after")
    def validate_runtime_requirements(self) -> Settings:
        base = self.POS_API_BASE_URL.strip()
        if not base:
            raise RuntimeError("Missing required environment variable: POS_API_BASE_URL")

        scheme = urlparse(base).scheme
        if scheme not in {"http", "https"}:
            raise RuntimeError(f"POS_API_BASE_URL must use http or https, got {base!r}")

        missing_paths = [
            name
            for name, value in {
                "POS_TOKEN_PATH": self.POS_TOKEN_PATH,
                "POS_TOKEN_REFRESH_PATH": self.POS_TOKEN_REFRESH_PATH,
                "POS_LOGOUT_PATH": self.POS_LOGOUT_PATH,
            }.items()
            if not str(value).strip()
        ]
        if missing_paths:
            raise RuntimeError(f"Missing required environment variables: {', '.join(missing_paths)}")

        if self.POS_HTTP_CONNECT_TIMEOUT <= 0 or self.POS_HTTP_READ_TIMEOUT <= 0:
            raise RuntimeError("POS_HTTP_*_TIMEOUT must be positive")

        if scheme == "http" and self.APP_ENV != "local":
            log.warning(
                "POS_API_BASE_URL uses plain http while APP_ENV=%s; tokens will travel unencrypted",
                self.APP_ENV,
            )

        return self


def get_settings() -> Settings:
    return Settings()
