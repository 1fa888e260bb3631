"""Application configuration."""

import logging
from functools import lru_cache
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

RESPONSE_VARIANTS = ("json", "html")


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Built once per process and passed explicitly to the handler.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # App
    app_name: str = "SecretHide"
    log_level: str = "INFO"

    # reCAPTCHA
    recaptcha_secret_key: str = ""
    siteverify_url: str = "https://www.recaptcha.net/recaptcha/api/siteverify"
    siteverify_timeout: float = 10.0

    # Disclosed on a successful check
    email_address: str = ""

    # "json" or "html"
    response_variant: str = "json"

    @field_validator("response_variant", mode="before")
    @classmethod
    def normalize_response_variant(cls, v: Any) -> str:
        if isinstance(v, str):
            v = v.strip().lower()
        if v not in RESPONSE_VARIANTS:
            raise ValueError(f"response_variant must be one of {RESPONSE_VARIANTS}, got {v!r}")
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> str:
        if isinstance(v, str):
            return v.strip().upper()
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(settings: Settings) -> None:
    """Set up root logging for an entry point."""
    logging.basicConfig(level=settings.log_level, format="%(levelname)s: %(name)s: %(message)s")
    # Request URLs carry the shared secret; httpx logs them at INFO.
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)
