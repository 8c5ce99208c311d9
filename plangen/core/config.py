"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Nested BaseSettings don't inherit env_file, so populate os.environ first
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=False)


def _build_llm_settings() -> "LLMSettings":
    """Build LLM settings from environment.

    Static type checkers treat required fields as constructor arguments,
    which is not how BaseSettings is meant to be used.
    """

    return LLMSettings()  # type: ignore[call-arg]


def _build_app_settings() -> "AppSettings":
    return AppSettings()  # type: ignore[call-arg]


def _build_log_settings() -> "LogSettings":
    return LogSettings()  # type: ignore[call-arg]


class LLMSettings(BaseSettings):
    """LLM provider configuration.

    Validation of provider-specific requirements happens in the factory.
    """

    provider: str = Field(
        "openai",
        description="LLM provider name (currently only openai)",
    )
    model: str = Field(
        "gpt-4",
        description="Model name used for plan generation",
    )
    api_key: str | None = Field(
        None,
        description="API key for the provider (required for OpenAI)",
    )
    base_url: str | None = Field(
        None,
        description="Custom API endpoint (OpenAI-compatible gateways)",
    )
    timeout_seconds: float = Field(
        60.0,
        description="Request timeout in seconds",
    )
    max_tokens: int = Field(
        2000,
        description="Maximum completion tokens per generated plan",
        ge=1,
    )
    temperature: float = Field(
        0.7,
        description="Sampling temperature for plan generation",
        ge=0.0,
        le=2.0,
    )

    model_config = SettingsConfigDict(
        env_prefix="LLM_",
        case_sensitive=False,
    )


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )
    public_base_url: str = Field(
        "http://localhost:3000",
        description="Base URL used when building share links and CLI commands",
    )
    cli_package: str = Field(
        "create-vibe-code-app",
        description="npm package of the scaffolding CLI printed in commands",
    )
    default_project_name: str = Field(
        "my-project",
        description="Project directory name used in generated CLI commands",
    )
    min_idea_chars: int = Field(20, ge=1)
    max_idea_chars: int = Field(1000, ge=1)
    min_plan_chars: int = Field(100, ge=1)
    max_plan_chars: int = Field(
        50000,
        ge=1,
        description="Maximum stored plan size in characters",
    )
    max_decoded_bytes: int = Field(
        1_000_000,
        ge=1,
        description="Upper bound on decompressed token size",
    )

    rate_limit_enabled: bool = Field(
        True,
        description="Enable per-client rate limiting on costed routes",
    )
    rate_limit_include_headers: bool = Field(
        True,
        description="Include X-RateLimit-* and Retry-After headers",
    )
    rate_limit_sweep_interval_seconds: float = Field(
        3600.0,
        gt=0,
        description="Interval between sweeps of expired rate limit windows",
    )

    plan_ttl_seconds: float = Field(
        30 * 24 * 60 * 60,
        gt=0,
        description="Lifetime of a stored plan",
    )
    plan_sweep_interval_seconds: float = Field(
        24 * 60 * 60,
        gt=0,
        description="Interval between sweeps of expired stored plans",
    )
    plan_id_max_attempts: int = Field(
        10,
        ge=1,
        description="Maximum id generation attempts before giving up",
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging configuration."""

    level: str = Field("INFO", description="Root log level")
    format: Literal["json", "plain"] = Field(
        "json",
        description="Output format: json or plain",
    )
    output: Literal["stdout", "file"] = Field(
        "stdout",
        description="Where to write logs",
    )
    file_path: str | None = Field(
        None,
        description="Log file path when output=file",
    )
    max_bytes: int = Field(
        10 * 1024 * 1024,
        ge=0,
        description="Rotate the log file after this many bytes (0 disables rotation)",
    )
    backup_count: int = Field(5, ge=0)
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header used to propagate the request correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    """

    app_env: str = APP_ENV
    llm: LLMSettings = Field(default_factory=_build_llm_settings)
    app: AppSettings = Field(default_factory=_build_app_settings)
    log: LogSettings = Field(default_factory=_build_log_settings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Global settings instance - composed from domain-specific settings
settings = Settings()
