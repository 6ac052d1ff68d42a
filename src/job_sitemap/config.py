from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Sequence

from pydantic import BaseModel, Field, ValidationError, field_validator

from job_sitemap.errors import ConfigError

DEFAULT_APPWRITE_ENDPOINT = "https://cloud.appwrite.io/v1"
DEFAULT_BASE_URL = "https://hiredup.me"
DEFAULT_OUTPUT_DIRNAME = "public"

RUN_REQUIRED_ENVS = (
    "APPWRITE_PROJECT_ID",
    "APPWRITE_API_KEY",
    "DATABASE_ID",
    "COLLECTION_ID",
)


class Settings(BaseModel):
    appwrite_endpoint: str = DEFAULT_APPWRITE_ENDPOINT
    appwrite_project_id: str = ""
    appwrite_api_key: str = ""
    database_id: str = ""
    collection_id: str = ""
    base_url: str = DEFAULT_BASE_URL
    output_dir: Path = Field(default_factory=lambda: Path.cwd() / DEFAULT_OUTPUT_DIRNAME)
    request_timeout_seconds: float = Field(default=30.0, gt=0.0)
    log_level: str = "INFO"

    @field_validator("appwrite_endpoint", "base_url")
    @classmethod
    def _validate_http_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError("URL must start with http:// or https://")
        return value.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {value}")
        return level


def _env_value(environ: Mapping[str, str], key: str) -> str:
    return environ.get(key, "").strip()


def missing_envs(required: Sequence[str], environ: Mapping[str, str] | None = None) -> list[str]:
    source = os.environ if environ is None else environ
    return [key for key in required if not _env_value(source, key)]


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    source = os.environ if environ is None else environ
    payload: dict[str, object] = {
        "appwrite_endpoint": _env_value(source, "APPWRITE_ENDPOINT") or DEFAULT_APPWRITE_ENDPOINT,
        "appwrite_project_id": _env_value(source, "APPWRITE_PROJECT_ID"),
        "appwrite_api_key": _env_value(source, "APPWRITE_API_KEY"),
        "database_id": _env_value(source, "DATABASE_ID"),
        "collection_id": _env_value(source, "COLLECTION_ID"),
        "base_url": _env_value(source, "SITE_BASE_URL") or DEFAULT_BASE_URL,
        "request_timeout_seconds": _env_value(source, "REQUEST_TIMEOUT_SECONDS") or "30",
        "log_level": _env_value(source, "LOG_LEVEL") or "INFO",
    }
    output_dir = _env_value(source, "SITEMAP_OUTPUT_DIR")
    if output_dir:
        payload["output_dir"] = Path(output_dir)
    try:
        return Settings(**payload)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc


def assert_required_envs(required: Sequence[str], environ: Mapping[str, str] | None = None) -> None:
    missing = missing_envs(required, environ)
    if missing:
        keys = ", ".join(missing)
        raise ConfigError(f"Missing required environment variables: {keys}")


def assert_required_settings(settings: Settings) -> None:
    """Same check as ``assert_required_envs`` for an already-built ``Settings``."""
    fields = {
        "APPWRITE_PROJECT_ID": settings.appwrite_project_id,
        "APPWRITE_API_KEY": settings.appwrite_api_key,
        "DATABASE_ID": settings.database_id,
        "COLLECTION_ID": settings.collection_id,
    }
    missing = [key for key in RUN_REQUIRED_ENVS if not fields[key].strip()]
    if missing:
        raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")


def mask_secret(value: str, visible_prefix: int = 3, visible_suffix: int = 2) -> str:
    if not value:
        return ""
    if len(value) <= visible_prefix + visible_suffix:
        return "*" * len(value)
    hidden = "*" * (len(value) - visible_prefix - visible_suffix)
    return f"{value[:visible_prefix]}{hidden}{value[-visible_suffix:]}"
