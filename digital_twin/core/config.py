from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_PROVIDER_URL = "https://openrouter.ai/api/v1/chat/completions"
DEFAULT_PROVIDER_MODEL = "gpt-oss-120b"
CREDENTIAL_ENV_NAME = "OPENROUTER_API_KEY"


@dataclass(frozen=True)
class AppConfig:
    app_name: str
    app_version: str
    environment: str
    provider_url: str
    provider_model: str
    temperature: float
    max_tokens: int
    max_messages: int
    provider_timeout_seconds: float
    site_url: str
    credential_env_name: str
    fallback_env_path: str


def _read_optional_env(name: str) -> str | None:
    value = os.getenv(name)
    if not value:
        return None
    stripped = value.strip()
    return stripped if stripped else None


def _read_int_env(name: str, default: int) -> int:
    value = _read_optional_env(name)
    if value is None:
        return default
    try:
        parsed = int(value)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_float_env(
    name: str,
    default: float,
    *,
    minimum: float = 0.0,
    maximum: float | None = None,
) -> float:
    value = _read_optional_env(name)
    if value is None:
        return default
    try:
        parsed = float(value)
    except ValueError:
        return default
    if parsed < minimum:
        return default
    if maximum is not None and parsed > maximum:
        return maximum
    return parsed


def default_fallback_env_path() -> str:
    return str(Path.cwd().parent / ".env")


def load_app_config() -> AppConfig:
    return AppConfig(
        app_name=os.getenv("APP_NAME", "Adrian Kolek Digital Twin"),
        app_version=os.getenv("APP_VERSION", "0.1.0"),
        environment=os.getenv("APP_ENV", "development"),
        provider_url=_read_optional_env("OPENROUTER_URL") or DEFAULT_PROVIDER_URL,
        provider_model=_read_optional_env("OPENROUTER_MODEL") or DEFAULT_PROVIDER_MODEL,
        temperature=_read_float_env(
            "OPENROUTER_TEMPERATURE", default=0.4, maximum=2.0
        ),
        max_tokens=_read_int_env("OPENROUTER_MAX_TOKENS", default=500),
        max_messages=_read_int_env("DIGITAL_TWIN_MAX_MESSAGES", default=12),
        provider_timeout_seconds=_read_float_env(
            "PROVIDER_TIMEOUT_SECONDS", default=30.0, minimum=1.0
        ),
        site_url=_read_optional_env("SITE_URL")
        or _read_optional_env("NEXT_PUBLIC_SITE_URL")
        or "http://localhost:3000",
        credential_env_name=CREDENTIAL_ENV_NAME,
        fallback_env_path=_read_optional_env("DIGITAL_TWIN_FALLBACK_ENV")
        or default_fallback_env_path(),
    )
