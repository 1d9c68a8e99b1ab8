from __future__ import annotations

from typing import Any

from digital_twin.core.config import AppConfig


def build_readiness_report(config: AppConfig, api_key: str | None) -> dict[str, Any]:
    provider = _provider_readiness(config, api_key)
    return {
        "ready": bool(provider["configured"]),
        "provider": provider,
    }


def _provider_readiness(config: AppConfig, api_key: str | None) -> dict[str, Any]:
    configured = bool(api_key)
    return {
        "configured": configured,
        "reason": (
            f"configured_with_{config.credential_env_name}"
            if configured
            else f"missing_{config.credential_env_name}"
        ),
        "model": config.provider_model,
    }
