from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from pathlib import Path

from digital_twin.core.config import AppConfig, load_app_config

LOGGER = logging.getLogger(__name__)

_QUOTES = ("'", '"')


def read_key_from_env_file(path: str | Path, key: str) -> str | None:
    try:
        raw = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None

    prefix = f"{key}="
    key_line = next(
        (line for line in raw.splitlines() if line.strip().startswith(prefix)),
        None,
    )
    if key_line is None:
        return None

    value = key_line[key_line.index("=") + 1 :].strip()
    if value[:1] in _QUOTES:
        value = value[1:]
    if value[-1:] in _QUOTES:
        value = value[:-1]
    return value or None


@dataclass(frozen=True)
class _ResolvedCredential:
    value: str | None
    source: str


class ProviderCredentialStore:
    """Resolves the provider API key once and serves it for the process lifetime.

    The environment variable wins over the fallback file. A miss is cached as
    well, so the fallback file is read at most once until ``reset()``.
    """

    def __init__(self, *, env_name: str, fallback_path: str | Path) -> None:
        self._env_name = env_name
        self._fallback_path = Path(fallback_path)
        self._lock = threading.Lock()
        self._resolved: _ResolvedCredential | None = None

    def get(self) -> str | None:
        resolved = self._resolved
        if resolved is not None:
            return resolved.value
        with self._lock:
            if self._resolved is None:
                self._resolved = self._resolve()
            return self._resolved.value

    @property
    def source(self) -> str | None:
        resolved = self._resolved
        return resolved.source if resolved is not None else None

    def reset(self) -> None:
        with self._lock:
            self._resolved = None

    def _resolve(self) -> _ResolvedCredential:
        from_env = (os.getenv(self._env_name) or "").strip()
        if from_env:
            return _ResolvedCredential(value=from_env, source="environment")

        from_file = read_key_from_env_file(self._fallback_path, self._env_name)
        if from_file:
            LOGGER.info(
                "provider credential resolved from fallback file %s",
                self._fallback_path,
            )
            return _ResolvedCredential(value=from_file, source="fallback_file")

        LOGGER.warning("provider credential %s is not configured", self._env_name)
        return _ResolvedCredential(value=None, source="missing")


def build_credential_store(config: AppConfig) -> ProviderCredentialStore:
    return ProviderCredentialStore(
        env_name=config.credential_env_name,
        fallback_path=config.fallback_env_path,
    )


_store_lock = threading.Lock()
_store: ProviderCredentialStore | None = None


def get_credential_store() -> ProviderCredentialStore:
    global _store
    if _store is None:
        with _store_lock:
            if _store is None:
                _store = build_credential_store(load_app_config())
    return _store


def get_provider_api_key() -> str | None:
    return get_credential_store().get()


def reset_credential_store() -> None:
    global _store
    with _store_lock:
        _store = None
