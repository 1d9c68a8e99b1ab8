from __future__ import annotations

from dataclasses import dataclass

OUTCOME_SUCCESS = "success"
OUTCOME_CLIENT_ERROR = "client_error"
OUTCOME_CONFIGURATION_ERROR = "configuration_error"
OUTCOME_UPSTREAM_ERROR = "upstream_error"


@dataclass(frozen=True)
class ProxyTrace:
    request_id: str
    outcome: str
    status_code: int
    message_count: int
    latency_ms: int
    error_class: str | None = None
