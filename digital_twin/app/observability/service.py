from __future__ import annotations

import json
import logging
import time
from dataclasses import asdict

from digital_twin.app.observability.contracts import (
    OUTCOME_CLIENT_ERROR,
    OUTCOME_SUCCESS,
    ProxyTrace,
)


def create_proxy_trace(
    request_id: str,
    started_at: float,
    *,
    outcome: str,
    status_code: int,
    message_count: int = 0,
    error_class: str | None = None,
) -> ProxyTrace:
    elapsed_ms = int((time.perf_counter() - started_at) * 1000)
    return ProxyTrace(
        request_id=request_id,
        outcome=outcome,
        status_code=status_code,
        message_count=message_count,
        latency_ms=max(elapsed_ms, 0),
        error_class=error_class,
    )


def emit_proxy_telemetry(
    trace: ProxyTrace,
    logger: logging.Logger | None = None,
) -> None:
    active_logger = logger or logging.getLogger(__name__)
    level = (
        logging.INFO
        if trace.outcome in {OUTCOME_SUCCESS, OUTCOME_CLIENT_ERROR}
        else logging.WARNING
    )
    active_logger.log(level, "proxy_event %s", json.dumps(asdict(trace), sort_keys=True))
