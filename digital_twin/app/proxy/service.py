from __future__ import annotations

import logging
import time
from uuid import uuid4

from digital_twin.app.llm.contracts import CompletionResult
from digital_twin.app.llm.normalize import render_reply_text
from digital_twin.app.llm.providers import CompletionProvider, build_completion_provider
from digital_twin.app.observability.contracts import (
    OUTCOME_CLIENT_ERROR,
    OUTCOME_CONFIGURATION_ERROR,
    OUTCOME_SUCCESS,
    OUTCOME_UPSTREAM_ERROR,
)
from digital_twin.app.observability.service import (
    create_proxy_trace,
    emit_proxy_telemetry,
)
from digital_twin.app.persona.profile import build_system_message
from digital_twin.app.proxy.contracts import (
    ChatTurn,
    ProxyErrorBody,
    ProxyOutcome,
    ProxyReply,
)
from digital_twin.app.proxy.errors import (
    ClientInputError,
    ConfigurationError,
    ProxyError,
    UpstreamError,
)
from digital_twin.app.proxy.sanitize import parse_request_body, sanitize_messages
from digital_twin.core.config import AppConfig

LOGGER = logging.getLogger(__name__)

EMPTY_REPLY_MESSAGE = "Model returned an empty response."

_OUTCOME_BY_ERROR: dict[type[ProxyError], str] = {
    ClientInputError: OUTCOME_CLIENT_ERROR,
    ConfigurationError: OUTCOME_CONFIGURATION_ERROR,
    UpstreamError: OUTCOME_UPSTREAM_ERROR,
}


def missing_credential_message(env_name: str) -> str:
    return f"{env_name} is missing. Add it to the environment or ../.env."


class AssistantProxy:
    """Validates a candidate conversation and relays it to the completion provider.

    One instance serves one request: received -> validated -> dispatched ->
    normalized. The first error ends the request; there are no retries.
    """

    def __init__(
        self,
        config: AppConfig,
        *,
        api_key: str | None,
        provider: CompletionProvider | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._config = config
        self._api_key = api_key
        self._provider = provider
        self._logger = logger or LOGGER

    def validate(self, raw_body: bytes | str) -> list[ChatTurn]:
        payload = parse_request_body(raw_body)
        return sanitize_messages(payload, self._config.max_messages)

    async def dispatch(self, turns: list[ChatTurn]) -> CompletionResult:
        messages = [build_system_message()]
        messages.extend(turn.to_provider_message() for turn in turns)
        return await self._require_provider().complete(messages)

    def normalize(self, result: CompletionResult) -> ProxyReply:
        reply = render_reply_text(result.content)
        if not reply:
            raise UpstreamError(EMPTY_REPLY_MESSAGE)
        return ProxyReply(reply=reply, model=result.model)

    async def handle(self, raw_body: bytes | str) -> ProxyOutcome:
        request_id = uuid4().hex
        started_at = time.perf_counter()
        message_count = 0
        try:
            self._require_api_key()
            turns = self.validate(raw_body)
            message_count = len(turns)
            result = await self.dispatch(turns)
            reply = self.normalize(result)
        except ProxyError as exc:
            emit_proxy_telemetry(
                create_proxy_trace(
                    request_id,
                    started_at,
                    outcome=_outcome_for(exc),
                    status_code=exc.status_code,
                    message_count=message_count,
                    error_class=exc.__class__.__name__,
                ),
                logger=self._logger,
            )
            return ProxyOutcome(
                status_code=exc.status_code,
                payload=ProxyErrorBody(error=exc.message).model_dump(),
            )

        emit_proxy_telemetry(
            create_proxy_trace(
                request_id,
                started_at,
                outcome=OUTCOME_SUCCESS,
                status_code=200,
                message_count=message_count,
            ),
            logger=self._logger,
        )
        return ProxyOutcome(status_code=200, payload=reply.model_dump())

    def _require_api_key(self) -> str:
        if not self._api_key:
            raise ConfigurationError(
                missing_credential_message(self._config.credential_env_name)
            )
        return self._api_key

    def _require_provider(self) -> CompletionProvider:
        if self._provider is None:
            self._provider = build_completion_provider(
                self._config, self._require_api_key()
            )
        return self._provider


def _outcome_for(exc: ProxyError) -> str:
    for error_type, outcome in _OUTCOME_BY_ERROR.items():
        if isinstance(exc, error_type):
            return outcome
    return OUTCOME_UPSTREAM_ERROR
