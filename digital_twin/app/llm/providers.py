from __future__ import annotations

import logging
from typing import Any

import httpx

from digital_twin.app.llm.contracts import CompletionResult
from digital_twin.app.llm.normalize import parse_reply_content
from digital_twin.app.persona.profile import PROVIDER_APP_TITLE
from digital_twin.app.proxy.errors import UpstreamError
from digital_twin.core.config import AppConfig

LOGGER = logging.getLogger(__name__)

UNREACHABLE_MESSAGE = "Unable to reach OpenRouter. Please try again."
REQUEST_FAILED_MESSAGE = "OpenRouter request failed."


class CompletionProvider:
    async def complete(self, messages: list[dict[str, str]]) -> CompletionResult:
        raise NotImplementedError


class OpenRouterCompletionProvider(CompletionProvider):
    def __init__(
        self,
        *,
        api_key: str,
        url: str,
        model: str,
        temperature: float,
        max_tokens: int,
        timeout_seconds: float,
        site_url: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._url = url
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._timeout_seconds = timeout_seconds
        self._site_url = site_url
        self._transport = transport

    @property
    def model(self) -> str:
        return self._model

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": self._site_url,
            "X-Title": PROVIDER_APP_TITLE,
        }

    def _payload(self, messages: list[dict[str, str]]) -> dict[str, Any]:
        return {
            "model": self._model,
            "temperature": self._temperature,
            "max_tokens": self._max_tokens,
            "messages": messages,
        }

    async def complete(self, messages: list[dict[str, str]]) -> CompletionResult:
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    self._url,
                    headers=self._headers(),
                    json=self._payload(messages),
                )
            body = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            LOGGER.warning(
                "provider request failed error_class=%s", exc.__class__.__name__
            )
            raise UpstreamError(UNREACHABLE_MESSAGE) from exc

        if not response.is_success:
            raise UpstreamError(_error_message(body) or REQUEST_FAILED_MESSAGE)

        return CompletionResult(
            content=parse_reply_content(_first_choice_content(body)),
            model=self._model,
        )


def _error_message(body: object) -> str | None:
    if not isinstance(body, dict):
        return None
    error = body.get("error")
    if not isinstance(error, dict):
        return None
    message = error.get("message")
    if isinstance(message, str) and message.strip():
        return message
    return None


def _first_choice_content(body: object) -> object:
    if not isinstance(body, dict):
        return None
    choices = body.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    message = first.get("message")
    if not isinstance(message, dict):
        return None
    return message.get("content")


def build_completion_provider(
    config: AppConfig,
    api_key: str,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> CompletionProvider:
    return OpenRouterCompletionProvider(
        api_key=api_key,
        url=config.provider_url,
        model=config.provider_model,
        temperature=config.temperature,
        max_tokens=config.max_tokens,
        timeout_seconds=config.provider_timeout_seconds,
        site_url=config.site_url,
        transport=transport,
    )
