from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from digital_twin.app.api.app import PROXY_ROUTE, create_app
from digital_twin.app.conversation.client import ProxyClient, run_submission
from digital_twin.app.conversation.contracts import Idle
from digital_twin.app.conversation.state import ConversationStateMachine
from digital_twin.app.llm.contracts import CompletionResult, TextContent
from digital_twin.app.llm.providers import CompletionProvider
from digital_twin.app.proxy.errors import UpstreamError


class _FakeProvider(CompletionProvider):
    def __init__(
        self, reply: str | None = None, error: Exception | None = None
    ) -> None:
        self.reply = reply
        self.error = error
        self.calls: list[list[dict[str, str]]] = []

    async def complete(self, messages: list[dict[str, str]]) -> CompletionResult:
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        return CompletionResult(
            content=TextContent(text=self.reply or ""), model="gpt-oss-120b"
        )


def _install(
    monkeypatch, provider: CompletionProvider, api_key: str | None = "sk"
) -> None:
    monkeypatch.setattr(
        "digital_twin.app.api.app.get_provider_api_key", lambda: api_key
    )
    monkeypatch.setattr(
        "digital_twin.app.proxy.service.build_completion_provider",
        lambda config, key: provider,
    )


def _asgi_client(app) -> ProxyClient:
    return ProxyClient(
        "http://testserver",
        transport=httpx.ASGITransport(app=app),
    )


def test_proxy_route_returns_reply(monkeypatch) -> None:
    provider = _FakeProvider(reply="Architecture and delivery.")
    _install(monkeypatch, provider)

    with TestClient(create_app()) as client:
        response = client.post(
            PROXY_ROUTE,
            json={
                "messages": [
                    {"role": "user", "content": "What are your strongest skills?"}
                ]
            },
        )

    assert response.status_code == 200
    assert response.json() == {
        "reply": "Architecture and delivery.",
        "model": "gpt-oss-120b",
    }
    assert provider.calls[0][0]["role"] == "system"


def test_proxy_route_rejects_malformed_json_with_400(monkeypatch) -> None:
    _install(monkeypatch, _FakeProvider(reply="unused"))

    with TestClient(create_app()) as client:
        response = client.post(
            PROXY_ROUTE,
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid JSON body."}


def test_proxy_route_reports_missing_credential(monkeypatch) -> None:
    provider = _FakeProvider(reply="unused")
    _install(monkeypatch, provider, api_key=None)

    with TestClient(create_app()) as client:
        response = client.post(
            PROXY_ROUTE, json={"messages": [{"role": "user", "content": "hi"}]}
        )

    assert response.status_code == 500
    assert "OPENROUTER_API_KEY" in response.json()["error"]
    assert provider.calls == []


@pytest.mark.asyncio
async def test_strongest_skills_round_trip(monkeypatch) -> None:
    _install(monkeypatch, _FakeProvider(reply="Architecture and delivery."))
    machine = ConversationStateMachine()

    issued = await run_submission(
        machine, "What are your strongest skills?", _asgi_client(create_app())
    )

    assert issued
    assert [message.content for message in machine.messages[1:]] == [
        "What are your strongest skills?",
        "Architecture and delivery.",
    ]
    assert machine.status == Idle()


@pytest.mark.asyncio
async def test_proxy_route_rejects_blank_only_conversation(monkeypatch) -> None:
    provider = _FakeProvider(reply="unused")
    _install(monkeypatch, provider)
    app = create_app()

    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://testserver"
    ) as client:
        response = await client.post(
            PROXY_ROUTE, json={"messages": [{"role": "user", "content": "  "}]}
        )

    assert response.status_code == 400
    assert response.json() == {"error": "Provide at least one valid message."}
    assert provider.calls == []


@pytest.mark.asyncio
async def test_provider_transport_failure_leaves_conversation_unchanged(
    monkeypatch,
) -> None:
    _install(
        monkeypatch,
        _FakeProvider(
            error=UpstreamError("Unable to reach OpenRouter. Please try again.")
        ),
    )
    machine = ConversationStateMachine()

    await run_submission(machine, "hello", _asgi_client(create_app()))

    assert len(machine.messages) == 2
    assert machine.messages[-1].content == "hello"
    assert machine.error == "Unable to reach OpenRouter. Please try again."


@pytest.mark.asyncio
async def test_server_error_becomes_client_error_state_verbatim(monkeypatch) -> None:
    provider = _FakeProvider(reply="unused")
    _install(monkeypatch, provider, api_key=None)
    machine = ConversationStateMachine()

    issued = await run_submission(machine, "hello", _asgi_client(create_app()))

    assert issued
    assert len(machine.messages) == 2
    assert machine.messages[-1].content == "hello"
    assert machine.error == (
        "OPENROUTER_API_KEY is missing. Add it to the environment or ../.env."
    )
    assert provider.calls == []
