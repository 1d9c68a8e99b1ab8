from __future__ import annotations

import asyncio
import logging

import httpx

from digital_twin.app.conversation.contracts import OutboundRequest
from digital_twin.app.conversation.state import (
    NO_REPLY_MESSAGE,
    ConversationStateMachine,
)

LOGGER = logging.getLogger(__name__)

PROXY_PATH = "/api/digital-twin"
CONNECTION_FAILED_MESSAGE = "Unable to connect to the digital twin right now."
CANCELLED_MESSAGE = "The request was stopped before a reply arrived."


class ConversationSendError(Exception):
    pass


class ProxyClient:
    def __init__(
        self,
        api_base_url: str,
        *,
        timeout: float = 45.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = f"{api_base_url.rstrip('/')}{PROXY_PATH}"
        self._timeout = timeout
        self._transport = transport

    async def send(self, request: OutboundRequest) -> str:
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(self._url, json=request.to_payload())
            body = response.json()
        except httpx.HTTPError as exc:
            LOGGER.warning("proxy request failed error_class=%s", exc.__class__.__name__)
            raise ConversationSendError(CONNECTION_FAILED_MESSAGE) from exc
        except ValueError as exc:
            raise ConversationSendError(NO_REPLY_MESSAGE) from exc

        if not isinstance(body, dict):
            raise ConversationSendError(NO_REPLY_MESSAGE)

        reply = body.get("reply")
        reply_text = reply.strip() if isinstance(reply, str) else ""
        if not response.is_success or not reply_text:
            error = body.get("error")
            raise ConversationSendError(
                error if isinstance(error, str) and error else NO_REPLY_MESSAGE
            )
        return reply_text


async def run_submission(
    machine: ConversationStateMachine,
    raw_text: str,
    client: ProxyClient,
) -> bool:
    request = machine.submit(raw_text)
    if request is None:
        return False

    try:
        reply = await client.send(request)
    except ConversationSendError as exc:
        machine.apply_failure(str(exc))
    except asyncio.CancelledError:
        machine.apply_failure(CANCELLED_MESSAGE)
        raise
    except Exception:
        LOGGER.exception("unexpected error while sending conversation")
        machine.apply_failure(CONNECTION_FAILED_MESSAGE)
    else:
        machine.apply_reply(reply)
    return True
