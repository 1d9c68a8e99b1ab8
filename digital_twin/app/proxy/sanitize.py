from __future__ import annotations

import json
from typing import Any

from digital_twin.app.proxy.contracts import ChatRole, ChatTurn
from digital_twin.app.proxy.errors import ClientInputError

INVALID_BODY_MESSAGE = "Invalid JSON body."
NO_VALID_MESSAGES_MESSAGE = "Provide at least one valid message."

_ALLOWED_ROLES = {role.value for role in ChatRole}


def parse_request_body(raw: bytes | str) -> dict[str, Any]:
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError, RecursionError) as exc:
        raise ClientInputError(INVALID_BODY_MESSAGE) from exc
    if not isinstance(payload, dict):
        raise ClientInputError(INVALID_BODY_MESSAGE)
    return payload


def _to_turn(entry: object) -> ChatTurn | None:
    if not isinstance(entry, dict):
        return None
    role = entry.get("role")
    content = entry.get("content")
    if not isinstance(role, str) or role not in _ALLOWED_ROLES:
        return None
    if not isinstance(content, str) or not content.strip():
        return None
    return ChatTurn(role=ChatRole(role), content=content)


def filter_messages(entries: object) -> list[ChatTurn]:
    if not isinstance(entries, list):
        return []
    turns: list[ChatTurn] = []
    for entry in entries:
        turn = _to_turn(entry)
        if turn is not None:
            turns.append(turn)
    return turns


def sanitize_messages(payload: dict[str, Any], max_messages: int) -> list[ChatTurn]:
    turns = filter_messages(payload.get("messages"))
    if max_messages > 0:
        turns = turns[-max_messages:]
    if not turns:
        raise ClientInputError(NO_VALID_MESSAGES_MESSAGE)
    return turns
