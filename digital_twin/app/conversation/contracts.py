from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from digital_twin.app.proxy.contracts import ChatRole


@dataclass(frozen=True)
class Message:
    id: str
    role: ChatRole
    content: str


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Sending:
    pass


@dataclass(frozen=True)
class Failed:
    message: str


ConversationStatus = Union[Idle, Sending, Failed]


@dataclass(frozen=True)
class OutboundRequest:
    messages: tuple[Message, ...]

    def to_payload(self) -> dict[str, list[dict[str, str]]]:
        return {
            "messages": [
                {"role": message.role.value, "content": message.content}
                for message in self.messages
            ]
        }
