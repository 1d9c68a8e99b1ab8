from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, Field


class ChatRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class ChatTurn(BaseModel):
    role: ChatRole
    content: str = Field(min_length=1)

    def to_provider_message(self) -> dict[str, str]:
        return {"role": self.role.value, "content": self.content}


class ProxyReply(BaseModel):
    reply: str
    model: str


class ProxyErrorBody(BaseModel):
    error: str


@dataclass(frozen=True)
class ProxyOutcome:
    status_code: int
    payload: dict[str, str]

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300
