from __future__ import annotations

import itertools
import logging
from uuid import uuid4

from digital_twin.app.conversation.contracts import (
    ConversationStatus,
    Failed,
    Idle,
    Message,
    OutboundRequest,
    Sending,
)
from digital_twin.app.persona.profile import (
    ASSISTANT_NAME,
    GREETING_MESSAGE_ID,
    GREETING_TEXT,
)
from digital_twin.app.proxy.contracts import ChatRole

LOGGER = logging.getLogger(__name__)

NO_REPLY_MESSAGE = f"Unable to get a response from {ASSISTANT_NAME}."


class ConversationStateMachine:
    """Client-side message log and send status for one chat view.

    At most one request is in flight. ``submit`` returns the outbound request
    to deliver; the caller reports the result with ``apply_reply`` or
    ``apply_failure``. Results arriving after ``close()`` are discarded.
    """

    def __init__(self, greeting: str = GREETING_TEXT) -> None:
        self._sequence = itertools.count(1)
        self._messages: list[Message] = [
            Message(id=GREETING_MESSAGE_ID, role=ChatRole.ASSISTANT, content=greeting)
        ]
        self._status: ConversationStatus = Idle()
        self._closed = False

    @property
    def messages(self) -> tuple[Message, ...]:
        return tuple(self._messages)

    @property
    def status(self) -> ConversationStatus:
        return self._status

    @property
    def error(self) -> str | None:
        if isinstance(self._status, Failed):
            return self._status.message
        return None

    @property
    def is_sending(self) -> bool:
        return isinstance(self._status, Sending)

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def has_user_messages(self) -> bool:
        return any(message.role is ChatRole.USER for message in self._messages)

    def submit(self, raw_text: str) -> OutboundRequest | None:
        prompt = raw_text.strip()
        if not prompt or self.is_sending or self._closed:
            return None

        self._messages.append(self._new_message(ChatRole.USER, prompt))
        self._status = Sending()
        return OutboundRequest(messages=tuple(self._messages))

    def apply_reply(self, reply: str) -> bool:
        if not self._accepts_result():
            return False
        text = reply.strip()
        if not text:
            self._status = Failed(message=NO_REPLY_MESSAGE)
            return True
        self._messages.append(self._new_message(ChatRole.ASSISTANT, text))
        self._status = Idle()
        return True

    def apply_failure(self, reason: str | None) -> bool:
        if not self._accepts_result():
            return False
        message = reason.strip() if isinstance(reason, str) else ""
        self._status = Failed(message=message or NO_REPLY_MESSAGE)
        return True

    def close(self) -> None:
        self._closed = True

    def _accepts_result(self) -> bool:
        if self._closed:
            LOGGER.debug("discarding result for a closed conversation")
            return False
        return self.is_sending

    def _new_message(self, role: ChatRole, content: str) -> Message:
        message_id = f"{role.value}-{next(self._sequence)}-{uuid4().hex[:6]}"
        return Message(id=message_id, role=role, content=content)
