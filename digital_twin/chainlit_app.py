from __future__ import annotations

import os

import chainlit as cl

from digital_twin.app.conversation.client import ProxyClient, run_submission
from digital_twin.app.conversation.state import ConversationStateMachine
from digital_twin.app.persona.profile import ASSISTANT_NAME, STARTER_PROMPTS

API_BASE_URL = os.getenv("DIGITAL_TWIN_API_URL", "http://localhost:8000").rstrip("/")
DEFAULT_CLIENT_TIMEOUT_SECONDS = 45.0
MAX_PROMPT_CHARS = 1500
SESSION_KEY = "conversation"


@cl.on_chat_start
async def on_chat_start() -> None:
    machine = ConversationStateMachine()
    cl.user_session.set(SESSION_KEY, machine)
    await cl.Message(
        content=_build_welcome_message(machine), author=ASSISTANT_NAME
    ).send()


@cl.on_message
async def on_message(message: cl.Message) -> None:
    content = message.content.strip()
    if content.lower() == "/help":
        await cl.Message(content=_help_message(), author=ASSISTANT_NAME).send()
        return

    machine = _resolve_machine(cl.user_session.get(SESSION_KEY))
    if machine.is_sending:
        await cl.Message(content=_busy_message(), author=ASSISTANT_NAME).send()
        return

    client = ProxyClient(
        API_BASE_URL,
        timeout=_resolve_client_timeout(os.getenv("DIGITAL_TWIN_CLIENT_TIMEOUT")),
    )
    async with cl.Step(name=ASSISTANT_NAME, type="llm") as step:
        step.output = "Thinking..."
        issued = await run_submission(machine, _clip_prompt(content), client)

    if not issued or machine.is_closed:
        return

    if machine.error is not None:
        await cl.Message(content=machine.error, author=ASSISTANT_NAME).send()
        return

    await cl.Message(
        content=machine.messages[-1].content, author=ASSISTANT_NAME
    ).send()


@cl.on_chat_end
async def on_chat_end() -> None:
    machine = cl.user_session.get(SESSION_KEY)
    if isinstance(machine, ConversationStateMachine):
        machine.close()


def _resolve_machine(value: object) -> ConversationStateMachine:
    if isinstance(value, ConversationStateMachine):
        return value
    machine = ConversationStateMachine()
    cl.user_session.set(SESSION_KEY, machine)
    return machine


def _resolve_client_timeout(raw_value: str | None) -> float:
    if raw_value is None:
        return DEFAULT_CLIENT_TIMEOUT_SECONDS
    try:
        parsed = float(raw_value)
    except ValueError:
        return DEFAULT_CLIENT_TIMEOUT_SECONDS
    return parsed if parsed > 0 else DEFAULT_CLIENT_TIMEOUT_SECONDS


def _clip_prompt(text: str) -> str:
    return text[:MAX_PROMPT_CHARS]


def _starter_lines() -> str:
    return "\n".join(f"- {prompt}" for prompt in STARTER_PROMPTS)


def _build_welcome_message(machine: ConversationStateMachine) -> str:
    greeting = machine.messages[0].content
    if machine.has_user_messages:
        return greeting
    return f"{greeting}\n\nSuggested questions:\n{_starter_lines()}"


def _help_message() -> str:
    return (
        f"Ask {ASSISTANT_NAME} about architecture philosophy, major deliveries, "
        "leadership style, or certifications. For example:\n"
        f"{_starter_lines()}"
    )


def _busy_message() -> str:
    return f"{ASSISTANT_NAME} is still answering your previous question."
