"""Conversion of chat messages into provider turns."""

from __future__ import annotations

from collections.abc import Iterable

from invoice_assistant.models import Message, TextPart, Turn

# The provider calls the assistant side of the conversation "model".
_PROVIDER_ROLES = {"user": "user", "assistant": "model"}


def to_turns(messages: Iterable[Message], placeholders: Iterable[str] = ()) -> list[Turn]:
    """Map UI messages to single-text-part turns, dropping transient notices."""

    skipped = set(placeholders)
    return [
        Turn(role=_PROVIDER_ROLES.get(message.role, message.role), parts=(TextPart(text=message.text),))
        for message in messages
        if message.text not in skipped
    ]
