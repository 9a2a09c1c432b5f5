"""Per-user chat session state."""

from __future__ import annotations

from dataclasses import dataclass, field

from invoice_assistant.models import Message


@dataclass
class ChatSession:
    """Message list and input state of one chat.

    Messages are only ever appended. The orchestrator is the sole writer; UI
    code reads ``messages`` and checks ``accepts_input`` before sending.
    """

    language: str = "en"
    messages: list[Message] = field(default_factory=list)
    busy: bool = False
    disabled: bool = False

    @property
    def accepts_input(self) -> bool:
        return not self.busy and not self.disabled

    def append(self, role: str, text: str) -> Message:
        message = Message(role=role, text=text)
        self.messages.append(message)
        return message
