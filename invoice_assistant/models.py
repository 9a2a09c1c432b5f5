"""Core domain models used across layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union


class InvoiceStatus(str, Enum):
    """Lifecycle status of an invoice."""

    PENDING = "Pending"
    PAID = "Paid"
    OVERDUE = "Overdue"


@dataclass(slots=True)
class Message:
    """Chat message as shown to the user."""

    role: str
    text: str


@dataclass(slots=True, frozen=True)
class TextPart:
    text: str

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text}


@dataclass(slots=True, frozen=True)
class FunctionCallPart:
    """Operation requested by the model."""

    name: str
    args: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"functionCall": {"name": self.name, "args": self.args}}


@dataclass(slots=True, frozen=True)
class FunctionResponsePart:
    """Result of a locally executed operation, fed back to the model."""

    name: str
    response: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {"functionResponse": {"name": self.name, "response": self.response}}


@dataclass(slots=True, frozen=True)
class RawPart:
    """Provider part kept verbatim so replies can be replayed unchanged."""

    data: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return dict(self.data)


Part = Union[TextPart, FunctionCallPart, FunctionResponsePart, RawPart]


def part_from_dict(data: dict[str, Any]) -> Part:
    """Build a part from the provider's JSON shape."""

    if set(data) == {"text"}:
        return TextPart(text=str(data["text"]))
    if set(data) == {"functionCall"}:
        call = data["functionCall"] or {}
        return FunctionCallPart(name=str(call.get("name", "")), args=dict(call.get("args") or {}))
    return RawPart(data=dict(data))


@dataclass(slots=True, frozen=True)
class Turn:
    """One entry of the provider conversation: a role and its ordered parts."""

    role: str
    parts: tuple[Part, ...]

    def to_dict(self) -> dict[str, Any]:
        return {"role": self.role, "parts": [part.to_dict() for part in self.parts]}


@dataclass(slots=True)
class Invoice:
    """Invoice record owned by the store."""

    id: str
    client_name: str
    amount: float
    issue_date: str
    due_date: str
    status: InvoiceStatus
    observations: str = ""

    def to_payload(self) -> dict[str, Any]:
        """Return the camelCase shape exposed to the model."""

        return {
            "id": self.id,
            "clientName": self.client_name,
            "amount": self.amount,
            "issueDate": self.issue_date,
            "dueDate": self.due_date,
            "status": self.status.value,
            "observations": self.observations,
        }

    def summary(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "clientName": self.client_name,
            "amount": self.amount,
            "status": self.status.value,
            "dueDate": self.due_date,
        }


@dataclass(slots=True)
class RelayResponse:
    """Normalized model reply returned by the relay."""

    text: str | None = None
    function_calls: list[FunctionCallPart] = field(default_factory=list)
    parts: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> RelayResponse:
        calls = [
            FunctionCallPart(name=str(call.get("name", "")), args=dict(call.get("args") or {}))
            for call in payload.get("functionCalls") or []
        ]
        return cls(text=payload.get("text"), function_calls=calls, parts=list(payload.get("parts") or []))
