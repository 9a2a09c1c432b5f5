"""LLM provider interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from invoice_assistant.models import RelayResponse, Turn


class LLMProvider(ABC):
    """Abstract model provider used by the orchestrator."""

    @abstractmethod
    async def ping(self) -> None:
        """Check that the model can be reached without spending a generation call."""

    @abstractmethod
    async def generate(
        self,
        contents: list[Turn] | str,
        system_instruction: str | None = None,
        tools: list[dict[str, Any]] | None = None,
        config: dict[str, Any] | None = None,
    ) -> RelayResponse:
        """Generate a model response."""
