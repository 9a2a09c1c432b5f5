"""Client for the credential-holding relay endpoint."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from invoice_assistant.errors import MISSING_KEY_MESSAGE, ConfigError, ProviderError
from invoice_assistant.llm.base import LLMProvider
from invoice_assistant.models import RelayResponse, Turn

_LOGGER = logging.getLogger(__name__)


class RelayClient(LLMProvider):
    """LLM provider that talks to the model only through the relay."""

    def __init__(
        self,
        relay_url: str,
        model: str,
        timeout_seconds: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._relay_url = relay_url
        self._model = model
        self._timeout_seconds = timeout_seconds
        self._transport = transport

    async def ping(self) -> None:
        await self._post({"ping": True})

    async def generate(
        self,
        contents: list[Turn] | str,
        system_instruction: str | None = None,
        tools: list[dict[str, Any]] | None = None,
        config: dict[str, Any] | None = None,
    ) -> RelayResponse:
        request_config = dict(config or {})
        if system_instruction:
            request_config["systemInstruction"] = system_instruction

        payload: dict[str, Any] = {
            "model": self._model,
            "contents": contents if isinstance(contents, str) else [turn.to_dict() for turn in contents],
        }
        if request_config:
            payload["config"] = request_config
        if tools:
            payload["tools"] = tools

        data = await self._post(payload)
        return RelayResponse.from_payload(data)

    async def _post(self, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout_seconds), transport=self._transport
            ) as client:
                response = await client.post(self._relay_url, json=payload)
        except httpx.HTTPError as exc:
            raise ProviderError(f"Could not reach the relay ({type(exc).__name__}).") from exc

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if response.status_code != 200:
            message = str(data.get("error") or f"Relay request failed with status {response.status_code}")
            _LOGGER.warning("Relay returned HTTP %d: %s", response.status_code, message)
            if message == MISSING_KEY_MESSAGE:
                raise ConfigError(message)
            raise ProviderError(message)
        return data
