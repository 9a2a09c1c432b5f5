"""Google Gemini ``generateContent`` client used by the relay."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import SecretStr

from invoice_assistant.errors import ProviderError

_LOGGER = logging.getLogger(__name__)

# Config keys that live at the top level of the REST payload rather than in generationConfig.
_TOP_LEVEL_CONFIG_KEYS = ("toolConfig", "safetySettings", "cachedContent")


class GeminiProvider:
    """Forwards generation requests to Gemini with a server-held API key."""

    def __init__(
        self,
        api_key: SecretStr,
        base_url: str,
        default_model: str,
        timeout_seconds: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._default_model = default_model
        self._timeout_seconds = timeout_seconds
        self._transport = transport

    async def generate_content(self, request: dict[str, Any]) -> dict[str, Any]:
        """Send one request and return the normalized ``{text, functionCalls, parts}`` shape."""

        model = request.get("model") or self._default_model
        payload = to_generate_content_payload(request)
        url = f"{self._base_url}/{model}:generateContent"

        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout_seconds), transport=self._transport
            ) as client:
                response = await client.post(
                    url,
                    headers={
                        "x-goog-api-key": self._api_key.get_secret_value(),
                        "Content-Type": "application/json",
                    },
                    json=payload,
                )
        except httpx.HTTPError as exc:
            raise ProviderError(f"Could not reach the model provider ({type(exc).__name__}).") from exc

        if response.status_code >= 400:
            status = _error_status(response)
            _LOGGER.warning(
                "Gemini returned HTTP %d (%s): %s",
                response.status_code,
                status,
                self._redact(response.text[:500]),
            )
            raise ProviderError(f"Model provider returned HTTP {response.status_code} ({status}).")

        try:
            data = response.json()
        except ValueError as exc:
            raise ProviderError("Model provider returned a malformed response.") from exc
        if not isinstance(data, dict):
            raise ProviderError("Model provider returned a malformed response.")

        normalized = normalize_response(data)
        _LOGGER.info(
            "Gemini response: text=%r function_calls=%r",
            (normalized["text"] or "")[:200],
            [call["name"] for call in normalized["functionCalls"] or []],
        )
        return normalized

    def _redact(self, text: str) -> str:
        secret = self._api_key.get_secret_value()
        return text.replace(secret, "***") if secret else text


def to_generate_content_payload(request: dict[str, Any]) -> dict[str, Any]:
    """Translate an SDK-style ``{model, contents, config, tools}`` request to the REST body."""

    contents = request.get("contents") or []
    if isinstance(contents, str):
        contents = [{"role": "user", "parts": [{"text": contents}]}]

    config = dict(request.get("config") or {})
    payload: dict[str, Any] = {"contents": contents}

    system_instruction = config.pop("systemInstruction", None)
    if isinstance(system_instruction, str):
        payload["systemInstruction"] = {"parts": [{"text": system_instruction}]}
    elif system_instruction:
        payload["systemInstruction"] = system_instruction

    config_tools = config.pop("tools", None)
    tools = request.get("tools") or config_tools
    if tools:
        payload["tools"] = tools

    for key in _TOP_LEVEL_CONFIG_KEYS:
        if key in config:
            payload[key] = config.pop(key)

    if config:
        payload["generationConfig"] = config
    return payload


def normalize_response(data: dict[str, Any]) -> dict[str, Any]:
    """Reduce a ``generateContent`` response to what the chat client needs."""

    candidates = data.get("candidates") or []
    parts: list[dict[str, Any]] = []
    if candidates:
        parts = list((candidates[0].get("content") or {}).get("parts") or [])

    texts: list[str] = []
    function_calls: list[dict[str, Any]] = []
    for part in parts:
        if "text" in part and not part.get("thought"):
            texts.append(part["text"])
        call = part.get("functionCall")
        if call:
            function_calls.append({"name": call.get("name", ""), "args": call.get("args") or {}})

    return {
        "text": "".join(texts) if texts else None,
        "functionCalls": function_calls or None,
        "parts": parts,
    }


def _error_status(response: httpx.Response) -> str:
    try:
        error = response.json().get("error") or {}
    except (ValueError, AttributeError):
        return response.reason_phrase or "error"
    return str(error.get("status") or response.reason_phrase or "error")
