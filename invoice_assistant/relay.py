"""HTTP relay that keeps the Gemini API key on the server.

Clients post either ``{"ping": true}`` to check that a key is configured, or
an SDK-style ``{"model", "contents", "config", "tools"}`` request which is
forwarded to Gemini. Replies are reduced to ``{"text", "functionCalls",
"parts"}``; every failure is reported as ``{"error": message}``.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict

from invoice_assistant.config import Settings, load_settings
from invoice_assistant.errors import MISSING_KEY_MESSAGE, ProviderError
from invoice_assistant.llm.gemini import GeminiProvider

LOGGER = logging.getLogger(__name__)

RELAY_PATH = "/api/gemini-proxy"
GENERIC_PROVIDER_ERROR = "An error occurred while calling the model provider."


class ContentGenerator(Protocol):
    async def generate_content(self, request: dict[str, Any]) -> dict[str, Any]: ...


class RelayRequest(BaseModel):
    """Incoming payload for the relay endpoint."""

    model_config = ConfigDict(extra="allow")

    ping: bool = False
    model: str | None = None
    contents: list[dict[str, Any]] | str | None = None
    config: dict[str, Any] | None = None
    tools: list[dict[str, Any]] | None = None


def create_app(settings: Settings, provider: ContentGenerator | None = None) -> FastAPI:
    """Build the relay app. The credential is read once, here."""

    if provider is None and settings.gemini_api_key is not None:
        provider = GeminiProvider(
            api_key=settings.gemini_api_key,
            base_url=settings.gemini_base_url,
            default_model=settings.gemini_model,
            timeout_seconds=settings.request_timeout_seconds,
        )
    if provider is None:
        LOGGER.warning("GEMINI_API_KEY is not set; relay will reject every request")

    app = FastAPI(title="Invoice Assistant Relay")

    @app.exception_handler(RequestValidationError)
    async def _invalid_body(_request: Any, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": "Invalid request body."})

    @app.post(RELAY_PATH)
    async def relay(req: RelayRequest) -> JSONResponse:
        if provider is None:
            return JSONResponse(status_code=500, content={"error": MISSING_KEY_MESSAGE})

        if req.ping:
            return JSONResponse(status_code=200, content={"status": "ok"})

        try:
            result = await provider.generate_content(req.model_dump(exclude_none=True, exclude={"ping"}))
        except ProviderError as exc:
            LOGGER.exception("Error in Gemini relay")
            return JSONResponse(status_code=500, content={"error": str(exc)})
        except Exception:  # noqa: BLE001
            LOGGER.exception("Unexpected error in Gemini relay")
            return JSONResponse(status_code=500, content={"error": GENERIC_PROVIDER_ERROR})

        return JSONResponse(status_code=200, content=result)

    @app.api_route(RELAY_PATH, methods=["GET", "PUT", "PATCH", "DELETE"])
    async def method_not_allowed() -> JSONResponse:
        return JSONResponse(status_code=405, content={"error": "Method Not Allowed"})

    return app


def main() -> None:
    """Serve the relay with uvicorn."""

    import uvicorn

    logging.basicConfig(level=logging.INFO)
    settings = load_settings()
    uvicorn.run(create_app(settings), host=settings.relay_host, port=settings.relay_port)


if __name__ == "__main__":
    main()
