"""Terminal chat entrypoint."""

from __future__ import annotations

import asyncio
import logging

from invoice_assistant.config import load_settings
from invoice_assistant.llm.relay_client import RelayClient
from invoice_assistant.orchestrator import ConversationOrchestrator
from invoice_assistant.session import ChatSession
from invoice_assistant.store import SqliteInvoiceStore
from invoice_assistant.tools.invoice_tools import invoice_tools
from invoice_assistant.tools.registry import ToolRegistry

logging.basicConfig(level=logging.WARNING)
LOGGER = logging.getLogger(__name__)


async def run() -> None:
    """Initialize app layers and start the chat loop."""

    settings = load_settings()

    store = SqliteInvoiceStore(settings.database_path)
    store.initialize()

    tools = ToolRegistry()
    for tool in invoice_tools(store):
        tools.register(tool)

    relay = RelayClient(
        relay_url=settings.relay_url,
        model=settings.gemini_model,
        timeout_seconds=settings.request_timeout_seconds,
    )
    orchestrator = ConversationOrchestrator(
        llm=relay,
        tool_registry=tools,
        store=store,
        max_rounds=settings.max_function_call_rounds,
    )

    session = ChatSession(language=settings.language)
    await orchestrator.start(session)
    for message in session.messages:
        print(f"assistant> {message.text}")

    while session.accepts_input:
        try:
            text = await asyncio.to_thread(input, "you> ")
        except EOFError:
            break
        if not text.strip():
            continue
        reply = await orchestrator.send(session, text)
        print(f"assistant> {reply.text}")

    LOGGER.info("Chat session ended")


def main() -> None:
    """Synchronous wrapper for asyncio entrypoint."""

    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
