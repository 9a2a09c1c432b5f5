"""Conversation orchestrator driving the function-calling loop."""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable

from invoice_assistant import prompts
from invoice_assistant.errors import ConfigError, ProviderError, SessionBusyError
from invoice_assistant.history import to_turns
from invoice_assistant.llm.base import LLMProvider
from invoice_assistant.models import FunctionResponsePart, Message, Turn, part_from_dict
from invoice_assistant.session import ChatSession
from invoice_assistant.store import InvoiceStore
from invoice_assistant.tools.registry import ToolRegistry

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_ROUNDS = 8


class ConversationOrchestrator:
    """Runs one user request at a time through the model and the invoice tools."""

    def __init__(
        self,
        llm: LLMProvider,
        tool_registry: ToolRegistry,
        store: InvoiceStore,
        max_rounds: int = DEFAULT_MAX_ROUNDS,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._llm = llm
        self._tool_registry = tool_registry
        self._store = store
        self._max_rounds = max_rounds
        self._today = today

    async def start(self, session: ChatSession) -> None:
        """Probe the relay and seed the session with its opening message."""

        lang = session.language
        session.busy = True
        try:
            await self._llm.ping()
        except ConfigError:
            session.disabled = True
            session.append("assistant", prompts.text(lang, "api_key_missing"))
            return
        except ProviderError as exc:
            LOGGER.warning("Relay probe failed: %s", exc)
            session.disabled = True
            session.append("assistant", prompts.text(lang, "error"))
            return
        finally:
            session.busy = False

        session.disabled = False
        if not session.messages:
            session.append("assistant", prompts.text(lang, "welcome"))

    async def send(self, session: ChatSession, text: str) -> Message:
        """Handle one user message and return the single assistant reply."""

        if not session.accepts_input:
            raise SessionBusyError("session is busy or disabled")

        lang = session.language
        session.append("user", text)
        session.busy = True
        try:
            reply = await self._run(session)
        except ConfigError:
            LOGGER.error("Relay has no API key configured; disabling session")
            session.disabled = True
            reply = prompts.text(lang, "service_unavailable")
        except ProviderError as exc:
            reply = prompts.text(lang, "provider_error", detail=str(exc))
        except Exception:  # noqa: BLE001
            LOGGER.exception("Request failed outside the relay")
            reply = prompts.text(lang, "error")
        finally:
            session.busy = False
        return session.append("assistant", reply)

    async def _run(self, session: ChatSession) -> str:
        lang = session.language
        turns = to_turns(session.messages, prompts.placeholder_texts(lang))
        system_instruction = prompts.build_system_instruction(lang, self._today(), self._store.list())
        tools = self._tool_registry.list_tool_specs()

        rounds = 0
        while True:
            response = await self._llm.generate(turns, system_instruction=system_instruction, tools=tools)
            if not response.function_calls:
                return response.text or prompts.text(lang, "empty_reply")

            rounds += 1
            if rounds > self._max_rounds:
                LOGGER.warning("Aborting after %d function-call rounds", self._max_rounds)
                raise ProviderError(prompts.text(lang, "too_many_steps"))

            LOGGER.info(
                "Round %d: model requested %s", rounds, [call.name for call in response.function_calls]
            )
            # Replay the reply exactly as received so call structure stays intact.
            model_parts = tuple(part_from_dict(part) for part in response.parts) or tuple(response.function_calls)
            turns = [*turns, Turn(role="model", parts=model_parts)]

            function_responses = []
            for call in response.function_calls:
                result = await self._tool_registry.execute(call.name, call.args)
                function_responses.append(FunctionResponsePart(name=call.name, response={"result": result}))
            turns = [*turns, Turn(role="user", parts=tuple(function_responses))]
