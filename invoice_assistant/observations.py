"""One-shot generation of invoice observation notes."""

from __future__ import annotations

import logging

from invoice_assistant import prompts
from invoice_assistant.errors import RelayError
from invoice_assistant.llm.base import LLMProvider

LOGGER = logging.getLogger(__name__)

# Short, low-latency completion: no thinking budget.
OBSERVATION_CONFIG = {
    "temperature": 0.5,
    "topP": 0.95,
    "topK": 64,
    "maxOutputTokens": 100,
    "thinkingConfig": {"thinkingBudget": 0},
}


async def generate_invoice_observation(
    llm: LLMProvider, client_name: str, amount: float, service: str, lang: str = "en"
) -> str:
    """Return a concise professional note for an invoice, or a localized error text."""

    prompt = prompts.observation_prompt(lang, client_name, amount, service)
    try:
        response = await llm.generate(prompt, config=OBSERVATION_CONFIG)
    except RelayError as exc:
        LOGGER.warning("Error generating observation via relay: %s", exc)
        return prompts.text(lang, "observation_error")
    if not response.text:
        return prompts.text(lang, "observation_error")
    return response.text.strip()
