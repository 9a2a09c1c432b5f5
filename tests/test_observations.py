from unittest.mock import AsyncMock, MagicMock

import pytest

from invoice_assistant.errors import ProviderError
from invoice_assistant.models import RelayResponse
from invoice_assistant.observations import OBSERVATION_CONFIG, generate_invoice_observation


@pytest.mark.asyncio
async def test_returns_stripped_text_and_uses_short_config():
    llm = MagicMock()
    llm.generate = AsyncMock(return_value=RelayResponse(text="  Consulting services rendered in March.\n"))

    note = await generate_invoice_observation(llm, "Alice", 1500.0, "Consulting", "en")

    assert note == "Consulting services rendered in March."
    prompt = llm.generate.call_args.args[0]
    assert '"Alice"' in prompt
    assert "$1500.00" in prompt
    assert llm.generate.call_args.kwargs["config"] == OBSERVATION_CONFIG


@pytest.mark.asyncio
async def test_portuguese_prompt_and_error_text():
    llm = MagicMock()
    llm.generate = AsyncMock(side_effect=ProviderError("Model provider returned HTTP 503 (UNAVAILABLE)."))

    note = await generate_invoice_observation(llm, "Bruno", 80.5, "Design", "pt")

    assert note == "Erro ao gerar observação. Tente novamente."
    assert "R$ 80.50" in llm.generate.call_args.args[0]
