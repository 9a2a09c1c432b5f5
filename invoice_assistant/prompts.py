"""Localized user-facing strings and the system instruction."""

from __future__ import annotations

from datetime import date

from invoice_assistant.models import Invoice

STRINGS: dict[str, dict[str, str]] = {
    "en": {
        "welcome": "Hi! I can create, look up, update, list and delete your invoices. What would you like to do?",
        "api_key_missing": "The assistant is unavailable: the AI service is not configured on the server.",
        "service_unavailable": "The assistant is unavailable right now. Please contact your administrator.",
        "error": "Sorry, something went wrong. Please try again.",
        "provider_error": "Sorry, I couldn't complete that request: {detail}",
        "too_many_steps": "the assistant needed too many steps to answer.",
        "empty_reply": "I didn't get a response. Could you rephrase your request?",
        "observation_error": "Error generating observation. Please try again.",
        "no_invoices": "No invoices registered at the moment.",
    },
    "pt": {
        "welcome": "Olá! Posso criar, consultar, atualizar, listar e excluir suas notas fiscais. Como posso ajudar?",
        "api_key_missing": "O assistente está indisponível: o serviço de IA não está configurado no servidor.",
        "service_unavailable": "O assistente está indisponível no momento. Contate o administrador.",
        "error": "Desculpe, ocorreu um erro. Tente novamente.",
        "provider_error": "Desculpe, não consegui concluir o pedido: {detail}",
        "too_many_steps": "o assistente precisou de etapas demais para responder.",
        "empty_reply": "Não recebi uma resposta. Pode reformular o pedido?",
        "observation_error": "Erro ao gerar observação. Tente novamente.",
        "no_invoices": "Nenhuma nota fiscal cadastrada no momento.",
    },
}

_SYSTEM_INSTRUCTIONS = {
    "en": """You are an AI assistant for an invoice management application.
Your goal is to help users manage their invoices: create, view details, update, list and delete.
Today's date is {today}.

**Current invoices:**
{invoices}

**Operating instructions:**
- To view, update or delete an invoice, use its ID from the list above. If the user does not give an ID, use the client name or other details to find it in the list.
- For destructive actions (delete), ALWAYS ask the user for confirmation before calling 'deleteInvoice'. Example: "Are you sure you want to delete invoice X?". Only call the function once the user confirms.
- After a function succeeds, confirm the action clearly (e.g. "Invoice for [Client] created successfully."). If a function returns an error, explain the error to the user clearly.
- The issue date of new invoices is always today ({today}).
- Always answer in English.""",
    "pt": """Você é um assistente de IA para um aplicativo de gerenciamento de notas fiscais.
Seu objetivo é ajudar os usuários a gerenciar suas notas: criar, visualizar detalhes, atualizar, listar e excluir.
A data de hoje é {today}.

**Contexto Atual das Notas Fiscais:**
{invoices}

**Instruções de Operação:**
- Para visualizar, atualizar ou excluir uma nota, use o ID correspondente da lista acima. Se o usuário não fornecer um ID, use o nome do cliente ou outros detalhes para encontrá-lo na lista.
- Para ações destrutivas (excluir), SEMPRE peça confirmação ao usuário antes de chamar a função 'deleteInvoice'. Exemplo: "Você tem certeza que deseja excluir a nota X?". Se o usuário confirmar, chame a função.
- Após executar uma função com sucesso, confirme a ação para o usuário de forma clara (ex: "Nota fiscal para [Cliente] criada com sucesso."). Se uma função retornar um erro, informe o usuário sobre o erro de forma clara.
- A data de emissão de novas notas é sempre hoje ({today}).
- Responda sempre em português.""",
}

_OBSERVATION_PROMPTS = {
    "en": (
        'Generate a brief, professional observation for an invoice in English. Client: "{client}", '
        'Amount: ${amount:.2f}, Service: "{service}". The observation should be concise and formal.'
    ),
    "pt": (
        "Gere uma breve observação profissional para uma nota fiscal em português. "
        'Cliente: "{client}", Valor: R$ {amount:.2f}, Serviço: "{service}". '
        "A observação deve ser concisa e formal."
    ),
}


def text(lang: str, key: str, **kwargs: str) -> str:
    """Look up a localized string, falling back to English."""

    template = STRINGS.get(lang, STRINGS["en"])[key]
    return template.format(**kwargs) if kwargs else template


def placeholder_texts(lang: str) -> frozenset[str]:
    """Assistant notices that must never be replayed to the model."""

    return frozenset(text(lang, key) for key in ("welcome", "api_key_missing", "service_unavailable", "error"))


def build_system_instruction(lang: str, today: date, invoices: list[Invoice]) -> str:
    if invoices:
        listing = "\n".join(
            f"- ID: {inv.id}, Client: {inv.client_name}, Amount: {inv.amount:.2f}, "
            f"Status: {inv.status.value}, Due: {inv.due_date}"
            for inv in invoices
        )
    else:
        listing = text(lang, "no_invoices")
    template = _SYSTEM_INSTRUCTIONS.get(lang, _SYSTEM_INSTRUCTIONS["en"])
    return template.format(today=today.isoformat(), invoices=listing)


def observation_prompt(lang: str, client_name: str, amount: float, service: str) -> str:
    template = _OBSERVATION_PROMPTS.get(lang, _OBSERVATION_PROMPTS["en"])
    return template.format(client=client_name, amount=amount, service=service)
