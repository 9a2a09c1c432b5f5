from invoice_assistant import prompts
from invoice_assistant.history import to_turns
from invoice_assistant.models import (
    FunctionCallPart,
    FunctionResponsePart,
    Message,
    RawPart,
    TextPart,
    Turn,
    part_from_dict,
)


def test_messages_become_single_text_turns_in_order():
    messages = [
        Message(role="user", text="list my invoices"),
        Message(role="assistant", text="You have none."),
        Message(role="user", text="create one"),
    ]

    turns = to_turns(messages)

    assert [turn.role for turn in turns] == ["user", "model", "user"]
    assert [turn.parts for turn in turns] == [
        (TextPart("list my invoices"),),
        (TextPart("You have none."),),
        (TextPart("create one"),),
    ]


def test_placeholder_notices_are_dropped():
    welcome = prompts.text("pt", "welcome")
    missing = prompts.text("pt", "api_key_missing")
    messages = [
        Message(role="assistant", text=welcome),
        Message(role="assistant", text=missing),
        Message(role="user", text="olá"),
    ]

    turns = to_turns(messages, prompts.placeholder_texts("pt"))

    assert turns == [Turn(role="user", parts=(TextPart("olá"),))]


def test_turn_serializes_to_provider_shape():
    turn = Turn(
        role="user",
        parts=(FunctionResponsePart(name="listInvoices", response={"result": []}),),
    )

    assert turn.to_dict() == {
        "role": "user",
        "parts": [{"functionResponse": {"name": "listInvoices", "response": {"result": []}}}],
    }


def test_parts_from_provider_are_preserved():
    call = part_from_dict({"functionCall": {"name": "createInvoice", "args": {"amount": 1}}})
    signed = part_from_dict({"functionCall": {"name": "x", "args": {}}, "thoughtSignature": "c2ln"})

    assert call == FunctionCallPart(name="createInvoice", args={"amount": 1})
    assert isinstance(signed, RawPart)
    assert signed.to_dict() == {"functionCall": {"name": "x", "args": {}}, "thoughtSignature": "c2ln"}
