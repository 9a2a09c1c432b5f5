from fastapi.testclient import TestClient

from invoice_assistant.config import Settings
from invoice_assistant.errors import MISSING_KEY_MESSAGE, ProviderError
from invoice_assistant.relay import GENERIC_PROVIDER_ERROR, RELAY_PATH, create_app


def _settings(api_key: str | None = "secret-key") -> Settings:
    return Settings(GEMINI_API_KEY=api_key, _env_file=None)


class FakeProvider:
    def __init__(self, result=None, error=None):
        self.result = result or {"text": "hello", "functionCalls": None, "parts": [{"text": "hello"}]}
        self.error = error
        self.requests = []

    async def generate_content(self, request):  # noqa: ANN001, ANN201
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.result


def test_ping_never_reaches_provider():
    provider = FakeProvider(error=RuntimeError("provider down"))
    client = TestClient(create_app(_settings(), provider=provider))

    response = client.post(RELAY_PATH, json={"ping": True})

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert provider.requests == []


def test_missing_key_is_reported_for_ping_and_requests():
    client = TestClient(create_app(_settings(None)))

    ping = client.post(RELAY_PATH, json={"ping": True})
    request = client.post(RELAY_PATH, json={"model": "gemini-2.5-flash", "contents": "hi"})

    assert ping.status_code == 500
    assert ping.json() == {"error": MISSING_KEY_MESSAGE}
    assert request.status_code == 500
    assert request.json() == {"error": MISSING_KEY_MESSAGE}


def test_only_post_is_accepted():
    provider = FakeProvider()
    client = TestClient(create_app(_settings(), provider=provider))

    response = client.get(RELAY_PATH)

    assert response.status_code == 405
    assert provider.requests == []


def test_request_is_forwarded_and_reply_returned():
    result = {
        "text": None,
        "functionCalls": [{"name": "listInvoices", "args": {}}],
        "parts": [{"functionCall": {"name": "listInvoices", "args": {}}}],
    }
    provider = FakeProvider(result=result)
    client = TestClient(create_app(_settings(), provider=provider))
    body = {
        "model": "gemini-2.5-flash",
        "contents": [{"role": "user", "parts": [{"text": "list"}]}],
        "config": {"systemInstruction": "be brief"},
        "tools": [{"functionDeclarations": []}],
    }

    response = client.post(RELAY_PATH, json=body)

    assert response.status_code == 200
    assert response.json() == result
    assert provider.requests == [body]


def test_provider_error_becomes_error_message():
    provider = FakeProvider(error=ProviderError("Model provider returned HTTP 429 (RESOURCE_EXHAUSTED)."))
    client = TestClient(create_app(_settings(), provider=provider))

    response = client.post(RELAY_PATH, json={"model": "m", "contents": "hi"})

    assert response.status_code == 500
    assert response.json() == {"error": "Model provider returned HTTP 429 (RESOURCE_EXHAUSTED)."}


def test_unexpected_error_does_not_leak_details():
    provider = FakeProvider(error=RuntimeError("bad key secret-key"))
    client = TestClient(create_app(_settings(), provider=provider))

    response = client.post(RELAY_PATH, json={"model": "m", "contents": "hi"})

    assert response.status_code == 500
    assert response.json() == {"error": GENERIC_PROVIDER_ERROR}
    assert "secret-key" not in response.text


def test_malformed_body_is_rejected():
    client = TestClient(create_app(_settings(), provider=FakeProvider()))

    response = client.post(RELAY_PATH, json=["not", "an", "object"])

    assert response.status_code == 400
    assert "error" in response.json()
