import pytest
import httpx

from moviechat.clients.llm_client import complete
from moviechat.config import settings
from moviechat.exceptions import ConfigurationError, UpstreamRequestError


class FakeResp:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise httpx.HTTPStatusError("Error", request=None, response=None)

    def json(self):
        return self.payload


class DummyClient:
    def __init__(self, response):
        self.response = response
        self.requests = []

    async def post(self, url, headers=None, json=None):
        self.requests.append((url, headers, json))
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


def chat_payload(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


@pytest.mark.asyncio
async def test_complete_returns_first_choice_content(monkeypatch):
    monkeypatch.setattr(settings, "OPENAI_MODEL", "gpt-test")
    client = DummyClient(FakeResp(chat_payload('["Heat"]')))

    assert await complete("suggest a movie", client) == '["Heat"]'

    url, headers, body = client.requests[0]
    assert url == f"{settings.OPENAI_BASE_URL}/chat/completions"
    assert headers["Authorization"] == "Bearer openai-test-key"
    assert body["model"] == "gpt-test"
    assert body["messages"] == [{"role": "user", "content": "suggest a movie"}]


@pytest.mark.asyncio
async def test_complete_non_success_status_raises():
    client = DummyClient(FakeResp({}, status_code=429))
    with pytest.raises(UpstreamRequestError) as exc:
        await complete("hi", client)
    assert exc.value.service == "openai"


@pytest.mark.asyncio
async def test_complete_timeout_raises_upstream_error():
    client = DummyClient(httpx.ReadTimeout("timed out"))
    with pytest.raises(UpstreamRequestError):
        await complete("hi", client)


@pytest.mark.asyncio
async def test_complete_body_without_content_raises():
    client = DummyClient(FakeResp({"choices": []}))
    with pytest.raises(UpstreamRequestError):
        await complete("hi", client)


@pytest.mark.asyncio
async def test_complete_without_key_sends_nothing(monkeypatch):
    monkeypatch.setattr(settings, "OPENAI_API_KEY", None)
    client = DummyClient(FakeResp(chat_payload("x")))
    with pytest.raises(ConfigurationError) as exc:
        await complete("hi", client)
    assert exc.value.missing == "OPENAI_API_KEY"
    assert client.requests == []
