"""Anthropic Messages API client tests"""

import json

import httpx
import pytest

from models.config import GenerationConfig
from models.errors import ConfigurationError, ExternalServiceError
from services.model_client import AnthropicModelClient


def message(*blocks):
    return {"id": "msg_1", "type": "message", "stop_reason": "end_turn", "content": list(blocks)}


class Recorder:
    """MockTransport handler replaying queued responses"""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def make_client(sleeps):
    async def fake_sleep(seconds):
        sleeps.append(seconds)

    def factory(recorder, **overrides):
        config = GenerationConfig(anthropic_api_key="sk-test", retry_delay_seconds=2.0, **overrides)
        return AnthropicModelClient(config, transport=httpx.MockTransport(recorder), sleep=fake_sleep)

    return factory


@pytest.mark.asyncio
async def test_extracts_reasoning_and_code(make_client):
    recorder = Recorder(httpx.Response(200, json=message(
        {"type": "thinking", "thinking": "Feeling hopeful today."},
        {"type": "text", "text": "```python\nprint('#FF0000')\n```"},
    )))

    response = await make_client(recorder).generate("prompt")

    assert response.reasoning == "Feeling hopeful today."
    assert response.code == "print('#FF0000')"


@pytest.mark.asyncio
async def test_request_shape(make_client):
    recorder = Recorder(httpx.Response(200, json=message({"type": "text", "text": "print()"})))

    await make_client(recorder, thinking_enabled=True, web_search_enabled=True).generate("hello")

    request = recorder.requests[0]
    body = json.loads(request.content)
    assert request.url.path == "/v1/messages"
    assert request.headers["x-api-key"] == "sk-test"
    assert request.headers["anthropic-version"] == "2023-06-01"
    assert body["messages"] == [{"role": "user", "content": "hello"}]
    assert body["thinking"] == {"type": "enabled", "budget_tokens": 10000}
    assert body["tools"][0]["name"] == "web_search"


@pytest.mark.asyncio
async def test_optional_features_omitted(make_client):
    recorder = Recorder(httpx.Response(200, json=message({"type": "text", "text": "print()"})))

    response = await make_client(recorder, thinking_enabled=False, web_search_enabled=False).generate("p")

    body = json.loads(recorder.requests[0].content)
    assert "thinking" not in body
    assert "tools" not in body
    assert response.reasoning == ""


@pytest.mark.asyncio
async def test_uses_last_text_block(make_client):
    recorder = Recorder(httpx.Response(200, json=message(
        {"type": "text", "text": "Let me search first."},
        {"type": "server_tool_use", "id": "t1", "name": "web_search", "input": {}},
        {"type": "text", "text": "print('final')"},
    )))

    assert (await make_client(recorder).generate("p")).code == "print('final')"


@pytest.mark.asyncio
async def test_retries_then_succeeds(make_client, sleeps):
    recorder = Recorder(
        httpx.Response(529, json={"type": "error"}),
        httpx.ConnectError("boom"),
        httpx.Response(200, json=message({"type": "text", "text": "print()"})),
    )

    response = await make_client(recorder).generate("p")

    assert response.code == "print()"
    assert len(recorder.requests) == 3
    assert sleeps == [2.0, 2.0]


@pytest.mark.asyncio
async def test_gives_up_after_max_retries(make_client, sleeps):
    recorder = Recorder(*[httpx.Response(500, json={}) for _ in range(4)])

    with pytest.raises(ExternalServiceError) as exc:
        await make_client(recorder).generate("p")

    assert len(recorder.requests) == 4
    assert len(sleeps) == 3
    assert exc.value.details["service"] == "anthropic"
    assert exc.value.message.startswith("Model call failed after 4 attempts")


@pytest.mark.asyncio
async def test_response_without_text_is_retried(make_client):
    recorder = Recorder(
        httpx.Response(200, json=message({"type": "thinking", "thinking": "hmm"})),
        httpx.Response(200, json=message({"type": "text", "text": "print()"})),
    )

    assert (await make_client(recorder).generate("p")).code == "print()"


@pytest.mark.asyncio
async def test_missing_key():
    client = AnthropicModelClient(GenerationConfig(anthropic_api_key=""))

    with pytest.raises(ConfigurationError):
        await client.generate("p")
