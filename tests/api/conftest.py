"""
API fixtures

The app runs in-process over httpx.ASGITransport with in-memory storage.
Judge0 and the Anthropic API share one MockTransport that dispatches on
the request host.
"""

import httpx
import pytest
import pytest_asyncio

from api import create_app
from api.dependencies import set_service_container
from services import build_services


class FakeAnthropic:
    """Replies with queued program texts as Messages API responses"""

    def __init__(self):
        self.programs = []
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        code = self.programs.pop(0) if self.programs else "print()"
        return httpx.Response(200, json={
            "id": f"msg_{len(self.requests)}",
            "type": "message",
            "stop_reason": "end_turn",
            "content": [
                {"type": "thinking", "thinking": "Sunrise mood\nThe day starts slowly. Everything is calm."},
                {"type": "text", "text": f"```python\n{code}\n```"},
            ],
        })


@pytest.fixture
def fake_anthropic():
    return FakeAnthropic()


@pytest.fixture
def transport(fake_judge0, fake_anthropic):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "api.anthropic.com":
            return fake_anthropic(request)
        return fake_judge0(request)
    return httpx.MockTransport(handler)


@pytest.fixture
def services(app_config, transport):
    return build_services(app_config, transport=transport)


@pytest_asyncio.fixture
async def client(services):
    set_service_container(services)
    app = create_app()
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as client:
        yield client
    set_service_container(None)
