"""
Shared fixtures: frame text builders, in-memory stores, and a fake Judge0
endpoint served through httpx.MockTransport.
"""

import base64
import json

import httpx
import pytest

from engine.buffer_segmenter import BufferSegmenter
from models.config import AppConfig, Judge0Config, GenerationConfig, StorageConfig
from models.enums import StorageBackend
from services.code_runner import Judge0CodeRunner
from services.mode_store import InMemoryModeStore
from services.script_executor import ScriptExecutor
from services.script_repository import InMemoryScriptRepository

JUDGE0_ENDPOINT = "https://judge0.test"


def b64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def solid_frame(color: str = "#FF0000", count: int = 60) -> str:
    return ",".join([color] * count)


@pytest.fixture
def make_frame():
    """Build one frame line of `count` identical colors"""
    return solid_frame


@pytest.fixture
def red_frames():
    """60 frames of solid red (one second at 60 fps)"""
    return [solid_frame("#FF0000")] * 60


@pytest.fixture
def mode_store():
    return InMemoryModeStore()


@pytest.fixture
def repository():
    return InMemoryScriptRepository()


@pytest.fixture
def segmenter():
    return BufferSegmenter(0.5)


class FakeJudge0:
    """
    Judge0 stand-in for httpx.MockTransport

    Returns `stdout` for every submission (or the next queued item of
    `outputs` while any are left) unless `status` / `stderr` are set.
    Records submitted source code in `submissions`.
    """

    def __init__(self, stdout: str = "", status_id: int = 3, status_description: str = "Accepted"):
        self.stdout = stdout
        self.status_id = status_id
        self.status_description = status_description
        self.stderr = ""
        self.http_status = 200
        self.submissions = []
        self.requests = []
        self.outputs = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.http_status != 200:
            return httpx.Response(self.http_status, text="quota exceeded")

        body = json.loads(request.content)
        self.submissions.append(base64.b64decode(body["source_code"]).decode("utf-8"))
        if self.outputs:
            self.stdout = self.outputs.pop(0)
        return httpx.Response(200, json={
            "stdout": b64(self.stdout) if self.stdout else None,
            "stderr": b64(self.stderr) if self.stderr else None,
            "compile_output": None,
            "status": {"id": self.status_id, "description": self.status_description},
            "time": "0.05",
            "memory": 3200,
        })


@pytest.fixture
def judge0_config():
    return Judge0Config(endpoint=JUDGE0_ENDPOINT, api_key="test-key")


@pytest.fixture
def fake_judge0():
    return FakeJudge0(stdout="\n".join([solid_frame("#00FF00")] * 3) + "\n")


@pytest.fixture
def runner(judge0_config, fake_judge0):
    return Judge0CodeRunner(judge0_config, transport=httpx.MockTransport(fake_judge0))


@pytest.fixture
def executor(runner):
    return ScriptExecutor(runner)


@pytest.fixture
def app_config(judge0_config):
    return AppConfig(
        storage=StorageConfig(backend=StorageBackend.MEMORY),
        judge0=judge0_config,
        generation=GenerationConfig(anthropic_api_key="sk-test", retry_delay_seconds=0)
    )
