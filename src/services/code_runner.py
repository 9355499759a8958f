"""
Code Runner - executes Python source on a remote Judge0 sandbox

Submissions are synchronous (wait=true) and base64-encoded in both
directions. Only status 3 (Accepted) counts as success; everything else is
an ExternalServiceError carrying the sandbox's stderr/compile output.
"""

import base64
from dataclasses import dataclass
from typing import Optional

import httpx

from models.config import Judge0Config
from models.enums import LogCategory
from models.errors import ExternalServiceError
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.EXECUTION)

STATUS_ACCEPTED = 3
SERVICE_NAME = "judge0"


@dataclass
class ExecutionResult:
    output: str
    time: Optional[str] = None
    memory: Optional[int] = None


def _b64encode(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def _b64decode(value: Optional[str]) -> str:
    if not value:
        return ""
    return base64.b64decode(value).decode("utf-8", errors="replace")


class Judge0CodeRunner:
    """
    Judge0 client

    Example:
        runner = Judge0CodeRunner(config.judge0)
        result = await runner.run('print("#FF0000," * 59 + "#FF0000")')
        result.output  # "#FF0000,...\n"
    """

    def __init__(self, config: Judge0Config, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Args:
            config: Endpoint, key and language settings
            transport: Optional httpx transport (tests inject a MockTransport)
        """
        self.config = config
        self.transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.config.endpoint and self.config.api_key)

    async def run(self, source_code: str) -> ExecutionResult:
        """
        Execute source code and return its stdout

        Raises:
            ExternalServiceError: Not configured, HTTP/transport failure, or non-accepted status
        """
        if not self.configured:
            raise ExternalServiceError(
                SERVICE_NAME,
                "Judge0 API not configured. Missing API key or endpoint."
            )

        url = f"{self.config.endpoint.rstrip('/')}/submissions"
        headers = {
            "Content-Type": "application/json",
            "X-RapidAPI-Key": self.config.api_key,
            "X-RapidAPI-Host": self.config.host,
        }
        submission = {
            "source_code": _b64encode(source_code),
            "language_id": self.config.language_id,
        }

        log.info("Submitting code for execution", bytes=len(source_code))

        try:
            async with httpx.AsyncClient(transport=self.transport, timeout=self.config.timeout_seconds) as client:
                response = await client.post(
                    url,
                    params={"base64_encoded": "true", "wait": "true"},
                    headers=headers,
                    json=submission
                )
        except httpx.HTTPError as ex:
            log.error("Judge0 request failed", error=str(ex), error_type=type(ex).__name__)
            raise ExternalServiceError(SERVICE_NAME, f"Failed to execute code: {ex}") from ex

        if response.status_code >= 400:
            log.error("Judge0 returned an error status", status=response.status_code)
            raise ExternalServiceError(
                SERVICE_NAME,
                f"Judge0 API returned status {response.status_code}: {response.text}",
                details={"status_code": response.status_code}
            )

        try:
            result = response.json()
            status = result.get("status") or {}
        except ValueError as ex:
            raise ExternalServiceError(SERVICE_NAME, f"Judge0 returned invalid JSON: {ex}") from ex

        log.info(
            "Execution completed",
            status=status.get("description"),
            time=result.get("time"),
            memory=result.get("memory")
        )

        if status.get("id") != STATUS_ACCEPTED:
            stderr = _b64decode(result.get("stderr"))
            compile_output = _b64decode(result.get("compile_output"))
            message = f"Execution failed: {status.get('description', 'Unknown')}\n{stderr}\n{compile_output}".strip()
            raise ExternalServiceError(
                SERVICE_NAME,
                message,
                details={"status_id": status.get("id"), "stderr": stderr, "compile_output": compile_output}
            )

        return ExecutionResult(
            output=_b64decode(result.get("stdout")),
            time=result.get("time"),
            memory=result.get("memory")
        )
