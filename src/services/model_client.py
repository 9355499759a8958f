"""
Model Client - Anthropic Messages API over httpx

One call = one prompt in, (reasoning, code) out. The text of the last text
block is the program (markdown fences stripped); the thinking block, when
extended thinking is enabled, is the reasoning.
"""

import asyncio
from dataclasses import dataclass
from typing import Optional

import httpx

from models.config import GenerationConfig
from models.enums import LogCategory
from models.errors import ExternalServiceError, ConfigurationError
from services.script_executor import strip_markdown_code_fences
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.MODEL)

SERVICE_NAME = "anthropic"

WEB_SEARCH_TOOL = {
    "type": "web_search_20250305",
    "name": "web_search",
    "max_uses": 5,
}


@dataclass
class ModelResponse:
    reasoning: str
    code: str


class AnthropicModelClient:
    """
    Example:
        client = AnthropicModelClient(config.generation)
        response = await client.generate("Write a Python program that ...")
        response.code       # cleaned Python source
        response.reasoning  # thinking text, "" when thinking is off
    """

    def __init__(
        self,
        config: GenerationConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep=asyncio.sleep
    ):
        self.config = config
        self.transport = transport
        self._sleep = sleep

    def _build_request(self, prompt: str) -> dict:
        body = {
            "model": self.config.model,
            "max_tokens": self.config.max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        if self.config.thinking_enabled:
            body["thinking"] = {"type": "enabled", "budget_tokens": self.config.thinking_budget_tokens}
        if self.config.web_search_enabled:
            body["tools"] = [dict(WEB_SEARCH_TOOL)]
        return body

    async def _call_once(self, prompt: str) -> ModelResponse:
        url = f"{self.config.anthropic_base_url.rstrip('/')}/v1/messages"
        headers = {
            "x-api-key": self.config.anthropic_api_key,
            "anthropic-version": self.config.anthropic_version,
            "content-type": "application/json",
        }

        async with httpx.AsyncClient(transport=self.transport, timeout=self.config.timeout_seconds) as client:
            response = await client.post(url, headers=headers, json=self._build_request(prompt))
            response.raise_for_status()
            message = response.json()

        log.debug(
            "Received response",
            id=message.get("id"),
            stop_reason=message.get("stop_reason"),
            content_blocks=len(message.get("content") or [])
        )

        reasoning = ""
        text = ""
        for block in message.get("content") or []:
            if block.get("type") == "text":
                text = block.get("text") or ""
            elif block.get("type") == "thinking":
                reasoning = block.get("thinking") or ""

        if not text.strip():
            raise ValueError("Model response contained no text block")

        return ModelResponse(reasoning=reasoning, code=strip_markdown_code_fences(text))

    async def generate(self, prompt: str) -> ModelResponse:
        """
        Call the model, retrying transient failures

        Raises:
            ConfigurationError: No API key configured
            ExternalServiceError: Every attempt failed (carries the last error)
        """
        if not self.config.anthropic_api_key:
            raise ConfigurationError("Server configuration error: Missing ANTHROPIC_API_KEY")

        attempts = self.config.max_retries + 1
        last_error: Optional[Exception] = None

        for attempt in range(1, attempts + 1):
            log.info(
                f"Calling model (attempt {attempt}/{attempts})",
                model=self.config.model,
                thinking=self.config.thinking_enabled,
                web_search=self.config.web_search_enabled
            )
            try:
                return await self._call_once(prompt)
            except (httpx.HTTPError, ValueError) as ex:
                last_error = ex
                log.error("Model call failed", attempt=attempt, error=str(ex), error_type=type(ex).__name__)
                if attempt < attempts:
                    log.info(f"Retrying in {self.config.retry_delay_seconds} seconds")
                    await self._sleep(self.config.retry_delay_seconds)

        raise ExternalServiceError(
            SERVICE_NAME,
            f"Model call failed after {attempts} attempts: {last_error}",
            details={"attempts": attempts}
        )
