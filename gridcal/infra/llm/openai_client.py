from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from gridcal.infra.llm.base import LLMAPIError

LOGGER = logging.getLogger(__name__)

_ERROR_BODY_LIMIT = 500


class OpenAIAPIError(LLMAPIError):
    """OpenAI-specific API error wrapper."""


class OpenAIClient:
    """Minimal async client for an OpenAI-compatible chat completions API."""

    def __init__(
        self,
        *,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: str = "https://api.openai.com/v1",
        timeout_seconds: float = 30.0,
        max_retries: int = 1,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.max_retries = max_retries

    async def create_chat_completion(
        self,
        *,
        model: str | None = None,
        messages: list[dict[str, Any]],
        max_tokens: int | None = None,
        response_format: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"model": model or self.model, "messages": messages}
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens
        if response_format is not None:
            payload["response_format"] = response_format

        response = await self._post("/chat/completions", payload)
        if response.status_code // 100 != 2:
            body = response.text
            trimmed = body[:_ERROR_BODY_LIMIT] + ("..." if len(body) > _ERROR_BODY_LIMIT else "")
            raise OpenAIAPIError(
                status_code=response.status_code,
                message=f"OpenAI API error {response.status_code}: {trimmed}",
            )

        data = response.json()
        choices = data.get("choices") or [{}]
        content = choices[0].get("message", {}).get("content") or ""
        return {"content": content, "model": data.get("model", payload["model"])}

    async def _post(self, path: str, payload: dict[str, Any]) -> httpx.Response:
        url = f"{self.base_url}{path}"
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
            for attempt in range(self.max_retries + 1):
                last_attempt = attempt >= self.max_retries
                try:
                    response = await client.post(url, json=payload, headers=headers)
                except httpx.TimeoutException as exc:
                    if last_attempt:
                        raise RuntimeError("OpenAI request timed out") from exc
                    LOGGER.info("OpenAI request timed out; retry attempt=%s", attempt + 1)
                    await asyncio.sleep(0.5 * (attempt + 1))
                    continue
                if response.status_code >= 500 and not last_attempt:
                    LOGGER.info("OpenAI server error status=%s; retry attempt=%s", response.status_code, attempt + 1)
                    await asyncio.sleep(0.5 * (attempt + 1))
                    continue
                return response
        raise RuntimeError("OpenAI request failed")
