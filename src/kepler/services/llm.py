"""OpenAI-compatible chat completion client using httpx.

Single request per call, no retries: callers decide how to degrade when a
request fails.
"""

import logging
from dataclasses import dataclass

import httpx

from kepler.config import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChatResponse:
    content: str
    model: str
    total_tokens: int | None = None


class LLMClient:
    """Async client for ``POST {base_url}/chat/completions``."""

    def __init__(
        self,
        settings: Settings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = settings.llm_base_url.rstrip("/")
        self._model = settings.llm_model_name
        self._temperature = settings.llm_temperature
        headers = {"Content-Type": "application/json"}
        if settings.llm_api_key:
            headers["Authorization"] = f"Bearer {settings.llm_api_key}"
        self._client = httpx.AsyncClient(
            headers=headers,
            timeout=httpx.Timeout(settings.llm_timeout, connect=10.0),
            transport=transport,
        )

    async def chat(
        self,
        messages: list[dict[str, str]],
        *,
        temperature: float | None = None,
    ) -> ChatResponse:
        """Send a chat completion request and return the first choice.

        Raises ``httpx.HTTPError`` on transport failures and non-2xx
        responses, ``ValueError`` when the body is not JSON.
        """
        payload = {
            "model": self._model,
            "messages": messages,
            "temperature": temperature if temperature is not None else self._temperature,
        }
        response = await self._client.post(
            f"{self._base_url}/chat/completions", json=payload
        )
        response.raise_for_status()
        data = response.json()

        choices = data.get("choices") or [{}]
        content = _content_text((choices[0].get("message") or {}).get("content"))
        usage = data.get("usage") or {}
        logger.debug("LLM response (first 200 chars): %s", content[:200])

        return ChatResponse(
            content=content,
            model=data.get("model", self._model),
            total_tokens=usage.get("total_tokens"),
        )

    async def is_reachable(self) -> bool:
        """Check if the LLM endpoint answers the models listing."""
        try:
            response = await self._client.get(
                f"{self._base_url}/models",
                timeout=httpx.Timeout(5.0),
            )
            return response.status_code == 200
        except httpx.HTTPError:
            return False

    async def close(self) -> None:
        await self._client.aclose()


def _content_text(content: object) -> str:
    """Flatten a message ``content`` into plain text.

    Plain strings pass through; a list of content parts (strings or
    ``{"type": "text", "text": ...}`` objects) is concatenated. Anything
    else yields an empty string.
    """
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts: list[str] = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and isinstance(part.get("text"), str):
                parts.append(part["text"])
        return "".join(parts)
    return ""
