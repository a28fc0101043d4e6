from __future__ import annotations

from typing import Any, Optional, Sequence

from openai import AsyncOpenAI

from app.ai.types import AIClientError, ChatMessage

MAX_PROMPT_CHARS = 12_000


def _clamp(value: float, min_value: float, max_value: float) -> float:
    return min(max(value, min_value), max_value)


class OpenAICompatibleProvider:
    """Chat completions against any OpenAI-compatible endpoint (OpenRouter, Gemini, OpenAI)."""

    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_s: float = 60.0,
        max_retries: int = 0,
        default_headers: Optional[dict[str, str]] = None,
        client: Optional[AsyncOpenAI] = None,
    ):
        self._model = model
        key = (api_key or "").strip()
        if client is None and not key:
            raise AIClientError("AI API key is missing", code="llm_disabled")

        self._client = client or AsyncOpenAI(
            api_key=key,
            base_url=base_url,
            timeout=timeout_s,
            max_retries=max_retries,
            default_headers=default_headers,
        )

    @property
    def model(self) -> str:
        return self._model

    async def complete(
        self,
        messages: Sequence[ChatMessage],
        *,
        json_mode: bool = False,
        temperature: float = 0.4,
        max_tokens: int = 1500,
    ) -> str:
        payload = [
            {"role": m.role, "content": m.content.strip()[:MAX_PROMPT_CHARS]}
            for m in messages
            if m.content and m.content.strip()
        ]
        if not payload:
            raise AIClientError("AI request messages are required.", code="llm_invalid_request")

        create_kwargs: dict[str, Any] = {
            "model": self._model,
            "messages": payload,
            "temperature": _clamp(temperature, 0.3, 0.5),
            "max_tokens": int(_clamp(max_tokens, 100, 2000)),
        }
        if json_mode:
            create_kwargs["response_format"] = {"type": "json_object"}

        try:
            response = await self._client.chat.completions.create(**create_kwargs)
        except Exception as exc:
            raise AIClientError(f"AI request failed: {exc}", code="llm_exception") from exc

        content = response.choices[0].message.content if response.choices else None
        if not content or not isinstance(content, str):
            raise AIClientError("AI response was empty.", code="llm_empty")
        return content
