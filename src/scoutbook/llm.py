"""Text-generation backends used for scouting reports."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from openai import AsyncOpenAI, OpenAIError

from scoutbook.config import DEFAULT_OPENAI_MODEL
from scoutbook.errors import GenerationFailed, GenerationUnavailable


logger = logging.getLogger(__name__)


class TextGenerator(Protocol):
    @property
    def configured(self) -> bool: ...

    async def generate(self, prompt: str, *, temperature: float, max_tokens: int) -> str: ...


class OpenAIGenerator:
    """Chat-completions client; ``configured`` is false without an API key."""

    def __init__(
        self,
        api_key: Optional[str],
        *,
        model: str = DEFAULT_OPENAI_MODEL,
        client: AsyncOpenAI | None = None,
    ):
        self.model = model
        self._api_key = api_key
        self._client = client

    @property
    def configured(self) -> bool:
        return self._client is not None or bool(self._api_key)

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self._api_key:
                raise GenerationUnavailable("OpenAI API key not configured")
            self._client = AsyncOpenAI(api_key=self._api_key)
        return self._client

    async def generate(self, prompt: str, *, temperature: float, max_tokens: int) -> str:
        client = self._get_client()
        try:
            completion = await client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except OpenAIError as exc:
            logger.warning("OpenAI completion failed: %s", exc)
            raise GenerationFailed(f"Text generation failed: {exc}") from exc
        if not completion.choices:
            return ""
        return completion.choices[0].message.content or ""
