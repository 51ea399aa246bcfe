"""OpenAI-compatible LLM client implementation."""

import logging
from typing import Any

from daily_dose.config import get_settings
from daily_dose.errors import ConfigurationError
from daily_dose.llm.base import LLMClient

logger = logging.getLogger(__name__)


class OpenAIClient(LLMClient):
    """OpenAI API client - works with OpenAI or compatible endpoints (e.g. LiteLLM)."""

    def __init__(
        self,
        *,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
    ) -> None:
        settings = get_settings()
        self._api_key = api_key or settings.llm_api_key
        self._base_url = base_url or settings.llm_base_url
        self._model = model or settings.llm_model
        self._client = None

    def _get_client(self):
        """Lazy-init the async OpenAI client."""
        if not self._api_key:
            raise ConfigurationError(
                "API key is missing. Please set the LLM_API_KEY environment variable."
            )
        if self._client is None:
            from openai import AsyncOpenAI

            client_kwargs: dict[str, Any] = {"api_key": self._api_key}
            if self._base_url:
                client_kwargs["base_url"] = self._base_url
            self._client = AsyncOpenAI(**client_kwargs)
        return self._client

    async def generate(
        self,
        prompt: str,
        response_schema: dict[str, Any],
        *,
        schema_name: str = "response",
    ) -> str:
        """Chat completion constrained to a strict JSON schema."""
        client = self._get_client()
        response = await client.chat.completions.create(
            model=self._model,
            messages=[{"role": "user", "content": prompt}],
            response_format={
                "type": "json_schema",
                "json_schema": {
                    "name": schema_name,
                    "schema": response_schema,
                    "strict": True,
                },
            },
        )
        content = response.choices[0].message.content
        logger.debug("LLM response length: %d", len(content or ""))
        return content or ""
