"""LLM client abstract interface - structured generation."""

from abc import ABC, abstractmethod
from typing import Any


class LLMClient(ABC):
    """Generative model that answers a prompt with JSON matching a schema."""

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        response_schema: dict[str, Any],
        *,
        schema_name: str = "response",
    ) -> str:
        """
        Send the prompt and return the raw JSON text of the response.
        response_schema: JSON Schema the response must conform to.
        """
        ...
