"""LLM abstraction - OpenAI-compatible."""

from daily_dose.llm.base import LLMClient
from daily_dose.llm.openai_client import OpenAIClient

__all__ = ["LLMClient", "OpenAIClient"]
