from __future__ import annotations

import asyncio
import json
from typing import Any, Callable

import pytest

from daily_dose.llm.base import LLMClient
from daily_dose.persistence import AppStore, MemoryKeyValueStore


def _result_payload(calories: float = 850, summary: str = "Balanced adult diet.") -> dict[str, Any]:
    return {
        "dailyCalories": calories,
        "wetFoodAmount": "0",
        "dryFoodAmount": "2 cups",
        "summary": summary,
        "advice": "Keep treats under 10% of daily calories.",
        "recommendations": {
            "wet": [{"name": "Royal Canin Adult Loaf", "reason": "Hydration"}],
            "dry": [
                {"name": "Hill's Science Diet Adult", "reason": "Balanced"},
                {"name": "Purina Pro Plan Sensitive", "reason": "Gentle on digestion"},
            ],
        },
    }


class FakeLLM(LLMClient):
    """Records prompts. With hold=True every call waits until release(index)."""

    def __init__(self) -> None:
        self.calls: list[str] = []
        self.schemas: list[dict[str, Any]] = []
        self.responder: Callable[[str], str] = lambda prompt: json.dumps(_result_payload())
        self.error: Exception | None = None
        self.hold = False
        self._gates: dict[int, asyncio.Event] = {}

    async def generate(self, prompt, response_schema, *, schema_name="response"):
        index = len(self.calls)
        self.calls.append(prompt)
        self.schemas.append(response_schema)
        if self.hold:
            gate = self._gates[index] = asyncio.Event()
            await gate.wait()
        if self.error is not None:
            raise self.error
        return self.responder(prompt)

    async def wait_for_calls(self, count: int) -> None:
        while len(self.calls) < count:
            await asyncio.sleep(0)

    def release(self, index: int) -> None:
        self._gates[index].set()


@pytest.fixture
def make_result() -> Callable[..., str]:
    """JSON text of a valid nutrition response."""

    def _make(**kwargs: Any) -> str:
        return json.dumps(_result_payload(**kwargs))

    return _make


@pytest.fixture
def llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def kv() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def store(kv) -> AppStore:
    return AppStore(
        kv,
        seed_admin_items=[
            {"id": "1", "type": "menu", "title": "Home", "linkUrl": "#"},
            {"id": "3", "type": "news", "title": "Welcome", "content": "Hello", "linkUrl": "#"},
        ],
    )


@pytest.fixture
def profile_data() -> dict[str, Any]:
    return {
        "name": "Rex",
        "species": "Dog",
        "breed": "Beagle",
        "weight": 25,
        "age": 4,
        "sex": "Male",
        "activityLevel": "Moderate",
        "medicalConditions": ["Arthritis", "Obesity"],
        "foodType": "Dry",
        "foodBrands": ["Royal Canin"],
    }
