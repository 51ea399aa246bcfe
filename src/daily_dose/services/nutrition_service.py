"""Nutrition request service - one structured AI call per pet profile."""

import asyncio
import logging
from urllib.parse import quote_plus

from pydantic import ValidationError as PydanticValidationError

from daily_dose.errors import ComputationError, ConfigurationError
from daily_dose.llm.base import LLMClient
from daily_dose.models import (
    NUTRITION_RESPONSE_SCHEMA,
    NutritionResult,
    PetProfile,
    ProductRecommendation,
    Species,
)

logger = logging.getLogger(__name__)

COMPUTATION_FAILED_MESSAGE = "Failed to calculate nutrition plan. Please try again."
MISSING_KEY_MESSAGE = "API Key is missing. Please set the LLM_API_KEY environment variable."

SHOPPING_SEARCH_URL = "https://www.google.com/search?tbm=shop&q={query}"

NUTRITION_PROMPT_TEMPLATE = """Act as a veterinary nutritionist. Analyze the following pet details and provide daily nutritional recommendations.

Pet Details:
- Name: {name}
- Species: {species}
- Breed: {breed}
- Age: {age} years old
- Sex: {sex}
- Weight: {weight} lbs
- Activity Level: {activity_level}
- Medical Conditions: {medical_conditions}
- Food Preference: {food_type}
- Preferred Brands: {food_brands}

Task:
1. Calculate the daily caloric needs (Resting Energy Requirement * Factor based on activity level and life stage).
2. Recommend the amount of wet and/or dry food based on the 'Food Preference' and 'Preferred Brands'.
   If specific brands are listed, estimate based on their typical caloric density.
   If 'Both' is selected, split calories approx 50/50 or appropriately for the species.
3. Provide a brief summary of why this is the recommendation.
4. Provide specific advice considering the medical conditions (e.g., "Avoid high sodium for heart issues").
5. List top 3 specific Wet Food products and top 3 specific Dry Food products (Brand + specific formula).
   - If the user selected 'Wet' only, prioritize that, but IF 'Dry' would be beneficial (e.g. for dental health), include recommendations for it with a note why.
   - If the user selected 'Dry' only, prioritize that, but IF 'Wet' would be beneficial (e.g. for hydration in cats), include recommendations for it with a note why.
   - If 'Both', provide 3 of each.

Return the data in a strict JSON format matching the schema."""


def build_prompt(profile: PetProfile) -> str:
    """Spell out every profile field for the model."""
    return NUTRITION_PROMPT_TEMPLATE.format(**profile.to_ai_context())


def buy_link(recommendation: ProductRecommendation, species: Species | str) -> str:
    """Shopping search URL for a recommended product."""
    species_name = Species(species).value
    return SHOPPING_SEARCH_URL.format(
        query=quote_plus(f"{recommendation.name} for {species_name}")
    )


class NutritionService:
    """Computes a NutritionResult from a pet profile. No retries, no caching."""

    def __init__(
        self,
        llm: LLMClient,
        *,
        api_key_present: bool = True,
        timeout_seconds: float | None = None,
    ) -> None:
        self._llm = llm
        self._configured = api_key_present
        self._timeout = timeout_seconds

    @property
    def configured(self) -> bool:
        return self._configured

    async def compute_plan(self, profile: PetProfile) -> NutritionResult:
        """
        Ask the model for a plan and parse it against the fixed schema.
        Raises ConfigurationError without a credential, ComputationError otherwise.
        """
        if not self._configured:
            raise ConfigurationError(MISSING_KEY_MESSAGE)

        prompt = build_prompt(profile)
        try:
            call = self._llm.generate(
                prompt,
                NUTRITION_RESPONSE_SCHEMA,
                schema_name="nutrition_result",
            )
            if self._timeout is not None:
                raw = await asyncio.wait_for(call, self._timeout)
            else:
                raw = await call
        except ConfigurationError:
            raise
        except Exception as e:
            logger.exception("AI calculation failed for %s: %s", profile.name or "unnamed pet", e)
            raise ComputationError(COMPUTATION_FAILED_MESSAGE) from e

        if not raw or not raw.strip():
            logger.warning("Empty response from AI for %s", profile.name or "unnamed pet")
            raise ComputationError(COMPUTATION_FAILED_MESSAGE)
        try:
            return NutritionResult.model_validate_json(raw)
        except PydanticValidationError as e:
            logger.warning("AI response failed schema validation: %s. Raw: %s", e, raw[:200])
            raise ComputationError(COMPUTATION_FAILED_MESSAGE) from e
