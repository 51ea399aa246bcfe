"""Nutrition plan data model and the response schema the AI must follow."""

from typing import Any

from pydantic import Field

from daily_dose.models.base import CamelModel


class ProductRecommendation(CamelModel):
    """One suggested product."""

    name: str = Field(..., description="Brand + formula")
    reason: str = Field(..., description="Short reason why this is good")


class Recommendations(CamelModel):
    """Wet and dry product lists, in the order the model ranked them."""

    wet: list[ProductRecommendation] = Field(default_factory=list)
    dry: list[ProductRecommendation] = Field(default_factory=list)


class NutritionResult(CamelModel):
    """Daily feeding plan for one pet profile. Replaced wholesale on recompute."""

    daily_calories: float = Field(..., description="kcal per day")
    wet_food_amount: str = Field(..., description="e.g. '1.5 cans (5.5oz)' or '0'")
    dry_food_amount: str = Field(..., description="e.g. '1 cup' or '0'")
    summary: str
    advice: str
    recommendations: Recommendations


_RECOMMENDATION_ITEM: dict[str, Any] = {
    "type": "object",
    "properties": {
        "name": {"type": "string", "description": "Full name of the product (Brand + Formula)"},
        "reason": {"type": "string", "description": "Short reason why this is good"},
    },
    "required": ["name", "reason"],
    "additionalProperties": False,
}

NUTRITION_RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "dailyCalories": {
            "type": "number",
            "description": "Total recommended calories per day in kcal",
        },
        "wetFoodAmount": {
            "type": "string",
            "description": "Description of wet food amount (e.g., '1.5 cans (5.5oz)') or '0' if none",
        },
        "dryFoodAmount": {
            "type": "string",
            "description": "Description of dry food amount (e.g., '1 cup') or '0' if none",
        },
        "summary": {"type": "string", "description": "A concise summary of the diet plan."},
        "advice": {
            "type": "string",
            "description": "Specific medical or dietary advice based on inputs.",
        },
        "recommendations": {
            "type": "object",
            "properties": {
                "wet": {
                    "type": "array",
                    "description": "Top 3 Wet Food recommendations",
                    "items": _RECOMMENDATION_ITEM,
                },
                "dry": {
                    "type": "array",
                    "description": "Top 3 Dry Food recommendations",
                    "items": _RECOMMENDATION_ITEM,
                },
            },
            "required": ["wet", "dry"],
            "additionalProperties": False,
        },
    },
    "required": [
        "dailyCalories",
        "wetFoodAmount",
        "dryFoodAmount",
        "summary",
        "advice",
        "recommendations",
    ],
    "additionalProperties": False,
}
