"""Data models."""

from daily_dose.models.admin import (
    AdminItem,
    AdminItemType,
    AdPlan,
    BillingCycle,
    PaymentConfig,
)
from daily_dose.models.nutrition import (
    NUTRITION_RESPONSE_SCHEMA,
    NutritionResult,
    ProductRecommendation,
    Recommendations,
)
from daily_dose.models.pet import (
    ActivityLevel,
    FoodType,
    Pet,
    PetProfile,
    PetStatus,
    Sex,
    Species,
)
from daily_dose.models.user import AccountRecord, User

__all__ = [
    "AccountRecord",
    "ActivityLevel",
    "AdPlan",
    "AdminItem",
    "AdminItemType",
    "BillingCycle",
    "FoodType",
    "NUTRITION_RESPONSE_SCHEMA",
    "NutritionResult",
    "PaymentConfig",
    "Pet",
    "PetProfile",
    "PetStatus",
    "ProductRecommendation",
    "Recommendations",
    "Sex",
    "Species",
    "User",
]
