"""Business logic services."""

from daily_dose.services.auth_controller import AuthController, PlaintextPasswordVault
from daily_dose.services.feed_controller import FeedController, move_item
from daily_dose.services.nutrition_service import NutritionService, buy_link
from daily_dose.services.pet_controller import PetController, PlanRequest, changed_fields
from daily_dose.services.signup_prompt import SignupPrompter

__all__ = [
    "AuthController",
    "FeedController",
    "NutritionService",
    "PetController",
    "PlaintextPasswordVault",
    "PlanRequest",
    "SignupPrompter",
    "buy_link",
    "changed_fields",
    "move_item",
]
