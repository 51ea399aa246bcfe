import asyncio
import json

import pytest

from daily_dose.errors import ComputationError, ConfigurationError
from daily_dose.models import NUTRITION_RESPONSE_SCHEMA, PetProfile, ProductRecommendation
from daily_dose.services.nutrition_service import NutritionService, build_prompt, buy_link


def test_prompt_spells_out_every_profile_field(profile_data):
    prompt = build_prompt(PetProfile.from_form(profile_data))
    for expected in [
        "Name: Rex",
        "Species: Dog",
        "Breed: Beagle",
        "Age: 4 years old",
        "Sex: Male",
        "Weight: 25 lbs",
        "Activity Level: Moderate",
        "Medical Conditions: Arthritis, Obesity",
        "Food Preference: Dry",
        "Preferred Brands: Royal Canin",
    ]:
        assert expected in prompt


def test_prompt_keeps_exact_numbers(profile_data):
    profile = PetProfile.from_form({**profile_data, "weight": 12.3456789, "age": 1234567})
    prompt = build_prompt(profile)
    assert "Weight: 12.3456789 lbs" in prompt
    assert "Age: 1234567 years old" in prompt

    prompt = build_prompt(PetProfile.from_form({**profile_data, "age": 0.5}))
    assert "Age: 0.5 years old" in prompt


def test_unnamed_pet_prompt(profile_data):
    prompt = build_prompt(PetProfile.from_form({**profile_data, "name": ""}))
    assert "Name: Unnamed" in prompt


def test_compute_plan_parses_structured_response(llm, profile_data):
    service = NutritionService(llm)
    result = asyncio.run(service.compute_plan(PetProfile.from_form(profile_data)))

    assert result.daily_calories == 850
    assert result.dry_food_amount == "2 cups"
    assert [r.name for r in result.recommendations.dry] == [
        "Hill's Science Diet Adult",
        "Purina Pro Plan Sensitive",
    ]
    assert llm.schemas == [NUTRITION_RESPONSE_SCHEMA]
    assert len(llm.calls) == 1


def test_missing_credential_is_configuration_error(llm, profile_data):
    service = NutritionService(llm, api_key_present=False)
    with pytest.raises(ConfigurationError):
        asyncio.run(service.compute_plan(PetProfile.from_form(profile_data)))
    assert llm.calls == []


def test_transport_failure_is_computation_error(llm, profile_data):
    llm.error = ConnectionError("network down")
    service = NutritionService(llm)
    with pytest.raises(ComputationError) as exc_info:
        asyncio.run(service.compute_plan(PetProfile.from_form(profile_data)))
    assert isinstance(exc_info.value.__cause__, ConnectionError)


@pytest.mark.parametrize(
    "raw",
    [
        "",
        "not json at all",
        json.dumps({"dailyCalories": "lots", "summary": "x"}),
        json.dumps({"dailyCalories": 500}),
    ],
)
def test_bad_response_is_computation_error(llm, profile_data, raw):
    llm.responder = lambda prompt: raw
    service = NutritionService(llm)
    with pytest.raises(ComputationError, match="Failed to calculate nutrition plan"):
        asyncio.run(service.compute_plan(PetProfile.from_form(profile_data)))


def test_timeout_becomes_computation_error(llm, profile_data):
    llm.hold = True
    service = NutritionService(llm, timeout_seconds=0.01)
    with pytest.raises(ComputationError):
        asyncio.run(service.compute_plan(PetProfile.from_form(profile_data)))


def test_buy_link_is_shopping_search():
    rec = ProductRecommendation(name="Royal Canin Adult", reason="Balanced")
    url = buy_link(rec, "Cat")
    assert url == "https://www.google.com/search?tbm=shop&q=Royal+Canin+Adult+for+Cat"
