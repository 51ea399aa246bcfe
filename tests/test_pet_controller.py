import asyncio

import pytest

from daily_dose.errors import PetNotFound, ValidationError
from daily_dose.models import Pet, PetProfile, PetStatus
from daily_dose.services import NutritionService, PetController, changed_fields


@pytest.fixture
def ready_pets():
    return []


@pytest.fixture
def controller(store, llm, ready_pets):
    return PetController(store, NutritionService(llm), on_ready=ready_pets.append)


def _profile(data, **overrides):
    return PetProfile.from_form({**data, **overrides})


def test_create_reaches_ready_and_persists(controller, store, llm, profile_data, ready_pets):
    pet = asyncio.run(controller.create_pet(_profile(profile_data)))

    assert pet.status is PetStatus.READY
    assert pet.result.daily_calories == 850
    assert [p.id for p in store.load_pets()] == [pet.id]
    assert store.load_pets()[0].result is not None
    assert len(llm.calls) == 1
    assert [p.id for p in ready_pets] == [pet.id]


def test_create_failure_reaches_failed(controller, llm, profile_data, ready_pets):
    llm.error = RuntimeError("provider exploded")
    pet = asyncio.run(controller.create_pet(_profile(profile_data)))

    assert pet.status is PetStatus.FAILED
    assert pet.error == "Failed to calculate nutrition plan. Please try again."
    assert ready_pets == []


def test_begin_create_enters_loading(controller, profile_data):
    request = controller.begin_create(_profile(profile_data))
    assert controller.get(request.pet_id).status is PetStatus.LOADING


def test_fifth_pet_is_rejected(controller, llm, profile_data):
    for i in range(4):
        asyncio.run(controller.create_pet(_profile(profile_data, name=f"Pet {i}")))
    before = controller.pets

    with pytest.raises(ValidationError, match="limit of 4"):
        controller.begin_create(_profile(profile_data, name="Fifth"))

    assert controller.pets == before
    assert len(llm.calls) == 4


def test_capacity_is_configurable(store, llm, profile_data):
    controller = PetController(store, NutritionService(llm), max_pets=1)
    asyncio.run(controller.create_pet(_profile(profile_data)))
    with pytest.raises(ValidationError):
        controller.begin_create(_profile(profile_data))


def test_identical_edit_is_a_noop(controller, store, llm, profile_data):
    pet = asyncio.run(controller.create_pet(_profile(profile_data)))
    saved = store.load_pets()

    edited = asyncio.run(controller.edit_pet(pet.id, _profile(profile_data)))

    assert edited == pet
    assert store.load_pets() == saved
    assert len(llm.calls) == 1


def test_reordered_selection_is_not_a_change(controller, llm, profile_data):
    pet = asyncio.run(controller.create_pet(_profile(profile_data)))

    request = controller.begin_edit(
        pet.id, _profile(profile_data, medicalConditions=["Obesity", "Arthritis"])
    )

    assert request is None
    assert len(llm.calls) == 1


def test_changed_edit_recomputes_with_same_id(controller, llm, profile_data, make_result):
    pet = asyncio.run(controller.create_pet(_profile(profile_data)))
    llm.responder = lambda prompt: make_result(calories=700)

    request = controller.begin_edit(pet.id, _profile(profile_data, weight=20))
    loading = controller.get(pet.id)
    assert loading.status is PetStatus.LOADING
    assert loading.result is None
    assert loading.weight == 20

    updated = asyncio.run(controller.run(request))
    assert updated.id == pet.id
    assert updated.result.daily_calories == 700
    assert "Weight: 20 lbs" in llm.calls[-1]


def test_changed_fields_lists_differences(profile_data):
    old = _profile(profile_data)
    new = _profile(profile_data, name="Max", foodBrands=["Royal Canin", "Orijen"])
    assert changed_fields(old, new) == ["name", "food_brands"]
    assert changed_fields(old, old) == []


def test_refresh_recovers_from_failure(controller, llm, profile_data):
    llm.error = RuntimeError("flaky")
    pet = asyncio.run(controller.create_pet(_profile(profile_data)))
    assert pet.status is PetStatus.FAILED

    llm.error = None
    refreshed = asyncio.run(controller.refresh_pet(pet.id))
    assert refreshed.status is PetStatus.READY
    assert refreshed.error is None


def test_refresh_unknown_pet(controller):
    with pytest.raises(PetNotFound):
        controller.begin_refresh("missing")


def test_delete_requires_confirmation(controller, store, profile_data):
    pet = asyncio.run(controller.create_pet(_profile(profile_data)))

    assert controller.delete_pet(pet.id, confirmed=False) is False
    assert controller.get(pet.id) is not None

    assert controller.delete_pet(pet.id, confirmed=True) is True
    assert controller.pets == []
    assert store.load_pets() == []


def test_late_completion_for_deleted_pet_is_discarded(controller, store, llm, profile_data):
    llm.hold = True

    async def scenario():
        request = controller.begin_create(_profile(profile_data))
        task = asyncio.create_task(controller.run(request))
        await llm.wait_for_calls(1)
        controller.delete_pet(request.pet_id, confirmed=True)
        llm.release(0)
        return await task

    assert asyncio.run(scenario()) is None
    assert controller.pets == []
    assert store.load_pets() == []


def test_superseded_completion_is_discarded(controller, llm, profile_data, make_result):
    llm.hold = True
    llm.responder = lambda prompt: make_result(calories=600 if "Weight: 30 lbs" in prompt else 400)

    async def scenario():
        first = controller.begin_create(_profile(profile_data))
        first_task = asyncio.create_task(controller.run(first))
        await llm.wait_for_calls(1)

        second = controller.begin_edit(first.pet_id, _profile(profile_data, weight=30))
        second_task = asyncio.create_task(controller.run(second))
        await llm.wait_for_calls(2)

        llm.release(1)
        await second_task
        llm.release(0)
        return await first_task

    assert asyncio.run(scenario()) is None
    pet = controller.pets[0]
    assert pet.status is PetStatus.READY
    assert pet.result.daily_calories == 600


def test_concurrent_pets_complete_in_any_order(controller, llm, profile_data, make_result):
    llm.hold = True
    llm.responder = lambda prompt: make_result(calories=300 if "Name: Tom" in prompt else 900)

    async def scenario():
        rex = controller.begin_create(_profile(profile_data))
        tom = controller.begin_create(_profile(profile_data, name="Tom", species="Cat", weight=9))
        rex_task = asyncio.create_task(controller.run(rex))
        tom_task = asyncio.create_task(controller.run(tom))
        await llm.wait_for_calls(2)

        llm.release(1)
        await tom_task
        assert controller.get(rex.pet_id).status is PetStatus.LOADING
        assert controller.get(tom.pet_id).result.daily_calories == 300

        llm.release(0)
        await rex_task
        return rex.pet_id, tom.pet_id

    rex_id, tom_id = asyncio.run(scenario())
    assert controller.get(rex_id).result.daily_calories == 900
    assert controller.get(tom_id).result.daily_calories == 300
    assert [p.name for p in controller.pets] == ["Rex", "Tom"]


def test_interrupted_loading_pet_is_marked_failed(store, llm, profile_data):
    stuck = Pet(id="p1", **_profile(profile_data).model_dump()).loading()
    store.save_pets([stuck])

    controller = PetController(store, NutritionService(llm))
    assert controller.get("p1").status is PetStatus.FAILED
