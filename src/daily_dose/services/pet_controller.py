"""Pet lifecycle - create, edit, refresh, delete and merge async plan results."""

import logging
import uuid
from dataclasses import dataclass
from typing import Callable

from daily_dose.errors import DailyDoseError, PetNotFound, ValidationError
from daily_dose.models import Pet, PetProfile
from daily_dose.persistence import AppStore
from daily_dose.services.nutrition_service import NutritionService

logger = logging.getLogger(__name__)

# Compared as sets: reordering a selection is not a change
SET_VALUED_FIELDS = frozenset({"medical_conditions", "food_brands"})

INTERRUPTED_MESSAGE = "Calculation was interrupted. Please refresh."


def changed_fields(old: PetProfile, new: PetProfile) -> list[str]:
    """Names of profile fields that differ between two profiles."""
    changed = []
    for name in PetProfile.model_fields:
        before, after = getattr(old, name), getattr(new, name)
        if name in SET_VALUED_FIELDS:
            if set(before) != set(after):
                changed.append(name)
        elif before != after:
            changed.append(name)
    return changed


@dataclass(frozen=True)
class PlanRequest:
    """An outstanding nutrition computation for one pet."""

    pet_id: str
    profile: PetProfile
    token: int


class PetController:
    """
    Owns the pet list. Each pet moves Idle -> Loading -> Ready | Failed.

    The begin_* methods make the synchronous transition and persist it; run()
    awaits the AI call and merges the outcome. A completion is dropped if its
    pet was deleted or a newer request for the same pet has started.
    """

    def __init__(
        self,
        store: AppStore,
        nutrition: NutritionService,
        *,
        max_pets: int = 4,
        on_ready: Callable[[Pet], None] | None = None,
    ) -> None:
        self._store = store
        self._nutrition = nutrition
        self._max_pets = max_pets
        self._on_ready = on_ready
        self._tokens: dict[str, int] = {}
        self._pets = [self._recover(p) for p in store.load_pets()]

    @staticmethod
    def _recover(pet: Pet) -> Pet:
        # A request that was in flight when the process stopped will never complete
        if pet.is_loading:
            return pet.failed(INTERRUPTED_MESSAGE)
        return pet

    @property
    def pets(self) -> list[Pet]:
        return list(self._pets)

    @property
    def max_pets(self) -> int:
        return self._max_pets

    def get(self, pet_id: str) -> Pet | None:
        return next((p for p in self._pets if p.id == pet_id), None)

    def _require(self, pet_id: str) -> Pet:
        pet = self.get(pet_id)
        if pet is None:
            raise PetNotFound(f"No pet with id {pet_id}")
        return pet

    def _replace(self, pet: Pet) -> None:
        self._pets = [pet if p.id == pet.id else p for p in self._pets]
        self._store.save_pets(self._pets)

    def _request(self, pet: Pet) -> PlanRequest:
        token = self._tokens.get(pet.id, 0) + 1
        self._tokens[pet.id] = token
        return PlanRequest(pet_id=pet.id, profile=pet.profile(), token=token)

    # Synchronous transitions

    def begin_create(self, profile: PetProfile) -> PlanRequest:
        if len(self._pets) >= self._max_pets:
            raise ValidationError(
                f"You have reached the dashboard limit of {self._max_pets} pets."
            )
        pet = Pet(id=str(uuid.uuid4()), **profile.model_dump()).loading()
        self._pets = [*self._pets, pet]
        self._store.save_pets(self._pets)
        logger.info("Created pet %s (%s)", pet.id, pet.name or "unnamed")
        return self._request(pet)

    def begin_edit(self, pet_id: str, profile: PetProfile) -> PlanRequest | None:
        """Returns None when nothing changed; the stored pet is left as is."""
        pet = self._require(pet_id)
        changed = changed_fields(pet.profile(), profile)
        if not changed:
            logger.info("Edit of pet %s has no changes", pet_id)
            return None
        logger.info("Pet %s changed: %s", pet_id, ", ".join(changed))
        pet = pet.with_profile(profile).loading()
        self._replace(pet)
        return self._request(pet)

    def begin_refresh(self, pet_id: str) -> PlanRequest:
        pet = self._require(pet_id).loading()
        self._replace(pet)
        return self._request(pet)

    def delete_pet(self, pet_id: str, *, confirmed: bool) -> bool:
        """Remove a pet. Without confirmation nothing happens."""
        self._require(pet_id)
        if not confirmed:
            return False
        self._pets = [p for p in self._pets if p.id != pet_id]
        self._tokens.pop(pet_id, None)
        self._store.save_pets(self._pets)
        logger.info("Deleted pet %s", pet_id)
        return True

    # Async completion

    async def run(self, request: PlanRequest) -> Pet | None:
        """Compute and merge. Returns the updated pet, or None if discarded."""
        try:
            result = await self._nutrition.compute_plan(request.profile)
        except DailyDoseError as e:
            logger.warning("Plan for pet %s failed: %s", request.pet_id, e)
            return self._merge(request, lambda p: p.failed(str(e)))
        pet = self._merge(request, lambda p: p.ready(result))
        if pet is not None and self._on_ready:
            self._on_ready(pet)
        return pet

    def _merge(self, request: PlanRequest, apply: Callable[[Pet], Pet]) -> Pet | None:
        current = self.get(request.pet_id)
        if current is None:
            logger.info("Discarding result for deleted pet %s", request.pet_id)
            return None
        if self._tokens.get(request.pet_id) != request.token:
            logger.info("Discarding superseded result for pet %s", request.pet_id)
            return None
        pet = apply(current)
        self._replace(pet)
        return pet

    # Convenience: transition and await in one call

    async def create_pet(self, profile: PetProfile) -> Pet | None:
        return await self.run(self.begin_create(profile))

    async def edit_pet(self, pet_id: str, profile: PetProfile) -> Pet | None:
        """Returns the stored pet unchanged when the edit is a no-op."""
        request = self.begin_edit(pet_id, profile)
        if request is None:
            return self.get(pet_id)
        return await self.run(request)

    async def refresh_pet(self, pet_id: str) -> Pet | None:
        return await self.run(self.begin_refresh(pet_id))
