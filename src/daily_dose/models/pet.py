"""Pet profile and pet record data models."""

from enum import Enum
from typing import Any

from pydantic import Field, ValidationError as PydanticValidationError, field_validator

from daily_dose.errors import ValidationError
from daily_dose.models.base import CamelModel
from daily_dose.models.nutrition import NutritionResult

NO_CONDITIONS = "None"
NO_BRAND_PREFERENCE = "Generic / No Preference"
UNKNOWN_BREED = "Unknown Mix"


def _plain_number(value: float) -> str:
    """Exact decimal text; whole numbers without a trailing .0"""
    return str(int(value)) if value.is_integer() else repr(value)


class Species(str, Enum):
    DOG = "Dog"
    CAT = "Cat"


class Sex(str, Enum):
    MALE = "Male"
    FEMALE = "Female"


class FoodType(str, Enum):
    WET = "Wet"
    DRY = "Dry"
    BOTH = "Both"


class ActivityLevel(str, Enum):
    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"
    WORKING = "Working/Athlete"


class PetStatus(str, Enum):
    """Computation state of a pet's nutrition plan."""

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class PetProfile(CamelModel):
    """User-editable attributes of a pet, excluding the derived plan."""

    name: str = Field(default="")
    species: Species = Field(default=Species.DOG)
    breed: str = Field(default=UNKNOWN_BREED)
    weight: float = Field(..., gt=0, description="Weight in lbs")
    age: float = Field(..., ge=0, description="Age in years")
    sex: Sex = Field(default=Sex.MALE)
    activity_level: ActivityLevel = Field(default=ActivityLevel.MODERATE)
    medical_conditions: list[str] = Field(default_factory=lambda: [NO_CONDITIONS])
    food_type: FoodType = Field(default=FoodType.DRY)
    food_brands: list[str] = Field(default_factory=lambda: [NO_BRAND_PREFERENCE])
    image_url: str | None = Field(default=None, description="Data URI or external URL")

    @field_validator("breed", mode="before")
    @classmethod
    def _default_breed(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return UNKNOWN_BREED
        return v

    @field_validator("medical_conditions", mode="before")
    @classmethod
    def _default_conditions(cls, v: Any) -> Any:
        return v or [NO_CONDITIONS]

    @field_validator("food_brands", mode="before")
    @classmethod
    def _default_brands(cls, v: Any) -> Any:
        return v or [NO_BRAND_PREFERENCE]

    @field_validator("image_url", mode="before")
    @classmethod
    def _blank_image(cls, v: Any) -> Any:
        return v or None

    @classmethod
    def from_form(cls, data: dict[str, Any]) -> "PetProfile":
        """Validate submitted form data, raising the domain ValidationError."""
        try:
            return cls.model_validate(data)
        except PydanticValidationError as e:
            fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
            if "weight" in fields:
                raise ValidationError("Please enter a valid weight.") from e
            if "age" in fields:
                raise ValidationError("Please enter a valid age.") from e
            raise ValidationError(f"Invalid pet details: {', '.join(fields)}") from e

    def to_ai_context(self) -> dict[str, Any]:
        """Fields as they are spelled out in the nutrition prompt."""
        return {
            "name": self.name or "Unnamed",
            "species": self.species.value,
            "breed": self.breed,
            "age": _plain_number(self.age),
            "sex": self.sex.value,
            "weight": _plain_number(self.weight),
            "activity_level": self.activity_level.value,
            "medical_conditions": ", ".join(self.medical_conditions) or "None",
            "food_type": self.food_type.value,
            "food_brands": ", ".join(self.food_brands) or "Generic/None",
        }


class Pet(PetProfile):
    """A registered pet: profile plus id and the async plan slot."""

    id: str = Field(..., frozen=True)
    result: NutritionResult | None = None
    is_loading: bool = False
    error: str | None = None

    @property
    def status(self) -> PetStatus:
        if self.is_loading:
            return PetStatus.LOADING
        if self.error:
            return PetStatus.FAILED
        if self.result is not None:
            return PetStatus.READY
        return PetStatus.IDLE

    def profile(self) -> PetProfile:
        """The editable part of this pet."""
        return PetProfile.model_validate(
            self.model_dump(include=set(PetProfile.model_fields))
        )

    def with_profile(self, profile: PetProfile) -> "Pet":
        """Apply a new profile, keeping id and plan slot."""
        return self.model_copy(update=profile.model_dump(include=set(PetProfile.model_fields)))

    def loading(self) -> "Pet":
        return self.model_copy(update={"is_loading": True, "error": None, "result": None})

    def ready(self, result: NutritionResult) -> "Pet":
        return self.model_copy(update={"is_loading": False, "error": None, "result": result})

    def failed(self, message: str) -> "Pet":
        return self.model_copy(update={"is_loading": False, "error": message, "result": None})
