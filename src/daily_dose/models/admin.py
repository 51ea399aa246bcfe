"""Admin feed and payment link data models."""

from enum import Enum

from pydantic import Field

from daily_dose.models.base import CamelModel

PLACEHOLDER_URL = "#"


class AdminItemType(str, Enum):
    """Admin feed item kind."""

    MENU = "menu"
    NEWS = "news"
    AD_IMAGE = "ad-image"
    AD_TEXT = "ad-text"


class AdminItem(CamelModel):
    """One entry of the admin feed. Which optional fields are set depends on type."""

    id: str
    type: AdminItemType
    title: str | None = None
    content: str | None = None
    image_url: str | None = None
    link_url: str | None = None
    date: str | None = None
    background_color: str | None = None
    text_color: str | None = None


class AdPlan(str, Enum):
    TEXT = "text"
    IMAGE = "image"
    BOTH = "both"


class BillingCycle(str, Enum):
    MONTHLY = "monthly"
    YEARLY = "yearly"


class PaymentConfig(CamelModel):
    """External checkout links, one per plan and billing cycle."""

    text_monthly: str = Field(default=PLACEHOLDER_URL)
    text_yearly: str = Field(default=PLACEHOLDER_URL)
    image_monthly: str = Field(default=PLACEHOLDER_URL)
    image_yearly: str = Field(default=PLACEHOLDER_URL)
    both_monthly: str = Field(default=PLACEHOLDER_URL)
    both_yearly: str = Field(default=PLACEHOLDER_URL)

    @classmethod
    def placeholder(cls, url: str = PLACEHOLDER_URL) -> "PaymentConfig":
        return cls(**{name: url for name in cls.model_fields})

    def url_for(self, plan: AdPlan, cycle: BillingCycle) -> str:
        return getattr(self, f"{AdPlan(plan).value}_{BillingCycle(cycle).value}")
