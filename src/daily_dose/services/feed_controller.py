"""Admin feed - passphrase-gated CRUD and manual ordering of feed items."""

import logging
import uuid
from datetime import date
from typing import TypeVar

from daily_dose.errors import AdminAccessDenied, ValidationError
from daily_dose.models import AdminItem, AdminItemType, AdPlan, BillingCycle, PaymentConfig
from daily_dose.persistence import AppStore

logger = logging.getLogger(__name__)

DEFAULT_AD_BACKGROUND = "#FEF3C7"
DEFAULT_AD_TEXT_COLOR = "#78350F"

T = TypeVar("T")


def move_item(items: list[T], from_index: int, to_index: int) -> list[T]:
    """
    Remove the item at from_index and reinsert it at to_index.
    Items in between shift by one; this is not a swap.
    """
    if not 0 <= from_index < len(items) or not 0 <= to_index < len(items):
        raise ValidationError(
            f"Cannot move item {from_index} to {to_index} in a list of {len(items)}"
        )
    moved = list(items)
    item = moved.pop(from_index)
    moved.insert(to_index, item)
    return moved


class FeedController:
    """Admin column state. Reads are open; every mutation needs unlock()."""

    def __init__(self, store: AppStore, passphrase: str) -> None:
        self._store = store
        self._passphrase = passphrase
        self._unlocked = False
        self._items = store.load_admin_items()
        self._payment_config = store.load_payment_config()

    @property
    def items(self) -> list[AdminItem]:
        return list(self._items)

    @property
    def payment_config(self) -> PaymentConfig:
        return self._payment_config

    @property
    def is_unlocked(self) -> bool:
        return self._unlocked

    def unlock(self, passphrase: str) -> None:
        if passphrase != self._passphrase:
            logger.warning("Admin unlock rejected")
            raise AdminAccessDenied("Incorrect passphrase")
        self._unlocked = True

    def lock(self) -> None:
        self._unlocked = False

    def _require_unlocked(self) -> None:
        if not self._unlocked:
            raise AdminAccessDenied("Admin access required")

    def _save(self, items: list[AdminItem]) -> None:
        self._items = items
        self._store.save_admin_items(items)

    def add_item(
        self,
        item_type: AdminItemType | str,
        *,
        title: str = "",
        content: str = "",
        image_url: str = "",
        link_url: str = "",
        background_color: str = DEFAULT_AD_BACKGROUND,
        text_color: str = DEFAULT_AD_TEXT_COLOR,
    ) -> AdminItem:
        """Create an item dated today and put it at the top of the feed."""
        self._require_unlocked()
        item_type = AdminItemType(item_type)
        if item_type != AdminItemType.AD_IMAGE and not title.strip():
            raise ValidationError("Title is required.")
        if item_type == AdminItemType.AD_IMAGE and not image_url:
            raise ValidationError("An image is required for image ads.")
        is_text_ad = item_type == AdminItemType.AD_TEXT
        item = AdminItem(
            id=str(uuid.uuid4()),
            type=item_type,
            title=title,
            content=content,
            image_url=image_url,
            link_url=link_url,
            background_color=background_color if is_text_ad else None,
            text_color=text_color if is_text_ad else None,
            date=date.today().isoformat(),
        )
        self._save([item, *self._items])
        logger.info("Added %s item %s", item_type.value, item.id)
        return item

    def add_page(self, name: str) -> AdminItem | None:
        """Menu link shortcut. Blank name adds nothing."""
        self._require_unlocked()
        if not name or not name.strip():
            return None
        item = AdminItem(id=str(uuid.uuid4()), type=AdminItemType.MENU, title=name, link_url="#")
        self._save([item, *self._items])
        return item

    def delete_item(self, item_id: str) -> bool:
        self._require_unlocked()
        remaining = [i for i in self._items if i.id != item_id]
        if len(remaining) == len(self._items):
            return False
        self._save(remaining)
        logger.info("Deleted item %s", item_id)
        return True

    def reorder(self, from_index: int, to_index: int) -> list[AdminItem]:
        self._require_unlocked()
        self._save(move_item(self._items, from_index, to_index))
        return self.items

    def update_payment_config(self, config: PaymentConfig) -> None:
        self._require_unlocked()
        self._payment_config = config
        self._store.save_payment_config(config)

    def payment_url(self, plan: AdPlan | str, cycle: BillingCycle | str) -> str:
        return self._payment_config.url_for(AdPlan(plan), BillingCycle(cycle))
