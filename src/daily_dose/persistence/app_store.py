"""Typed slots over a key-value store: pets, admin feed, payment links, accounts."""

import json
import logging
from datetime import date
from typing import Any

from pydantic import BaseModel, TypeAdapter, ValidationError

from daily_dose.models import AccountRecord, AdminItem, PaymentConfig, Pet, User
from daily_dose.persistence.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

SLOT_PETS = "pets"
SLOT_ADMIN_ITEMS = "admin_items"
SLOT_PAYMENT_CONFIG = "payment_config"
SLOT_CURRENT_USER = "current_user"
SLOT_USERS = "users"
SLOT_LEGACY_CREDS = "user_creds"

_pets_adapter = TypeAdapter(list[Pet])
_items_adapter = TypeAdapter(list[AdminItem])
_accounts_adapter = TypeAdapter(list[AccountRecord])


class AppStore:
    """
    Reads and writes JSON-serialized domain records, one named slot each.
    Absent or undecodable slots read as their default.
    """

    def __init__(
        self,
        kv: KeyValueStore,
        *,
        key_prefix: str = "daily_dose",
        seed_admin_items: list[dict[str, Any]] | None = None,
        payment_placeholder: str = "#",
    ) -> None:
        self._kv = kv
        self._prefix = key_prefix
        self._seed_admin_items = seed_admin_items or []
        self._payment_placeholder = payment_placeholder

    def key(self, slot: str) -> str:
        return f"{self._prefix}_{slot}" if self._prefix else slot

    def _load(self, slot: str, adapter: TypeAdapter) -> Any | None:
        raw = self._kv.get(self.key(slot))
        if raw is None:
            return None
        try:
            return adapter.validate_json(raw)
        except ValidationError as e:
            logger.warning("Discarding unreadable slot %s: %s", slot, e)
            return None

    def _save(self, slot: str, value: Any) -> None:
        if isinstance(value, BaseModel):
            data = value.to_record()
        else:
            data = [v.to_record() for v in value]
        self._kv.set(self.key(slot), json.dumps(data))

    # Pets

    def load_pets(self) -> list[Pet]:
        return self._load(SLOT_PETS, _pets_adapter) or []

    def save_pets(self, pets: list[Pet]) -> None:
        self._save(SLOT_PETS, pets)

    # Admin feed

    def load_admin_items(self) -> list[AdminItem]:
        items = self._load(SLOT_ADMIN_ITEMS, _items_adapter)
        if items is not None:
            return items
        today = date.today().isoformat()
        seeded = []
        for raw in self._seed_admin_items:
            item = AdminItem.model_validate(raw)
            if item.type == "news" and not item.date:
                item = item.model_copy(update={"date": today})
            seeded.append(item)
        return seeded

    def save_admin_items(self, items: list[AdminItem]) -> None:
        self._save(SLOT_ADMIN_ITEMS, items)

    # Payment links

    def load_payment_config(self) -> PaymentConfig:
        config = self._load(SLOT_PAYMENT_CONFIG, TypeAdapter(PaymentConfig))
        return config or PaymentConfig.placeholder(self._payment_placeholder)

    def save_payment_config(self, config: PaymentConfig) -> None:
        self._save(SLOT_PAYMENT_CONFIG, config)

    # Accounts

    def load_current_user(self) -> User | None:
        return self._load(SLOT_CURRENT_USER, TypeAdapter(User))

    def save_current_user(self, user: User | None) -> None:
        if user is None:
            self._kv.delete(self.key(SLOT_CURRENT_USER))
            return
        self._save(SLOT_CURRENT_USER, User(name=user.name, email=user.email))

    def load_accounts(self) -> list[AccountRecord]:
        return self._load(SLOT_USERS, _accounts_adapter) or []

    def save_accounts(self, accounts: list[AccountRecord]) -> None:
        self._save(SLOT_USERS, accounts)

    def load_legacy_account(self) -> AccountRecord | None:
        """Single-credential record written by older releases."""
        return self._load(SLOT_LEGACY_CREDS, TypeAdapter(AccountRecord))
