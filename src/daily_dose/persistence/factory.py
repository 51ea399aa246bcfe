"""Store factory - creates file or Redis backed stores based on config."""

from pathlib import Path

from daily_dose.config import Settings, get_catalog, get_settings
from daily_dose.persistence.app_store import AppStore
from daily_dose.persistence.kv_store import FileKeyValueStore, KeyValueStore
from daily_dose.persistence.redis_store import RedisKeyValueStore


def create_kv_store(settings: Settings) -> KeyValueStore:
    """Uses Redis when REDIS_URL is set; otherwise one JSON file per slot."""
    if settings.redis_url:
        return RedisKeyValueStore(settings.redis_url)
    data_dir = Path(settings.data_dir)
    data_dir.mkdir(parents=True, exist_ok=True)
    return FileKeyValueStore(data_dir)


def create_store(
    settings: Settings | None = None,
    kv: KeyValueStore | None = None,
) -> AppStore:
    """Build the AppStore with catalog seed data."""
    settings = settings or get_settings()
    catalog = get_catalog()
    return AppStore(
        kv or create_kv_store(settings),
        key_prefix=settings.key_prefix,
        seed_admin_items=catalog.get("default_admin_items", []),
        payment_placeholder=catalog.get("payment_link_placeholder", "#"),
    )
