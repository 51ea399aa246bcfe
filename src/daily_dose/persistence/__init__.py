"""Persistence layer."""

from daily_dose.persistence.app_store import AppStore
from daily_dose.persistence.factory import create_kv_store, create_store
from daily_dose.persistence.kv_store import (
    FileKeyValueStore,
    KeyValueStore,
    MemoryKeyValueStore,
)
from daily_dose.persistence.redis_store import RedisKeyValueStore

__all__ = [
    "AppStore",
    "FileKeyValueStore",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "RedisKeyValueStore",
    "create_kv_store",
    "create_store",
]
