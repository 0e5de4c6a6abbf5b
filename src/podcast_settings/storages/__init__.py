from podcast_settings.config import Config, StoreType
from podcast_settings.errors import ConfigException

from .base import KeyValueStore
from .db import DBStore
from .memory import MemoryStore

__all__ = ["DBStore", "KeyValueStore", "MemoryStore", "get_store"]


def get_store(*, config: Config) -> KeyValueStore:
    store_type = config.store.type

    if store_type == StoreType.MEMORY:
        return MemoryStore()

    if store_type == StoreType.DB:
        from podcast_settings.db import create_tables, init_db

        init_db(config.store.db_path)
        create_tables()
        return DBStore()

    raise ConfigException(f"Unknown settings store type: {store_type}")
