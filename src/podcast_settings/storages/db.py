import logging
from datetime import datetime
from typing import Any

from peewee import PeeweeException

from podcast_settings.errors import PersistenceError

logger = logging.getLogger(__name__)


class DBStore:
    """Store backed by the ``options`` table.

    The database must be initialized with :func:`podcast_settings.db.init_db`
    before the store is used.
    """

    def get(self, key: str, default: Any = None) -> Any:
        from podcast_settings.models import Option

        try:
            row = Option.get_or_none(Option.name == key)
        except PeeweeException as e:
            raise PersistenceError(f"Failed to read option {key}: {e}") from e

        if row is None:
            return default
        return row.value

    def exists(self, key: str) -> bool:
        from podcast_settings.models import Option

        try:
            return Option.select().where(Option.name == key).exists()
        except PeeweeException as e:
            raise PersistenceError(f"Failed to read option {key}: {e}") from e

    def set(self, key: str, value: Any) -> None:
        from podcast_settings.models import UTC, Option, database_proxy

        try:
            with database_proxy.atomic():
                (
                    Option.insert(name=key, value=value, updated_at=datetime.now(UTC))
                    .on_conflict(
                        conflict_target=[Option.name],
                        preserve=[Option.value, Option.updated_at],
                    )
                    .execute()
                )
        except PeeweeException as e:
            raise PersistenceError(f"Failed to write option {key}: {e}") from e

        logger.debug(f"Option stored: {key}")

    def delete(self, key: str) -> None:
        from podcast_settings.models import Option

        try:
            Option.delete().where(Option.name == key).execute()
        except PeeweeException as e:
            raise PersistenceError(f"Failed to delete option {key}: {e}") from e

        logger.debug(f"Option deleted: {key}")
