import copy
import logging
from typing import Any

logger = logging.getLogger(__name__)


class MemoryStore:
    """Dict backed store for tests and ephemeral runs."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(initial or {})

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    def exists(self, key: str) -> bool:
        return key in self._data

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)
        logger.debug(f"Option stored: {key}")

    def delete(self, key: str) -> None:
        self._data.pop(key, None)
        logger.debug(f"Option deleted: {key}")

    def keys(self) -> list[str]:
        return list(self._data)
