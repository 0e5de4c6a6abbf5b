from typing import Any, Protocol


class KeyValueStore(Protocol):
    def get(self, key: str, default: Any = None) -> Any: ...

    def exists(self, key: str) -> bool: ...

    def set(self, key: str, value: Any) -> None: ...

    def delete(self, key: str) -> None: ...
