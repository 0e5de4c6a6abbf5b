"""Option key composition shared by every read and write."""

from typing import Optional

from .consts import DEFAULT_SCOPE, OPTION_PREFIX


def is_scoped(scope_id: Optional[object]) -> bool:
    """True when ``scope_id`` selects an override rather than the default feed."""
    if scope_id is None:
        return False
    scope = str(scope_id)
    return bool(scope) and scope != DEFAULT_SCOPE


def option_key(
    field_id: str, scope_id: Optional[object] = None, prefix: str = OPTION_PREFIX
) -> str:
    """Compose the store key for a field, optionally under a scope.

    Examples:
        >>> option_key("data_title")
        'ss_podcasting_data_title'
        >>> option_key("data_title", "default")
        'ss_podcasting_data_title'
        >>> option_key("data_title", 12)
        'ss_podcasting_data_title_12'
    """
    key = f"{prefix}{field_id}"
    if is_scoped(scope_id):
        key = f"{key}_{scope_id}"
    return key
