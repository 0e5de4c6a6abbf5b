"""Post-write observers with cross-field side effects."""

import logging
import time
from typing import Any, Callable, Optional

from .consts import (
    CHECKBOX_ON,
    HOSTING_ACCOUNT_ID_FIELD,
    HOSTING_DISCONNECT_FIELD,
    HOSTING_EMAIL_FIELD,
    HOSTING_TOKEN_FIELD,
    REDIRECT_FEED_DATE_FIELD,
    REDIRECT_FEED_FIELD,
)
from .keys import option_key
from .storages import KeyValueStore

logger = logging.getLogger(__name__)


def mark_feed_redirect_date(
    store: KeyValueStore, clock: Callable[[], float] = time.time
):
    """Record when feed redirection was switched on.

    Only a transition to ``"on"`` from any other stored state writes the
    timestamp; on->on, on->off and absent->off do nothing. The old value is
    whatever the store held just before the write, so concurrent writers may
    be observed out of order.
    """

    def observer(field_id: str, scope_id: Optional[str], old_value: Any, new_value: Any) -> None:
        if new_value != CHECKBOX_ON or old_value == CHECKBOX_ON:
            return

        timestamp = int(clock())
        store.set(option_key(REDIRECT_FEED_DATE_FIELD, scope_id), timestamp)
        logger.info(f"Feed redirect enabled at {timestamp}")

    return observer


def disconnect_from_hosting(store: KeyValueStore):
    """Forget the hosting credentials when the disconnect box is ticked."""

    def observer(field_id: str, scope_id: Optional[str], old_value: Any, new_value: Any) -> None:
        if new_value != CHECKBOX_ON:
            return

        for credential in (
            HOSTING_EMAIL_FIELD,
            HOSTING_TOKEN_FIELD,
            HOSTING_ACCOUNT_ID_FIELD,
            HOSTING_DISCONNECT_FIELD,
        ):
            store.delete(option_key(credential))
        logger.info("Disconnected from hosting service")

    return observer


def install_default_hooks(engine) -> None:
    engine.observe(REDIRECT_FEED_FIELD, mark_feed_redirect_date(engine.store))
    engine.observe(HOSTING_DISCONNECT_FIELD, disconnect_from_hosting(engine.store))
