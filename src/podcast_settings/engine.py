"""Validated persistence and scoped resolution of setting values."""

from __future__ import annotations

import copy
import logging
from collections import defaultdict
from dataclasses import dataclass, field as dataclass_field
from typing import Any, Callable, Mapping, Optional

from .consts import CHECKBOX_ON
from .errors import SchemaError, ValidationError
from .keys import is_scoped, option_key
from .schema import (
    BaseField,
    CheckboxField,
    ChoiceField,
    InputField,
    MultiCheckboxField,
    Schema,
    SchemaRegistry,
    UnknownField,
)
from .storages import KeyValueStore
from .validators import VALIDATORS, Validator

logger = logging.getLogger(__name__)

# Called after a write with (field_id, scope_id, old_value, new_value)
Observer = Callable[[str, Optional[str], Any, Any], None]
# Called after a section submission with (section_key, scope_id, result)
SectionObserver = Callable[[str, Optional[str], "SubmissionResult"], None]

_FALSY_CHECKBOX = ("", "0", "off", "false", "no")


@dataclass
class SubmissionResult:
    """Outcome of submitting one section: saved field ids and per-field errors."""

    saved: list[str] = dataclass_field(default_factory=list)
    errors: dict[str, str] = dataclass_field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class SettingsEngine:
    """Resolves and persists setting values for a schema.

    Construct one instance at startup and pass it to whatever needs settings.
    Values are read and written through ``store`` using the keys composed by
    :func:`podcast_settings.keys.option_key`.
    """

    def __init__(
        self,
        registry: SchemaRegistry,
        store: KeyValueStore,
        validators: Optional[Mapping[str, Validator]] = None,
    ) -> None:
        self._registry = registry
        self._store = store
        self._validators: dict[str, Validator] = dict(VALIDATORS)
        if validators:
            self._validators.update(validators)
        self._observers: dict[str, list[Observer]] = defaultdict(list)
        self._section_observers: dict[str, list[SectionObserver]] = defaultdict(list)

        if registry.is_loaded:
            self._check_validators()

    @property
    def registry(self) -> SchemaRegistry:
        return self._registry

    @property
    def store(self) -> KeyValueStore:
        return self._store

    def load(self, schema: Schema | dict | list) -> Schema:
        """Define the schema and check that every named validator exists."""
        defined = self._registry.define(schema)
        self._check_validators()
        return defined

    def register_validator(self, name: str, fn: Validator) -> None:
        self._validators[name] = fn

    def observe(self, field_id: str, callback: Observer) -> None:
        """Register a post-write observer for one field."""
        self._observers[field_id].append(callback)

    def observe_section(self, section_key: str, callback: SectionObserver) -> None:
        """Register an observer run after a whole section has been submitted."""
        self._section_observers[section_key].append(callback)

    def resolve(self, field_id: str, scope_id: Optional[str] = None) -> Any:
        """Effective value: scoped value, then unscoped value, then the default."""
        return self.resolve_field(self._registry.field(field_id), scope_id)

    def resolve_field(self, field: BaseField, scope_id: Optional[str] = None) -> Any:
        if is_scoped(scope_id):
            key = option_key(field.id, scope_id)
            if self._store.exists(key):
                return self._store.get(key)

        key = option_key(field.id)
        if self._store.exists(key):
            return self._store.get(key)

        return copy.deepcopy(field.default)

    def stored(self, field_id: str, scope_id: Optional[str] = None) -> Any:
        """Raw stored value under the exact key, or None when absent."""
        return self._store.get(option_key(field_id, scope_id))

    def submit(self, field_id: str, scope_id: Optional[str], raw_value: Any) -> Any:
        """Validate ``raw_value`` and store it for ``field_id`` under ``scope_id``.

        Returns:
            The stored value. For a secret field submitted empty this is the
            existing stored value, left untouched.

        Raises:
            ValidationError: If the value is rejected; nothing is written.
            PersistenceError: If the store fails.
        """
        return self._submit_field(self._registry.field(field_id), scope_id, raw_value)

    def submit_section(
        self,
        section_key: str,
        scope_id: Optional[str],
        values: Mapping[str, Any],
    ) -> SubmissionResult:
        """Submit every field of a section independently.

        Unticked checkboxes are absent from form posts, so a missing checkbox
        stores ``""`` and a missing multi-checkbox stores ``[]``. Other missing
        fields are left as they are.
        """
        section = self._registry.section(section_key)
        result = SubmissionResult()

        for field in section.fields:
            if field.is_computed or isinstance(field, UnknownField):
                continue

            if field.id in values:
                raw = values[field.id]
            elif isinstance(field, CheckboxField):
                raw = ""
            elif isinstance(field, MultiCheckboxField):
                raw = []
            else:
                continue

            try:
                self._submit_field(field, scope_id, raw)
            except ValidationError as e:
                logger.warning(f"Setting rejected: {e}")
                result.errors[field.id] = e.reason
            else:
                result.saved.append(field.id)

        for callback in self._section_observers.get(section_key, []):
            callback(section_key, scope_id, result)

        logger.info(
            f"Section '{section_key}' submitted: {len(result.saved)} saved, "
            f"{len(result.errors)} rejected"
        )
        return result

    def delete(self, field_id: str, scope_id: Optional[str] = None) -> None:
        self._store.delete(option_key(field_id, scope_id))

    def _submit_field(self, field: BaseField, scope_id: Optional[str], raw_value: Any) -> Any:
        if field.is_computed:
            raise ValidationError(field.id, "Computed field cannot be written")

        key = option_key(field.id, scope_id)

        if field.is_secret and _is_blank(raw_value):
            logger.debug(f"Blank secret submitted, keeping stored value: {key}")
            return self._store.get(key)

        value = self._validate(field, raw_value)
        old_value = self._store.get(key)
        self._store.set(key, value)
        logger.info(f"Setting saved: {key}")

        for callback in self._observers.get(field.id, []):
            callback(field.id, scope_id, old_value, value)

        return value

    def _validate(self, field: BaseField, raw_value: Any) -> Any:
        try:
            value = self._coerce(field, raw_value)
            if field.validator:
                value = self._validators[field.validator](value)
        except ValueError as e:
            raise ValidationError(field.id, str(e)) from e
        return value

    def _coerce(self, field: BaseField, raw_value: Any) -> Any:
        if isinstance(field, CheckboxField):
            if _is_blank(raw_value):
                return ""
            if isinstance(raw_value, (bool, int, float)) and not raw_value:
                return ""
            if isinstance(raw_value, str) and raw_value.strip().lower() in _FALSY_CHECKBOX:
                return ""
            return CHECKBOX_ON

        if isinstance(field, MultiCheckboxField):
            if _is_blank(raw_value):
                return []
            if isinstance(raw_value, str):
                items = [raw_value]
            elif isinstance(raw_value, (list, tuple, set)):
                items = list(raw_value)
            else:
                raise ValueError("Expected a list of options")
            allowed = {option.value for option in field.options}
            values: list[str] = []
            for item in map(str, items):
                if item not in allowed:
                    raise ValueError(f"Unknown option: {item}")
                if item not in values:
                    values.append(item)
            return values

        if isinstance(field, ChoiceField):
            value = "" if raw_value is None else str(raw_value)
            if field.options and value not in {option.value for option in field.options}:
                raise ValueError(f"Unknown option: {value}")
            return value

        if isinstance(field, InputField) and field.type == "number":
            value = "" if raw_value is None else str(raw_value).strip()
            if value:
                float(value)
            return value

        if raw_value is None:
            return ""
        if isinstance(raw_value, (list, dict)):
            raise ValueError("Expected a single value")
        return str(raw_value)

    def _check_validators(self) -> None:
        for section in self._registry.sections_in_order():
            for field in section.fields:
                if field.validator and field.validator not in self._validators:
                    raise SchemaError(
                        f"Unknown validator '{field.validator}' on field '{field.id}'"
                    )
