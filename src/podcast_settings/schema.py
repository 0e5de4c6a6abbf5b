"""Settings schema models and the schema registry."""

from __future__ import annotations

import logging
from typing import Annotated, Any, Callable, Literal, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    TypeAdapter,
    field_validator,
)
from pydantic import ValidationError as PydanticValidationError

from .enums import FieldType
from .errors import SchemaError

logger = logging.getLogger(__name__)


class Option(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: str
    label: str


class GroupedOption(Option):
    group: str = ""


def _options_from_mapping(v):
    """Accept ``{value: label}`` or ``{value: {"label", "group"}}`` in declaration order."""
    if v is None:
        return []
    if isinstance(v, dict):
        items = []
        for value, label in v.items():
            if isinstance(label, dict):
                items.append({"value": value, **label})
            else:
                items.append({"value": value, "label": label})
        return items
    return v


class BaseField(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    label: str = ""
    description: str = ""
    default: Any = ""
    placeholder: str = ""
    css_class: str = Field(default="", alias="class")
    parent_class: str = ""
    container_class: str = ""
    validator: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("validator", "callback")
    )

    @property
    def is_secret(self) -> bool:
        return False

    @property
    def is_computed(self) -> bool:
        return False


class InputField(BaseField):
    type: Literal["text", "number"] = "text"


class SecretField(BaseField):
    type: Literal["text_secret", "password"] = "text_secret"

    @property
    def is_secret(self) -> bool:
        return True


class ColourField(BaseField):
    type: Literal["colour-picker"] = "colour-picker"


class TextareaField(BaseField):
    type: Literal["textarea"] = "textarea"


class CheckboxField(BaseField):
    type: Literal["checkbox"] = "checkbox"


class ChoiceField(BaseField):
    options: list[Option] = []

    @field_validator("options", mode="before")
    @classmethod
    def coerce_mapping_to_list(cls, v):
        return _options_from_mapping(v)


class MultiCheckboxField(ChoiceField):
    type: Literal["checkbox_multi"] = "checkbox_multi"
    default: list[str] = []


class RadioField(ChoiceField):
    type: Literal["radio"] = "radio"


class SelectField(ChoiceField):
    type: Literal["select"] = "select"
    options: list[GroupedOption] = []


class ImageField(BaseField):
    type: Literal["image"] = "image"


class LinkField(BaseField):
    """Read-only computed link; never persisted."""

    type: Literal["feed_link", "feed_link_series", "podcast_url"]

    @property
    def is_computed(self) -> bool:
        return True


class HiddenField(BaseField):
    type: Literal["hidden"] = "hidden"


class UnknownField(BaseField):
    """Any type tag the renderer does not know. Accepted, renders nothing."""

    type: str


_KIND_BY_TYPE = {
    FieldType.TEXT.value: "input",
    FieldType.PASSWORD.value: "secret",
    FieldType.NUMBER.value: "input",
    FieldType.TEXT_SECRET.value: "secret",
    FieldType.COLOUR_PICKER.value: "colour",
    FieldType.TEXTAREA.value: "textarea",
    FieldType.CHECKBOX.value: "checkbox",
    FieldType.CHECKBOX_MULTI.value: "checkbox_multi",
    FieldType.RADIO.value: "radio",
    FieldType.SELECT.value: "select",
    FieldType.IMAGE.value: "image",
    FieldType.FEED_LINK.value: "link",
    FieldType.FEED_LINK_SERIES.value: "link",
    FieldType.PODCAST_URL.value: "link",
    FieldType.HIDDEN.value: "hidden",
}


def _field_kind(value: Any) -> str:
    if isinstance(value, dict):
        field_type = value.get("type")
    else:
        field_type = getattr(value, "type", None)
    if isinstance(field_type, FieldType):
        field_type = field_type.value
    if not isinstance(field_type, str):
        return "unknown"
    return _KIND_BY_TYPE.get(field_type, "unknown")


FieldDefinition = Annotated[
    Union[
        Annotated[InputField, Tag("input")],
        Annotated[SecretField, Tag("secret")],
        Annotated[ColourField, Tag("colour")],
        Annotated[TextareaField, Tag("textarea")],
        Annotated[CheckboxField, Tag("checkbox")],
        Annotated[MultiCheckboxField, Tag("checkbox_multi")],
        Annotated[RadioField, Tag("radio")],
        Annotated[SelectField, Tag("select")],
        Annotated[ImageField, Tag("image")],
        Annotated[LinkField, Tag("link")],
        Annotated[HiddenField, Tag("hidden")],
        Annotated[UnknownField, Tag("unknown")],
    ],
    Discriminator(_field_kind),
]

_field_adapter = TypeAdapter(FieldDefinition)


class Section(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    title: str
    description: str = ""
    fields: list[FieldDefinition] = []

    def get(self, field_id: str) -> Optional[BaseField]:
        return next((f for f in self.fields if f.id == field_id), None)

    def with_field(self, field, after: Optional[str] = None) -> "Section":
        """Return a copy with ``field`` appended, or inserted after ``after``."""
        field = _coerce_field(field)
        fields = list(self.fields)
        if after is None:
            fields.append(field)
        else:
            index = next(
                (i for i, f in enumerate(fields) if f.id == after), len(fields) - 1
            )
            fields.insert(index + 1, field)
        return self.model_copy(update={"fields": fields})

    def without_field(self, field_id: str) -> "Section":
        return self.model_copy(
            update={"fields": [f for f in self.fields if f.id != field_id]}
        )

    def replace_field(self, field) -> "Section":
        field = _coerce_field(field)
        return self.model_copy(
            update={"fields": [field if f.id == field.id else f for f in self.fields]}
        )


class Schema(BaseModel):
    model_config = ConfigDict(frozen=True)

    sections: list[Section] = []

    @field_validator("sections", mode="before")
    @classmethod
    def coerce_keyed_dict_to_list(cls, v):
        if v is None:
            return []
        if isinstance(v, dict):
            return [
                {"key": key, **value} if isinstance(value, dict) else value
                for key, value in v.items()
            ]
        return v

    def get(self, key: str) -> Optional[Section]:
        return next((s for s in self.sections if s.key == key), None)

    def with_section(self, section, after: Optional[str] = None) -> "Schema":
        """Return a copy with ``section`` appended, or inserted after ``after``."""
        if not isinstance(section, Section):
            section = Section.model_validate(section)
        sections = list(self.sections)
        if after is None:
            sections.append(section)
        else:
            index = next(
                (i for i, s in enumerate(sections) if s.key == after), len(sections) - 1
            )
            sections.insert(index + 1, section)
        return self.model_copy(update={"sections": sections})

    def without_section(self, key: str) -> "Schema":
        return self.model_copy(
            update={"sections": [s for s in self.sections if s.key != key]}
        )

    def replace_section(self, section: Section) -> "Schema":
        return self.model_copy(
            update={
                "sections": [section if s.key == section.key else s for s in self.sections]
            }
        )


def _coerce_field(field) -> BaseField:
    if isinstance(field, BaseField):
        return field
    try:
        return _field_adapter.validate_python(field)
    except PydanticValidationError as e:
        raise SchemaError(f"Invalid field definition: {e}") from e


SchemaFilter = Callable[[Schema], Union[Schema, dict, list]]


class SchemaRegistry:
    """Holds the ordered sections and fields of the settings surface.

    External collaborators may register filters with :meth:`add_filter`; they
    run in registration order inside :meth:`define`, after the base schema is
    parsed and before it is validated and made available.
    """

    def __init__(self) -> None:
        self._filters: list[SchemaFilter] = []
        self._schema: Optional[Schema] = None
        self._fields: dict[str, BaseField] = {}

    @property
    def is_loaded(self) -> bool:
        return self._schema is not None

    @property
    def schema(self) -> Schema:
        if self._schema is None:
            raise SchemaError("Settings schema has not been defined")
        return self._schema

    def add_filter(self, fn: SchemaFilter) -> None:
        if self._schema is not None:
            raise SchemaError("Schema filters must be added before the schema is defined")
        self._filters.append(fn)

    def define(self, schema: Schema | dict | list) -> Schema:
        """Parse, filter, validate and freeze the schema.

        Raises:
            SchemaError: If the schema cannot be parsed, a section key or a
                field id within a section is duplicated, or a select field
                has non-contiguous option groups.
        """
        parsed = parse_schema(schema)
        for fn in self._filters:
            parsed = parse_schema(fn(parsed))

        _check_schema(parsed)

        fields: dict[str, BaseField] = {}
        for section in parsed.sections:
            for field in section.fields:
                fields.setdefault(field.id, field)

        self._schema = parsed
        self._fields = fields
        logger.info(
            f"Settings schema defined: {len(parsed.sections)} sections, "
            f"{len(fields)} fields"
        )
        return parsed

    def sections_in_order(self) -> list[Section]:
        return list(self.schema.sections)

    def section(self, key: str) -> Section:
        section = self.schema.get(key)
        if section is None:
            raise SchemaError(f"Unknown settings section: {key}")
        return section

    def field(self, field_id: str, section: Optional[str] = None) -> BaseField:
        if section is not None:
            found = self.section(section).get(field_id)
        else:
            if self._schema is None:
                raise SchemaError("Settings schema has not been defined")
            found = self._fields.get(field_id)
        if found is None:
            raise SchemaError(f"Unknown settings field: {field_id}")
        return found

    def has_field(self, field_id: str) -> bool:
        return field_id in self._fields


def parse_schema(value) -> Schema:
    if isinstance(value, Schema):
        return value
    if isinstance(value, list):
        value = {"sections": value}
    elif isinstance(value, dict) and "sections" not in value:
        value = {"sections": value}
    try:
        return Schema.model_validate(value)
    except PydanticValidationError as e:
        error_lines = ["Settings schema is invalid:"]
        for error in e.errors():
            loc = " -> ".join(str(item) for item in error["loc"])
            error_lines.append(f"  - {loc}: {error['msg']}")
        raise SchemaError("\n".join(error_lines)) from e


def _check_schema(schema: Schema) -> None:
    section_keys = set()
    for section in schema.sections:
        if section.key in section_keys:
            raise SchemaError(f"Duplicate section key: {section.key}")
        section_keys.add(section.key)

        field_ids = set()
        for field in section.fields:
            if field.id in field_ids:
                raise SchemaError(
                    f"Duplicate field id '{field.id}' in section '{section.key}'"
                )
            field_ids.add(field.id)

            if isinstance(field, SelectField):
                _check_option_groups(section.key, field)


def _check_option_groups(section_key: str, field: SelectField) -> None:
    # A group may only appear as a single contiguous run of options.
    closed = set()
    previous = ""
    for option in field.options:
        if option.group != previous:
            if previous:
                closed.add(previous)
            if option.group in closed:
                raise SchemaError(
                    f"Option group '{option.group}' of field '{field.id}' in section "
                    f"'{section_key}' is not contiguous"
                )
        previous = option.group
