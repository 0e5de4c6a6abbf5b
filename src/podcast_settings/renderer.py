"""Turn field definitions and resolved values into renderable records."""

import logging
from pathlib import Path
from typing import Any, Callable, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape
from pydantic import BaseModel

from .config import SiteConfig
from .consts import FEED_TOKEN, SERIES_SLUG_PLACEHOLDER, TEMPLATE_FIELDS
from .i18n import gettext as _
from .keys import is_scoped, option_key
from .schema import (
    BaseField,
    CheckboxField,
    ColourField,
    GroupedOption,
    HiddenField,
    ImageField,
    InputField,
    LinkField,
    MultiCheckboxField,
    Option,
    RadioField,
    SecretField,
    SelectField,
    TextareaField,
)

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"

# Field types whose stored unscoped value seeds a scoped value that is not set
_SCOPED_FALLBACK_TYPES = ("checkbox", "select", "image")


class RenderedOption(BaseModel):
    value: str
    label: str
    checked: bool = False


class OptionGroup(BaseModel):
    """A contiguous run of options sharing one group label ("" for none)."""

    label: str = ""
    options: list[RenderedOption] = []


class FieldRecord(BaseModel):
    """Everything needed to draw one field, independent of markup."""

    id: str
    kind: str
    type: str
    label: str = ""
    description: str = ""
    name: str = ""
    value: Any = ""
    placeholder: str = ""
    css_class: str = ""
    parent_class: str = ""
    container_class: str = ""
    options: list[RenderedOption] = []
    groups: list[OptionGroup] = []
    checked: bool = False
    href: str = ""


def group_options(options: list[GroupedOption], selected: Any = None) -> list[OptionGroup]:
    """Split options into runs, starting a new run whenever the group changes.

    Options without a group form runs of their own, so an ungrouped option
    between two groups closes the first group.
    """
    groups: list[OptionGroup] = []
    current: Optional[OptionGroup] = None
    for option in options:
        if current is None or option.group != current.label:
            current = OptionGroup(label=option.group)
            groups.append(current)
        current.options.append(
            RenderedOption(value=option.value, label=option.label, checked=option.value == selected)
        )
    return groups


def feed_url(site: SiteConfig, series_slug: Optional[str] = None) -> str:
    """Public feed URL, optionally for one series."""
    if site.pretty_permalinks:
        url = f"{site.home_url}feed/{site.feed_slug}"
        if series_slug:
            url = f"{url}/{series_slug}"
        return url

    url = f"{site.home_url}?feed={FEED_TOKEN}"
    if series_slug:
        url = f"{url}&podcast_series={series_slug}"
    return url


def podcast_url(site: SiteConfig) -> str:
    return f"{site.home_url}{site.archive_slug}"


class FieldRenderer:
    """Builds :class:`FieldRecord` objects and renders them to HTML.

    Each field class maps to one builder; field types with no builder render
    nothing.
    """

    def __init__(self, site: SiteConfig) -> None:
        self.site = site
        self.jinja_env = Environment(
            loader=FileSystemLoader(TEMPLATE_DIR),
            autoescape=select_autoescape(enabled_extensions=("html", "html.j2")),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.jinja_env.globals["_"] = _

        self._builders: dict[type, Callable[[BaseField, FieldRecord], FieldRecord]] = {
            InputField: self._input,
            SecretField: self._secret,
            ColourField: self._plain,
            TextareaField: self._plain,
            CheckboxField: self._checkbox,
            MultiCheckboxField: self._checkbox_multi,
            RadioField: self._radio,
            SelectField: self._select,
            ImageField: self._plain,
            LinkField: self._link,
            HiddenField: self._plain,
        }

    def record(
        self,
        field: BaseField,
        value: Any,
        name: Optional[str] = None,
        placeholder: Optional[str] = None,
    ) -> Optional[FieldRecord]:
        builder = self._builders.get(type(field))
        if builder is None:
            logger.debug(f"No renderer for field type '{getattr(field, 'type', None)}': {field.id}")
            return None

        base = FieldRecord(
            id=field.id,
            kind=_kind_of(field),
            type=field.type,
            label=field.label,
            description=field.description,
            name=name if name is not None else option_key(field.id),
            value=value,
            placeholder=placeholder if placeholder is not None else field.placeholder,
            css_class=field.css_class,
            parent_class=field.parent_class,
            container_class=field.container_class,
        )
        return builder(field, base)

    def render(self, engine, field: BaseField, scope_id: Optional[str] = None) -> Optional[FieldRecord]:
        """Record for ``field`` with the value resolved through ``engine``.

        Under a scope the unscoped value, when set, is shown as the
        placeholder, and checkbox, select and image fields fall back to it.
        Secret values never reach the record; either stored value only turns
        on the stored indicator.
        """
        if field.is_computed:
            return self.record(field, None)

        name = option_key(field.id, scope_id)
        if not is_scoped(scope_id):
            return self.record(field, engine.resolve_field(field), name=name)

        if field.is_secret:
            stored = engine.stored(field.id, scope_id)
            if stored is None:
                stored = engine.stored(field.id)
            return self.record(field, stored, name=name)

        unscoped = engine.resolve_field(field)
        placeholder = None
        if unscoped:
            placeholder = str(unscoped) if not isinstance(unscoped, list) else None

        scoped = engine.stored(field.id, scope_id)
        if scoped is None:
            scoped = unscoped if field.type in _SCOPED_FALLBACK_TYPES else ""
        return self.record(field, scoped, name=name, placeholder=placeholder)

    def html(self, record: Optional[FieldRecord]) -> str:
        if record is None:
            return ""
        template = self.jinja_env.get_template(TEMPLATE_FIELDS)
        return template.render(record=record)

    def _plain(self, field: BaseField, record: FieldRecord) -> FieldRecord:
        record.value = "" if record.value is None else str(record.value)
        return record

    def _input(self, field: InputField, record: FieldRecord) -> FieldRecord:
        return self._plain(field, record)

    def _secret(self, field: SecretField, record: FieldRecord) -> FieldRecord:
        if record.value:
            record.placeholder = _("Password stored securely")
        record.value = ""
        return record

    def _checkbox(self, field: CheckboxField, record: FieldRecord) -> FieldRecord:
        record.checked = record.value == "on"
        return record

    def _checkbox_multi(self, field: MultiCheckboxField, record: FieldRecord) -> FieldRecord:
        value = record.value
        if value is None or value == "":
            selected = set()
        elif isinstance(value, (list, tuple, set)):
            selected = set(map(str, value))
        else:
            selected = {str(value)}
        record.value = sorted(selected)
        record.options = _options(field.options, lambda option: option.value in selected)
        return record

    def _radio(self, field: RadioField, record: FieldRecord) -> FieldRecord:
        record.options = _options(field.options, lambda option: option.value == record.value)
        return record

    def _select(self, field: SelectField, record: FieldRecord) -> FieldRecord:
        record.groups = group_options(field.options, record.value)
        record.options = [option for group in record.groups for option in group.options]
        return record

    def _link(self, field: LinkField, record: FieldRecord) -> FieldRecord:
        if field.type == "feed_link":
            record.href = feed_url(self.site)
        elif field.type == "feed_link_series":
            record.href = feed_url(self.site, SERIES_SLUG_PLACEHOLDER)
        else:
            record.href = podcast_url(self.site)
        record.value = record.href
        return record


def _options(options: list[Option], is_checked: Callable[[Option], bool]) -> list[RenderedOption]:
    return [
        RenderedOption(value=option.value, label=option.label, checked=is_checked(option))
        for option in options
    ]


def _kind_of(field: BaseField) -> str:
    if isinstance(field, LinkField):
        return "link"
    if isinstance(field, SecretField):
        return "secret"
    if isinstance(field, InputField):
        return "input"
    return field.type
