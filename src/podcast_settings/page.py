"""Compose settings sections into tabbed pages."""

import logging
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape
from pydantic import BaseModel

from .config import SiteConfig
from .consts import (
    DEFAULT_SCOPE,
    NO_SAVE_SECTIONS,
    SCOPED_SECTIONS,
    SECTION_HOSTING,
    TEMPLATE_SETTINGS_PAGE,
)
from .errors import SchemaError
from .i18n import gettext as _
from .renderer import FieldRecord, FieldRenderer, feed_url
from .schema import HiddenField

logger = logging.getLogger(__name__)

__all__ = ["Scope", "ScopeLink", "SectionView", "SettingsPage", "Tab", "feed_url"]


class Scope(BaseModel):
    """A series whose feed details may override the default feed."""

    slug: str
    name: str
    id: str


class Tab(BaseModel):
    key: str
    title: str
    active: bool = False


class ScopeLink(BaseModel):
    slug: str
    name: str
    current: bool = False


class SectionView(BaseModel):
    key: str
    title: str
    description: str = ""
    scope_slug: str = DEFAULT_SCOPE
    scope_id: Optional[str] = None
    fields: list[FieldRecord] = []
    scopes: list[ScopeLink] = []
    view_feed_url: Optional[str] = None
    show_save: bool = True
    show_validate: bool = False


class SettingsPage:
    def __init__(
        self,
        engine,
        renderer: FieldRenderer,
        site: SiteConfig,
        scopes: Optional[list[Scope]] = None,
    ) -> None:
        self.engine = engine
        self.renderer = renderer
        self.site = site
        self.scopes = list(scopes or [])

    def tabs(self, active: Optional[str] = None) -> list[Tab]:
        sections = self.engine.registry.sections_in_order()
        if active is None and sections:
            active = sections[0].key
        return [
            Tab(key=section.key, title=section.title, active=section.key == active)
            for section in sections
        ]

    def find_scope(self, slug: Optional[str]) -> Optional[Scope]:
        if not slug or slug == DEFAULT_SCOPE:
            return None
        return next((scope for scope in self.scopes if scope.slug == slug), None)

    def render_section(self, section_key: str, scope_slug: Optional[str] = None) -> SectionView:
        """Build the view of one tab.

        Only scoped sections honour ``scope_slug``; an unknown slug falls back
        to the default feed.

        Raises:
            SchemaError: If the schema is not loaded or the section is unknown.
        """
        section = self.engine.registry.section(section_key)
        scoped = section_key in SCOPED_SECTIONS

        scope = self.find_scope(scope_slug) if scoped else None
        scope_id = scope.id if scope else None
        title = section.title
        if scope is not None:
            title = f"{title}: {scope.name}"

        records = []
        for field in section.fields:
            if isinstance(field, HiddenField):
                continue
            record = self.renderer.render(self.engine, field, scope_id)
            if record is not None:
                records.append(record)

        view = SectionView(
            key=section.key,
            title=title,
            description=section.description,
            scope_slug=scope.slug if scope else DEFAULT_SCOPE,
            scope_id=scope_id,
            fields=records,
            show_save=section_key not in NO_SAVE_SECTIONS,
            show_validate=section_key == SECTION_HOSTING,
        )

        if scoped:
            view.view_feed_url = feed_url(self.site, scope.slug if scope else None)
            if self.scopes:
                view.scopes = [
                    ScopeLink(slug=DEFAULT_SCOPE, name=_("Default feed"), current=scope is None)
                ] + [
                    ScopeLink(slug=s.slug, name=s.name, current=scope is not None and s.slug == scope.slug)
                    for s in self.scopes
                ]

        logger.debug(f"Rendered section {section_key} ({len(records)} fields)")
        return view

    def render_html(self, section_key: str, scope_slug: Optional[str] = None) -> str:
        if not self.engine.registry.is_loaded:
            raise SchemaError("Settings schema has not been defined")

        view = self.render_section(section_key, scope_slug)
        env = Environment(
            loader=FileSystemLoader(Path(__file__).parent / "templates"),
            autoescape=select_autoescape(enabled_extensions=("html", "html.j2")),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        env.globals["_"] = _
        template = env.get_template(TEMPLATE_SETTINGS_PAGE)
        return template.render(
            view=view,
            tabs=self.tabs(section_key),
            rendered_fields=[(record, self.renderer.html(record)) for record in view.fields],
        )
