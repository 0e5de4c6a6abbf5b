"""Wire the settings engine and its collaborators from configuration."""

import logging
from typing import NamedTuple, Optional

from .config import Config
from .consts import SECTION_FEED_DETAILS
from .engine import SettingsEngine
from .fields import build_podcast_schema
from .hooks import install_default_hooks
from .hosting import HostingClient, sync_series_to_hosting
from .notifier import Notifier, get_notifier
from .page import Scope, SettingsPage
from .renderer import FieldRenderer
from .schema import SchemaRegistry
from .storages import KeyValueStore, get_store

logger = logging.getLogger(__name__)


class Components(NamedTuple):
    engine: SettingsEngine
    page: SettingsPage
    hosting: HostingClient
    notifier: Notifier


def build_engine(
    cfg: Config,
    store: Optional[KeyValueStore] = None,
    registry: Optional[SchemaRegistry] = None,
) -> SettingsEngine:
    """Define the podcast schema and attach the default observers.

    Filters already added to ``registry`` run while the schema is defined.
    """
    registry = registry or SchemaRegistry()
    engine = SettingsEngine(registry, store if store is not None else get_store(config=cfg))
    engine.load(build_podcast_schema(cfg.site))
    install_default_hooks(engine)
    return engine


def initialize_components(
    cfg: Config,
    store: Optional[KeyValueStore] = None,
    registry: Optional[SchemaRegistry] = None,
) -> Components:
    """Initialize application components from configuration."""
    engine = build_engine(cfg, store=store, registry=registry)

    hosting = HostingClient(cfg.hosting)
    engine.observe_section(SECTION_FEED_DETAILS, sync_series_to_hosting(hosting, engine))

    scopes = [Scope(slug=s.slug, name=s.name, id=s.id) for s in cfg.site.series]
    page = SettingsPage(engine, FieldRenderer(cfg.site), cfg.site, scopes)

    logger.info(f"Settings components initialized ({len(scopes)} series)")
    return Components(engine=engine, page=page, hosting=hosting, notifier=get_notifier(cfg.notification))
