"""Configuration file loading and validation."""

import logging
from pathlib import Path

from pydantic import BaseModel, Field, HttpUrl, ValidationError, field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

from .consts import (
    DATABASE_PATH,
    FEED_TOKEN,
    HOSTING_API_URL_DEFAULT,
    IMPORT_REQUEST_RECIPIENT,
    LOG_FILE_DEFAULT,
    TIMEOUT_HTTP_REQUEST,
)
from .enums import StoreType
from .errors import ConfigException
from .utils import trailingslashit

logger = logging.getLogger(__name__)


class SeriesConfig(BaseModel):
    """A podcast series with its own feed."""

    slug: str
    name: str
    id: str

    @field_validator("id", mode="before")
    @classmethod
    def id_to_str(cls, v) -> str:
        return str(v)


class SiteConfig(BaseModel):
    """Site the settings belong to; supplies defaults and feed URLs."""

    home_url: str = "http://localhost/"
    name: str = ""
    description: str = ""
    admin_email: str = ""
    language: str = "en-US"
    pretty_permalinks: bool = True
    feed_slug: str = FEED_TOKEN
    archive_slug: str = "podcast"
    post_types: dict[str, str] = Field(default_factory=lambda: {"post": "Posts"})
    series: list[SeriesConfig] = Field(default_factory=list)

    @field_validator("home_url")
    @classmethod
    def trailing_slash(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("site.home_url cannot be empty")
        return trailingslashit(v.strip())


class StoreConfig(BaseModel):
    """Key-value store configuration."""

    type: StoreType = StoreType.DB
    db_path: str = Field(default=DATABASE_PATH)


class HostingConfig(BaseModel):
    """Hosting service configuration."""

    api_url: HttpUrl = Field(default=HOSTING_API_URL_DEFAULT, validate_default=True)
    timeout: int = Field(default=TIMEOUT_HTTP_REQUEST, ge=1)


class NotificationConfig(BaseModel):
    """Email delivery of podcast import requests."""

    enabled: bool = False
    host: str = ""
    port: int = Field(default=587, ge=1, le=65535)
    user: str = ""
    password: str = ""
    from_addr: str = "podcast-settings@example.com"
    recipient: list[str] = Field(default_factory=lambda: [IMPORT_REQUEST_RECIPIENT])
    starttls: bool = False
    ssl: bool = False

    @model_validator(mode="after")
    def validate_email_config(self) -> "NotificationConfig":
        if not self.enabled:
            return self

        missing_fields = []
        if not self.host:
            missing_fields.append("host")
        if not self.recipient:
            missing_fields.append("recipient")

        if missing_fields:
            raise ValueError(
                f"Missing required fields for email notification: {', '.join(missing_fields)}"
            )

        return self


class WebConfig(BaseModel):
    """Web service configuration."""

    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5000, ge=1, le=65535)


class Config(BaseSettings):
    """Application configuration."""

    language: str = Field(default="en")
    log_file: str = Field(default=LOG_FILE_DEFAULT)

    site: SiteConfig = Field(default_factory=SiteConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    hosting: HostingConfig = Field(default_factory=HostingConfig)
    notification: NotificationConfig = Field(default_factory=NotificationConfig)
    web: WebConfig = Field(default_factory=WebConfig)

    model_config = SettingsConfigDict(
        env_prefix="PODCAST_SETTINGS_",
        env_nested_delimiter="__",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            TomlConfigSettingsSource(settings_cls),
        )

    @classmethod
    def load_from_file(cls, config_path: str) -> "Config":
        """Load configuration from specified path."""
        path = Path(config_path)
        if not path.exists():
            raise ConfigException(f"Configuration file not found: {config_path}")

        class _Config(cls):
            model_config = SettingsConfigDict(
                toml_file=str(path),
                env_prefix="PODCAST_SETTINGS_",
                env_nested_delimiter="__",
            )

        try:
            return _Config()
        except ValidationError as e:
            error_lines = ["Configuration validation failed:"]
            for error in e.errors():
                loc = " -> ".join(str(item) for item in error["loc"])
                error_lines.append(f"  - {loc}: {error['msg']}")
            raise ConfigException("\n".join(error_lines)) from e
