"""Configuration module unit tests"""

import os
import tempfile
from pathlib import Path

import pytest

from podcast_settings.config import Config
from podcast_settings.enums import StoreType
from podcast_settings.errors import ConfigException


@pytest.fixture
def temp_config_file():
    """Create a temporary config file"""
    fd, path = tempfile.mkstemp(suffix=".toml")
    os.close(fd)
    yield path
    # Cleanup
    os.unlink(path)


# ========== Test Cases ==========


def test_load_from_file_with_defaults(temp_config_file):
    """Test: An empty file gives the default configuration"""
    Path(temp_config_file).write_text("")

    config = Config.load_from_file(temp_config_file)

    assert config.language == "en"
    assert config.site.home_url == "http://localhost/"
    assert config.site.pretty_permalinks is True
    assert config.store.type == StoreType.DB
    assert str(config.hosting.api_url) == "https://app.castos.com/"
    assert config.notification.enabled is False
    assert config.web.port == 5000


def test_load_from_file_with_site_and_series(temp_config_file):
    """Test: Site details and series are read from the file"""
    content = """
language = "en"

[site]
home_url = "https://example.com"
name = "My Show"
admin_email = "admin@example.com"
pretty_permalinks = false

[site.post_types]
post = "Posts"
episode = "Episodes"

[[site.series]]
slug = "tech"
name = "Tech Talk"
id = 12

[store]
type = "memory"
"""
    Path(temp_config_file).write_text(content)

    config = Config.load_from_file(temp_config_file)

    assert config.site.home_url == "https://example.com/"
    assert config.site.name == "My Show"
    assert config.site.pretty_permalinks is False
    assert config.site.post_types == {"post": "Posts", "episode": "Episodes"}
    assert config.site.series[0].id == "12"
    assert config.store.type == StoreType.MEMORY


def test_env_overrides_file(temp_config_file, monkeypatch):
    """Test: Environment variables take precedence over the file"""
    Path(temp_config_file).write_text('[site]\nname = "From file"\n')
    monkeypatch.setenv("PODCAST_SETTINGS_SITE__NAME", "From env")

    config = Config.load_from_file(temp_config_file)

    assert config.site.name == "From env"


def test_missing_file_raises():
    """Test: A missing file raises ConfigException"""
    with pytest.raises(ConfigException, match="Configuration file not found"):
        Config.load_from_file("/nonexistent/config.toml")


def test_invalid_values_are_listed(temp_config_file):
    """Test: Validation errors are reported one per line"""
    Path(temp_config_file).write_text('[web]\nport = 70000\n\n[hosting]\napi_url = "nope"\n')

    with pytest.raises(ConfigException) as exc_info:
        Config.load_from_file(temp_config_file)

    message = str(exc_info.value)
    assert message.startswith("Configuration validation failed:")
    assert "web -> port" in message
    assert "hosting -> api_url" in message


def test_enabled_email_requires_host(temp_config_file):
    """Test: Enabled email notification must name an SMTP host"""
    Path(temp_config_file).write_text("[notification]\nenabled = true\n")

    with pytest.raises(ConfigException, match="host"):
        Config.load_from_file(temp_config_file)


def test_empty_home_url_rejected(temp_config_file):
    Path(temp_config_file).write_text('[site]\nhome_url = " "\n')

    with pytest.raises(ConfigException, match="home_url"):
        Config.load_from_file(temp_config_file)
