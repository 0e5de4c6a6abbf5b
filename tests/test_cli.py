"""Test CLI functionality."""

import json

import pytest
from click.testing import CliRunner

from podcast_settings import cli as cli_module
from podcast_settings.cli import cli

CONFIG = """
[site]
home_url = "https://example.com"
name = "My Show"

[[site.series]]
slug = "tech"
name = "Tech Talk"
id = 12

[store]
type = "db"
db_path = "settings.db"
"""


@pytest.fixture
def runner(monkeypatch):
    monkeypatch.setattr(cli_module, "setup_log", lambda logfile=None: None)
    runner = CliRunner()
    with runner.isolated_filesystem():
        with open("config.toml", "w", encoding="utf-8") as f:
            f.write(CONFIG)
        yield runner


def test_sections_lists_tabs(runner):
    result = runner.invoke(cli, ["sections"])

    assert result.exit_code == 0, result.output
    assert "feed-details\tFeed details" in result.output
    assert "castos-hosting" in result.output


def test_set_then_get(runner):
    result = runner.invoke(cli, ["set", "data_title", "<b>Hello</b>"])
    assert result.exit_code == 0, result.output

    result = runner.invoke(cli, ["get", "data_title"])
    assert result.exit_code == 0, result.output
    assert "Hello" in result.output
    assert "<b>" not in result.output


def test_get_scoped_value_falls_back(runner):
    runner.invoke(cli, ["set", "data_title", "Main"])
    runner.invoke(cli, ["set", "data_title", "Series", "--scope", "12"])

    assert "Series" in runner.invoke(cli, ["get", "data_title", "--scope", "12"]).output
    assert "Main" in runner.invoke(cli, ["get", "data_title", "--scope", "99"]).output


def test_set_list_value(runner):
    result = runner.invoke(cli, ["set", "use_post_types", '["post"]'])
    assert result.exit_code == 0, result.output

    result = runner.invoke(cli, ["get", "use_post_types"])
    assert json.loads(result.output.strip().splitlines()[-1]) == ["post"]


def test_get_secret_hides_value(runner):
    runner.invoke(cli, ["set", "protection_password", "hunter2"])

    result = runner.invoke(cli, ["get", "protection_password"])

    assert result.exit_code == 0
    assert "(stored)" in result.output
    assert "hunter2" not in result.output


def test_set_invalid_value_fails(runner):
    result = runner.invoke(cli, ["set", "data_image", "javascript:alert(1)"])

    assert result.exit_code != 0
    assert "data_image" in result.output


def test_unknown_field_fails(runner):
    result = runner.invoke(cli, ["get", "nope"])

    assert result.exit_code != 0
    assert "Unknown settings field" in result.output


def test_render_json(runner):
    result = runner.invoke(cli, ["render", "feed-details", "--scope", "tech", "--json"])

    assert result.exit_code == 0, result.output
    view = json.loads(result.output)
    assert view["title"] == "Feed details: Tech Talk"


def test_render_html(runner):
    result = runner.invoke(cli, ["render", "security"])

    assert result.exit_code == 0, result.output
    assert "Podcast Settings" in result.output


def test_missing_config_file(monkeypatch):
    monkeypatch.setattr(cli_module, "setup_log", lambda logfile=None: None)
    runner = CliRunner()
    with runner.isolated_filesystem():
        result = runner.invoke(cli, ["--config", "missing.toml", "sections"])

    assert result.exit_code != 0
    assert "Configuration file not found" in result.output
