"""CLI main entry point."""

import json
import logging

import click

from .bootstrap import initialize_components
from .config import Config
from .db import close_db
from .errors import SettingsException
from .i18n import initialize
from .log import setup as setup_log

logger = logging.getLogger(__name__)


def _load(ctx):
    config_path = ctx.obj["config_path"]
    logger.info(f"Loading configuration file: {config_path}")
    cfg = Config.load_from_file(config_path)
    initialize(ui_language=cfg.language)
    return cfg


def _parse_value(raw: str):
    """Accept JSON for lists and objects; anything else is a plain string."""
    try:
        value = json.loads(raw)
    except ValueError:
        return raw
    return value if isinstance(value, (list, dict)) else raw


@click.group()
@click.option("--config", "-c", default="config.toml", help="Configuration file path")
@click.pass_context
def cli(ctx, config: str):
    """Podcast Settings - schema driven podcast settings."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config
    setup_log()


@cli.command(name="sections")
@click.pass_context
def sections(ctx):
    """List the settings sections in tab order."""
    try:
        components = initialize_components(_load(ctx))
        click.echo("key\ttitle\tfields")
        for section in components.engine.registry.sections_in_order():
            click.echo(f"{section.key}\t{section.title}\t{len(section.fields)}")
    except SettingsException as e:
        raise click.ClickException(str(e))
    finally:
        close_db()


@cli.command(name="get")
@click.argument("field_id")
@click.option("--scope", "-s", default=None, help="Series id to resolve under")
@click.pass_context
def get(ctx, field_id: str, scope: str | None):
    """Print the effective value of a setting."""
    try:
        engine = initialize_components(_load(ctx)).engine
        field = engine.registry.field(field_id)
        if field.is_secret:
            stored = engine.stored(field_id, scope) is not None
            click.echo("(stored)" if stored else "")
            return
        value = engine.resolve_field(field, scope)
        click.echo(json.dumps(value, ensure_ascii=False) if isinstance(value, (list, dict)) else value)
    except SettingsException as e:
        raise click.ClickException(str(e))
    finally:
        close_db()


@cli.command(name="set")
@click.argument("field_id")
@click.argument("value")
@click.option("--scope", "-s", default=None, help="Series id to store the value under")
@click.pass_context
def set_value(ctx, field_id: str, value: str, scope: str | None):
    """Validate and store a setting."""
    try:
        engine = initialize_components(_load(ctx)).engine
        engine.submit(field_id, scope, _parse_value(value))
        click.echo(f"Saved {field_id}")
    except SettingsException as e:
        logger.error(f"Failed to save {field_id}: {e}")
        raise click.ClickException(str(e))
    finally:
        close_db()


@cli.command(name="render")
@click.argument("section_key")
@click.option("--scope", "-s", default=None, help="Series slug to render")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the section view as JSON")
@click.pass_context
def render(ctx, section_key: str, scope: str | None, as_json: bool):
    """Render one settings section."""
    try:
        page = initialize_components(_load(ctx)).page
        if as_json:
            click.echo(page.render_section(section_key, scope).model_dump_json(indent=2))
        else:
            click.echo(page.render_html(section_key, scope))
    except SettingsException as e:
        raise click.ClickException(str(e))
    finally:
        close_db()


@cli.command(name="serve")
@click.option("--host", "-h", default=None, help="Override host from config")
@click.option("--port", "-p", default=None, type=int, help="Override port from config")
@click.pass_context
def serve(ctx, host, port):
    """Start the settings web service."""
    try:
        cfg = _load(ctx)
        setup_log(cfg.log_file)

        host = host or cfg.web.host
        port = port or cfg.web.port

        import uvicorn

        from .api import create_app

        app = create_app(cfg)
        logger.info(f"Starting web service on {host}:{port}")
        uvicorn.run(app, host=host, port=port)
    except SettingsException as e:
        logger.error(f"Application error: {e}", exc_info=True)
        raise click.ClickException(str(e))


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
