"""Command line entry points for the public site and the admin API."""

import asyncio
import logging

import typer
import uvicorn

from postdeck.config import CmsConfig, ConfigError, load_config
from postdeck.db_context import DatabaseManager
from postdeck.errors import AppError
from postdeck.logging_config import configure_logging
from postdeck.post_repository import PostRepository
from postdeck.web.admin import create_admin_app
from postdeck.web.public import create_site_app

app = typer.Typer(
    name="postdeck",
    help="Posts store with a public site and an admin API",
    no_args_is_help=True,
)

logger = logging.getLogger(__name__)

ConfigFileOption = typer.Option(..., "--config-file", "-c", help="Path to the config TOML")
LogLevelOption = typer.Option("info", "--log-level", help="Logging level")


def _load(config_file: str, log_level: str) -> CmsConfig:
    configure_logging(log_level)
    try:
        config = load_config(config_file)
    except ConfigError as exc:
        typer.echo(f"exited program, error: {exc}", err=True)
        raise typer.Exit(1) from exc
    logger.debug("config: %r", config.redacted())
    return config


@app.command("site")
def serve_site(config_file: str = ConfigFileOption, log_level: str = LogLevelOption):
    """Serve the public site on ``webserver_port``."""
    config = _load(config_file, log_level)
    index_template = config.template_dir / "index.html.in"
    if not index_template.exists():
        typer.echo(f"Template file not found at: {index_template}", err=True)
        raise typer.Exit(1)
    uvicorn.run(create_site_app(config=config), host="0.0.0.0", port=config.webserver_port)


@app.command("admin")
def serve_admin(config_file: str = ConfigFileOption, log_level: str = LogLevelOption):
    """Serve the admin API on ``admin_port``."""
    config = _load(config_file, log_level)
    uvicorn.run(create_admin_app(config=config), host="0.0.0.0", port=config.admin_port)


async def _init_db(config: CmsConfig):
    await DatabaseManager.create_pool(config.dsn, config.pool)
    try:
        await PostRepository().create_schema()
    finally:
        await DatabaseManager.close_pool()


@app.command("init-db")
def init_db(config_file: str = ConfigFileOption, log_level: str = LogLevelOption):
    """Create the posts table if it does not exist."""
    config = _load(config_file, log_level)
    try:
        asyncio.run(_init_db(config))
    except AppError as exc:
        typer.echo(f"exited program, error: {exc.message}", err=True)
        raise typer.Exit(1) from exc
    typer.echo("posts table ready")


if __name__ == "__main__":
    app()
