"""
Main entry point for LLM CMS MCP Server.

This module provides the command-line interface for the MCP server,
handling startup, configuration and database seeding.
"""

import asyncio
import sys
from pathlib import Path
from typing import Optional

import click
import structlog

from .client.base import PostStore
from .client.samples import SAMPLE_POSTS
from .config.settings import Config, load_config
from .server import LLMCMSMCPServer, create_store
from .utils.logging import setup_logging

logger = structlog.get_logger(__name__)


def _load(config: Optional[Path], log_level: Optional[str] = None) -> Config:
    config_data = load_config(config_path=config)
    if log_level:
        config_data.server.log_level = log_level.upper()
    setup_logging(config_data.server.log_level)
    return config_data


def _check_store_settings(config_data: Config) -> None:
    if config_data.store.backend == "mongodb" and not config_data.store.mongo_uri:
        logger.error("MONGO_URI environment variable is required for the mongodb backend")
        sys.exit(1)


@click.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Set logging level",
)
@click.option(
    "--stdio/--no-stdio",
    default=True,
    help="Use stdio transport (default)",
)
def main(
    config: Optional[Path] = None,
    log_level: Optional[str] = None,
    stdio: bool = True,
) -> None:
    """
    LLM CMS MCP Server - exposes CMS posts to MCP hosts.

    Serves post tools, post resources and writing prompts over the
    Model Context Protocol.
    """
    try:
        config_data = _load(config, log_level)

        logger.info(
            "Starting LLM CMS MCP Server",
            version=config_data.version,
            config_file=str(config) if config else "default",
            log_level=config_data.server.log_level,
            store_backend=config_data.store.backend,
        )

        _check_store_settings(config_data)

        server = LLMCMSMCPServer(config_data)

        if stdio:
            logger.info("Starting server in stdio mode")
            asyncio.run(server.run_stdio())
        else:
            logger.error("Only stdio transport is currently supported")
            sys.exit(1)

    except KeyboardInterrupt:
        logger.info("Server shutdown requested")
        sys.exit(0)
    except Exception as e:
        logger.error("Server startup failed", error=str(e), exc_info=True)
        sys.exit(1)


@click.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(path_type=Path),
    help="Path to save configuration file",
)
def init_config(config: Optional[Path] = None) -> None:
    """Initialize a configuration file with default settings."""
    from .config.settings import create_default_config

    config_path = config or Path("config.json")

    if config_path.exists():
        click.echo(f"Configuration file already exists: {config_path}")
        if not click.confirm("Overwrite?"):
            return

    try:
        create_default_config(config_path)
        click.echo(f"Created configuration file: {config_path}")
        click.echo("\nNext steps:")
        click.echo("1. Set environment variables (or put them in a .env file):")
        click.echo("   export MONGO_URI='mongodb+srv://...'")
        click.echo("   export DB_NAME='chatcms'")
        click.echo("2. Register the server with your MCP host:")
        click.echo(f"   llm-cms-mcp-server serve --config {config_path}")
    except OSError as e:
        click.echo(f"Failed to create configuration file: {e}", err=True)
        sys.exit(1)


async def seed_posts(store: PostStore, force: bool = False) -> int:
    """
    Insert the sample posts into ``store``.

    Skips seeding when posts already exist unless ``force`` is set.

    Returns:
        Number of posts inserted
    """
    existing = await store.count_posts()
    if existing and not force:
        logger.info("Store already has posts, skipping seed", existing=existing)
        return 0

    for sample in SAMPLE_POSTS:
        post = await store.insert_post(
            title=sample["title"],
            content=sample["content"],
            author=sample["author"],
        )
        logger.info("Seeded post", post_id=post.id, title=post.title)

    return len(SAMPLE_POSTS)


@click.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.option("--force", is_flag=True, help="Seed even when posts already exist")
def seed(config: Optional[Path] = None, force: bool = False) -> None:
    """Populate the post store with sample posts."""
    config_data = _load(config)
    _check_store_settings(config_data)

    async def run() -> None:
        async with create_store(config_data) as store:
            before = await store.count_posts()
            inserted = await seed_posts(store, force=force)
            after = await store.count_posts()
        click.echo(f"Posts before: {before}")
        click.echo(f"Inserted: {inserted}")
        click.echo(f"Posts now: {after}")

    try:
        asyncio.run(run())
    except Exception as e:
        click.echo(f"Seeding failed: {e}", err=True)
        sys.exit(1)


@click.group()
@click.version_option(package_name="llm-cms-mcp-server")
def cli() -> None:
    """LLM CMS MCP Server CLI."""


cli.add_command(main, name="serve")
cli.add_command(init_config, name="init")
cli.add_command(seed, name="seed")


if __name__ == "__main__":
    cli()
