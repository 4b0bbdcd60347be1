"""
Main entry point for the Event Consumer service.

This module provides the command-line interface and process startup logic.
"""

import asyncio
import sys
from typing import Optional

import typer
from loguru import logger

from .application.startup import EXIT_FAILURE, ApplicationStartup
from .core.exceptions import ConfigurationError
from .infrastructure.config.loader import ConfigLoader
from .infrastructure.config.models import ApplicationConfig
from .infrastructure.logging.setup import setup_logging

# Create CLI application
cli = typer.Typer(
    name="event-consumer",
    help="Event-driven message consumer with graceful shutdown"
)


@cli.command()
def start(
    config_file: Optional[str] = typer.Option(
        None, "--config", "-c", help="Configuration file path"
    ),
    backend: Optional[str] = typer.Option(
        None, "--backend", help="Messaging backend (mqtt/memory)"
    ),
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Logging level"
    ),
    debug: bool = typer.Option(
        False, "--debug", help="Enable debug mode"
    )
) -> None:
    """Start consuming events until a termination signal arrives."""

    try:
        config = ConfigLoader().load_config(config_file)
        if backend:
            config.messaging.backend = backend
            config = ApplicationConfig.from_dict(config.to_dict())
    except ConfigurationError as e:
        logger.critical(f"Failed to load configuration: {e}")
        sys.exit(EXIT_FAILURE)

    if log_level:
        config.logging.level = log_level.upper()
    if debug:
        config.debug = True
        config.logging.level = "DEBUG"

    setup_logging(config.logging)

    logger.info(f"Starting {config.name} v{config.version}")
    logger.info(f"Environment: {config.environment}")
    logger.info(f"Messaging backend: {config.messaging.backend}")

    try:
        exit_code = asyncio.run(run_application(config))
    except KeyboardInterrupt:
        logger.info("Application interrupted by user")
        exit_code = 0
    except Exception as e:
        logger.critical(f"Application failed to start: {e}")
        exit_code = EXIT_FAILURE

    if exit_code:
        sys.exit(exit_code)


@cli.command()
def init_config(
    output: str = typer.Option(
        "config.yaml", "--output", "-o", help="Output configuration file"
    ),
    format: str = typer.Option(
        "yaml", "--format", "-f", help="Configuration format (yaml/json)"
    )
) -> None:
    """Generate a default configuration file."""

    config = ApplicationConfig()
    config_loader = ConfigLoader()

    try:
        config_loader.save_config(config, output, format)
        typer.echo(f"Default configuration saved to {output}")
    except ConfigurationError as e:
        typer.echo(f"Error saving configuration: {e}", err=True)
        sys.exit(EXIT_FAILURE)


@cli.command()
def validate_config(
    config_file: str = typer.Argument(...,
                                      help="Configuration file to validate")
) -> None:
    """Validate a configuration file."""

    config_loader = ConfigLoader()

    try:
        config = config_loader.load_config(config_file)
        typer.echo(f"Configuration file {config_file} is valid")
        typer.echo(f"Application: {config.name} v{config.version}")
        typer.echo(f"Messaging: {config.messaging.backend} "
                   f"{config.messaging.broker_host}:{config.messaging.broker_port}")
    except ConfigurationError as e:
        typer.echo(f"Configuration validation failed: {e}", err=True)
        sys.exit(EXIT_FAILURE)


async def run_application(config: ApplicationConfig) -> int:
    """
    Run the consumer with the given configuration.

    Args:
        config: Application configuration

    Returns:
        Process exit code
    """
    startup = ApplicationStartup(config)
    return await startup.run()


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
