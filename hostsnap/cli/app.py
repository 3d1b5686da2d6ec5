"""Typer-based CLI application for hostsnap."""

import logging
from enum import Enum
from pathlib import Path
from typing import Annotated, Optional

import typer
import yaml
from pydantic import ValidationError

from hostsnap import __version__
from hostsnap.config import load_settings
from hostsnap.core.collectors import EnvironmentSnapshotCollector, MissingPropertyError
from hostsnap.utils.formatters import format_properties

app = typer.Typer(
    name="hostsnap",
    help="Capture the host environment for benchmark reports",
    add_completion=False,
)


class OutputFormat(str, Enum):
    """Snapshot output formats."""

    TEXT = "text"
    JSON = "json"
    YAML = "yaml"


def version_callback(value: bool):
    """Display version and exit."""
    if value:
        typer.echo(f"hostsnap v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, is_eager=True),
    ] = None,
):
    """Hostsnap - Environment snapshots for benchmark results.

    Records runtime version, OS identity, CPU topology, memory capacity and
    hostname as one sorted property set.
    """
    pass


def configure_logging(log_level: str) -> None:
    """Configure logging from a CLI log level name.

    Raises:
        typer.Exit: If the level name is not recognized
    """
    log_level_upper = log_level.upper()
    if log_level_upper not in ["DEBUG", "INFO", "WARN", "WARNING", "ERROR"]:
        typer.echo(
            f"❌ Invalid log level: {log_level}. "
            "Must be debug, info, warn, or error.",
            err=True,
        )
        raise typer.Exit(1)

    # Map WARN to WARNING for Python logging
    if log_level_upper == "WARN":
        log_level_upper = "WARNING"

    logging.basicConfig(
        level=getattr(logging, log_level_upper),
        format="%(message)s",
    )


@app.command()
def snapshot(
    output_format: Annotated[
        OutputFormat,
        typer.Option("--format", case_sensitive=False, help="Output format"),
    ] = OutputFormat.TEXT,
    config: Annotated[
        Optional[Path],
        typer.Option(help="YAML settings file (paths, reader command, timeout)"),
    ] = None,
    no_enrich: Annotated[
        bool,
        typer.Option("--no-enrich", help="Skip CPU/memory enrichment"),
    ] = False,
    no_hostname: Annotated[
        bool,
        typer.Option("--no-hostname", help="Skip local hostname resolution"),
    ] = False,
    # Runtime options (hidden from help - for developers)
    log_level: Annotated[
        str,
        typer.Option(
            help="Logging level (debug, info, warn, error)",
            case_sensitive=False,
            hidden=True,  # Hide from --help
        ),
    ] = "warn",
):
    """Collect and print one environment snapshot."""
    configure_logging(log_level)
    logger = logging.getLogger(__name__)

    if config is not None and not config.exists():
        typer.echo(f"❌ Settings file does not exist: {config}", err=True)
        raise typer.Exit(1)

    try:
        settings = load_settings(config)
    except (ValidationError, ValueError, yaml.YAMLError) as e:
        typer.echo(f"❌ Invalid settings file: {e}", err=True)
        raise typer.Exit(1) from e

    updates = {}
    if no_enrich:
        updates["enrich"] = False
    if no_hostname:
        updates["resolve_hostname"] = False
    if updates:
        settings = settings.model_copy(update=updates)

    try:
        result = EnvironmentSnapshotCollector(settings=settings).collect()
    except MissingPropertyError as e:
        logger.debug("Base property collection failed", exc_info=True)
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(1) from e

    if output_format is OutputFormat.JSON:
        typer.echo(result.to_json())
    elif output_format is OutputFormat.YAML:
        typer.echo(result.to_yaml(), nl=False)
    else:
        typer.echo(format_properties(result))
