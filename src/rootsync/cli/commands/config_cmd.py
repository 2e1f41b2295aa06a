"""rootsync config: inspect and edit picker settings."""

from __future__ import annotations

from pathlib import Path

import typer
import yaml

from rootsync.core.config import default_config_path, load_config, set_config_value
from rootsync.core.exceptions import ConfigError

config_app = typer.Typer(
    name="config",
    help="Inspect and edit picker timeouts and backoff tables.",
    no_args_is_help=True,
)

@config_app.command(name="show")
def config_show(
    config_path: Path | None = typer.Option(
        None, "--config", "-c", help="Config file (default: ./rootsync.config.yaml)."
    ),
) -> None:
    """Print the effective configuration (file + environment) as YAML."""
    path = config_path or default_config_path()
    try:
        config = load_config(config_path=path)
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from None

    source = str(path) if path.exists() else f"{path} (not found, defaults)"
    typer.echo(f"# file: {source}")
    typer.echo(yaml.safe_dump(config.model_dump(mode="json"), sort_keys=False))


@config_app.command(name="set")
def config_set(
    key: str = typer.Argument(
        help="Dotted key, e.g. timeouts.pick_root_ms or backoff.root_not_ready."
    ),
    value: str = typer.Argument(help='New value. Backoff tables take a list: "10, 20, 40".'),
    config_path: Path | None = typer.Option(
        None, "--config", "-c", help="Config file (default: ./rootsync.config.yaml)."
    ),
) -> None:
    """Write one setting to the config file."""
    path = config_path or default_config_path()
    try:
        stored = set_config_value(path, key, value)
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from None
    typer.echo(f"Set {key} = {stored} in {path}")
