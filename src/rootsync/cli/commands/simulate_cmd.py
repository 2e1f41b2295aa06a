"""rootsync simulate — run RootViewPicker against a scripted UI world."""

from __future__ import annotations

import logging
from pathlib import Path

import typer

from rootsync.core.config import load_config
from rootsync.core.exceptions import RootSyncError
from rootsync.core.scenario_loader import load_scenarios
from rootsync.simulation.world import SimulatedWorld

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def simulate_command(
    scenarios_path: str = typer.Argument(help="Scenario file or directory path."),
    config_path: str | None = typer.Option(
        None, "--config", "-c", help="Config file path."
    ),
    log_level: str = typer.Option(
        "WARNING", "--log-level", "-l", help="Logging level (DEBUG, INFO, WARNING...)."
    ),
) -> None:
    """Simulate root picking for each scenario."""
    level = log_level.upper()
    if level not in LOG_LEVELS:
        expected = ", ".join(LOG_LEVELS)
        typer.echo(f"Error: unknown log level {log_level!r}, expected one of {expected}", err=True)
        raise typer.Exit(code=1)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        cfg_path = Path(config_path) if config_path else None
        config = load_config(config_path=cfg_path)
        scenarios = load_scenarios(Path(scenarios_path))
    except RootSyncError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from None

    failed = 0
    for scenario in scenarios:
        typer.echo(f"\nScenario: {scenario.name}")
        try:
            world = SimulatedWorld.from_scenario(scenario, config)
            result = world.run(scenario.name)
        except ValueError as e:
            typer.echo(typer.style(f"  Invalid scenario: {e}", fg=typer.colors.RED), err=True)
            failed += 1
            continue

        if result.success:
            status = typer.style("PICKED", fg=typer.colors.GREEN)
            typer.echo(f"  {status} root={result.root_name}")
        else:
            failed += 1
            status = typer.style("FAILED", fg=typer.colors.RED)
            typer.echo(f"  {status} {result.error_type}")
            typer.echo(typer.style(f"         Reason: {result.error_message}", fg=typer.colors.RED))
        typer.echo(f"  elapsed={result.elapsed_ms}ms yields={result.yield_count}")
        if result.busy_resources:
            typer.echo(f"  busy idling resources: {', '.join(result.busy_resources)}")

    typer.echo("")
    total = len(scenarios)
    typer.echo(f"Simulated {total} scenario(s): {total - failed} picked, {failed} failed")
    if failed:
        raise typer.Exit(code=1)
