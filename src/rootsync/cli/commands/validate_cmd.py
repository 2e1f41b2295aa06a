"""rootsync validate — scenario YAML validation."""

from __future__ import annotations

from pathlib import Path

import typer

from rootsync.core.exceptions import ScenarioError
from rootsync.core.scenario_loader import load_scenario, scenario_files
from rootsync.picker.predicates import parse_predicate


def validate_command(
    path: str = typer.Argument(help="Scenario file or directory path."),
) -> None:
    """Validate simulation scenario YAML files."""
    scenario_path = Path(path)

    if not scenario_path.exists():
        typer.echo(
            typer.style(f"Path does not exist: {path}", fg=typer.colors.RED),
            err=True,
        )
        raise typer.Exit(code=1)

    files = [scenario_path] if scenario_path.is_file() else scenario_files(scenario_path)
    if not files:
        typer.echo(
            typer.style(f"No YAML files found in: {path}", fg=typer.colors.RED),
            err=True,
        )
        raise typer.Exit(code=1)

    errors: list[str] = []
    for file in files:
        try:
            scenario = load_scenario(file)
            parse_predicate(scenario.predicate)
            status = typer.style("OK", fg=typer.colors.GREEN)
            typer.echo(f"  {file.name}: {status}")
        except (ScenarioError, ValueError) as e:
            status = typer.style("ERROR", fg=typer.colors.RED)
            typer.echo(f"  {file.name}: {status} - {e}")
            errors.append(file.name)

    typer.echo("")
    total = len(files)
    passed = total - len(errors)
    typer.echo(f"Validated {total} file(s): {passed} OK, {len(errors)} ERROR")

    if errors:
        raise typer.Exit(code=1)
