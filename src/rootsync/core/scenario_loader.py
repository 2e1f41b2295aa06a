"""Load simulation scenarios from YAML files and validate them via Pydantic."""

from __future__ import annotations

from pathlib import Path  # noqa: TC003
from typing import Any

import yaml

from rootsync.core.exceptions import ScenarioError
from rootsync.core.models import Scenario


def load_scenario(path: Path) -> Scenario:
    """Load a single Scenario from a YAML file.

    Raises:
        ScenarioError: If file cannot be read, parsed, or validated.
    """
    data = _load_yaml(path)
    try:
        return Scenario.model_validate(data)
    except Exception as e:
        msg = f"Scenario validation failed ({path.name}): {e}"
        raise ScenarioError(msg) from e


def load_scenarios(path: Path) -> list[Scenario]:
    """Load scenarios from a file or directory.

    If path is a directory, scan for *.yaml / *.yml files (sorted by name).

    Raises:
        ScenarioError: If path doesn't exist, no scenarios are found,
            or every file fails to load.
    """
    if not path.exists():
        msg = f"Scenario path does not exist: {path}"
        raise ScenarioError(msg)

    if path.is_file():
        return [load_scenario(path)]

    yaml_files = scenario_files(path)
    if not yaml_files:
        msg = f"No scenario YAML files found in: {path}"
        raise ScenarioError(msg)

    scenarios = []
    errors = []
    for yaml_file in yaml_files:
        try:
            scenarios.append(load_scenario(yaml_file))
        except ScenarioError as e:
            errors.append(str(e))

    if errors and not scenarios:
        msg = "All scenario files failed to load:\n" + "\n".join(errors)
        raise ScenarioError(msg)

    return scenarios


def scenario_files(directory: Path) -> list[Path]:
    """All *.yaml / *.yml files under *directory*, sorted."""
    return sorted(
        f for f in directory.rglob("*") if f.suffix in (".yaml", ".yml") and f.is_file()
    )


def _load_yaml(path: Path) -> dict[str, Any]:
    """Load and parse a YAML file."""
    try:
        with open(path, encoding="utf-8") as f:  # noqa: PTH123
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        msg = f"Failed to parse scenario YAML ({path.name}): {e}"
        raise ScenarioError(msg) from e
    except OSError as e:
        msg = f"Failed to read scenario file ({path.name}): {e}"
        raise ScenarioError(msg) from e

    if data is None:
        msg = f"Scenario file is empty: {path.name}"
        raise ScenarioError(msg)
    if not isinstance(data, dict):
        msg = f"Scenario file must be a YAML mapping: {path.name}"
        raise ScenarioError(msg)
    return data
