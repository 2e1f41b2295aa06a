"""Tests for Pydantic models and enums."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from rootsync.core.models import (
    NON_TERMINAL_STAGES,
    BackoffConfig,
    Config,
    RootSpec,
    Scenario,
    SimulationResult,
    Stage,
)


class TestStage:
    def test_lifecycle_order(self) -> None:
        assert list(Stage)[0] == Stage.PRE_ON_CREATE
        assert list(Stage)[-1] == Stage.DESTROYED

    def test_between_inclusive(self) -> None:
        assert Stage.between(Stage.STARTED, Stage.PAUSED) == (
            Stage.STARTED,
            Stage.RESUMED,
            Stage.PAUSED,
        )

    def test_non_terminal_stages(self) -> None:
        assert Stage.DESTROYED not in NON_TERMINAL_STAGES
        assert Stage.PRE_ON_CREATE in NON_TERMINAL_STAGES
        assert Stage.RESTARTED in NON_TERMINAL_STAGES
        assert len(NON_TERMINAL_STAGES) == 7


class TestBackoffConfig:
    def test_defaults_are_non_decreasing(self) -> None:
        config = BackoffConfig()
        for table in config.model_dump().values():
            assert table == sorted(table)

    def test_decreasing_rejected(self) -> None:
        with pytest.raises(ValidationError, match="non-decreasing"):
            BackoffConfig(no_matching_root=[100, 10])

    def test_empty_rejected(self) -> None:
        with pytest.raises(ValidationError, match="must not be empty"):
            BackoffConfig(root_not_ready=[])

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValidationError):
            BackoffConfig(no_active_roots=[-5, 10])


class TestConfig:
    def test_defaults(self) -> None:
        config = Config()
        assert config.needs_foreground_component is True
        assert config.timeouts.pick_root_ms == 60000
        assert config.timeouts.root_ready_ms == 10000
        assert config.timeouts.idle_timeout_ms == 26000


class TestScenario:
    def test_minimal(self) -> None:
        scenario = Scenario(name="s")
        assert scenario.predicate == "default"
        assert scenario.needs_foreground_component is None
        assert scenario.roots == []

    def test_duplicate_root_names(self) -> None:
        with pytest.raises(ValidationError, match="duplicate root names: a"):
            Scenario(name="s", roots=[{"name": "a"}, {"name": "a"}])

    def test_duplicate_component_names(self) -> None:
        with pytest.raises(ValidationError, match="duplicate component names"):
            Scenario(name="s", components=[{"name": "Main"}, {"name": "Main"}])

    def test_root_removed_before_appearing(self) -> None:
        with pytest.raises(ValidationError, match="remove_at_ms"):
            RootSpec(name="r", appear_at_ms=100, remove_at_ms=50)

    def test_stage_parsed_from_string(self) -> None:
        scenario = Scenario(
            name="s",
            components=[{"name": "Main", "transitions": [{"at_ms": 0, "stage": "resumed"}]}],
        )
        assert scenario.components[0].transitions[0].stage == Stage.RESUMED


class TestSimulationResult:
    def test_failure_fields(self) -> None:
        result = SimulationResult(
            scenario_name="s",
            success=False,
            error_type="NoMatchingRootError",
            error_message="nothing",
        )
        assert result.root_name is None
        assert result.busy_resources == []
