"""rootsync data models — Pydantic v2.

This module is a leaf: no internal project imports.
All Enum and Model definitions live here.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Any

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

# ============================================================
# Enums
# ============================================================


class Stage(StrEnum):
    """Foreground component lifecycle stage, in lifecycle order."""

    PRE_ON_CREATE = "pre_on_create"
    CREATED = "created"
    STARTED = "started"
    RESUMED = "resumed"
    PAUSED = "paused"
    STOPPED = "stopped"
    RESTARTED = "restarted"
    DESTROYED = "destroyed"

    @classmethod
    def between(cls, first: Stage, last: Stage) -> tuple[Stage, ...]:
        """Stages from *first* to *last* inclusive, in lifecycle order."""
        members = list(cls)
        return tuple(members[members.index(first) : members.index(last) + 1])


# Every stage a live (not destroyed) component can be in.
NON_TERMINAL_STAGES: tuple[Stage, ...] = Stage.between(Stage.PRE_ON_CREATE, Stage.RESTARTED)


class RootSelectionState(StrEnum):
    """Global root state observed by a single poll."""

    NO_ROOTS_PRESENT = "no_roots_present"
    NO_ROOTS_PICKED = "no_roots_picked"
    ROOTS_PICKED = "roots_picked"


class Orientation(StrEnum):
    """Screen / configuration orientation."""

    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


# ============================================================
# Config Models
# ============================================================


class TimeoutConfig(BaseModel):
    """Wait ceilings, in milliseconds of execution-context time."""

    pick_root_ms: int = Field(default=60000, ge=0)
    root_ready_ms: int = Field(default=10000, ge=0)
    idle_timeout_ms: int = Field(default=26000, ge=0)


# The env source leaves these as raw text; split_text parses them.
BackoffTable = Annotated[list[int], NoDecode]


class BackoffConfig(BaseModel):
    """Backoff tables (milliseconds) per retry condition."""

    no_active_roots: BackoffTable = Field(default=[10, 10, 20, 30, 50, 80, 130, 210, 340])
    no_matching_root: BackoffTable = Field(default=[10, 20, 200, 400, 1000, 2000])
    root_not_ready: BackoffTable = Field(default=[10, 25, 50, 100, 200, 400, 800, 1000])
    component_created: BackoffTable = Field(default=[10, 50, 150, 250])
    component_resumed: BackoffTable = Field(default=[10, 50, 100, 500, 2000, 30000])

    @field_validator("*", mode="before")
    @classmethod
    def split_text(cls, value: Any) -> Any:
        """Accept a table written as text: "10, 20, 40" or "[10, 20, 40]"."""
        if isinstance(value, str):
            return [item.strip() for item in value.strip().strip("[]").split(",") if item.strip()]
        return value

    @field_validator("*")
    @classmethod
    def non_decreasing(cls, value: list[int]) -> list[int]:
        if not value:
            msg = "backoff table must not be empty"
            raise ValueError(msg)
        if any(v < 0 for v in value):
            msg = f"backoff table entries must be >= 0: {value}"
            raise ValueError(msg)
        if any(b < a for a, b in zip(value, value[1:])):
            msg = f"backoff table must be non-decreasing: {value}"
            raise ValueError(msg)
        return value


class Config(BaseSettings):
    """Project configuration. Merged from YAML + env var + CLI flag."""

    model_config = SettingsConfigDict(
        env_prefix="ROOTSYNC_",
        env_nested_delimiter="__",
    )

    needs_foreground_component: bool = Field(default=True)
    timeouts: TimeoutConfig = Field(default_factory=TimeoutConfig)
    backoff: BackoffConfig = Field(default_factory=BackoffConfig)


# ============================================================
# Scenario Models (simulation)
# ============================================================


class StageTransition(BaseModel):
    """Component enters *stage* at virtual time *at_ms*."""

    at_ms: int = Field(..., ge=0)
    stage: Stage


class OrientationChange(BaseModel):
    """Orientation becomes *orientation* at virtual time *at_ms*."""

    at_ms: int = Field(..., ge=0)
    orientation: Orientation


class ApplicationSpec(BaseModel):
    """Simulated application-wide configuration."""

    orientation: Orientation = Field(default=Orientation.PORTRAIT)
    orientation_changes: list[OrientationChange] = Field(default_factory=list)


class ComponentSpec(BaseModel):
    """Simulated foreground component."""

    name: str = Field(..., min_length=1)
    orientation: Orientation = Field(default=Orientation.PORTRAIT)
    transitions: list[StageTransition] = Field(default_factory=list)
    orientation_changes: list[OrientationChange] = Field(default_factory=list)


class RootSpec(BaseModel):
    """Simulated top-level root surface."""

    name: str = Field(..., min_length=1)
    stacking_order: int = Field(default=2)
    dialog: bool = Field(default=False)
    focusable: bool = Field(default=True)
    has_focus: bool = Field(default=False)
    appear_at_ms: int = Field(default=0, ge=0)
    remove_at_ms: int | None = Field(default=None, ge=0)
    ready_at_ms: int | None = Field(
        default=0,
        ge=0,
        description="When layout settles. None: layout never settles.",
    )

    @model_validator(mode="after")
    def removal_after_appearance(self) -> RootSpec:
        if self.remove_at_ms is not None and self.remove_at_ms < self.appear_at_ms:
            msg = f"root {self.name}: remove_at_ms must be >= appear_at_ms"
            raise ValueError(msg)
        return self


class Scenario(BaseModel):
    """Scripted UI world for `rootsync simulate`."""

    name: str = Field(..., min_length=1)
    description: str = Field(default="")
    predicate: str = Field(default="default")
    needs_foreground_component: bool | None = Field(default=None)
    application: ApplicationSpec = Field(default_factory=ApplicationSpec)
    components: list[ComponentSpec] = Field(default_factory=list)
    roots: list[RootSpec] = Field(default_factory=list)

    @model_validator(mode="after")
    def unique_names(self) -> Scenario:
        for kind, names in (
            ("component", [c.name for c in self.components]),
            ("root", [r.name for r in self.roots]),
        ):
            dupes = sorted({n for n in names if names.count(n) > 1})
            if dupes:
                msg = f"duplicate {kind} names: {', '.join(dupes)}"
                raise ValueError(msg)
        return self


# ============================================================
# Result Models
# ============================================================


class SimulationResult(BaseModel):
    """Outcome of one simulated `RootViewPicker.get()` call."""

    scenario_name: str
    success: bool
    root_name: str | None = None
    error_type: str | None = None
    error_message: str | None = None
    elapsed_ms: int = Field(default=0, ge=0)
    yield_count: int = Field(default=0, ge=0)
    busy_resources: list[str] = Field(default_factory=list)
