"""Data types for the fixed-percentage farm registry.

All types are frozen dataclasses. ``FixedFarmState.farms`` is never mutated
in place; transitions build a fresh mapping.

Units/conventions:
- ``allocation_percent`` and ``total_fixed_percentage`` are basis points of
  ``PRECISION`` (10_000).
- ``fixed_pids`` lists active pool ids; order is not meaningful and changes on
  removal (swap-with-last).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, unique
from typing import Mapping


@unique
class Action(Enum):
    REGISTER = "register"
    UPDATE = "update"


@unique
class Event(Enum):
    FIXED_FARM_ADDED = "FixedFarmAdded"
    FIXED_FARM_UPDATED = "FixedFarmUpdated"
    FIXED_FARM_REMOVED = "FixedFarmRemoved"


@dataclass(frozen=True)
class FixedPercentFarmInfo:
    """One pinned pool. Deactivated records are kept for audit."""

    pool_id: int
    allocation_percent: int = 0
    is_active: bool = False


@dataclass(frozen=True)
class FixedFarmState:
    """Complete registry state."""

    farms: Mapping[int, FixedPercentFarmInfo] = field(default_factory=dict)
    fixed_pids: tuple[int, ...] = ()
    total_fixed_percentage: int = 0


@dataclass(frozen=True)
class ActionParams:
    action: Action
    pool_id: int = 0
    percent: int = 0


@dataclass(frozen=True)
class StepResult:
    accepted: bool
    state: FixedFarmState | None = None
    event: Event | None = None
    rejection: str | None = None
