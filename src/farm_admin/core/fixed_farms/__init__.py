"""`fixed_farms`: registry of pools pinned to a fixed share of farm rewards.

This package follows the kernel layout used across ``farm_admin.core``:
- deterministic, integer-only transitions,
- immutable state (frozen dataclasses),
- fail-closed guards and invariant checks.

Public API:
- `initial_state() -> FixedFarmState`
- `step(state, params, pool_count=...) -> StepResult`
- `step_or_raise(state, params, pool_count=...) -> StepResult` (raises on rejection)
- `register(...)` / `update(...)` convenience wrappers returning the new state
"""

from .math import (
    BASE_PERCENTAGE,
    BASE_POOL_ID,
    BUFFER,
    MAX_FIXED_FARM_PERCENTAGE,
    PRECISION,
)
from .registry import (
    fixed_farm_count,
    get_fixed_farm,
    is_active,
    percent_of,
    register,
    step,
    step_or_raise,
    total_allocation_share,
    update,
)
from .state import initial_state, state_from_dict, state_to_dict
from .types import Action, ActionParams, Event, FixedFarmState, FixedPercentFarmInfo, StepResult

__all__ = [
    "PRECISION",
    "BASE_PERCENTAGE",
    "BASE_POOL_ID",
    "BUFFER",
    "MAX_FIXED_FARM_PERCENTAGE",
    "step",
    "step_or_raise",
    "register",
    "update",
    "get_fixed_farm",
    "is_active",
    "percent_of",
    "fixed_farm_count",
    "total_allocation_share",
    "initial_state",
    "state_from_dict",
    "state_to_dict",
    "Action",
    "ActionParams",
    "Event",
    "FixedFarmState",
    "FixedPercentFarmInfo",
    "StepResult",
]
