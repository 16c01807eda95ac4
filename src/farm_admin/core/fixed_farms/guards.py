"""Guard functions for the fixed-farm registry.

One pure function per action. Each returns ``None`` when the action is allowed
in the given PRE-state, otherwise a rejection string ``"<code>:<detail>"``
whose ``code`` names an error class in ``farm_admin.core.errors``.

Checks run in a fixed order so the first failing precondition decides the
reported error.
"""

from __future__ import annotations

from .math import BASE_POOL_ID, MAX_FIXED_FARM_PERCENTAGE
from .types import ActionParams, FixedFarmState


def _is_active(state: FixedFarmState, pool_id: int) -> bool:
    info = state.farms.get(pool_id)
    return info is not None and info.is_active


def guard_register(state: FixedFarmState, params: ActionParams, pool_count: int) -> str | None:
    if params.pool_id == BASE_POOL_ID:
        return "out_of_range:cannot add reserved base pool 0"
    if params.pool_id < 0 or params.pool_id >= pool_count:
        return "out_of_range:pid is out of bounds"
    if _is_active(state, params.pool_id):
        return "already_active:fixed percent farm already added"
    if params.percent < 0:
        return "budget_exceeded:allocation out of bounds"
    if state.total_fixed_percentage + params.percent > MAX_FIXED_FARM_PERCENTAGE:
        return "budget_exceeded:allocation out of bounds"
    return None


def guard_update(state: FixedFarmState, params: ActionParams, pool_count: int) -> str | None:
    if not _is_active(state, params.pool_id):
        return "not_active:fixed percent farm not active"
    if params.percent < 0:
        return "budget_exceeded:allocation out of bounds"
    delta = params.percent - state.farms[params.pool_id].allocation_percent
    if state.total_fixed_percentage + delta > MAX_FIXED_FARM_PERCENTAGE:
        return "budget_exceeded:allocation out of bounds"
    return None
