"""State transition functions for the fixed-farm registry.

One pure function per action, evaluated against the PRE-state and assuming
its guard has passed. Each returns a new ``FixedFarmState``.
"""

from __future__ import annotations

from dataclasses import replace

from .types import ActionParams, FixedFarmState, FixedPercentFarmInfo


def remove_pid(pids: tuple[int, ...], pool_id: int) -> tuple[int, ...]:
    """Drop ``pool_id`` by moving the last element into its slot."""
    out = list(pids)
    index = out.index(pool_id)
    out[index] = out[-1]
    out.pop()
    return tuple(out)


def apply_register(state: FixedFarmState, params: ActionParams) -> FixedFarmState:
    farms = dict(state.farms)
    farms[params.pool_id] = FixedPercentFarmInfo(
        pool_id=params.pool_id,
        allocation_percent=params.percent,
        is_active=True,
    )
    return replace(
        state,
        farms=farms,
        fixed_pids=state.fixed_pids + (params.pool_id,),
        total_fixed_percentage=state.total_fixed_percentage + params.percent,
    )


def apply_update(state: FixedFarmState, params: ActionParams) -> FixedFarmState:
    current = state.farms[params.pool_id]
    delta = params.percent - current.allocation_percent
    farms = dict(state.farms)
    fixed_pids = state.fixed_pids

    if params.percent == 0:
        # A zeroed record reads back as 0, not its pre-zero value.
        farms[params.pool_id] = replace(current, allocation_percent=0, is_active=False)
        fixed_pids = remove_pid(fixed_pids, params.pool_id)
    else:
        farms[params.pool_id] = replace(current, allocation_percent=params.percent)

    return replace(
        state,
        farms=farms,
        fixed_pids=fixed_pids,
        total_fixed_percentage=state.total_fixed_percentage + delta,
    )
