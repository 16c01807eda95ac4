"""
Fixed-percentage allocation synchronization.

Given the farm's current weights and the fixed-farm registry, compute integer
weights for every active fixed pool so that each pool's weight divided by the
new farm total approximates its configured percentage, while the floating
(non-fixed, non-base) pools keep their absolute weight.

With `S` the total allocation share (fixed ledger + base share) and `N` the
floating weight, the new total is `N / (1 - S)`; the fixed pools together with
the base pool hold `S` of it. The base pool's weight is derived by the farm
itself and is not written here.

Per-pool weights are truncated independently; there is no reconciliation pass,
so the written weights can sum to less than the allotted amount by at most one
unit per fixed pool.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from ..farm.adapter import FarmAdapter
from .fixed_farms.math import BASE_POOL_ID, PRECISION
from .fixed_farms.registry import total_allocation_share
from .fixed_farms.types import FixedFarmState


@dataclass(frozen=True)
class FixedWeight:
    pool_id: int
    percent: int
    weight: int


@dataclass(frozen=True)
class SyncPlan:
    """Inputs and outputs of one synchronization, in the order they were derived."""

    total_weight: int
    base_weight: int
    fixed_weight: int
    non_percentage_allocation: int
    total_share: int
    new_total_weight: int
    allotted_fixed_weight: int
    weights: Tuple[FixedWeight, ...]


def scale_factor(total_share: int) -> int:
    """`PRECISION^2 / (PRECISION - S)`, truncated. Requires `0 < S < PRECISION`."""
    if total_share <= 0 or total_share >= PRECISION:
        raise ValueError(f"total allocation share must be in (0, {PRECISION}), got {total_share}")
    return (PRECISION * PRECISION) // (PRECISION - total_share)


def compute_fixed_weights(
    *,
    total_weight: int,
    base_weight: int,
    fixed_pools: Sequence[Tuple[int, int, int]],
    total_share: int,
) -> SyncPlan:
    """
    Compute new weights for the fixed pools.

    Args:
        total_weight: Farm's current total weight.
        base_weight: Current weight of the base pool.
        fixed_pools: `(pool_id, percent, current_weight)` per active fixed pool,
            in registry order.
        total_share: Fixed ledger plus base share, in basis points.

    Raises:
        ValueError: If the farm weights are inconsistent (floating weight would
            be negative) or `total_share` is outside `(0, PRECISION)`.
    """
    fixed_weight = sum(current for _pid, _pct, current in fixed_pools)
    non_percentage_allocation = total_weight - base_weight - fixed_weight
    if non_percentage_allocation < 0:
        raise ValueError(
            f"inconsistent farm weights: total={total_weight} base={base_weight} fixed={fixed_weight}"
        )

    scale = scale_factor(total_share)
    new_total_weight = non_percentage_allocation * scale // PRECISION
    allotted_fixed_weight = new_total_weight - non_percentage_allocation

    weights = tuple(
        FixedWeight(
            pool_id=pid,
            percent=percent,
            weight=allotted_fixed_weight * percent // total_share,
        )
        for pid, percent, _current in fixed_pools
    )
    return SyncPlan(
        total_weight=total_weight,
        base_weight=base_weight,
        fixed_weight=fixed_weight,
        non_percentage_allocation=non_percentage_allocation,
        total_share=total_share,
        new_total_weight=new_total_weight,
        allotted_fixed_weight=allotted_fixed_weight,
        weights=weights,
    )


def plan_sync(farm: FarmAdapter, state: FixedFarmState) -> Optional[SyncPlan]:
    """Read the farm and compute a plan without writing. None when no pool is fixed."""
    if not state.fixed_pids:
        return None
    fixed_pools = [
        (pid, state.farms[pid].allocation_percent, farm.pool_info(pid).weight)
        for pid in state.fixed_pids
    ]
    return compute_fixed_weights(
        total_weight=farm.total_weight(),
        base_weight=farm.pool_info(BASE_POOL_ID).weight,
        fixed_pools=fixed_pools,
        total_share=total_allocation_share(state),
    )


def apply_plan(farm: FarmAdapter, plan: SyncPlan) -> None:
    for entry in plan.weights:
        farm.set_pool_weight(entry.pool_id, entry.weight, False)


def synchronize(farm: FarmAdapter, state: FixedFarmState) -> Optional[SyncPlan]:
    """Recompute and write fixed pool weights. No-op (returns None) with no fixed pools."""
    plan = plan_sync(farm, state)
    if plan is not None:
        apply_plan(farm, plan)
    return plan
