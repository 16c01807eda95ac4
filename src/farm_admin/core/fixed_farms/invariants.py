"""Invariant checkers for the fixed-farm registry.

Each function returns True when the invariant holds; ``check_all()`` returns
the list of violated invariant IDs (empty = all pass). The registry engine
runs ``check_all()`` on every post-state before accepting a step.
"""

from __future__ import annotations

from typing import Callable

from .math import BASE_POOL_ID, within_budget
from .types import FixedFarmState


def _active_pids(s: FixedFarmState) -> list[int]:
    return [pid for pid, info in s.farms.items() if info.is_active]


def inv_budget_bounded(s: FixedFarmState) -> bool:
    return within_budget(s.total_fixed_percentage)


def inv_ledger_matches_active(s: FixedFarmState) -> bool:
    active_sum = sum(info.allocation_percent for info in s.farms.values() if info.is_active)
    return s.total_fixed_percentage == active_sum


def inv_index_matches_active(s: FixedFarmState) -> bool:
    return sorted(s.fixed_pids) == sorted(_active_pids(s))


def inv_index_unique(s: FixedFarmState) -> bool:
    return len(set(s.fixed_pids)) == len(s.fixed_pids)


def inv_base_pool_unregistered(s: FixedFarmState) -> bool:
    return BASE_POOL_ID not in s.farms


def inv_inactive_zeroed(s: FixedFarmState) -> bool:
    return all(info.allocation_percent == 0 for info in s.farms.values() if not info.is_active)


def inv_record_keys_match(s: FixedFarmState) -> bool:
    return all(pid == info.pool_id for pid, info in s.farms.items())


def inv_percent_nonneg(s: FixedFarmState) -> bool:
    return all(info.allocation_percent >= 0 for info in s.farms.values())


INVARIANT_REGISTRY: dict[str, Callable[[FixedFarmState], bool]] = {
    "inv_budget_bounded": inv_budget_bounded,
    "inv_ledger_matches_active": inv_ledger_matches_active,
    "inv_index_matches_active": inv_index_matches_active,
    "inv_index_unique": inv_index_unique,
    "inv_base_pool_unregistered": inv_base_pool_unregistered,
    "inv_inactive_zeroed": inv_inactive_zeroed,
    "inv_record_keys_match": inv_record_keys_match,
    "inv_percent_nonneg": inv_percent_nonneg,
}


def check_all(state: FixedFarmState) -> list[str]:
    """Return list of violated invariant IDs (empty = all pass)."""
    return [
        inv_id
        for inv_id, check_fn in INVARIANT_REGISTRY.items()
        if not check_fn(state)
    ]
