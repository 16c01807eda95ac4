"""State construction and serialization for the fixed-farm registry.

Round-trip property (tested): ``state_from_dict(state_to_dict(s)) == s`` for all
valid states, including the order of ``fixed_pids``.
"""

from __future__ import annotations

from typing import Any, Mapping

from .types import FixedFarmState, FixedPercentFarmInfo


def initial_state() -> FixedFarmState:
    """Empty registry: no records, no active pools, zero ledger."""
    return FixedFarmState()


def _require_int(value: Any, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    return int(value)


def state_to_dict(state: FixedFarmState) -> dict[str, Any]:
    """Serialize to plain JSON-compatible data. Records are sorted by pool id."""
    return {
        "farms": [
            {
                "pool_id": info.pool_id,
                "allocation_percent": info.allocation_percent,
                "is_active": info.is_active,
            }
            for _pid, info in sorted(state.farms.items())
        ],
        "fixed_pids": list(state.fixed_pids),
        "total_fixed_percentage": state.total_fixed_percentage,
    }


def state_from_dict(d: Mapping[str, Any]) -> FixedFarmState:
    """Deserialize. Raises KeyError on missing fields, TypeError on bad types."""
    farms: dict[int, FixedPercentFarmInfo] = {}
    for entry in d["farms"]:
        pool_id = _require_int(entry["pool_id"], name="pool_id")
        is_active = entry["is_active"]
        if not isinstance(is_active, bool):
            raise TypeError("is_active must be a bool")
        if pool_id in farms:
            raise ValueError(f"duplicate fixed farm record for pid {pool_id}")
        farms[pool_id] = FixedPercentFarmInfo(
            pool_id=pool_id,
            allocation_percent=_require_int(entry["allocation_percent"], name="allocation_percent"),
            is_active=is_active,
        )
    return FixedFarmState(
        farms=farms,
        fixed_pids=tuple(_require_int(p, name="fixed_pids[]") for p in d["fixed_pids"]),
        total_fixed_percentage=_require_int(d["total_fixed_percentage"], name="total_fixed_percentage"),
    )
