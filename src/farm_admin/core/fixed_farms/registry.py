"""Dispatch-table engine for the fixed-farm registry.

``step(state, params, pool_count=...)`` is the single entry point. It:

1. Rejects non-integer pool ids and percentages.
2. Dispatches to the correct guard / update functions.
3. Checks all invariants on the post-state.
4. Returns a ``StepResult`` (accepted or rejected with reason).

``pool_count`` is the farm's current number of pools; it bounds which pool ids
can be registered. The registry never reads the farm itself.
"""

from __future__ import annotations

from typing import Callable

from ..errors import ERRORS_BY_CODE, FarmAdminError, FixedFarmInvariantError
from .guards import guard_register, guard_update
from .invariants import check_all
from .math import total_allocation_share as _share
from .types import Action, ActionParams, Event, FixedFarmState, FixedPercentFarmInfo, StepResult
from .updates import apply_register, apply_update

GuardFn = Callable[[FixedFarmState, ActionParams, int], "str | None"]
UpdateFn = Callable[[FixedFarmState, ActionParams], FixedFarmState]

_DISPATCH: dict[Action, tuple[GuardFn, UpdateFn]] = {
    Action.REGISTER: (guard_register, apply_register),
    Action.UPDATE: (guard_update, apply_update),
}

# Integer-typed fields and the rejection code reported when one is malformed.
_PARAM_CODES: tuple[tuple[str, str], ...] = (
    ("pool_id", "out_of_range"),
    ("percent", "budget_exceeded"),
)


def _validate_params(params: ActionParams) -> str | None:
    """Check parameter types. Returns rejection reason or None."""
    for field, code in _PARAM_CODES:
        val = getattr(params, field)
        if not isinstance(val, int) or isinstance(val, bool):
            return f"{code}:{field} must be an int, got {type(val).__name__}"
    return None


def _event_for(params: ActionParams) -> Event:
    if params.action is Action.REGISTER:
        return Event.FIXED_FARM_ADDED
    if params.percent == 0:
        return Event.FIXED_FARM_REMOVED
    return Event.FIXED_FARM_UPDATED


def step(state: FixedFarmState, params: ActionParams, *, pool_count: int) -> StepResult:
    """Execute one registry action against the given state.

    Returns ``StepResult`` with ``accepted=True`` on success,
    or ``accepted=False`` with a ``rejection`` reason string.
    """
    entry = _DISPATCH.get(params.action)
    if entry is None:
        return StepResult(accepted=False, rejection=f"unknown_action:{params.action}")

    domain_err = _validate_params(params)
    if domain_err is not None:
        return StepResult(accepted=False, rejection=domain_err)

    guard_fn, update_fn = entry

    rejection = guard_fn(state, params, pool_count)
    if rejection is not None:
        return StepResult(accepted=False, rejection=rejection)

    new_state = update_fn(state, params)

    violations = check_all(new_state)
    if violations:
        return StepResult(
            accepted=False,
            rejection=f"invariant:{','.join(violations)}",
        )

    return StepResult(accepted=True, state=new_state, event=_event_for(params))


def step_or_raise(state: FixedFarmState, params: ActionParams, *, pool_count: int) -> StepResult:
    """Like ``step()`` but raises on rejection instead of returning a result.

    Raises:
        OutOfRange: Reserved base pool or pid not on the farm.
        AlreadyActive / NotActive: Record state does not match the action.
        BudgetExceeded: Percentage ledger would leave its allowed range.
        FixedFarmInvariantError: Post-state violates one or more invariants.
    """
    result = step(state, params, pool_count=pool_count)
    if result.accepted:
        return result

    reason = result.rejection or ""
    code, _, detail = reason.partition(":")
    if code == FixedFarmInvariantError.code:
        raise FixedFarmInvariantError(detail.split(","))
    error_cls = ERRORS_BY_CODE.get(code, FarmAdminError)
    raise error_cls(detail or reason)


def register(state: FixedFarmState, pool_id: int, percent: int, *, pool_count: int) -> FixedFarmState:
    params = ActionParams(action=Action.REGISTER, pool_id=pool_id, percent=percent)
    return step_or_raise(state, params, pool_count=pool_count).state  # type: ignore[return-value]


def update(state: FixedFarmState, pool_id: int, percent: int, *, pool_count: int) -> FixedFarmState:
    params = ActionParams(action=Action.UPDATE, pool_id=pool_id, percent=percent)
    return step_or_raise(state, params, pool_count=pool_count).state  # type: ignore[return-value]


# -- Queries -----------------------------------------------------------------

def get_fixed_farm(state: FixedFarmState, pool_id: int) -> FixedPercentFarmInfo:
    """Stored record for ``pool_id``; unknown pools read back as an inactive zero record."""
    info = state.farms.get(pool_id)
    if info is None:
        return FixedPercentFarmInfo(pool_id=pool_id)
    return info


def is_active(state: FixedFarmState, pool_id: int) -> bool:
    return get_fixed_farm(state, pool_id).is_active


def percent_of(state: FixedFarmState, pool_id: int) -> int:
    return get_fixed_farm(state, pool_id).allocation_percent


def fixed_farm_count(state: FixedFarmState) -> int:
    return len(state.fixed_pids)


def total_allocation_share(state: FixedFarmState) -> int:
    return _share(state.total_fixed_percentage)
