"""
Core farm admin algorithms
"""

from .allocation import FixedWeight, SyncPlan, compute_fixed_weights, plan_sync, scale_factor, synchronize
from .errors import (
    AlreadyActive,
    BudgetExceeded,
    FarmAdminError,
    FixedFarmInvariantError,
    InvalidDestination,
    LengthMismatch,
    MultiplierTooHigh,
    NoFixedFarms,
    NotActive,
    OutOfRange,
    PidOutOfBounds,
    Unauthorized,
)
from .governance import GovernanceState, NoHandoff, PendingHandoff, Role

__all__ = [
    "FixedWeight",
    "SyncPlan",
    "compute_fixed_weights",
    "plan_sync",
    "scale_factor",
    "synchronize",
    "AlreadyActive",
    "BudgetExceeded",
    "FarmAdminError",
    "FixedFarmInvariantError",
    "InvalidDestination",
    "LengthMismatch",
    "MultiplierTooHigh",
    "NoFixedFarms",
    "NotActive",
    "OutOfRange",
    "PidOutOfBounds",
    "Unauthorized",
    "GovernanceState",
    "NoHandoff",
    "PendingHandoff",
    "Role",
]
