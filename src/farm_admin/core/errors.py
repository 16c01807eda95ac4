"""Exception types for the farm admin layer.

Every rejection is surfaced synchronously to the caller as one of these
classes. ``code`` is a stable identifier used in rejection strings
(``StepResult.rejection``) and in audit log records.
"""

from __future__ import annotations


class FarmAdminError(Exception):
    """Base class for every rejection raised by the admin layer."""

    code: str = "farm_admin_error"


class Unauthorized(FarmAdminError):
    """Caller does not hold the role the operation requires."""

    code = "unauthorized"


class InvalidDestination(FarmAdminError):
    """A zero/empty identity was supplied where a real target is required."""

    code = "invalid_destination"


class OutOfRange(FarmAdminError):
    """Pool id is the reserved base pool or does not exist on the farm."""

    code = "out_of_range"


class PidOutOfBounds(FarmAdminError):
    """Pool id in a batch is not below the farm's pool count."""

    code = "pid_out_of_bounds"


class AlreadyActive(FarmAdminError):
    code = "already_active"


class NotActive(FarmAdminError):
    code = "not_active"


class BudgetExceeded(FarmAdminError):
    """The fixed-percentage ledger would leave its allowed range."""

    code = "budget_exceeded"


class LengthMismatch(FarmAdminError):
    code = "length_mismatch"


class MultiplierTooHigh(FarmAdminError):
    code = "multiplier_too_high"


class NoFixedFarms(FarmAdminError):
    code = "no_fixed_farms"


class FixedFarmInvariantError(FarmAdminError):
    """Raised when a registry post-state violates one or more invariants."""

    code = "invariant"

    def __init__(self, violations: list[str]) -> None:
        self.violations = violations
        super().__init__(f"invariant violations: {', '.join(violations)}")


ERRORS_BY_CODE: dict[str, type[FarmAdminError]] = {
    cls.code: cls
    for cls in (
        Unauthorized,
        InvalidDestination,
        OutOfRange,
        PidOutOfBounds,
        AlreadyActive,
        NotActive,
        BudgetExceeded,
        LengthMismatch,
        MultiplierTooHigh,
        NoFixedFarms,
    )
}
