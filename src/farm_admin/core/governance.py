"""
Role state for the farm admin layer.

Two roles gate every privileged command:
- OWNER: multiplier, token sweep, ownership handoffs (highest trust).
- FARM_ADMIN: pool weights and fixed-percentage records.

Transferring control of the farm away from the admin layer is two-phase: the
owner names a target (`PendingHandoff`), and only that target can complete the
transfer, which returns the slot to `NoHandoff`.

All transitions are pure and return a new `GovernanceState`.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum, unique
from typing import Tuple, Union

from .errors import InvalidDestination, Unauthorized


ZERO_ADDRESS = "0x" + "00" * 20


def is_zero_address(identity: object) -> bool:
    """True for None, empty strings and all-zero hex identities."""
    if identity is None:
        return True
    if not isinstance(identity, str):
        return False
    s = identity.strip()
    if s[:2] in ("0x", "0X"):
        s = s[2:]
    return s == "" or set(s) == {"0"}


def require_destination(identity: object, *, name: str) -> str:
    if not isinstance(identity, str) or is_zero_address(identity):
        raise InvalidDestination(f"{name} must be a non-zero identity")
    return identity


@unique
class Role(Enum):
    OWNER = "owner"
    FARM_ADMIN = "farm_admin"


@dataclass(frozen=True)
class NoHandoff:
    pass


@dataclass(frozen=True)
class PendingHandoff:
    target: str


ControlHandoff = Union[NoHandoff, PendingHandoff]


@dataclass(frozen=True)
class GovernanceState:
    owner: str
    farm_admin: str
    control_handoff: ControlHandoff = NoHandoff()

    def __post_init__(self) -> None:
        require_destination(self.owner, name="owner")
        require_destination(self.farm_admin, name="farm_admin")
        if isinstance(self.control_handoff, PendingHandoff):
            require_destination(self.control_handoff.target, name="pending farm owner")


def holder_of(state: GovernanceState, role: Role) -> str:
    if role is Role.OWNER:
        return state.owner
    return state.farm_admin


def require_role(state: GovernanceState, caller: str, role: Role) -> None:
    if caller != holder_of(state, role):
        raise Unauthorized(f"must be called by {role.value}")


def transfer_role(state: GovernanceState, role: Role, new_holder: str) -> GovernanceState:
    new_holder = require_destination(new_holder, name=f"new {role.value}")
    if role is Role.OWNER:
        return replace(state, owner=new_holder)
    return replace(state, farm_admin=new_holder)


def begin_handoff(state: GovernanceState, target: str) -> GovernanceState:
    target = require_destination(target, name="pending farm owner")
    return replace(state, control_handoff=PendingHandoff(target=target))


def complete_handoff(state: GovernanceState, caller: str) -> Tuple[GovernanceState, str]:
    """Return the cleared state and the new farm controller."""
    handoff = state.control_handoff
    if not isinstance(handoff, PendingHandoff) or caller != handoff.target:
        raise Unauthorized("must be called by the pending farm owner")
    return replace(state, control_handoff=NoHandoff()), handoff.target
