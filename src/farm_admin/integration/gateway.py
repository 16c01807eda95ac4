"""
Role-gated command surface over a reward distributor.

This is the imperative shell around the functional core:
- Checks the caller's role against `GovernanceState`.
- Validates batch arguments (array lengths, pool id bounds) before touching the farm.
- Applies pool mutations through a `FarmAdapter`, then optionally re-synchronizes
  fixed-percentage pools.

Every command is atomic: on any error the gateway's own state is restored and,
when the farm supports `checkpoint`/`rollback`, so is the farm's. Expensive
steps (recompute-all-pools before a batch, fixed-percentage sync after it) are
never inferred; callers opt in per call.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum, unique
from typing import Dict, Iterator, Optional, Sequence, Tuple

from ..core.allocation import SyncPlan, synchronize
from ..core.errors import LengthMismatch, MultiplierTooHigh, NoFixedFarms, PidOutOfBounds
from ..core.fixed_farms import registry
from ..core.fixed_farms.math import PRECISION
from ..core.fixed_farms.types import FixedFarmState, FixedPercentFarmInfo
from ..core.governance import (
    GovernanceState,
    PendingHandoff,
    Role,
    begin_handoff,
    complete_handoff,
    require_destination,
    require_role,
    transfer_role,
)
from ..farm.adapter import FarmAdapter, SupportsCheckpoint
from ..state.custody import TokenLedger
from .audit_log import log_event
from .config import AdminConfig


COMPONENT = "farm_admin.gateway"
MAX_BONUS_MULTIPLIER = 4


@unique
class GatewayEvent(Enum):
    OWNERSHIP_TRANSFERRED = "OwnershipTransferred"
    FARM_ADMIN_TRANSFERRED = "FarmAdminTransferred"
    MULTIPLIER_UPDATED = "MultiplierUpdated"
    PENDING_FARM_OWNER_SET = "PendingFarmOwnerSet"
    FARM_OWNERSHIP_ACCEPTED = "FarmOwnershipAccepted"
    TOKENS_RECEIVED = "TokensReceived"
    TOKENS_SWEPT = "TokensSwept"
    FARMS_ADDED = "FarmsAdded"
    FARMS_SET = "FarmsSet"
    FIXED_FARM_ADDED = "FixedFarmAdded"
    FIXED_FARM_SET = "FixedFarmSet"
    FIXED_FARMS_SYNCED = "FixedFarmsSynced"
    POOLS_UPDATED = "PoolsUpdated"


@dataclass(frozen=True)
class PoolAllocation:
    pool_id: int
    token: str
    weight: int
    share_bps: int
    fixed_percent: int
    is_fixed: bool


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class AdminGateway:
    """
    Admin proxy for one farm.

    Args:
        farm: Distributor the commands are applied to.
        governance: Owner / farm-admin identities and the farm handoff slot.
        custody_address: Identity under which swept tokens are held.
        fixed_farms: Registry state to resume from (defaults to empty).
        ledger: Custody balances to resume from (defaults to empty).
        max_multiplier: Ceiling for `update_multiplier`.
    """

    def __init__(
        self,
        farm: FarmAdapter,
        governance: GovernanceState,
        *,
        custody_address: str,
        fixed_farms: Optional[FixedFarmState] = None,
        ledger: Optional[TokenLedger] = None,
        max_multiplier: int = MAX_BONUS_MULTIPLIER,
    ):
        self.farm = farm
        self.custody_address = require_destination(custody_address, name="custody_address")
        self.max_multiplier = max_multiplier
        self._governance = governance
        self._fixed = fixed_farms if fixed_farms is not None else FixedFarmState()
        self._ledger = ledger if ledger is not None else TokenLedger()

    @classmethod
    def from_config(cls, config: AdminConfig, farm: FarmAdapter) -> "AdminGateway":
        """Build a gateway and register the configured fixed farms (no sync)."""
        gateway = cls(
            farm,
            GovernanceState(owner=config.owner, farm_admin=config.farm_admin),
            custody_address=config.custody_address,
        )
        for setting in config.fixed_farms:
            gateway.add_fixed_percent_farm(config.farm_admin, setting.pid, setting.percent)
        return gateway

    @property
    def governance(self) -> GovernanceState:
        return self._governance

    @property
    def fixed_state(self) -> FixedFarmState:
        return self._fixed

    @property
    def ledger(self) -> TokenLedger:
        return self._ledger

    # -- Command wrapper ---------------------------------------------------------

    @contextmanager
    def _command(self, event: GatewayEvent, caller: Optional[str], **fields) -> Iterator[None]:
        saved = (self._governance, self._fixed, self._ledger.copy())
        token = self.farm.checkpoint() if isinstance(self.farm, SupportsCheckpoint) else None
        try:
            yield
        except Exception as exc:
            self._governance, self._fixed, self._ledger = saved
            if token is not None:
                self.farm.rollback(token)
            log_event(
                COMPONENT,
                event.value,
                "command rejected",
                level=logging.WARNING,
                caller=caller,
                error=getattr(exc, "code", type(exc).__name__),
                reason=str(exc),
                **fields,
            )
            raise
        log_event(COMPONENT, event.value, "command accepted", caller=caller, **fields)

    # -- Owner -------------------------------------------------------------------

    def transfer_ownership(self, caller: str, new_owner: str) -> None:
        with self._command(GatewayEvent.OWNERSHIP_TRANSFERRED, caller, new_owner=new_owner):
            require_role(self._governance, caller, Role.OWNER)
            self._governance = transfer_role(self._governance, Role.OWNER, new_owner)

    def update_multiplier(self, caller: str, value: int) -> None:
        with self._command(GatewayEvent.MULTIPLIER_UPDATED, caller, multiplier=value):
            require_role(self._governance, caller, Role.OWNER)
            if value > self.max_multiplier:
                raise MultiplierTooHigh(f"multiplier greater than max ({self.max_multiplier})")
            self.farm.set_reward_multiplier(value)

    def set_pending_farm_owner(self, caller: str, target: str) -> None:
        with self._command(GatewayEvent.PENDING_FARM_OWNER_SET, caller, target=target):
            require_role(self._governance, caller, Role.OWNER)
            self._governance = begin_handoff(self._governance, target)

    def accept_farm_ownership(self, caller: str) -> None:
        """Complete the handoff; callable only by the pending target."""
        with self._command(GatewayEvent.FARM_OWNERSHIP_ACCEPTED, caller):
            self._governance, new_controller = complete_handoff(self._governance, caller)
            self.farm.transfer_control(new_controller)

    def receive_tokens(self, token: str, amount: int) -> None:
        """Record tokens arriving in the gateway's custody."""
        with self._command(GatewayEvent.TOKENS_RECEIVED, None, token=token, amount=amount):
            self._ledger.credit(self.custody_address, token, amount)

    def sweep_tokens(self, caller: str, tokens: Sequence[str], to: str) -> Dict[str, int]:
        """Move the full custody balance of each token to `to`. Returns amounts moved."""
        with self._command(GatewayEvent.TOKENS_SWEPT, caller, tokens=list(tokens), to=to):
            require_role(self._governance, caller, Role.OWNER)
            require_destination(to, name="sweep destination")
            swept: Dict[str, int] = {}
            for token in tokens:
                amount = self._ledger.get(self.custody_address, token)
                if amount:
                    self._ledger.transfer(self.custody_address, to, token, amount)
                swept[token] = swept.get(token, 0) + amount
        return swept

    # -- Farm admin ----------------------------------------------------------------

    def transfer_farm_admin(self, caller: str, new_admin: str) -> None:
        with self._command(GatewayEvent.FARM_ADMIN_TRANSFERRED, caller, new_admin=new_admin):
            require_role(self._governance, caller, Role.FARM_ADMIN)
            self._governance = transfer_role(self._governance, Role.FARM_ADMIN, new_admin)

    def add_farms(
        self,
        caller: str,
        weights: Sequence[int],
        tokens: Sequence[str],
        with_mass_update: bool = False,
        with_sync: bool = False,
    ) -> Optional[SyncPlan]:
        plan = None
        with self._command(
            GatewayEvent.FARMS_ADDED, caller,
            weights=list(weights), tokens=list(tokens),
            with_mass_update=with_mass_update, with_sync=with_sync,
        ):
            require_role(self._governance, caller, Role.FARM_ADMIN)
            if len(weights) != len(tokens):
                raise LengthMismatch("weights and tokens must have the same length")
            if with_mass_update:
                self.farm.recompute_all_pools()
            for weight, token in zip(weights, tokens):
                self.farm.add_pool(weight, token, False)
            if with_sync:
                plan = synchronize(self.farm, self._fixed)
        return plan

    def set_farms(
        self,
        caller: str,
        pids: Sequence[int],
        weights: Sequence[int],
        with_mass_update: bool = False,
        with_sync: bool = False,
    ) -> Optional[SyncPlan]:
        plan = None
        with self._command(
            GatewayEvent.FARMS_SET, caller,
            pids=list(pids), weights=list(weights),
            with_mass_update=with_mass_update, with_sync=with_sync,
        ):
            require_role(self._governance, caller, Role.FARM_ADMIN)
            if len(pids) != len(weights):
                raise LengthMismatch("pids and weights must have the same length")
            self._require_pids(pids)
            if with_mass_update:
                self.farm.recompute_all_pools()
            for pid, weight in zip(pids, weights):
                self.farm.set_pool_weight(pid, weight, False)
            if with_sync:
                plan = synchronize(self.farm, self._fixed)
        return plan

    def add_fixed_percent_farm(
        self,
        caller: str,
        pid: int,
        percent: int,
        with_mass_update: bool = False,
        with_sync: bool = False,
    ) -> Optional[SyncPlan]:
        plan = None
        with self._command(
            GatewayEvent.FIXED_FARM_ADDED, caller,
            pid=pid, percent=percent,
            with_mass_update=with_mass_update, with_sync=with_sync,
        ):
            require_role(self._governance, caller, Role.FARM_ADMIN)
            self._fixed = registry.register(self._fixed, pid, percent, pool_count=self.farm.pool_count())
            if with_mass_update:
                self.farm.recompute_all_pools()
            if with_sync:
                plan = synchronize(self.farm, self._fixed)
        return plan

    def set_fixed_percent_farm(
        self,
        caller: str,
        pid: int,
        percent: int,
        with_mass_update: bool = False,
        with_sync: bool = False,
    ) -> Optional[SyncPlan]:
        """Change a fixed pool's percentage; 0 deactivates it (its farm weight is left as is)."""
        plan = None
        with self._command(
            GatewayEvent.FIXED_FARM_SET, caller,
            pid=pid, percent=percent,
            with_mass_update=with_mass_update, with_sync=with_sync,
        ):
            require_role(self._governance, caller, Role.FARM_ADMIN)
            self._fixed = registry.update(self._fixed, pid, percent, pool_count=self.farm.pool_count())
            if with_mass_update:
                self.farm.recompute_all_pools()
            if with_sync:
                plan = synchronize(self.farm, self._fixed)
        return plan

    def sync_fixed_percent_farms(self, caller: str) -> Optional[SyncPlan]:
        """Write fixed pool weights now. Raises `NoFixedFarms` when none are registered."""
        with self._command(GatewayEvent.FIXED_FARMS_SYNCED, caller):
            require_role(self._governance, caller, Role.FARM_ADMIN)
            if not self._fixed.fixed_pids:
                raise NoFixedFarms("no fixed farms added")
            return synchronize(self.farm, self._fixed)

    # -- Public --------------------------------------------------------------------

    def update_pools(self, pids: Sequence[int]) -> None:
        """Recompute accrued rewards for an explicit subset of pools."""
        with self._command(GatewayEvent.POOLS_UPDATED, None, pids=list(pids)):
            self._require_pids(pids)
            for pid in pids:
                self.farm.recompute_pool(pid)

    # -- Queries -------------------------------------------------------------------

    def fixed_farm_count(self) -> int:
        return registry.fixed_farm_count(self._fixed)

    def get_fixed_farm(self, pid: int) -> FixedPercentFarmInfo:
        return registry.get_fixed_farm(self._fixed, pid)

    def fixed_farm_pids(self) -> Tuple[int, ...]:
        return self._fixed.fixed_pids

    def total_fixed_percentage(self) -> int:
        return self._fixed.total_fixed_percentage

    def total_allocation_share(self) -> int:
        return registry.total_allocation_share(self._fixed)

    def pending_farm_owner(self) -> Optional[str]:
        handoff = self._governance.control_handoff
        return handoff.target if isinstance(handoff, PendingHandoff) else None

    def allocation_report(self) -> Tuple[PoolAllocation, ...]:
        total = self.farm.total_weight()
        rows = []
        for pid in range(self.farm.pool_count()):
            info = self.farm.pool_info(pid)
            fixed = registry.get_fixed_farm(self._fixed, pid)
            rows.append(
                PoolAllocation(
                    pool_id=pid,
                    token=info.token,
                    weight=info.weight,
                    share_bps=info.weight * PRECISION // total if total else 0,
                    fixed_percent=fixed.allocation_percent,
                    is_fixed=fixed.is_active,
                )
            )
        return tuple(rows)

    # -- Internals -----------------------------------------------------------------

    def _require_pids(self, pids: Sequence[int]) -> None:
        count = self.farm.pool_count()
        for pid in pids:
            if not _is_int(pid) or pid < 0 or pid >= count:
                raise PidOutOfBounds(f"pid {pid!r} is out of bounds (pool count {count})")
