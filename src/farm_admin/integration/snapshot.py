"""
Admin state snapshot encoding.

Goals:
- Deterministic JSON serialization of everything the gateway must keep
  between calls (roles, handoff slot, fixed-farm registry, custody balances).
- Round-trippable into an `AdminGateway` bound to a farm.
- Explicit versioning.

The farm's own state is not part of the snapshot; it lives with the farm.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from typing import Any, Dict, Mapping

from ..core.fixed_farms.invariants import check_all
from ..core.fixed_farms.state import state_from_dict, state_to_dict
from ..core.errors import FixedFarmInvariantError
from ..core.governance import GovernanceState, NoHandoff, PendingHandoff
from ..farm.adapter import FarmAdapter
from ..state.canonical import canonical_json_bytes, domain_sep_bytes, sha256_hex
from ..state.custody import TokenLedger
from .gateway import AdminGateway


ADMIN_SNAPSHOT_VERSION = 1


def _require_str(value: Any, *, name: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a string")
    if not value:
        raise ValueError(f"{name} must be non-empty")
    return value


def _require_int(value: Any, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0:
        raise ValueError(f"{name} must be non-negative")
    return int(value)


@dataclass(frozen=True)
class AdminSnapshot:
    """
    Deterministic, versioned snapshot of gateway state.

    The commitment is *not* included inside `data` to avoid self-reference.
    """

    version: int
    data: Dict[str, Any]

    def canonical_bytes(self) -> bytes:
        return canonical_json_bytes(self.data)

    def commitment_bytes(self) -> bytes:
        payload = domain_sep_bytes("admin_snapshot", version=self.version) + self.canonical_bytes()
        return hashlib.sha256(payload).digest()

    def commitment_hex(self) -> str:
        payload = domain_sep_bytes("admin_snapshot", version=self.version) + self.canonical_bytes()
        return sha256_hex(payload)

    def to_json(self) -> str:
        return json.dumps({"version": self.version, "data": self.data}, sort_keys=True)

    @classmethod
    def from_json(cls, text: str) -> "AdminSnapshot":
        obj = json.loads(text)
        if not isinstance(obj, Mapping):
            raise TypeError("snapshot JSON must be an object")
        version = obj.get("version")
        if version != ADMIN_SNAPSHOT_VERSION:
            raise ValueError(f"unsupported snapshot version: {version!r}")
        data = obj.get("data")
        if not isinstance(data, dict):
            raise TypeError("snapshot data must be an object")
        return cls(version=version, data=data)


def snapshot_from_gateway(gateway: AdminGateway) -> AdminSnapshot:
    gov = gateway.governance
    handoff = gov.control_handoff
    custody = [
        {"holder": holder, "token": token, "amount": int(amount)}
        for (holder, token), amount in gateway.ledger.get_all_balances().items()
    ]
    custody.sort(key=lambda e: (e["holder"], e["token"]))

    data = {
        "governance": {
            "owner": gov.owner,
            "farm_admin": gov.farm_admin,
            "pending_farm_owner": handoff.target if isinstance(handoff, PendingHandoff) else None,
        },
        "custody_address": gateway.custody_address,
        "max_multiplier": gateway.max_multiplier,
        "fixed_farms": state_to_dict(gateway.fixed_state),
        "custody": custody,
    }
    return AdminSnapshot(version=ADMIN_SNAPSHOT_VERSION, data=data)


def gateway_from_snapshot(snapshot: AdminSnapshot, farm: FarmAdapter) -> AdminGateway:
    if snapshot.version != ADMIN_SNAPSHOT_VERSION:
        raise ValueError(f"unsupported snapshot version: {snapshot.version!r}")
    data = snapshot.data

    gov_raw = data["governance"]
    pending = gov_raw.get("pending_farm_owner")
    handoff = NoHandoff() if pending is None else PendingHandoff(
        target=_require_str(pending, name="pending_farm_owner")
    )
    governance = GovernanceState(
        owner=_require_str(gov_raw["owner"], name="owner"),
        farm_admin=_require_str(gov_raw["farm_admin"], name="farm_admin"),
        control_handoff=handoff,
    )

    fixed = state_from_dict(data["fixed_farms"])
    violations = check_all(fixed)
    if violations:
        raise FixedFarmInvariantError(violations)

    ledger = TokenLedger()
    for entry in data.get("custody", []):
        ledger.set(
            _require_str(entry["holder"], name="holder"),
            _require_str(entry["token"], name="token"),
            _require_int(entry["amount"], name="amount"),
        )

    return AdminGateway(
        farm,
        governance,
        custody_address=_require_str(data["custody_address"], name="custody_address"),
        fixed_farms=fixed,
        ledger=ledger,
        max_multiplier=_require_int(data["max_multiplier"], name="max_multiplier"),
    )
