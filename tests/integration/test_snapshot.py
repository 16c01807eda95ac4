"""Tests for farm_admin/integration/snapshot.py — admin state snapshots."""

import json

import pytest

from farm_admin.core.errors import FarmAdminError, FixedFarmInvariantError
from farm_admin.core.governance import GovernanceState, PendingHandoff
from farm_admin.farm import InMemoryFarm
from farm_admin.integration.gateway import AdminGateway
from farm_admin.integration.snapshot import (
    ADMIN_SNAPSHOT_VERSION,
    AdminSnapshot,
    gateway_from_snapshot,
    snapshot_from_gateway,
)

OWNER = "0x" + "01" * 20
FARM_ADMIN = "0x" + "02" * 20
ALICE = "0x" + "0a" * 20
CUSTODY = "0x" + "cc" * 20
TOKEN = "0x" + "77" * 20


def _farm() -> InMemoryFarm:
    farm = InMemoryFarm(controller=CUSTODY, base_token="0x" + "b0" * 20)
    for i in range(1, 6):
        farm.add_pool(i * 100, "0x" + f"{i:040x}", False)
    return farm


def _gateway() -> AdminGateway:
    gw = AdminGateway(
        _farm(),
        GovernanceState(owner=OWNER, farm_admin=FARM_ADMIN),
        custody_address=CUSTODY,
    )
    gw.add_fixed_percent_farm(FARM_ADMIN, 2, 1000)
    gw.add_fixed_percent_farm(FARM_ADMIN, 4, 300)
    gw.set_pending_farm_owner(OWNER, ALICE)
    gw.receive_tokens(TOKEN, 42)
    return gw


def test_snapshot_contents():
    snap = snapshot_from_gateway(_gateway())
    assert snap.version == ADMIN_SNAPSHOT_VERSION
    assert snap.data["governance"] == {
        "owner": OWNER,
        "farm_admin": FARM_ADMIN,
        "pending_farm_owner": ALICE,
    }
    assert snap.data["fixed_farms"]["fixed_pids"] == [2, 4]
    assert snap.data["fixed_farms"]["total_fixed_percentage"] == 1300
    assert snap.data["custody"] == [{"holder": CUSTODY, "token": TOKEN, "amount": 42}]


def test_restore_from_json():
    gw = _gateway()
    snap = snapshot_from_gateway(gw)
    restored = gateway_from_snapshot(AdminSnapshot.from_json(snap.to_json()), _farm())
    assert restored.governance.control_handoff == PendingHandoff(target=ALICE)
    assert restored.fixed_state == gw.fixed_state
    assert restored.ledger == gw.ledger
    assert restored.max_multiplier == gw.max_multiplier
    assert snapshot_from_gateway(restored).commitment_hex() == snap.commitment_hex()


def test_commitment_tracks_state():
    gw = _gateway()
    before = snapshot_from_gateway(gw)
    gw.set_fixed_percent_farm(FARM_ADMIN, 4, 0)
    after = snapshot_from_gateway(gw)
    assert before.commitment_hex() != after.commitment_hex()
    assert before.commitment_hex().startswith("0x")
    assert len(before.commitment_bytes()) == 32


def test_unsupported_version():
    text = json.dumps({"version": 99, "data": {}})
    with pytest.raises(ValueError):
        AdminSnapshot.from_json(text)


def test_restore_rejects_broken_registry():
    snap = snapshot_from_gateway(_gateway())
    data = json.loads(snap.to_json())["data"]
    data["fixed_farms"]["total_fixed_percentage"] = 5000
    with pytest.raises(FixedFarmInvariantError):
        gateway_from_snapshot(AdminSnapshot(version=ADMIN_SNAPSHOT_VERSION, data=data), _farm())


@pytest.mark.parametrize("pid, pct", [(1, 100.5), (True, 100)])
def test_malformed_registration_never_reaches_snapshot(pid, pct):
    gw = _gateway()
    before = snapshot_from_gateway(gw)
    with pytest.raises(FarmAdminError):
        gw.add_fixed_percent_farm(FARM_ADMIN, pid, pct)
    after = snapshot_from_gateway(gw)
    assert after.commitment_hex() == before.commitment_hex()
    restored = gateway_from_snapshot(AdminSnapshot.from_json(after.to_json()), _farm())
    assert restored.fixed_farm_pids() == (2, 4)
