from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

SCENARIO = Path(__file__).resolve().parents[2] / "tools" / "scenarios" / "fixed_farms.yaml"


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_run_scenario_syncs_fixed_pools() -> None:
    import yaml

    from tools.farm_admin_sim import run_scenario

    data = yaml.safe_load(SCENARIO.read_text(encoding="utf-8"))
    gateway = run_scenario(data)

    assert gateway.farm.pool_count() == 11
    assert gateway.fixed_farm_pids() == (1, 5, 10)
    total = gateway.farm.total_weight()
    for pid, pct in ((1, 1000), (5, 500), (10, 250)):
        share = gateway.farm.pool_info(pid).weight * 10_000 // total
        assert abs(share - pct) <= 300


def test_main_json_and_snapshot(tmp_path, capsys) -> None:
    from farm_admin.integration.snapshot import AdminSnapshot
    from tools.farm_admin_sim import main

    out = tmp_path / "snapshot.json"
    assert main([str(SCENARIO), "--json", "--snapshot-out", str(out)]) == 0

    report = json.loads(capsys.readouterr().out)
    assert len(report["pools"]) == 11
    assert [row["pool_id"] for row in report["pools"] if row["is_fixed"]] == [1, 5, 10]

    snapshot = AdminSnapshot.from_json(out.read_text(encoding="utf-8"))
    assert snapshot.data["fixed_farms"]["total_fixed_percentage"] == 1750


def test_main_table(capsys) -> None:
    from tools.farm_admin_sim import main

    assert main([str(SCENARIO)]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0].split()[:3] == ["pid", "weight", "share_bps"]
    assert lines[-1].startswith("total_weight=")


def test_main_rejects_non_mapping(tmp_path) -> None:
    from tools.farm_admin_sim import main

    path = tmp_path / "bad.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")
    assert main([str(path)]) == 2


def test_main_logs_to_stderr(capsys) -> None:
    from tools.farm_admin_sim import main

    assert main([str(SCENARIO), "--json", "--log-level", "info"]) == 0

    captured = capsys.readouterr()
    json.loads(captured.out)
    events = [json.loads(line)["event"] for line in captured.err.splitlines() if line.startswith("{")]
    assert events.count("FixedFarmAdded") == 3
    assert events[-1] == "FixedFarmsSynced"
