#!/usr/bin/env python3
"""
Run a fixed-percentage allocation scenario against an in-memory farm.

Scenario YAML:

    owner: "0x11..."
    farm_admin: "0x22..."
    custody_address: "0x33..."
    farm:
      base_token: "0xba..."
      reward_per_block: 1000000000000000000
      multiplier: 1
    pools:
      - {token: "0xa1...", weight: 100}
    fixed_farms:
      - {pid: 1, percent: 1000}

Pools are added through the gateway, fixed farms registered, then one sync is
run. Prints the per-pool allocation report.
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict, replace
from pathlib import Path
from typing import Any, Mapping, Sequence

import yaml

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT / "src") not in sys.path:
    sys.path.insert(0, str(ROOT / "src"))

from farm_admin.core.governance import GovernanceState
from farm_admin.farm.memory import InMemoryFarm
from farm_admin.integration.audit_log import configure_logging
from farm_admin.integration.config import apply_env_overrides, config_from_dict
from farm_admin.integration.gateway import AdminGateway
from farm_admin.integration.snapshot import snapshot_from_gateway


def run_scenario(data: Mapping[str, Any]) -> AdminGateway:
    config = config_from_dict(data)
    farm_raw = data.get("farm") or {}
    farm = InMemoryFarm(
        controller=config.custody_address,
        base_token=str(farm_raw.get("base_token", "0x" + "ba" * 20)),
        reward_per_block=int(farm_raw.get("reward_per_block", 10**18)),
        multiplier=int(farm_raw.get("multiplier", 1)),
    )
    gateway = AdminGateway(
        farm,
        GovernanceState(owner=config.owner, farm_admin=config.farm_admin),
        custody_address=config.custody_address,
    )

    pools = data.get("pools") or []
    if pools:
        gateway.add_farms(
            config.farm_admin,
            [int(p["weight"]) for p in pools],
            [str(p["token"]) for p in pools],
        )
    for setting in config.fixed_farms:
        gateway.add_fixed_percent_farm(config.farm_admin, setting.pid, setting.percent)
    if config.fixed_farms:
        gateway.sync_fixed_percent_farms(config.farm_admin)
    return gateway


def _print_table(gateway: AdminGateway) -> None:
    print(f"{'pid':>4} {'weight':>12} {'share_bps':>10} {'fixed_bps':>10}  token")
    for row in gateway.allocation_report():
        fixed = str(row.fixed_percent) if row.is_fixed else "-"
        print(f"{row.pool_id:>4} {row.weight:>12} {row.share_bps:>10} {fixed:>10}  {row.token}")
    print(f"total_weight={gateway.farm.total_weight()} "
          f"total_fixed_bps={gateway.total_fixed_percentage()} "
          f"total_share_bps={gateway.total_allocation_share()}")


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("scenario", type=Path, help="scenario YAML file")
    parser.add_argument("--json", action="store_true", help="print the report as JSON")
    parser.add_argument("--snapshot-out", type=Path, default=None, help="write the admin snapshot here")
    parser.add_argument("--log-level", default=None, help="override the scenario's logging.level")
    args = parser.parse_args(argv)

    data = yaml.safe_load(args.scenario.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        print("[farm-admin-sim] scenario must be a mapping", file=sys.stderr)
        return 2
    data = apply_env_overrides(data)
    settings = config_from_dict(data).logging
    if args.log_level:
        settings = replace(settings, level=args.log_level.upper())
    # Audit records go to stderr so stdout stays a clean report.
    configure_logging(settings, stream=sys.stderr)
    gateway = run_scenario(data)

    if args.json:
        report = [asdict(row) for row in gateway.allocation_report()]
        print(json.dumps({"pools": report, "total_weight": gateway.farm.total_weight()}, indent=2))
    else:
        _print_table(gateway)

    if args.snapshot_out is not None:
        snapshot = snapshot_from_gateway(gateway)
        args.snapshot_out.write_text(snapshot.to_json(), encoding="utf-8")
        print(f"[farm-admin-sim] snapshot {snapshot.commitment_hex()} -> {args.snapshot_out}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
