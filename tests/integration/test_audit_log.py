"""Tests for farm_admin/integration/audit_log.py and the gateway's audit records."""

import io
import json
import logging

import pytest

from farm_admin.core.errors import Unauthorized
from farm_admin.core.governance import GovernanceState
from farm_admin.farm import InMemoryFarm
from farm_admin.integration.audit_log import JsonFormatter, configure_logging, log_event
from farm_admin.integration.config import LoggingSettings
from farm_admin.integration.gateway import COMPONENT, AdminGateway

OWNER = "0x" + "01" * 20
FARM_ADMIN = "0x" + "02" * 20
CUSTODY = "0x" + "cc" * 20


def _gateway() -> AdminGateway:
    farm = InMemoryFarm(controller=CUSTODY, base_token="0x" + "b0" * 20)
    return AdminGateway(farm, GovernanceState(owner=OWNER, farm_admin=FARM_ADMIN), custody_address=CUSTODY)


def test_formatter_emits_fields():
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "hello %s", ("world",), None)
    record.component = "farm_admin.test"
    record.event = "Tested"
    record.fields = {"pid": 3}
    out = json.loads(JsonFormatter().format(record))
    assert out["msg"] == "hello world"
    assert out["lvl"] == "INFO"
    assert out["component"] == "farm_admin.test"
    assert out["event"] == "Tested"
    assert out["pid"] == 3
    assert out["time"].endswith("Z")


def test_log_event_record(caplog):
    with caplog.at_level(logging.INFO, logger="farm_admin.test"):
        log_event("farm_admin.test", "Tested", "ok", pid=7)
    (record,) = caplog.records
    assert record.event == "Tested"
    assert record.fields == {"pid": 7}


def test_gateway_logs_accepted_and_rejected(caplog):
    gw = _gateway()
    with caplog.at_level(logging.INFO, logger=COMPONENT):
        gw.update_multiplier(OWNER, 2)
        with pytest.raises(Unauthorized):
            gw.update_multiplier(FARM_ADMIN, 3)
    accepted, rejected = caplog.records
    assert accepted.levelno == logging.INFO
    assert accepted.event == "MultiplierUpdated"
    assert accepted.fields["multiplier"] == 2
    assert rejected.levelno == logging.WARNING
    assert rejected.fields["error"] == "unauthorized"
    assert rejected.fields["caller"] == FARM_ADMIN


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_configure_logging_from_settings(tmp_path, restore_root_logger):
    stream = io.StringIO()
    log_file = tmp_path / "logs" / "audit.log"
    handlers = configure_logging(
        LoggingSettings(level="debug", file=str(log_file), retention_days=3), stream=stream
    )
    assert restore_root_logger.level == logging.DEBUG
    assert handlers[1].backupCount == 3

    log_event("farm_admin.test", "Tested", "written", pid=4)
    for handler in handlers:
        handler.flush()

    line = json.loads(stream.getvalue().splitlines()[-1])
    assert line["event"] == "Tested"
    assert line["pid"] == 4
    assert json.loads(log_file.read_text(encoding="utf-8").splitlines()[-1]) == line


def test_configure_logging_defaults_to_stdout_only(restore_root_logger):
    handlers = configure_logging()
    assert len(handlers) == 1
    assert restore_root_logger.level == logging.INFO


def test_sync_returns_plan_and_logs_once(caplog):
    gw = _gateway()
    gw.add_farms(FARM_ADMIN, [100, 200], ["0x" + "a1" * 20, "0x" + "a2" * 20])
    gw.add_fixed_percent_farm(FARM_ADMIN, 1, 1000)
    with caplog.at_level(logging.INFO, logger=COMPONENT):
        caplog.clear()
        plan = gw.sync_fixed_percent_farms(FARM_ADMIN)
    assert plan is not None
    assert [w.pool_id for w in plan.weights] == [1]
    assert gw.farm.pool_info(1).weight == plan.weights[0].weight
    (record,) = caplog.records
    assert record.event == "FixedFarmsSynced"
    assert record.levelno == logging.INFO
