"""
Admin layer configuration.

Loads a YAML document into a frozen `AdminConfig`. Environment variables of
the form `FARM_ADMIN__SECTION__KEY=value` override keys after loading
(`FARM_ADMIN__LOGGING__LEVEL=DEBUG` sets `logging.level`).

Example:

    owner: "0x1111111111111111111111111111111111111111"
    farm_admin: "0x2222222222222222222222222222222222222222"
    custody_address: "0x3333333333333333333333333333333333333333"
    fixed_farms:
      - {pid: 1, percent: 1000}
    logging:
      level: INFO
      file: logs/farm_admin.log
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple

import yaml


ENV_PREFIX = "FARM_ADMIN__"


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class FixedFarmSetting:
    pid: int
    percent: int


@dataclass(frozen=True)
class LoggingSettings:
    level: str = "INFO"
    file: Optional[str] = None
    retention_days: int = 14


@dataclass(frozen=True)
class AdminConfig:
    owner: str
    farm_admin: str
    custody_address: str
    fixed_farms: Tuple[FixedFarmSetting, ...] = ()
    logging: LoggingSettings = LoggingSettings()


def _parse_scalar(raw: str) -> Any:
    if raw.lower() in ("true", "false"):
        return raw.lower() == "true"
    try:
        return int(raw)
    except ValueError:
        return raw


def apply_env_overrides(data: Mapping[str, Any], environ: Optional[Mapping[str, str]] = None) -> dict:
    env = os.environ if environ is None else environ
    out = copy.deepcopy(dict(data))
    for key, raw in env.items():
        if not key.startswith(ENV_PREFIX):
            continue
        path = [p.lower() for p in key[len(ENV_PREFIX):].split("__") if p]
        if not path:
            continue
        cur = out
        for part in path[:-1]:
            nxt = cur.get(part)
            if not isinstance(nxt, dict):
                nxt = {}
                cur[part] = nxt
            cur = nxt
        cur[path[-1]] = _parse_scalar(raw)
    return out


def _require_identity(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"config key {key!r} must be a non-empty string")
    return value.strip()


def _require_int(value: Any, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise ConfigError(f"{name} must be an int")
    return value


def config_from_dict(data: Mapping[str, Any]) -> AdminConfig:
    if not isinstance(data, Mapping):
        raise ConfigError("config must be a mapping")

    fixed_raw = data.get("fixed_farms") or []
    if not isinstance(fixed_raw, list):
        raise ConfigError("fixed_farms must be a list")
    fixed = []
    for i, entry in enumerate(fixed_raw):
        if not isinstance(entry, Mapping):
            raise ConfigError(f"fixed_farms[{i}] must be a mapping")
        fixed.append(
            FixedFarmSetting(
                pid=_require_int(entry.get("pid"), name=f"fixed_farms[{i}].pid"),
                percent=_require_int(entry.get("percent"), name=f"fixed_farms[{i}].percent"),
            )
        )

    log_raw = data.get("logging") or {}
    if not isinstance(log_raw, Mapping):
        raise ConfigError("logging must be a mapping")
    logging_settings = LoggingSettings(
        level=str(log_raw.get("level", "INFO")).upper(),
        file=log_raw.get("file") or None,
        retention_days=_require_int(log_raw.get("retention_days", 14), name="logging.retention_days"),
    )

    return AdminConfig(
        owner=_require_identity(data, "owner"),
        farm_admin=_require_identity(data, "farm_admin"),
        custody_address=_require_identity(data, "custody_address"),
        fixed_farms=tuple(fixed),
        logging=logging_settings,
    )


def load_config(path: str | Path, environ: Optional[Mapping[str, str]] = None) -> AdminConfig:
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, Mapping):
        raise ConfigError("config YAML must be a mapping")
    return config_from_dict(apply_env_overrides(data, environ))
