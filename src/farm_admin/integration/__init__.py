"""
Integration layer: gateway, configuration, snapshots and audit logging
"""

from .audit_log import configure_logging, log_event
from .config import AdminConfig, ConfigError, load_config
from .gateway import MAX_BONUS_MULTIPLIER, AdminGateway, GatewayEvent, PoolAllocation
from .snapshot import AdminSnapshot, gateway_from_snapshot, snapshot_from_gateway

__all__ = [
    "AdminConfig",
    "AdminGateway",
    "AdminSnapshot",
    "ConfigError",
    "GatewayEvent",
    "MAX_BONUS_MULTIPLIER",
    "PoolAllocation",
    "configure_logging",
    "gateway_from_snapshot",
    "load_config",
    "log_event",
    "snapshot_from_gateway",
]
