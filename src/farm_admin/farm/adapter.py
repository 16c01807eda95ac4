"""
Interface the admin layer consumes from the reward distributor ("the farm").

The farm itself is an external collaborator. Anything that satisfies
`FarmAdapter` can sit behind `AdminGateway`: an RPC client for a deployed
distributor, or `InMemoryFarm` for tests and simulation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


class FarmError(Exception):
    """Raised by a farm implementation when it rejects a mutation."""


class UnknownPool(FarmError):
    pass


class DuplicatePool(FarmError):
    pass


@dataclass(frozen=True)
class PoolInfo:
    """Read-only view of one farm pool."""

    token: str
    weight: int
    last_reward_block: int = 0
    acc_reward_per_share: int = 0
    staked: int = 0


@runtime_checkable
class FarmAdapter(Protocol):
    def pool_count(self) -> int: ...

    def pool_info(self, pool_id: int) -> PoolInfo: ...

    def total_weight(self) -> int: ...

    def add_pool(self, weight: int, token: str, recompute_all: bool) -> None: ...

    def set_pool_weight(self, pool_id: int, weight: int, recompute_all: bool) -> None: ...

    def recompute_all_pools(self) -> None: ...

    def recompute_pool(self, pool_id: int) -> None: ...

    def set_reward_multiplier(self, value: int) -> None: ...

    def transfer_control(self, new_controller: str) -> None: ...


@runtime_checkable
class SupportsCheckpoint(Protocol):
    """Optional extension: lets the gateway roll a farm back after a failed batch."""

    def checkpoint(self) -> Any: ...

    def rollback(self, token: Any) -> None: ...
