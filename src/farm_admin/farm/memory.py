"""
In-memory reward distributor implementing `FarmAdapter`.

Deterministic reference model of the distributor the admin layer fronts:
- pool 0 is the base pool; its weight is re-derived as one third of all other
  pools' weight whenever that sum is non-zero (so it holds 25% of the total),
- rewards accrue per block: `blocks * multiplier * reward_per_block` split by
  weight, credited to `acc_reward_per_share` (scaled by `ACC_REWARD_SCALE`)
  per unit staked.

Used by the test suite, `tools/farm_admin_sim.py`, and anywhere a real chain
client is not available.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import List

from .adapter import DuplicatePool, FarmError, PoolInfo, UnknownPool


ACC_REWARD_SCALE = 10**12
BASE_POOL_DIVISOR = 3
DEFAULT_BASE_WEIGHT = 1000


@dataclass
class _PoolSlot:
    token: str
    weight: int
    last_reward_block: int
    acc_reward_per_share: int = 0
    staked: int = 0

    def view(self) -> PoolInfo:
        return PoolInfo(
            token=self.token,
            weight=self.weight,
            last_reward_block=self.last_reward_block,
            acc_reward_per_share=self.acc_reward_per_share,
            staked=self.staked,
        )


class InMemoryFarm:
    """
    Reward distributor with a self-managed base pool.

    Args:
        controller: Identity currently allowed to administer the farm.
        base_token: Token staked in the base pool (pool 0).
        reward_per_block: Rewards emitted per block before the multiplier.
        start_block: First block that accrues rewards.
        multiplier: Global bonus multiplier.
        base_weight: Initial weight of the base pool.
    """

    def __init__(
        self,
        *,
        controller: str,
        base_token: str,
        reward_per_block: int = 10**18,
        start_block: int = 0,
        multiplier: int = 1,
        base_weight: int = DEFAULT_BASE_WEIGHT,
    ):
        if reward_per_block < 0 or start_block < 0 or multiplier < 0 or base_weight < 0:
            raise ValueError("farm parameters must be non-negative")
        self.controller = controller
        self.reward_per_block = reward_per_block
        self.start_block = start_block
        self.multiplier = multiplier
        self.block_number = start_block
        self._pools: List[_PoolSlot] = [
            _PoolSlot(token=base_token, weight=base_weight, last_reward_block=start_block)
        ]
        self._total_weight = base_weight

    # -- FarmAdapter -----------------------------------------------------------

    def pool_count(self) -> int:
        return len(self._pools)

    def pool_info(self, pool_id: int) -> PoolInfo:
        return self._slot(pool_id).view()

    def total_weight(self) -> int:
        return self._total_weight

    def add_pool(self, weight: int, token: str, recompute_all: bool) -> None:
        self._require_weight(weight)
        if any(slot.token == token for slot in self._pools):
            raise DuplicatePool(f"pool already exists for token {token}")
        if recompute_all:
            self.recompute_all_pools()
        self._pools.append(
            _PoolSlot(
                token=token,
                weight=weight,
                last_reward_block=max(self.block_number, self.start_block),
            )
        )
        self._total_weight += weight
        self._update_base_pool()

    def set_pool_weight(self, pool_id: int, weight: int, recompute_all: bool) -> None:
        self._require_weight(weight)
        slot = self._slot(pool_id)
        if recompute_all:
            self.recompute_all_pools()
        previous = slot.weight
        slot.weight = weight
        if previous != weight:
            self._total_weight = self._total_weight - previous + weight
            self._update_base_pool()

    def recompute_all_pools(self) -> None:
        for pool_id in range(len(self._pools)):
            self.recompute_pool(pool_id)

    def recompute_pool(self, pool_id: int) -> None:
        slot = self._slot(pool_id)
        if self.block_number <= slot.last_reward_block:
            return
        if slot.staked == 0 or self._total_weight == 0:
            slot.last_reward_block = self.block_number
            return
        blocks = (self.block_number - slot.last_reward_block) * self.multiplier
        reward = blocks * self.reward_per_block * slot.weight // self._total_weight
        slot.acc_reward_per_share += reward * ACC_REWARD_SCALE // slot.staked
        slot.last_reward_block = self.block_number

    def set_reward_multiplier(self, value: int) -> None:
        if value < 0:
            raise FarmError("multiplier must be non-negative")
        self.multiplier = value

    def transfer_control(self, new_controller: str) -> None:
        if not new_controller:
            raise FarmError("new controller must be non-empty")
        self.controller = new_controller

    # -- Checkpointing -----------------------------------------------------------

    def checkpoint(self) -> tuple:
        return (
            copy.deepcopy(self._pools),
            self._total_weight,
            self.multiplier,
            self.controller,
            self.block_number,
        )

    def rollback(self, token: tuple) -> None:
        pools, total_weight, multiplier, controller, block_number = token
        self._pools = copy.deepcopy(pools)
        self._total_weight = total_weight
        self.multiplier = multiplier
        self.controller = controller
        self.block_number = block_number

    # -- Simulation controls -----------------------------------------------------

    def advance_blocks(self, blocks: int) -> None:
        if blocks < 0:
            raise ValueError("blocks must be non-negative")
        self.block_number += blocks

    def stake(self, pool_id: int, amount: int) -> None:
        """Add (or, with a negative amount, remove) staked supply for a pool."""
        slot = self._slot(pool_id)
        self.recompute_pool(pool_id)
        if slot.staked + amount < 0:
            raise FarmError(f"insufficient stake in pool {pool_id}")
        slot.staked += amount

    def pending_reward(self, pool_id: int, amount: int, reward_debt: int = 0) -> int:
        """Reward owed to a position of `amount` staked since `reward_debt` was taken."""
        slot = self._slot(pool_id)
        acc = slot.acc_reward_per_share
        if self.block_number > slot.last_reward_block and slot.staked != 0 and self._total_weight != 0:
            blocks = (self.block_number - slot.last_reward_block) * self.multiplier
            reward = blocks * self.reward_per_block * slot.weight // self._total_weight
            acc += reward * ACC_REWARD_SCALE // slot.staked
        return amount * acc // ACC_REWARD_SCALE - reward_debt

    # -- Internals -----------------------------------------------------------------

    def _slot(self, pool_id: int) -> _PoolSlot:
        if not isinstance(pool_id, int) or isinstance(pool_id, bool) or not 0 <= pool_id < len(self._pools):
            raise UnknownPool(f"unknown pool id {pool_id!r}")
        return self._pools[pool_id]

    @staticmethod
    def _require_weight(weight: int) -> None:
        if not isinstance(weight, int) or isinstance(weight, bool) or weight < 0:
            raise FarmError(f"weight must be a non-negative int, got {weight!r}")

    def _update_base_pool(self) -> None:
        points = sum(slot.weight for slot in self._pools[1:])
        if points == 0:
            return
        points //= BASE_POOL_DIVISOR
        base = self._pools[0]
        self._total_weight = self._total_weight - base.weight + points
        base.weight = points

    def __repr__(self) -> str:
        return f"InMemoryFarm({len(self._pools)} pools, total_weight={self._total_weight})"
