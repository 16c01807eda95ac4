"""
Reward distributor interface and in-memory reference implementation
"""

from .adapter import DuplicatePool, FarmAdapter, FarmError, PoolInfo, SupportsCheckpoint, UnknownPool
from .memory import ACC_REWARD_SCALE, InMemoryFarm

__all__ = [
    "ACC_REWARD_SCALE",
    "DuplicatePool",
    "FarmAdapter",
    "FarmError",
    "InMemoryFarm",
    "PoolInfo",
    "SupportsCheckpoint",
    "UnknownPool",
]
