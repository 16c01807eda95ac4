"""Constants and integer helpers for fixed-percentage farms.

Percentages are basis points of ``PRECISION``. All arithmetic is on plain
Python ints; division is ``//`` (floor), matching the truncating integer
division of the distributor the weights are written to.
"""

from __future__ import annotations

PRECISION: int = 10_000
# Share of total weight the farm keeps for its own base pool.
BASE_PERCENTAGE: int = PRECISION // 4
# Headroom that keeps PRECISION - share well away from zero.
BUFFER: int = PRECISION // 10
MAX_FIXED_FARM_PERCENTAGE: int = PRECISION - BUFFER - BASE_PERCENTAGE

# Pool 0 is owned by the farm and can never be pinned.
BASE_POOL_ID: int = 0


def total_allocation_share(total_fixed_percentage: int) -> int:
    """Fixed pools plus the base pool, in basis points."""
    return total_fixed_percentage + BASE_PERCENTAGE


def within_budget(total_fixed_percentage: int) -> bool:
    return 0 <= total_fixed_percentage <= MAX_FIXED_FARM_PERCENTAGE
