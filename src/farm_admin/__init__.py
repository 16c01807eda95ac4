"""
Admin layer for a yield-farm reward distributor: role-gated pool management and
fixed-percentage allocation for pinned pools.
"""

__version__ = "0.1.0"
