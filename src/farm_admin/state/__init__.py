"""
Durable state helpers for the farm admin layer
"""

from .canonical import canonical_json_bytes, domain_sep_bytes, sha256_hex
from .custody import TokenLedger

__all__ = [
    "TokenLedger",
    "canonical_json_bytes",
    "domain_sep_bytes",
    "sha256_hex",
]
