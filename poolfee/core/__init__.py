"""
Core fee-adjustment algorithms

``poolfee.core.poke`` (the per-pool update cycle) is imported explicitly; it
depends on ``poolfee.state``, which in turn depends on the types re-exported here.
"""

from .dynamic_fee import (
    OOBState,
    PoolTypeParams,
    clamp_fee,
    compute_new_fee,
    ema,
    within_bounds,
)

__all__ = [
    "OOBState",
    "PoolTypeParams",
    "clamp_fee",
    "compute_new_fee",
    "ema",
    "within_bounds",
]
