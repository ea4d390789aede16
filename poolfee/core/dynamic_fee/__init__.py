"""`dynamic_fee`: ratio-driven fee adjustment with an EMA target and OOB streak throttling.

- deterministic, integer-only fixed-point arithmetic (``ONE`` == 1e18),
- immutable inputs and outputs (frozen dataclasses),
- no internal state: callers persist the fee, target ratio and ``OOBState``.

Public API:
- `compute_new_fee(current_fee, current_ratio, target_ratio, global_max_adj_rate, params, streak) -> (fee, OOBState)`
- `ema(current_ratio, old_target_ratio, lookback_period) -> int`
- `within_bounds(target, tolerance, current) -> (is_upper, in_band)`
- `clamp_fee(fee, min_fee, max_fee) -> int`
"""

from .bounds import (
    MAX_ADJUSTMENT_RATE,
    MAX_LP_FEE,
    ONE,
    require_valid_params,
    validate_global_max_adj_rate,
    validate_pool_type_params,
)
from .engine import compute_new_fee
from .errors import (
    DynamicFeeError,
    FeeInvariantError,
    FeeOverflowError,
    InvalidParamsError,
    RatioOutOfRangeError,
)
from .math import clamp_fee, ema, mul_div, within_bounds
from .types import OOBState, PoolTypeParams

__all__ = [
    "compute_new_fee",
    "ema",
    "within_bounds",
    "clamp_fee",
    "mul_div",
    "ONE",
    "MAX_LP_FEE",
    "MAX_ADJUSTMENT_RATE",
    "validate_pool_type_params",
    "validate_global_max_adj_rate",
    "require_valid_params",
    "OOBState",
    "PoolTypeParams",
    "DynamicFeeError",
    "FeeOverflowError",
    "InvalidParamsError",
    "RatioOutOfRangeError",
    "FeeInvariantError",
]
