"""Global bounds policy for dynamic fee parameters.

Every limit here exists so that the fixed-point steps in ``engine.py`` stay
inside the bounded fee representation (uint24) for any parameter set that
passes ``validate_pool_type_params``:

- ``fee <= MAX_LP_FEE`` and ``rate <= MAX_ADJUSTMENT_RATE`` give
  ``fee * rate // ONE < UINT24_MAX``;
- side factors are capped at ``TEN_WAD``, so a scaled delta stays far below
  uint256 even before the final clamp.

Validation functions return lists of violated bound names (empty = valid),
following the ``check_all()`` convention used by the invariant checkers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .errors import InvalidParamsError

if TYPE_CHECKING:
    from .types import PoolTypeParams

# Fixed-point scale (1.0)
ONE: int = 10**18
TEN_WAD: int = 10 * ONE

# Integer widths
UINT24_MAX: int = 2**24 - 1
UINT256_MAX: int = 2**256 - 1

# Fees are in hundredths of a basis point: 1_000_000 == 100%.
MAX_LP_FEE: int = 1_000_000
MIN_FEE: int = 1

# Bounded fee representation and streak counter width
MAX_FEE_REPR: int = UINT24_MAX
MAX_CONSECUTIVE_HITS: int = UINT24_MAX

MIN_LOOKBACK_PERIOD: int = 1
MAX_LOOKBACK_PERIOD: int = 365

MIN_PERIOD: int = 3_600  # 1 hour
MAX_PERIOD: int = 2_592_000  # 30 days

MAX_CURRENT_RATIO: int = 10**21

MIN_RATIO_TOLERANCE: int = 10**15  # 0.1%
MAX_RATIO_TOLERANCE: int = TEN_WAD

MIN_LINEAR_SLOPE: int = 10**17
MAX_LINEAR_SLOPE: int = TEN_WAD

MIN_SIDE_FACTOR: int = ONE // 10
MAX_SIDE_FACTOR: int = TEN_WAD

# Keeps MAX_LP_FEE * rate // ONE strictly below UINT24_MAX.
MAX_ADJUSTMENT_RATE: int = UINT24_MAX * ONE // MAX_LP_FEE - 1


# (field_name, min_val, max_val) for each independently bounded field.
_PARAM_BOUNDS: list[tuple[str, int, int]] = [
    ("min_fee", MIN_FEE, MAX_LP_FEE),
    ("max_fee", MIN_FEE, MAX_LP_FEE),
    ("base_max_fee_delta", MIN_FEE, MAX_LP_FEE),
    ("lookback_period", MIN_LOOKBACK_PERIOD, MAX_LOOKBACK_PERIOD),
    ("min_period", MIN_PERIOD, MAX_PERIOD),
    ("ratio_tolerance", MIN_RATIO_TOLERANCE, MAX_RATIO_TOLERANCE),
    ("linear_slope", MIN_LINEAR_SLOPE, MAX_LINEAR_SLOPE),
    ("max_current_ratio", 1, MAX_CURRENT_RATIO),
    ("upper_side_factor", MIN_SIDE_FACTOR, MAX_SIDE_FACTOR),
    ("lower_side_factor", MIN_SIDE_FACTOR, MAX_SIDE_FACTOR),
]


def validate_pool_type_params(params: PoolTypeParams) -> list[str]:
    """Return the names of violated bounds (empty = valid)."""
    violations: list[str] = []
    for field, lo, hi in _PARAM_BOUNDS:
        val = getattr(params, field)
        if val < lo or val > hi:
            violations.append(field)
    return violations


def validate_global_max_adj_rate(rate: int) -> list[str]:
    if not isinstance(rate, int) or isinstance(rate, bool):
        return ["global_max_adj_rate"]
    if rate <= 0 or rate > MAX_ADJUSTMENT_RATE:
        return ["global_max_adj_rate"]
    return []


def require_valid_params(params: PoolTypeParams, global_max_adj_rate: int | None = None) -> None:
    """Raise ``InvalidParamsError`` listing every violated bound.

    When ``global_max_adj_rate`` is given it is validated together with the
    pool-type parameters.
    """
    violations = validate_pool_type_params(params)
    if global_max_adj_rate is not None:
        violations += validate_global_max_adj_rate(global_max_adj_rate)
    if violations:
        raise InvalidParamsError(violations)
