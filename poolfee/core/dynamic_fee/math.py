"""Pure fixed-point arithmetic for the dynamic fee engine.

Every function is stateless and operates on plain Python ints. Rounding is
explicit: ``//`` floors, and all multiply-divides go through ``mul_div`` so
the product is formed at full width before dividing. The operand domain is
uint256; leaving it raises ``FeeOverflowError`` instead of wrapping.
"""

from __future__ import annotations

from .bounds import MAX_FEE_REPR, ONE, UINT256_MAX
from .errors import FeeOverflowError


def _require_uint256(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0 or value > UINT256_MAX:
        raise FeeOverflowError(f"{name} outside uint256: {value}")


# -- Multiply-divide -----------------------------------------------------------

def mul_div(a: int, b: int, denominator: int) -> int:
    """``floor(a * b / denominator)`` with a full-width intermediate product."""
    _require_uint256("a", a)
    _require_uint256("b", b)
    _require_uint256("denominator", denominator)
    if denominator == 0:
        raise FeeOverflowError("mul_div by zero")
    result = (a * b) // denominator
    if result > UINT256_MAX:
        raise FeeOverflowError(f"mul_div result outside uint256: {result}")
    return result


# -- Clamp ---------------------------------------------------------------------

def clamp_fee(fee: int, min_fee: int, max_fee: int) -> int:
    """Clamp ``fee`` to ``[min_fee, max_fee]`` and narrow to the fee representation."""
    if fee < min_fee:
        bounded = min_fee
    elif fee > max_fee:
        bounded = max_fee
    else:
        bounded = fee
    if bounded < 0 or bounded > MAX_FEE_REPR:
        raise FeeOverflowError(f"fee does not fit uint24: {bounded}")
    return bounded


# -- Tolerance band ------------------------------------------------------------

def within_bounds(target: int, tolerance: int, current: int) -> tuple[bool, bool]:
    """Classify ``current`` against ``target +/- target * tolerance``.

    Returns ``(is_upper, in_band)``. The lower edge saturates at zero. A zero
    target yields a degenerate ``[0, 0]`` band; callers must handle it before
    dividing by the target.
    """
    delta = mul_div(target, tolerance, ONE)
    lower = target - delta if target > delta else 0
    upper = target + delta
    is_upper = current > upper
    in_band = lower <= current <= upper
    return is_upper, in_band


# -- EMA -----------------------------------------------------------------------

def ema_alpha(lookback_period: int) -> int:
    """Smoothing constant ``2 / (lookback + 1)`` in fixed point."""
    if not isinstance(lookback_period, int) or isinstance(lookback_period, bool):
        raise TypeError("lookback_period must be an int")
    if lookback_period < 1:
        raise ValueError(f"lookback_period must be >= 1: {lookback_period}")
    return (2 * ONE) // (lookback_period + 1)


def ema(current_ratio: int, old_target_ratio: int, lookback_period: int) -> int:
    """Move the target ratio toward ``current_ratio`` by one EMA step.

    The result always lies weakly between ``old_target_ratio`` and
    ``current_ratio``; it reaches ``current_ratio`` only when the lookback is 1.
    """
    alpha = ema_alpha(lookback_period)
    if current_ratio >= old_target_ratio:
        return old_target_ratio + mul_div(current_ratio - old_target_ratio, alpha, ONE)
    return old_target_ratio - mul_div(old_target_ratio - current_ratio, alpha, ONE)
