"""Fee adjustment engine.

``compute_new_fee`` is the single entry point. Given the current fee, the
observed and target ratios, the protocol-wide adjustment-rate ceiling, the
pool type's parameters and the prior out-of-band streak, it returns the new
fee and the new streak. It holds no state and never raises for ratios inside
the uint256 domain and params that pass the bounds policy
(``bounds.validate_pool_type_params``).

Order matters: the zero-target / in-band exit runs before the only division
by ``target_ratio``.
"""

from __future__ import annotations

from .bounds import MAX_CONSECUTIVE_HITS, ONE
from .math import clamp_fee, mul_div, within_bounds
from .types import OOBState, PoolTypeParams


def next_streak(prior: OOBState, is_upper: bool) -> OOBState:
    """Streak after an out-of-band observation on side ``is_upper``.

    A side flip restarts the run at 1; the count saturates at the counter width.
    """
    if is_upper != prior.last_was_upper:
        hits = 1
    else:
        hits = min(prior.consecutive_hits + 1, MAX_CONSECUTIVE_HITS)
    return OOBState(last_was_upper=is_upper, consecutive_hits=hits)


def adjustment_rate(deviation: int, target_ratio: int, linear_slope: int, global_max_adj_rate: int) -> int:
    """``deviation * slope / target`` capped at the global ceiling. ``target_ratio`` must be non-zero."""
    rate = mul_div(deviation, linear_slope, target_ratio)
    return min(rate, global_max_adj_rate)


def compute_new_fee(
    current_fee: int,
    current_ratio: int,
    target_ratio: int,
    global_max_adj_rate: int,
    params: PoolTypeParams,
    streak: OOBState,
) -> tuple[int, OOBState]:
    """Recompute the fee for one trigger. Returns ``(new_fee, new_streak)``."""
    is_upper, in_band = within_bounds(target_ratio, params.ratio_tolerance, current_ratio)

    if target_ratio == 0 or in_band:
        reset = OOBState(last_was_upper=streak.last_was_upper, consecutive_hits=0)
        return clamp_fee(current_fee, params.min_fee, params.max_fee), reset

    new_streak = next_streak(streak, is_upper)

    if is_upper:
        deviation = current_ratio - target_ratio
    else:
        deviation = target_ratio - current_ratio

    rate = adjustment_rate(deviation, target_ratio, params.linear_slope, global_max_adj_rate)
    fee_delta = mul_div(current_fee, rate, ONE)

    # Longer same-side runs unlock proportionally larger single-step moves.
    max_fee_delta = params.base_max_fee_delta * new_streak.consecutive_hits
    fee_delta = min(fee_delta, max_fee_delta)

    if is_upper:
        scaled_delta = mul_div(fee_delta, params.upper_side_factor, ONE)
        # Unbounded int accumulator; may exceed max_fee until the clamp below.
        fee_acc = current_fee + scaled_delta
    else:
        scaled_delta = mul_div(fee_delta, params.lower_side_factor, ONE)
        if scaled_delta >= current_fee:
            return params.min_fee, new_streak
        fee_acc = current_fee - scaled_delta

    return clamp_fee(fee_acc, params.min_fee, params.max_fee), new_streak
