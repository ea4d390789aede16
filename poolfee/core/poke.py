"""One fee-update cycle ("poke") over a caller-persisted pool snapshot.

Follows the guard -> update -> effects -> invariant-check pattern:

- guards: ``current_ratio`` a non-negative int no greater than
  ``params.max_current_ratio``, params within the bounds policy, and a valid
  global rate ceiling;
- update: ``compute_new_fee`` and ``ema`` both read the *old* target ratio, so
  one cycle observes a single consistent snapshot;
- effects: a ``FeeUpdate`` describing the transition;
- invariants: fee within ``[min_fee, max_fee]``, new target weakly between
  the old target and the observed ratio.

Cooldown (``params.min_period``), pausing and persistence belong to the
caller; ``poke`` never inspects time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..state.fee_state import FeeUpdate, PoolFeeState
from .dynamic_fee.bounds import validate_global_max_adj_rate, validate_pool_type_params
from .dynamic_fee.engine import compute_new_fee
from .dynamic_fee.errors import FeeInvariantError, InvalidParamsError, RatioOutOfRangeError
from .dynamic_fee.math import ema, within_bounds
from .dynamic_fee.types import OOBState, PoolTypeParams

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PokeResult:
    """Result of a single poke."""

    accepted: bool
    state: PoolFeeState | None = None
    effects: FeeUpdate | None = None
    rejection: str | None = None


def initial_pool_state(initial_fee: int, initial_target_ratio: int, params: PoolTypeParams) -> PoolFeeState:
    """Create the state for a freshly registered pool (zeroed OOB streak).

    Raises ``InvalidParamsError`` if the params, the fee or the target ratio are
    out of bounds.
    """
    violations = validate_pool_type_params(params)
    if not (params.min_fee <= initial_fee <= params.max_fee):
        violations.append("initial_fee")
    if not (0 < initial_target_ratio <= params.max_current_ratio):
        violations.append("initial_target_ratio")
    if violations:
        raise InvalidParamsError(violations)
    return PoolFeeState(fee=initial_fee, target_ratio=initial_target_ratio, oob=OOBState())


# ---------------------------------------------------------------------------
# Guards
# ---------------------------------------------------------------------------

def _guard(current_ratio: int, params: PoolTypeParams, global_max_adj_rate: int) -> str | None:
    """Return a rejection reason, or None when the poke may proceed."""
    if not isinstance(current_ratio, int) or isinstance(current_ratio, bool) or current_ratio < 0:
        return "ratio_invalid"
    param_violations = validate_pool_type_params(params)
    if param_violations:
        return f"params:{','.join(param_violations)}"
    if validate_global_max_adj_rate(global_max_adj_rate):
        return "global_max_adj_rate"
    if current_ratio > params.max_current_ratio:
        return "ratio_above_max"
    return None


# ---------------------------------------------------------------------------
# Invariant check
# ---------------------------------------------------------------------------

def check_invariants(
    old: PoolFeeState, new: PoolFeeState, current_ratio: int, params: PoolTypeParams
) -> list[str]:
    """Check post-poke invariants. Returns list of violation names."""
    violations: list[str] = []
    if not (params.min_fee <= new.fee <= params.max_fee):
        violations.append("fee_within_bounds")
    lo = min(old.target_ratio, current_ratio)
    hi = max(old.target_ratio, current_ratio)
    if not (lo <= new.target_ratio <= hi):
        violations.append("target_between_old_and_current")
    return violations


# ---------------------------------------------------------------------------
# Poke
# ---------------------------------------------------------------------------

def poke(
    state: PoolFeeState,
    current_ratio: int,
    params: PoolTypeParams,
    global_max_adj_rate: int,
) -> PokeResult:
    """Run one fee-update cycle.

    Returns PokeResult with accepted=True on success, or accepted=False with a
    rejection reason string.
    """
    rejection = _guard(current_ratio, params, global_max_adj_rate)
    if rejection is not None:
        logger.warning("poke rejected: %s (current_ratio=%r)", rejection, current_ratio)
        return PokeResult(accepted=False, rejection=rejection)

    new_fee, new_oob = compute_new_fee(
        state.fee,
        current_ratio,
        state.target_ratio,
        global_max_adj_rate,
        params,
        state.oob,
    )
    new_target = ema(current_ratio, state.target_ratio, params.lookback_period)
    new_state = PoolFeeState(fee=new_fee, target_ratio=new_target, oob=new_oob)

    violations = check_invariants(state, new_state, current_ratio, params)
    if violations:
        logger.warning("poke rejected: invariant violations %s", violations)
        return PokeResult(accepted=False, rejection=f"invariant:{','.join(violations)}")

    is_upper, in_band = within_bounds(state.target_ratio, params.ratio_tolerance, current_ratio)
    healthy = in_band or state.target_ratio == 0
    effects = FeeUpdate(
        old_fee=state.fee,
        new_fee=new_fee,
        old_target_ratio=state.target_ratio,
        current_ratio=current_ratio,
        new_target_ratio=new_target,
        in_band=healthy,
        is_upper=is_upper and not healthy,
        consecutive_hits=new_oob.consecutive_hits,
    )
    logger.debug(
        "fee %d -> %d, target %d -> %d, ratio %d, streak %d (upper=%s)",
        state.fee,
        new_fee,
        state.target_ratio,
        new_target,
        current_ratio,
        new_oob.consecutive_hits,
        new_oob.last_was_upper,
    )
    return PokeResult(accepted=True, state=new_state, effects=effects)


def poke_or_raise(
    state: PoolFeeState,
    current_ratio: int,
    params: PoolTypeParams,
    global_max_adj_rate: int,
) -> PokeResult:
    """Like ``poke()`` but raises on rejection instead of returning a result.

    Raises:
        InvalidParamsError: Params or global rate outside the bounds policy.
        RatioOutOfRangeError: ``current_ratio`` negative, not an int, or above
            ``params.max_current_ratio``.
        FeeInvariantError: Post-state violates one or more invariants.
    """
    result = poke(state, current_ratio, params, global_max_adj_rate)
    if result.accepted:
        return result

    reason = result.rejection or ""
    if reason.startswith("params:"):
        raise InvalidParamsError(reason.removeprefix("params:").split(","))
    if reason == "global_max_adj_rate":
        raise InvalidParamsError([reason])
    if reason.startswith("invariant:"):
        raise FeeInvariantError(reason.removeprefix("invariant:").split(","))
    if reason == "ratio_invalid":
        raise RatioOutOfRangeError(f"current_ratio must be a non-negative int: {current_ratio!r}")
    raise RatioOutOfRangeError(f"current_ratio {current_ratio} > max_current_ratio {params.max_current_ratio}")
