"""Property tests for the dynamic fee engine (Hypothesis)."""

from __future__ import annotations

import importlib.util

import pytest

if importlib.util.find_spec("hypothesis") is None:  # pragma: no cover
    pytest.skip("hypothesis not installed", allow_module_level=True)

import hypothesis.strategies as st
from hypothesis import given, settings

from poolfee.core.dynamic_fee.bounds import (
    MAX_ADJUSTMENT_RATE,
    MAX_CONSECUTIVE_HITS,
    MAX_CURRENT_RATIO,
    MAX_LINEAR_SLOPE,
    MAX_LOOKBACK_PERIOD,
    MAX_LP_FEE,
    MAX_SIDE_FACTOR,
    MIN_FEE,
    MIN_LINEAR_SLOPE,
    MIN_LOOKBACK_PERIOD,
    MIN_RATIO_TOLERANCE,
    MIN_SIDE_FACTOR,
    ONE,
    TEN_WAD,
    UINT24_MAX,
)
from poolfee.core.dynamic_fee.engine import compute_new_fee
from poolfee.core.dynamic_fee.math import clamp_fee, ema, within_bounds
from poolfee.core.dynamic_fee.types import OOBState, PoolTypeParams

ratios = st.integers(min_value=0, max_value=MAX_CURRENT_RATIO)
lookbacks = st.integers(min_value=MIN_LOOKBACK_PERIOD, max_value=MAX_LOOKBACK_PERIOD)


@st.composite
def pool_params(draw) -> PoolTypeParams:
    min_fee = draw(st.integers(min_value=MIN_FEE, max_value=MAX_LP_FEE))
    max_fee = draw(st.integers(min_value=min_fee, max_value=MAX_LP_FEE))
    return PoolTypeParams(
        min_fee=min_fee,
        max_fee=max_fee,
        base_max_fee_delta=draw(st.integers(min_value=MIN_FEE, max_value=MAX_LP_FEE)),
        lookback_period=draw(lookbacks),
        min_period=3_600,
        ratio_tolerance=draw(st.integers(min_value=MIN_RATIO_TOLERANCE, max_value=TEN_WAD)),
        linear_slope=draw(st.integers(min_value=MIN_LINEAR_SLOPE, max_value=MAX_LINEAR_SLOPE)),
        max_current_ratio=MAX_CURRENT_RATIO,
        upper_side_factor=draw(st.integers(min_value=MIN_SIDE_FACTOR, max_value=MAX_SIDE_FACTOR)),
        lower_side_factor=draw(st.integers(min_value=MIN_SIDE_FACTOR, max_value=MAX_SIDE_FACTOR)),
    )


streaks = st.builds(
    OOBState,
    last_was_upper=st.booleans(),
    consecutive_hits=st.integers(min_value=0, max_value=MAX_CONSECUTIVE_HITS),
)
rates = st.integers(min_value=1, max_value=MAX_ADJUSTMENT_RATE)


@settings(max_examples=300, deadline=None)
@given(fee=st.integers(min_value=0, max_value=UINT24_MAX), data=st.data())
def test_clamp_in_range_and_identity_inside(fee: int, data) -> None:
    lo = data.draw(st.integers(min_value=0, max_value=UINT24_MAX))
    hi = data.draw(st.integers(min_value=lo, max_value=UINT24_MAX))
    out = clamp_fee(fee, lo, hi)
    assert lo <= out <= hi
    assert (out == fee) == (lo <= fee <= hi)


@settings(max_examples=300, deadline=None)
@given(
    target=st.integers(min_value=1, max_value=MAX_CURRENT_RATIO),
    tol=st.integers(min_value=0, max_value=TEN_WAD),
    data=st.data(),
)
def test_ratio_inside_tolerance_is_in_band(target: int, tol: int, data) -> None:
    delta = target * tol // ONE
    current = data.draw(st.integers(min_value=max(target - delta, 0), max_value=target + delta))
    is_upper, in_band = within_bounds(target, tol, current)
    assert in_band is True
    assert is_upper is False


@settings(max_examples=300, deadline=None)
@given(x=ratios, lookback=lookbacks)
def test_ema_fixpoint(x: int, lookback: int) -> None:
    assert ema(x, x, lookback) == x


@settings(max_examples=300, deadline=None)
@given(current=ratios, old=ratios, lookback=lookbacks)
def test_ema_between_old_and_current(current: int, old: int, lookback: int) -> None:
    new = ema(current, old, lookback)
    assert min(old, current) <= new <= max(old, current)
    if lookback == 1:
        assert new == current


@settings(max_examples=500, deadline=None)
@given(
    params=pool_params(),
    current=ratios,
    target=ratios,
    rate=rates,
    streak=streaks,
    data=st.data(),
)
def test_fee_always_within_bounds(params, current, target, rate, streak, data) -> None:
    fee = data.draw(st.integers(min_value=params.min_fee, max_value=params.max_fee))
    new_fee, new_streak = compute_new_fee(fee, current, target, rate, params, streak)
    assert params.min_fee <= new_fee <= params.max_fee
    assert 0 <= new_streak.consecutive_hits <= MAX_CONSECUTIVE_HITS


@settings(max_examples=300, deadline=None)
@given(params=pool_params(), current=ratios, target=ratios, rate=rates, streak=streaks, data=st.data())
def test_streak_transitions(params, current, target, rate, streak, data) -> None:
    fee = data.draw(st.integers(min_value=params.min_fee, max_value=params.max_fee))
    _, new_streak = compute_new_fee(fee, current, target, rate, params, streak)
    is_upper, in_band = within_bounds(target, params.ratio_tolerance, current)
    if target == 0 or in_band:
        assert new_streak == OOBState(streak.last_was_upper, 0)
    elif is_upper != streak.last_was_upper:
        assert new_streak == OOBState(is_upper, 1)
    else:
        expected = min(streak.consecutive_hits + 1, MAX_CONSECUTIVE_HITS)
        assert new_streak == OOBState(is_upper, expected)


@settings(max_examples=300, deadline=None)
@given(params=pool_params(), current=ratios, target=ratios, rate=rates, streak=streaks, data=st.data())
def test_direction_follows_side(params, current, target, rate, streak, data) -> None:
    fee = data.draw(st.integers(min_value=params.min_fee, max_value=params.max_fee))
    new_fee, _ = compute_new_fee(fee, current, target, rate, params, streak)
    is_upper, in_band = within_bounds(target, params.ratio_tolerance, current)
    if target == 0 or in_band:
        assert new_fee == fee
    elif is_upper:
        assert new_fee >= fee
    else:
        assert new_fee <= fee
