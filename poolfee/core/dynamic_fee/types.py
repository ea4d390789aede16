"""Value types for the dynamic fee engine.

All types are frozen dataclasses. Nothing here is persisted by this package:
callers own ``PoolTypeParams`` (per pool type) and ``OOBState`` (per pool) and
pass them in by value on every call.

Units/conventions:
- fees are integers in hundredths of a basis point (``MAX_LP_FEE`` == 100%);
- ratios, tolerances, slopes, rates and side factors are fixed-point with
  ``ONE`` == 1.0.
"""

from __future__ import annotations

from dataclasses import dataclass

from .bounds import MAX_CONSECUTIVE_HITS


def _require_uint(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0:
        raise ValueError(f"{name} must be non-negative: {value}")


@dataclass(frozen=True)
class PoolTypeParams:
    """Per-pool-type configuration.

    Only structural checks happen here; the global limits are applied by
    ``bounds.validate_pool_type_params``.
    """

    min_fee: int
    max_fee: int
    base_max_fee_delta: int
    lookback_period: int
    min_period: int
    ratio_tolerance: int
    linear_slope: int
    max_current_ratio: int
    upper_side_factor: int
    lower_side_factor: int

    def __post_init__(self) -> None:
        for name in self.__dataclass_fields__:
            _require_uint(name, getattr(self, name))
        if self.min_fee > self.max_fee:
            raise ValueError(f"min_fee must be <= max_fee: {self.min_fee} > {self.max_fee}")


@dataclass(frozen=True)
class OOBState:
    """Out-of-band streak: side of the last OOB observation and its run length."""

    last_was_upper: bool = False
    consecutive_hits: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.last_was_upper, bool):
            raise TypeError("last_was_upper must be a bool")
        _require_uint("consecutive_hits", self.consecutive_hits)
        if self.consecutive_hits > MAX_CONSECUTIVE_HITS:
            raise ValueError(
                f"consecutive_hits must be <= {MAX_CONSECUTIVE_HITS}: {self.consecutive_hits}"
            )
