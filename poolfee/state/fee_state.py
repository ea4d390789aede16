"""Per-pool fee state and its flat-dict serialization.

The fee, target ratio and OOB streak are recomputed on every poke and persisted
by the caller before the next one. This package never stores them.

Round-trip property (tested): ``state_from_dict(state_to_dict(s)) == s``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from ..core.dynamic_fee.types import OOBState


@dataclass(frozen=True)
class PoolFeeState:
    """Snapshot of one pool's fee-adjustment state."""

    fee: int
    target_ratio: int
    oob: OOBState = field(default_factory=OOBState)

    def __post_init__(self) -> None:
        for name, val in (("fee", self.fee), ("target_ratio", self.target_ratio)):
            if not isinstance(val, int) or isinstance(val, bool):
                raise TypeError(f"{name} must be an int")
            if val < 0:
                raise ValueError(f"{name} must be non-negative: {val}")
        if not isinstance(self.oob, OOBState):
            raise TypeError("oob must be an OOBState")


@dataclass(frozen=True)
class FeeUpdate:
    """Observables emitted by an accepted poke."""

    old_fee: int
    new_fee: int
    old_target_ratio: int
    current_ratio: int
    new_target_ratio: int
    in_band: bool
    is_upper: bool
    consecutive_hits: int


STATE_VAR_NAMES: tuple[str, ...] = (
    "fee",
    "target_ratio",
    "oob_last_was_upper",
    "oob_consecutive_hits",
)


def state_to_dict(state: PoolFeeState) -> dict[str, bool | int]:
    """Serialize a PoolFeeState to a flat dict."""
    return {
        "fee": state.fee,
        "target_ratio": state.target_ratio,
        "oob_last_was_upper": state.oob.last_was_upper,
        "oob_consecutive_hits": state.oob.consecutive_hits,
    }


def state_from_dict(d: Mapping[str, Any]) -> PoolFeeState:
    """Deserialize a flat dict to a PoolFeeState. Raises KeyError on missing fields."""
    vals: dict[str, bool | int] = {}
    for name in STATE_VAR_NAMES:
        val = d[name]
        if isinstance(val, bool):
            vals[name] = val
        elif isinstance(val, int):
            vals[name] = int(val)  # normalize int subclasses
        else:
            raise TypeError(f"state var {name!r} must be bool|int, got {type(val).__name__}")
    return PoolFeeState(
        fee=vals["fee"],
        target_ratio=vals["target_ratio"],
        oob=OOBState(
            last_was_upper=vals["oob_last_was_upper"],
            consecutive_hits=vals["oob_consecutive_hits"],
        ),
    )
