"""
Caller-persisted pool fee state
"""

from .fee_state import FeeUpdate, PoolFeeState, state_from_dict, state_to_dict

__all__ = [
    "FeeUpdate",
    "PoolFeeState",
    "state_from_dict",
    "state_to_dict",
]
