"""Exception types for the dynamic fee engine.

The arithmetic core is total over well-formed inputs; these are raised only for
out-of-domain operands, rejected configuration, or by ``poke_or_raise()`` in
``poolfee.core.poke`` for callers that prefer exceptions over ``PokeResult``
inspection.
"""

from __future__ import annotations


class DynamicFeeError(Exception):
    """Base class for dynamic fee errors."""


class FeeOverflowError(DynamicFeeError):
    """Raised when an operand or result leaves the uint256 / bounded-fee domain."""


class InvalidParamsError(DynamicFeeError):
    """Raised when parameters violate one or more bounds-policy limits."""

    def __init__(self, violations: list[str]) -> None:
        self.violations = violations
        super().__init__(f"invalid params: {', '.join(violations)}")


class RatioOutOfRangeError(DynamicFeeError):
    """Raised when an observed ratio exceeds the pool type's max current ratio."""


class FeeInvariantError(DynamicFeeError):
    """Raised when a post-poke state violates one or more invariants."""

    def __init__(self, violations: list[str]) -> None:
        self.violations = violations
        super().__init__(f"invariant violations: {', '.join(violations)}")
