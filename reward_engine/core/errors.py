"""
Exception types for the reward accounting engine.

Fatal replay errors derive from PreconditionViolation so callers can tell
malformed or out-of-order history apart from caller mistakes such as
querying a block the engine has already accounted past.
"""

from typing import Any, List, Optional


class PreconditionViolation(Exception):
    """
    Raised when an event cannot be applied without breaking an invariant.

    Fields:
        event: The offending event
        invariant: Name of the violated invariant
    """

    def __init__(self, message: str, event: Any = None, invariant: Optional[str] = None) -> None:
        self.event = event
        self.invariant = invariant
        detail = message
        if invariant:
            detail = f"{detail} [invariant={invariant}]"
        if event is not None:
            detail = f"{detail} [event={event!r}]"
        super().__init__(detail)


class UnknownAccountError(PreconditionViolation):
    """Raised when a withdrawal references an account that never deposited."""
    pass


class InsufficientSharesError(PreconditionViolation):
    """Raised when a subtraction would drive staked shares negative."""
    pass


class OutOfOrderEventError(PreconditionViolation):
    """Raised when an event is older than the block already accounted for."""
    pass


class AccumulatorOverflowError(PreconditionViolation):
    """Raised when a 256-bit quantity leaves its range."""
    pass


class InvalidTransitionError(Exception):
    """Raised when no handler is registered for an event type."""
    pass


class InvariantViolationError(Exception):
    """Raised when a post-state violates one or more invariants."""

    def __init__(self, violations: List[str], event: Any = None) -> None:
        self.violations = violations
        self.event = event
        message = f"invariant violations: {', '.join(violations)}"
        if event is not None:
            message = f"{message} [event={event!r}]"
        super().__init__(message)


class InvalidEventError(ValueError):
    """Raised when an event carries malformed fields."""
    pass


class InvalidQueryError(Exception):
    """Raised when a reward preview asks for a block before the accounted block."""
    pass


class DecodeError(Exception):
    """Raised when a raw log record cannot be decoded into an event."""
    pass


class LogFetchError(Exception):
    """Raised when vault logs cannot be retrieved from the node."""
    pass
