"""
Core reward accounting primitives.

This module provides the foundational abstractions:
- Events: Deposit, Withdraw, Transfer
- State: VaultState and per-account UserRecord
- Reducer: Pure state transitions with registered handlers
- Accrual: Reward-per-share accumulator arithmetic
- Invariants: Named checks over VaultState
- Canonical: Deterministic serialization
"""

from .events import Deposit, Withdraw, Transfer, Event, event_from_dict, event_to_dict, normalize_account
from .state import UserRecord, VaultState
from .reducer import Reducer
from .handlers import register_handlers
from .canonical import canonicalize, canonical_json_bytes, canonical_json_str
from .errors import (
    PreconditionViolation,
    UnknownAccountError,
    InsufficientSharesError,
    OutOfOrderEventError,
    AccumulatorOverflowError,
    InvalidTransitionError,
    InvariantViolationError,
    InvalidEventError,
    InvalidQueryError,
    DecodeError,
    LogFetchError,
)

__all__ = [
    "Deposit",
    "Withdraw",
    "Transfer",
    "Event",
    "event_from_dict",
    "event_to_dict",
    "normalize_account",
    "UserRecord",
    "VaultState",
    "Reducer",
    "register_handlers",
    "canonicalize",
    "canonical_json_bytes",
    "canonical_json_str",
    "PreconditionViolation",
    "UnknownAccountError",
    "InsufficientSharesError",
    "OutOfOrderEventError",
    "AccumulatorOverflowError",
    "InvalidTransitionError",
    "InvariantViolationError",
    "InvalidEventError",
    "InvalidQueryError",
    "DecodeError",
    "LogFetchError",
]
