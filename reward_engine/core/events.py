"""
Event model for vault stake changes.

Events are immutable records of deposits, withdrawals and share transfers,
each stamped with the block (and optionally the log index) it was emitted at.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from .errors import InvalidEventError

MAX_UINT256 = 2**256 - 1
MAX_UINT64 = 2**64 - 1

_ADDRESS_RE = re.compile(r"^0x[0-9a-f]{40}$")


def normalize_account(account: str) -> str:
    """
    Normalize a 20-byte account identifier to lowercase 0x-hex.

    Raises:
        InvalidEventError: If the value is not a 20-byte hex address
    """
    a = str(account).strip().lower()
    if not _ADDRESS_RE.match(a):
        raise InvalidEventError(f"invalid account: {account!r}")
    return a


def _check_uint(name: str, value: Any, upper: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidEventError(f"{name} must be an integer, got {value!r}")
    if value < 0 or value > upper:
        raise InvalidEventError(f"{name} out of range: {value}")
    return value


def _check_log_index(value: Optional[int]) -> Optional[int]:
    if value is None:
        return None
    return _check_uint("log_index", value, MAX_UINT64)


@dataclass(frozen=True)
class Deposit:
    """
    Shares staked into the vault for an account.

    Fields:
        account: Receiving account (lowercase 0x-hex)
        shares: Share amount, 18-decimal fixed point
        block: Block number of the source log
        log_index: Position of the source log within its block (None if unknown)
    """
    account: str
    shares: int
    block: int
    log_index: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "account", normalize_account(self.account))
        _check_uint("shares", self.shares, MAX_UINT256)
        _check_uint("block", self.block, MAX_UINT64)
        _check_log_index(self.log_index)

    @property
    def type(self) -> str:
        return "Deposit"


@dataclass(frozen=True)
class Withdraw:
    """Shares removed from the vault for an account."""
    account: str
    shares: int
    block: int
    log_index: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "account", normalize_account(self.account))
        _check_uint("shares", self.shares, MAX_UINT256)
        _check_uint("block", self.block, MAX_UINT64)
        _check_log_index(self.log_index)

    @property
    def type(self) -> str:
        return "Withdraw"


@dataclass(frozen=True)
class Transfer:
    """
    Shares moved between two accounts without entering or leaving the vault.

    Mints and burns (transfers touching the zero address) never reach the
    engine; the decoder drops them because Deposit/Withdraw already cover them.
    """
    sender: str
    recipient: str
    shares: int
    block: int
    log_index: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "sender", normalize_account(self.sender))
        object.__setattr__(self, "recipient", normalize_account(self.recipient))
        _check_uint("shares", self.shares, MAX_UINT256)
        _check_uint("block", self.block, MAX_UINT64)
        _check_log_index(self.log_index)

    @property
    def type(self) -> str:
        return "Transfer"


Event = Union[Deposit, Withdraw, Transfer]

EVENT_TYPES = ("Deposit", "Withdraw", "Transfer")


def event_to_dict(event: Event) -> Dict[str, Any]:
    """Plain dict form of an event; shares are decimal strings."""
    data: Dict[str, Any] = {
        "type": event.type,
        "block": event.block,
        "log_index": event.log_index,
        "shares": str(event.shares),
    }
    if isinstance(event, Transfer):
        data["from"] = event.sender
        data["to"] = event.recipient
    else:
        data["account"] = event.account
    return data


def event_from_dict(data: Dict[str, Any]) -> Event:
    """
    Build an event from its dict form.

    Raises:
        InvalidEventError: On unknown type or malformed fields
    """
    kind = data.get("type")
    try:
        shares = int(data["shares"])
        block = int(data["block"])
        log_index = data.get("log_index")
        if log_index is not None:
            log_index = int(log_index)
        if kind == "Deposit":
            return Deposit(account=data["account"], shares=shares, block=block, log_index=log_index)
        if kind == "Withdraw":
            return Withdraw(account=data["account"], shares=shares, block=block, log_index=log_index)
        if kind == "Transfer":
            return Transfer(
                sender=data["from"],
                recipient=data["to"],
                shares=shares,
                block=block,
                log_index=log_index,
            )
    except InvalidEventError:
        raise
    except (KeyError, TypeError, ValueError) as ex:
        raise InvalidEventError(f"malformed {kind} event: {ex}") from ex
    raise InvalidEventError(f"unknown event type: {kind!r}")
