"""
Event model tests.
"""

import pytest

from reward_engine.core import Deposit, InvalidEventError, Transfer, Withdraw, event_from_dict, event_to_dict
from reward_engine.core.events import MAX_UINT256, normalize_account

A = "0x" + "a" * 40
B = "0x" + "b" * 40
CHECKSUMMED = "0xaF53431488E871D103baA0280b6360998F0F9926"


def test_accounts_are_lowercased():
    ev = Deposit(CHECKSUMMED, 1, 10)
    assert ev.account == CHECKSUMMED.lower()

    t = Transfer(CHECKSUMMED, B.upper().replace("0X", "0x"), 1, 10)
    assert t.sender == CHECKSUMMED.lower()
    assert t.recipient == B


@pytest.mark.parametrize("bad", ["", "0x", "0x1234", "a" * 40, "0x" + "g" * 40, "0x" + "a" * 41])
def test_normalize_account_rejects_malformed(bad):
    with pytest.raises(InvalidEventError):
        normalize_account(bad)


def test_event_types():
    assert Deposit(A, 1, 1).type == "Deposit"
    assert Withdraw(A, 1, 1).type == "Withdraw"
    assert Transfer(A, B, 1, 1).type == "Transfer"


def test_shares_range_checked():
    Deposit(A, 0, 1)
    Deposit(A, MAX_UINT256, 1)
    with pytest.raises(InvalidEventError):
        Deposit(A, -1, 1)
    with pytest.raises(InvalidEventError):
        Withdraw(A, MAX_UINT256 + 1, 1)


def test_non_integer_fields_rejected():
    with pytest.raises(InvalidEventError):
        Deposit(A, True, 1)
    with pytest.raises(InvalidEventError):
        Deposit(A, "5", 1)
    with pytest.raises(InvalidEventError):
        Deposit(A, 5, 1.0)
    with pytest.raises(InvalidEventError):
        Deposit(A, 5, 1, log_index=-1)


def test_events_are_immutable():
    ev = Deposit(A, 1, 1)
    with pytest.raises(AttributeError):
        ev.shares = 2


def test_dict_form_uses_string_shares():
    big = 2**200
    data = event_to_dict(Transfer(A, B, big, 42, log_index=3))

    assert data == {"type": "Transfer", "from": A, "to": B, "shares": str(big), "block": 42, "log_index": 3}
    assert event_from_dict(data) == Transfer(A, B, big, 42, log_index=3)


def test_event_from_dict_accepts_numeric_shares():
    ev = event_from_dict({"type": "Withdraw", "account": A, "shares": 7, "block": "9"})
    assert ev == Withdraw(A, 7, 9)
    assert ev.log_index is None


def test_event_from_dict_unknown_type():
    with pytest.raises(InvalidEventError, match="unknown event type"):
        event_from_dict({"type": "Mint", "account": A, "shares": "1", "block": 1})


def test_event_from_dict_missing_field():
    with pytest.raises(InvalidEventError, match="malformed Deposit"):
        event_from_dict({"type": "Deposit", "shares": "1", "block": 1})
