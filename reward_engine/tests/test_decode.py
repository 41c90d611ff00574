"""
ERC-4626 log decoding tests.
"""

import pytest

from reward_engine.chain import TOPIC0, ZERO_ADDRESS, decode_log, decode_logs, event_topic
from reward_engine.core import DecodeError, Deposit, Transfer, Withdraw

A = "0x" + "a" * 40
B = "0x" + "b" * 40
C = "0x" + "c" * 40


def _topic(addr: str) -> str:
    return "0x" + "0" * 24 + addr[2:]


def _data(*words: int) -> str:
    return "0x" + "".join(f"{w:064x}" for w in words)


def _log(name, topics, data, block=0x10, log_index=0x2):
    return {
        "topics": [TOPIC0[name]] + topics,
        "data": data,
        "blockNumber": hex(block),
        "logIndex": hex(log_index),
    }


def test_transfer_topic_matches_erc20():
    assert TOPIC0["Transfer"] == "0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef"
    assert event_topic("Transfer(address,address,uint256)") == TOPIC0["Transfer"]


def test_decode_deposit_uses_owner_and_shares():
    log = _log("Deposit", [_topic(B), _topic(A)], _data(999, 500))
    assert decode_log(log) == Deposit(A, 500, 16, log_index=2)


def test_decode_withdraw_uses_owner_and_shares():
    log = _log("Withdraw", [_topic(B), _topic(C), _topic(A)], _data(999, 300), block=20, log_index=0)
    assert decode_log(log) == Withdraw(A, 300, 20, log_index=0)


def test_decode_transfer():
    log = _log("Transfer", [_topic(A), _topic(B)], _data(7))
    assert decode_log(log) == Transfer(A, B, 7, 16, log_index=2)


def test_mint_and_burn_transfers_dropped():
    mint = _log("Transfer", [_topic(ZERO_ADDRESS), _topic(A)], _data(7))
    burn = _log("Transfer", [_topic(A), _topic(ZERO_ADDRESS)], _data(7))

    assert decode_log(mint) is None
    assert decode_log(burn) is None


def test_foreign_and_empty_topics_ignored():
    assert decode_log({"topics": ["0x" + "1" * 64], "data": "0x", "blockNumber": 1}) is None
    assert decode_log({"topics": [], "data": "0x", "blockNumber": 1}) is None


def test_decode_web3_style_record():
    """web3.py hands back bytes for topics/data and ints for numbers."""
    log = {
        "topics": [bytes.fromhex(t[2:]) for t in (TOPIC0["Deposit"], _topic(B), _topic(A))],
        "data": bytes.fromhex(_data(1, 2)[2:]),
        "blockNumber": 17564700,
        "logIndex": 5,
    }
    assert decode_log(log) == Deposit(A, 2, 17564700, log_index=5)


def test_missing_log_index_allowed():
    log = _log("Transfer", [_topic(A), _topic(B)], _data(7))
    del log["logIndex"]
    assert decode_log(log).log_index is None


def test_pending_log_rejected():
    log = _log("Transfer", [_topic(A), _topic(B)], _data(7))
    log["blockNumber"] = None
    with pytest.raises(DecodeError, match="blockNumber"):
        decode_log(log)


def test_short_data_rejected():
    with pytest.raises(DecodeError, match="data too short"):
        decode_log(_log("Deposit", [_topic(B), _topic(A)], _data(1)))


def test_missing_topics_rejected():
    with pytest.raises(DecodeError, match="topics"):
        decode_log(_log("Withdraw", [_topic(B), _topic(A)], _data(1, 2)))


def test_malformed_topic_rejected():
    with pytest.raises(DecodeError, match="topic format"):
        decode_log(_log("Transfer", ["0x1234", _topic(B)], _data(7)))


def test_decode_logs_filters():
    logs = [
        _log("Deposit", [_topic(A), _topic(A)], _data(10, 10), block=1),
        _log("Transfer", [_topic(ZERO_ADDRESS), _topic(A)], _data(10), block=1),
        _log("Transfer", [_topic(A), _topic(B)], _data(4), block=2),
    ]
    assert decode_logs(logs) == [Deposit(A, 10, 1, log_index=2), Transfer(A, B, 4, 2, log_index=2)]
