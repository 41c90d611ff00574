"""
ERC-4626 vault log decoding.

Turns raw `eth_getLogs` records into typed events:
- Deposit(address indexed sender, address indexed owner, uint256 assets, uint256 shares)
    account = topics[2], shares = data word 1
- Withdraw(address indexed sender, address indexed receiver, address indexed owner, uint256 assets, uint256 shares)
    account = topics[3], shares = data word 1
- Transfer(address indexed from, address indexed to, uint256 value)
    from = topics[1], to = topics[2], shares = data word 0
    mints and burns (zero address on either side) are dropped; Deposit/Withdraw cover them.

Records may come straight from JSON-RPC (hex strings) or from web3.py
(AttributeDict with HexBytes and ints).
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional

from web3 import Web3

from ..core.errors import DecodeError, InvalidEventError
from ..core.events import Deposit, Event, Transfer, Withdraw

SIGNATURES = {
    "Deposit": "Deposit(address,address,uint256,uint256)",
    "Withdraw": "Withdraw(address,address,address,uint256,uint256)",
    "Transfer": "Transfer(address,address,uint256)",
}

ZERO_ADDRESS = "0x" + "0" * 40


def event_topic(signature: str) -> str:
    return "0x" + bytes(Web3.keccak(text=signature)).hex()


TOPIC0: Dict[str, str] = {name: event_topic(sig) for name, sig in SIGNATURES.items()}
_NAME_BY_TOPIC0 = {topic: name for name, topic in TOPIC0.items()}


def _hex(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    if isinstance(value, str):
        v = value.lower()
        return v if v.startswith("0x") else "0x" + v
    raise DecodeError(f"expected hex string or bytes, got {type(value).__name__}")


def _to_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise DecodeError(f"{name}: unexpected bool")
    if isinstance(value, int):
        return value
    try:
        return int(_hex(value), 16)
    except ValueError as ex:
        raise DecodeError(f"{name}: invalid quantity {value!r}") from ex


def _topic_to_address(topic: str) -> str:
    if len(topic) != 66:
        raise DecodeError(f"unexpected topic format: {topic}")
    return "0x" + topic[-40:]


def _decode_words(data_hex: str, n: int) -> List[int]:
    hex_str = data_hex[2:]
    need = 64 * n
    if len(hex_str) < need:
        raise DecodeError(f"data too short: need {need} hex chars, got {len(hex_str)}")
    return [int(hex_str[i : i + 64], 16) for i in range(0, need, 64)]


def decode_log(log: Mapping[str, Any]) -> Optional[Event]:
    """
    Decode one raw log.

    Returns:
        Typed event, or None for foreign topics and mint/burn transfers

    Raises:
        DecodeError: If a vault log is missing topics, data or block number
    """
    topics = [_hex(t) for t in (log.get("topics") or [])]
    if not topics:
        return None
    name = _NAME_BY_TOPIC0.get(topics[0])
    if name is None:
        return None

    if log.get("blockNumber") is None:
        raise DecodeError(f"{name} log without blockNumber (pending?)")
    block = _to_int(log["blockNumber"], "blockNumber")
    log_index = log.get("logIndex")
    log_index = None if log_index is None else _to_int(log_index, "logIndex")
    data_hex = _hex(log.get("data") or "0x")

    try:
        if name == "Deposit":
            if len(topics) < 3:
                raise DecodeError(f"Deposit log has {len(topics)} topics, need 3")
            _assets, shares = _decode_words(data_hex, 2)
            return Deposit(account=_topic_to_address(topics[2]), shares=shares, block=block, log_index=log_index)

        if name == "Withdraw":
            if len(topics) < 4:
                raise DecodeError(f"Withdraw log has {len(topics)} topics, need 4")
            _assets, shares = _decode_words(data_hex, 2)
            return Withdraw(account=_topic_to_address(topics[3]), shares=shares, block=block, log_index=log_index)

        if len(topics) < 3:
            raise DecodeError(f"Transfer log has {len(topics)} topics, need 3")
        sender = _topic_to_address(topics[1])
        recipient = _topic_to_address(topics[2])
        if sender == ZERO_ADDRESS or recipient == ZERO_ADDRESS:
            return None
        (shares,) = _decode_words(data_hex, 1)
        return Transfer(sender=sender, recipient=recipient, shares=shares, block=block, log_index=log_index)
    except InvalidEventError as ex:
        raise DecodeError(f"{name} log at block {block}: {ex}") from ex


def decode_logs(logs: Iterable[Mapping[str, Any]]) -> List[Event]:
    """Decode many logs, dropping the ones that carry no stake change."""
    events = []
    for log in logs:
        ev = decode_log(log)
        if ev is not None:
            events.append(ev)
    return events
