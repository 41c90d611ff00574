"""
Deterministic state snapshot utilities.

Ensures same state always produces same bytes.
"""

import base64
import hashlib
import json

from .core.canonical import canonical_json_bytes
from .core.state import VaultState


def serialize_state(state: VaultState) -> bytes:
    """
    Serialize state to deterministic bytes.

    Uses canonical JSON serialization, so record insertion order and
    whitespace never change the output.
    """
    return canonical_json_bytes(state.to_dict())


def compute_state_hash(state: VaultState) -> str:
    """
    Compute SHA-256 hash of state.

    Returns:
        Hex string (64 characters)
    """
    return hashlib.sha256(serialize_state(state)).hexdigest()


def state_to_base64(state: VaultState) -> str:
    return base64.b64encode(serialize_state(state)).decode("ascii")


def state_from_base64(b64_str: str) -> VaultState:
    """
    Deserialize state from base64 string.

    Returns:
        Reconstructed VaultState
    """
    data = json.loads(base64.b64decode(b64_str))
    if data.get("last_event_block") is not None:
        data["last_event_block"] = int(data["last_event_block"])
    return VaultState.from_dict(data)
