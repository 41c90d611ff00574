"""
Canonical JSON for state hashing.

Two equal VaultStates always encode to the same bytes: mapping keys are
sorted, no whitespace is emitted, and integers are written as decimal
strings so 256-bit values survive any JSON reader.
"""

import json
from typing import Any

_SEPARATORS = (",", ":")


def canonicalize(obj: Any) -> Any:
    """
    Normalize nested dict/list/tuple/int data.

    Rules:
    - mapping keys become strings, sorted
    - tuples converted to lists, sequence order kept
    - ints become decimal strings; bool and None pass through
    """
    if isinstance(obj, dict):
        return {str(key): canonicalize(obj[key]) for key in sorted(obj)}
    if isinstance(obj, (list, tuple)):
        return [canonicalize(item) for item in obj]
    if isinstance(obj, int) and not isinstance(obj, bool):
        return str(obj)
    return obj


def canonical_json_str(obj: Any) -> str:
    return json.dumps(canonicalize(obj), sort_keys=True, separators=_SEPARATORS, ensure_ascii=False)


def canonical_json_bytes(obj: Any) -> bytes:
    """UTF-8 bytes of canonical_json_str(obj); this is what gets hashed."""
    return canonical_json_str(obj).encode("utf-8")
