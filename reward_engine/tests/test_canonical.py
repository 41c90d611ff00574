"""
Tests for canonical serialization.

Critical: These tests verify determinism guarantees.
"""

from reward_engine.core.canonical import canonicalize, canonical_json_bytes, canonical_json_str


def test_canonicalize_dict_key_order():
    """Dict key order must not affect canonical output."""
    d1 = {"z": 1, "a": 2, "m": 3}
    d2 = {"a": 2, "m": 3, "z": 1}

    assert canonicalize(d1) == canonicalize(d2)


def test_canonicalize_nested():
    """Nested structures must be canonicalized recursively."""
    obj = {
        "outer": {
            "z": (3, 1, 2),
            "a": {"nested": True}
        }
    }

    canon = canonicalize(obj)

    assert list(canon["outer"].keys()) == ["a", "z"]
    assert canon["outer"]["z"] == ["3", "1", "2"]  # list order kept, tuple -> list
    assert canon["outer"]["a"]["nested"] is True


def test_canonicalize_ints_become_strings():
    """Integers beyond double precision must survive exactly."""
    big = 2**256 - 1
    canon = canonicalize({"v": big, "none": None, "flag": False})

    assert canon == {"flag": False, "none": None, "v": str(big)}


def test_canonical_json_bytes_determinism():
    """Same object must produce identical bytes."""
    obj = {"b": 2, "a": 1, "c": {"x": 10, "y": 20}}

    b1 = canonical_json_bytes(obj)
    b2 = canonical_json_bytes(obj)

    assert b1 == b2
    assert isinstance(b1, bytes)


def test_canonical_json_str_format():
    obj = {"b": 2, "a": 1}

    assert canonical_json_str(obj) == '{"a":"1","b":"2"}'  # Keys sorted, no whitespace
