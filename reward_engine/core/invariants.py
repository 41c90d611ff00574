"""Invariant checkers for VaultState.

Each function returns True when the invariant holds. `check_all()` returns
the names of violated invariants (empty = all pass) and
`check_transition()` adds the monotonicity checks that need the prior state.
"""

from __future__ import annotations

from typing import Callable

from .events import MAX_UINT256
from .state import VaultState


def inv_shares_conserved(s: VaultState) -> bool:
    return s.total_shares_staked == sum(r.shares_staked for r in s.user_records.values())


def inv_shares_non_negative(s: VaultState) -> bool:
    return s.total_shares_staked >= 0 and all(r.shares_staked >= 0 for r in s.user_records.values())


def inv_snapshots_not_ahead(s: VaultState) -> bool:
    return all(r.rewards_per_share_snapshot <= s.total_rewards_per_share for r in s.user_records.values())


def inv_accounted_not_after_event(s: VaultState) -> bool:
    if s.last_event_block is None:
        return True
    return s.last_accounted_block <= s.last_event_block


def inv_within_uint256(s: VaultState) -> bool:
    if s.total_shares_staked > MAX_UINT256 or s.total_rewards_per_share > MAX_UINT256:
        return False
    return all(
        r.shares_staked <= MAX_UINT256
        and r.rewards_accumulated <= MAX_UINT256
        and r.rewards_per_share_snapshot <= MAX_UINT256
        for r in s.user_records.values()
    )


INVARIANTS: dict[str, Callable[[VaultState], bool]] = {
    "shares_conserved": inv_shares_conserved,
    "shares_non_negative": inv_shares_non_negative,
    "snapshots_not_ahead": inv_snapshots_not_ahead,
    "accounted_not_after_event": inv_accounted_not_after_event,
    "within_uint256": inv_within_uint256,
}


def check_all(s: VaultState) -> list[str]:
    return [name for name, fn in INVARIANTS.items() if not fn(s)]


def check_transition(before: VaultState, after: VaultState) -> list[str]:
    violations = check_all(after)
    if after.total_rewards_per_share < before.total_rewards_per_share:
        violations.append("rewards_per_share_monotonic")
    if after.last_accounted_block < before.last_accounted_block:
        violations.append("accounted_block_monotonic")
    if not set(before.user_records) <= set(after.user_records):
        violations.append("records_never_deleted")
    return violations
