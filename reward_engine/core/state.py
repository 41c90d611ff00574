"""
State model for reward accounting.

VaultState holds the global running totals and one UserRecord per account
that ever deposited. Both are immutable; handlers return new instances.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class UserRecord:
    """
    Per-account accounting snapshot.

    Fields:
        shares_staked: Shares currently held by the account
        rewards_per_share_snapshot: Global accumulator value at the last stake change
        rewards_accumulated: Settled reward scaled by precision, kept after full withdrawal
    """
    shares_staked: int = 0
    rewards_per_share_snapshot: int = 0
    rewards_accumulated: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "shares_staked": str(self.shares_staked),
            "rewards_per_share_snapshot": str(self.rewards_per_share_snapshot),
            "rewards_accumulated": str(self.rewards_accumulated),
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "UserRecord":
        return UserRecord(
            shares_staked=int(data.get("shares_staked", 0)),
            rewards_per_share_snapshot=int(data.get("rewards_per_share_snapshot", 0)),
            rewards_accumulated=int(data.get("rewards_accumulated", 0)),
        )


@dataclass(frozen=True)
class VaultState:
    """
    Immutable global accounting state.

    Fields:
        last_accounted_block: Block up to which rewards were distributed
        user_records: account -> UserRecord (never shrinks)
        total_shares_staked: Sum of shares_staked over all records
        total_rewards_per_share: Cumulative reward per share, scaled by PRECISION
        last_event_block: Block of the most recently applied event (None before the first)
        version: Number of events applied

    Use with_record() to derive the state that follows a stake change.
    """
    last_accounted_block: int
    user_records: Dict[str, UserRecord] = field(default_factory=dict)
    total_shares_staked: int = 0
    total_rewards_per_share: int = 0
    last_event_block: Optional[int] = None
    version: int = 0

    @staticmethod
    def initial(deploy_block: int) -> "VaultState":
        return VaultState(last_accounted_block=deploy_block)

    def get_record(self, account: str) -> Optional[UserRecord]:
        """
        Get an account's record.

        Returns:
            UserRecord or None if the account never deposited
        """
        return self.user_records.get(account)

    def with_record(self, account: str, record: UserRecord, total_shares_staked: int) -> "VaultState":
        """
        Create new state with an updated record and total stake.

        Since VaultState is immutable, this returns a new VaultState instance.
        """
        records = dict(self.user_records)
        records[account] = record
        return replace(self, user_records=records, total_shares_staked=total_shares_staked)

    def with_accumulator(self, total_rewards_per_share: int, last_accounted_block: int) -> "VaultState":
        return replace(
            self,
            total_rewards_per_share=total_rewards_per_share,
            last_accounted_block=last_accounted_block,
        )

    def accounts(self):
        return sorted(self.user_records.keys())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "last_accounted_block": self.last_accounted_block,
            "last_event_block": self.last_event_block,
            "total_shares_staked": str(self.total_shares_staked),
            "total_rewards_per_share": str(self.total_rewards_per_share),
            "user_records": {k: v.to_dict() for k, v in self.user_records.items()},
            "version": self.version,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "VaultState":
        return VaultState(
            last_accounted_block=int(data["last_accounted_block"]),
            last_event_block=data.get("last_event_block"),
            total_shares_staked=int(data.get("total_shares_staked", 0)),
            total_rewards_per_share=int(data.get("total_rewards_per_share", 0)),
            user_records={
                k: UserRecord.from_dict(v) for k, v in (data.get("user_records") or {}).items()
            },
            version=int(data.get("version", 0)),
        )
