"""
Deterministic reward queries over a replayed VaultState.

All functions are read-only; calling them any number of times leaves the
state untouched and returns identical results.
"""

from dataclasses import dataclass
from decimal import Decimal, localcontext
from typing import Dict, List, Optional

from .config import EngineConfig
from .core.accrual import projected_reward
from .core.errors import InvalidQueryError
from .core.events import normalize_account
from .core.state import UserRecord, VaultState

PERCENT_PRECISION = 80


@dataclass(frozen=True)
class AccountReward:
    account: str
    reward: int


@dataclass(frozen=True)
class RewardShare:
    account: str
    reward: int
    percent: Decimal


@dataclass(frozen=True)
class RewardReport:
    """
    Aggregate view at one evaluation block.

    Fields:
        block: Evaluation block
        expected_issuance: (block - deploy_block) * reward_rate_per_block
        total_reward: Sum of previewed rewards across all accounts
        rows: Ranked accounts with their share of total_reward
    """
    block: int
    expected_issuance: int
    total_reward: int
    rows: List[RewardShare]


def list_accounts(state: VaultState) -> List[str]:
    return state.accounts()


def get_record(state: VaultState, account: str) -> Optional[UserRecord]:
    return state.get_record(normalize_account(account))


def _check_block(state: VaultState, block: int) -> None:
    if block < state.last_accounted_block:
        raise InvalidQueryError(
            f"evaluation block {block} is before last accounted block {state.last_accounted_block}"
        )


def preview_reward(state: VaultState, account: str, block: int, config: EngineConfig) -> int:
    """
    Reward earned by account up to block, in base units.

    Returns:
        0 for accounts that never deposited

    Raises:
        InvalidQueryError: If block is before last_accounted_block
    """
    _check_block(state, block)
    record = state.get_record(normalize_account(account))
    if record is None:
        return 0
    return projected_reward(state, record, block, config)


def _all_rewards(state: VaultState, block: int, config: EngineConfig) -> Dict[str, int]:
    _check_block(state, block)
    return {
        account: projected_reward(state, record, block, config)
        for account, record in state.user_records.items()
    }


def total_rewards(state: VaultState, block: int, config: EngineConfig) -> int:
    return sum(_all_rewards(state, block, config).values())


def ranked_user_rewards(state: VaultState, block: int, config: EngineConfig) -> List[AccountReward]:
    """
    Non-zero rewards sorted by reward descending, ties broken by account ascending.
    """
    rewards = _all_rewards(state, block, config)
    ranked = sorted(
        ((account, reward) for account, reward in rewards.items() if reward != 0),
        key=lambda kv: (-kv[1], kv[0]),
    )
    return [AccountReward(account=a, reward=r) for a, r in ranked]


def expected_issuance(block: int, config: EngineConfig) -> int:
    return max(0, block - config.deploy_block) * config.reward_rate_per_block


def reward_report(state: VaultState, block: int, config: EngineConfig, top: Optional[int] = None) -> RewardReport:
    """
    Ranked rewards with each account's percentage of the aggregate.

    Args:
        top: Keep only the first N rows (None = all); total_reward still covers every account
    """
    ranked = ranked_user_rewards(state, block, config)
    total = sum(r.reward for r in ranked)

    rows = []
    with localcontext() as ctx:
        ctx.prec = PERCENT_PRECISION
        for r in ranked if top is None else ranked[:top]:
            pct = Decimal(r.reward) * 100 / Decimal(total) if total else Decimal(0)
            rows.append(RewardShare(account=r.account, reward=r.reward, percent=pct))

    return RewardReport(
        block=block,
        expected_issuance=expected_issuance(block, config),
        total_reward=total,
        rows=rows,
    )


def format_units(value: int, decimals: int = 18) -> str:
    """
    Render a fixed-point integer exactly, e.g. 1500000000000000000 -> "1.5".
    """
    sign = "-" if value < 0 else ""
    whole, frac = divmod(abs(value), 10**decimals)
    if decimals == 0 or frac == 0:
        return f"{sign}{whole}"
    frac_str = str(frac).rjust(decimals, "0").rstrip("0")
    return f"{sign}{whole}.{frac_str}"
