"""
Reward-per-share accumulator arithmetic.

All values are unbounded Python ints checked against the 256-bit range.
total_rewards_per_share and settled rewards are both scaled by
EngineConfig.precision; a reward is descaled once, when it is previewed.
"""

from typing import Any

from ..config import EngineConfig
from .errors import AccumulatorOverflowError
from .events import MAX_UINT256
from .state import UserRecord, VaultState


def check_uint256(name: str, value: int, event: Any = None) -> int:
    """
    Ensure value fits an unsigned 256-bit word.

    Raises:
        AccumulatorOverflowError: If value is outside [0, 2**256 - 1]
    """
    if value < 0 or value > MAX_UINT256:
        raise AccumulatorOverflowError(f"{name} out of uint256 range: {value}", event=event, invariant=name)
    return value


def reward_per_share_delta(elapsed_blocks: int, total_shares: int, config: EngineConfig) -> int:
    """Accumulator increment for elapsed_blocks of issuance spread over total_shares."""
    pending = elapsed_blocks * config.reward_rate_per_block
    return pending * config.precision // total_shares


def distribute_to_block(state: VaultState, block: int, config: EngineConfig, event: Any = None) -> VaultState:
    """
    Advance the accumulator to block.

    No-op when block is not ahead of last_accounted_block. With nothing
    staked the accumulator never moves; under the "forfeit" policy the
    accounted block still advances so that issuance is dropped, under
    "carry" the state is left as is and the gap is paid to the next stakers.

    Returns:
        New VaultState (or the same instance when nothing changes)
    """
    if block <= state.last_accounted_block:
        return state
    if state.total_shares_staked == 0:
        if config.zero_stake_policy == "forfeit":
            return state.with_accumulator(state.total_rewards_per_share, block)
        return state

    delta = reward_per_share_delta(block - state.last_accounted_block, state.total_shares_staked, config)
    total = check_uint256("total_rewards_per_share", state.total_rewards_per_share + delta, event)
    return state.with_accumulator(total_rewards_per_share=total, last_accounted_block=block)


def unsettled_reward(record: UserRecord, rewards_per_share: int) -> int:
    """Reward accrued since the record's snapshot, still scaled by precision."""
    return (rewards_per_share - record.rewards_per_share_snapshot) * record.shares_staked


def settle(state: VaultState, record: UserRecord, event: Any = None) -> int:
    """
    Fold the pending reward of record into its settled total.

    No division happens here, so frequent stake changes never shave off
    rounding remainders.

    Returns:
        New rewards_accumulated value (scaled)
    """
    settled = record.rewards_accumulated + unsettled_reward(record, state.total_rewards_per_share)
    return check_uint256("rewards_accumulated", settled, event)


def projected_reward(state: VaultState, record: UserRecord, block: int, config: EngineConfig) -> int:
    """
    Reward owed to record at block in base units, without touching state.

    With nothing staked there is no denominator to project over, so only
    the settled reward and the stale snapshot delta count.
    """
    if state.total_shares_staked == 0:
        stale = unsettled_reward(record, state.total_rewards_per_share)
        return (record.rewards_accumulated + stale) // config.precision

    projected = reward_per_share_delta(block - state.last_accounted_block, state.total_shares_staked, config)
    user_reward = (
        state.total_rewards_per_share + projected - record.rewards_per_share_snapshot
    ) * record.shares_staked
    return (user_reward + record.rewards_accumulated) // config.precision
