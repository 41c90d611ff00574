"""
Reducer handlers for vault stake changes.

All handlers are pure and deterministic. A transfer is a withdrawal from the
sender followed by a deposit to the recipient at the same block, routed
through the same two handlers so share conservation holds mechanically.
"""

from ..config import EngineConfig
from .accrual import check_uint256, distribute_to_block, settle
from .errors import InsufficientSharesError, UnknownAccountError
from .events import Deposit, Event, Transfer, Withdraw
from .state import UserRecord, VaultState


def register_handlers(reducer) -> None:
    reducer.register("Deposit", on_deposit)
    reducer.register("Withdraw", on_withdraw)
    reducer.register("Transfer", on_transfer)


def credit(state: VaultState, account: str, shares: int, block: int, config: EngineConfig,
           event: Event) -> VaultState:
    state = distribute_to_block(state, block, config, event)
    rps = state.total_rewards_per_share

    record = state.get_record(account)
    if record is None:
        new_record = UserRecord(
            shares_staked=shares,
            rewards_per_share_snapshot=rps,
            rewards_accumulated=0,
        )
    else:
        new_record = UserRecord(
            shares_staked=check_uint256("shares_staked", record.shares_staked + shares, event),
            rewards_per_share_snapshot=rps,
            rewards_accumulated=settle(state, record, event),
        )

    total = check_uint256("total_shares_staked", state.total_shares_staked + shares, event)
    return state.with_record(account, new_record, total)


def debit(state: VaultState, account: str, shares: int, block: int, config: EngineConfig,
          event: Event) -> VaultState:
    state = distribute_to_block(state, block, config, event)

    record = state.get_record(account)
    if record is None:
        raise UnknownAccountError(
            f"withdrawal from account {account} with no prior deposit",
            event=event,
            invariant="record_exists",
        )
    if shares > record.shares_staked:
        raise InsufficientSharesError(
            f"account {account} withdraws {shares} shares but holds {record.shares_staked}",
            event=event,
            invariant="shares_staked_non_negative",
        )
    if shares > state.total_shares_staked:
        raise InsufficientSharesError(
            f"withdrawal of {shares} shares exceeds total staked {state.total_shares_staked}",
            event=event,
            invariant="total_shares_staked_non_negative",
        )

    new_record = UserRecord(
        shares_staked=record.shares_staked - shares,
        rewards_per_share_snapshot=state.total_rewards_per_share,
        rewards_accumulated=settle(state, record, event),
    )
    return state.with_record(account, new_record, state.total_shares_staked - shares)


def on_deposit(state: VaultState, ev: Deposit, config: EngineConfig) -> VaultState:
    return credit(state, ev.account, ev.shares, ev.block, config, ev)


def on_withdraw(state: VaultState, ev: Withdraw, config: EngineConfig) -> VaultState:
    return debit(state, ev.account, ev.shares, ev.block, config, ev)


def on_transfer(state: VaultState, ev: Transfer, config: EngineConfig) -> VaultState:
    # Second distribute_to_block call is a no-op: same block.
    state = debit(state, ev.sender, ev.shares, ev.block, config, ev)
    return credit(state, ev.recipient, ev.shares, ev.block, config, ev)
