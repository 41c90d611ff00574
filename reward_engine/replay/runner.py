"""
Replay runner: reconstruct vault accounting state from an event history.

Replay is pure: the sequencer orders the events, then the reducer applies
them one at a time. Any precondition violation aborts the run.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional

from ..config import EngineConfig
from ..core.errors import InvariantViolationError
from ..core.events import Event
from ..core.handlers import register_handlers
from ..core.invariants import check_transition
from ..core.reducer import Reducer
from ..core.state import VaultState
from ..logging_config import get_logger
from .. import query
from .sequencer import sequence


@dataclass(frozen=True)
class ReplayResult:
    """
    Result of replay operation.

    Fields:
        state: Final state after applying events
        applied: Number of events applied
    """
    state: VaultState
    applied: int


def build_reducer(config: Optional[EngineConfig] = None) -> Reducer:
    reducer = Reducer(config)
    register_handlers(reducer)
    return reducer


def replay(
    events: Iterable[Event],
    reducer: Optional[Reducer] = None,
    to_block: Optional[int] = None,
    check_invariants: bool = False,
    trace_id: Optional[str] = None,
) -> ReplayResult:
    """
    Replay events to reconstruct state.

    Args:
        events: Events in any order; they are sequenced before application
        reducer: Reducer with registered handlers (default: vault handlers, default config)
        to_block: Stop before the first event after this block (inclusive, None = all)
        check_invariants: Verify every invariant after each event
        trace_id: Correlation id for log lines

    Returns:
        ReplayResult with final state and count

    Raises:
        PreconditionViolation: On malformed or out-of-order history
        InvariantViolationError: If check_invariants is set and a post-state is invalid
    """
    reducer = reducer or build_reducer()
    logger = get_logger(__name__, trace_id=trace_id)

    st = reducer.initial_state()
    count = 0

    for ev in sequence(events):
        if to_block is not None and ev.block > to_block:
            break
        nxt = reducer.apply(st, ev)
        if check_invariants:
            violations = check_transition(st, nxt)
            if violations:
                raise InvariantViolationError(violations, event=ev)
        logger.debug("Applied %s at block %d", ev.type, ev.block)
        st = nxt
        count += 1

    logger.info(
        "Replayed %d events",
        count,
        extra={
            "accounts": len(st.user_records),
            "last_accounted_block": st.last_accounted_block,
        },
    )
    return ReplayResult(state=st, applied=count)


class RewardEngine:
    """
    Stateful facade over the reducer for sequential replay and queries.

    Usage:
        engine = RewardEngine(EngineConfig(deploy_block=100))
        engine.apply_all(events)
        engine.preview("0xabc...", block=200)
    """

    def __init__(self, config: Optional[EngineConfig] = None) -> None:
        self.reducer = build_reducer(config)
        self.config = self.reducer.config
        self.state = self.reducer.initial_state()

    def apply(self, event: Event) -> VaultState:
        """Apply one event; events must arrive in non-decreasing block order."""
        self.state = self.reducer.apply(self.state, event)
        return self.state

    def apply_all(self, events: Iterable[Event], check_invariants: bool = False) -> int:
        """Sequence and apply events on top of the current state."""
        applied = 0
        for ev in sequence(events):
            nxt = self.reducer.apply(self.state, ev)
            if check_invariants:
                violations = check_transition(self.state, nxt)
                if violations:
                    raise InvariantViolationError(violations, event=ev)
            self.state = nxt
            applied += 1
        return applied

    def preview(self, account: str, block: int) -> int:
        return query.preview_reward(self.state, account, block, self.config)

    def total_rewards(self, block: int) -> int:
        return query.total_rewards(self.state, block, self.config)

    def ranked_user_rewards(self, block: int) -> List[query.AccountReward]:
        return query.ranked_user_rewards(self.state, block, self.config)
