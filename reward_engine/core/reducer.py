"""
Reducer: dispatches each event to the handler registered for its type.

Handlers never mutate their input and never touch I/O, so replaying the
same sequence always yields the same VaultState. The reducer itself owns
the ordering rule: blocks never go backwards.
"""

from dataclasses import replace
from typing import Callable, Dict, Optional

from ..config import EngineConfig
from .errors import InvalidTransitionError, OutOfOrderEventError
from .events import Event
from .state import VaultState

# Handler signature: (current_state, event, config) -> new_state
Handler = Callable[[VaultState, Event, EngineConfig], VaultState]


class Reducer:
    """
    Handler table keyed by event type, bound to one EngineConfig.

    Usage:
        reducer = Reducer(config)
        reducer.register("Deposit", apply_deposit)
        new_state = reducer.apply(state, event)
    """

    def __init__(self, config: Optional[EngineConfig] = None) -> None:
        self.config = config or EngineConfig()
        self._handlers: Dict[str, Handler] = {}

    def register(self, event_type: str, handler: Handler) -> None:
        """
        Bind handler to event_type, replacing any previous binding.

        Args:
            event_type: "Deposit", "Withdraw" or "Transfer"
            handler: Pure function (state, event, config) -> new_state
        """
        self._handlers[event_type] = handler

    def initial_state(self) -> VaultState:
        return VaultState.initial(self.config.deploy_block)

    def apply(self, state: VaultState, event: Event) -> VaultState:
        """
        Run the handler for event.type against state.

        Returns:
            Successor state with last_event_block and version advanced

        Raises:
            InvalidTransitionError: If event.type has no handler
            OutOfOrderEventError: If the event is older than the state
            PreconditionViolation: If the handler rejects the event
        """
        handler = self._handlers.get(event.type)
        if handler is None:
            raise InvalidTransitionError(f"no handler registered for {event.type}")

        floor = state.last_accounted_block
        if state.last_event_block is not None:
            floor = max(floor, state.last_event_block)
        if event.block < floor:
            raise OutOfOrderEventError(
                f"event block {event.block} is before block {floor}",
                event=event,
                invariant="non_decreasing_blocks",
            )

        new_state = handler(state, event, self.config)
        return replace(new_state, last_event_block=event.block, version=state.version + 1)
