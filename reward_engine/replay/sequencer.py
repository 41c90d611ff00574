"""
Sequencer: total order over an unordered event collection.

Events are ordered by (block, log_index). Within a block, events lacking a
log index come before indexed ones and keep their input order (the sort is
stable), so the same input always yields the same sequence.
"""

from typing import Iterable, List, Tuple

from ..core.events import Event


def sequence_key(event: Event) -> Tuple[int, int]:
    log_index = -1 if event.log_index is None else event.log_index
    return (event.block, log_index)


def sequence(events: Iterable[Event]) -> List[Event]:
    """
    Order events for replay.

    Args:
        events: Events in any order

    Returns:
        New list sorted by (block, log_index)
    """
    return sorted(events, key=sequence_key)


def is_sequenced(events: List[Event]) -> bool:
    return all(sequence_key(a) <= sequence_key(b) for a, b in zip(events, events[1:]))
