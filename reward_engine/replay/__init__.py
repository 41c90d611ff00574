"""
Replay system for deterministic state reconstruction.

Replay sequences the event history and applies the reducer to it.
Must be 100% deterministic: same events -> same state.
"""

from .runner import ReplayResult, RewardEngine, build_reducer, replay
from .sequencer import is_sequenced, sequence, sequence_key

__all__ = [
    "ReplayResult",
    "RewardEngine",
    "build_reducer",
    "replay",
    "is_sequenced",
    "sequence",
    "sequence_key",
]
