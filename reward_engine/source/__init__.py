"""
Event sources for replay.

- read_events / write_events: JSONL event files
"""

from .file_source import count_by_type, read_events, write_events

__all__ = [
    "count_by_type",
    "read_events",
    "write_events",
]
