"""
File-based event source using JSONL format.

Each line is one event:
    {"type": "Deposit", "account": "0x...", "shares": "1000", "block": 17564700, "log_index": 3}
    {"type": "Transfer", "from": "0x...", "to": "0x...", "shares": "5", "block": 17564800, "log_index": null}

Files are the hand-off between log acquisition and replay; they are inputs,
never engine state.
"""

import json
import os
from typing import Dict, Iterable, Iterator

from ..core.errors import InvalidEventError
from ..core.events import Event, event_from_dict, event_to_dict


def read_events(path: str) -> Iterator[Event]:
    """
    Read events from a JSONL file.

    Yields:
        Events in file order

    Raises:
        FileNotFoundError: If path does not exist
        InvalidEventError: On a malformed line (message includes the line number)
    """
    with open(path, "rb") as f:
        for lineno, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                rec = json.loads(line)
            except ValueError as ex:
                raise InvalidEventError(f"{path}:{lineno}: invalid JSON: {ex}") from ex
            if not isinstance(rec, dict):
                raise InvalidEventError(f"{path}:{lineno}: expected an object")
            try:
                yield event_from_dict(rec)
            except InvalidEventError as ex:
                raise InvalidEventError(f"{path}:{lineno}: {ex}") from ex


def write_events(path: str, events: Iterable[Event]) -> int:
    """
    Write events to a JSONL file, replacing it atomically.

    Returns:
        Number of events written
    """
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    tmp_path = f"{path}.tmp"
    count = 0
    with open(tmp_path, "wb") as f:
        for ev in events:
            f.write((_line(event_to_dict(ev)) + "\n").encode("utf-8"))
            count += 1
        f.flush()
        os.fsync(f.fileno())
    os.replace(tmp_path, path)
    return count


def _line(data: Dict) -> str:
    # block and log_index stay numeric; shares is already a decimal string
    return json.dumps(data, sort_keys=True, separators=(",", ":"))


def count_by_type(events: Iterable[Event]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for ev in events:
        counts[ev.type] = counts.get(ev.type, 0) + 1
    return counts
