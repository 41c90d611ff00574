"""
Chain collaborators: fetch vault logs and decode them into events.
"""

from .decode import SIGNATURES, TOPIC0, ZERO_ADDRESS, decode_log, decode_logs, event_topic
from .fetch import LogFetcher, connect, fetch_vault_events

__all__ = [
    "SIGNATURES",
    "TOPIC0",
    "ZERO_ADDRESS",
    "decode_log",
    "decode_logs",
    "event_topic",
    "LogFetcher",
    "connect",
    "fetch_vault_events",
]
