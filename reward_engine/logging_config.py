"""
Structured logging for vault-rewards.

Log lines carry a trace_id (the vault address for fetches, a run id or
"N/A" for replays) so the output of one run can be grepped out of a shared
log stream. Records go to stderr; stdout is reserved for command output.

Environment Variables:
    VAULT_REWARDS_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR, CRITICAL - default: INFO
    VAULT_REWARDS_LOG_FORMAT: json or text - default: json

Usage:
    from reward_engine.logging_config import setup_logging, get_logger

    setup_logging()
    log = get_logger(__name__, trace_id="0xaf53...")
    log.info("Fetched %d logs", 42, extra={"from_block": 17564663})
"""

import logging
import os
import sys
from typing import Optional

from pythonjsonlogger.json import JsonFormatter

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
NOISY_LOGGERS = ("urllib3", "web3", "asyncio")

_JSON_FIELDS = "%(asctime)s %(levelname)s %(name)s %(trace_id)s %(message)s"
_TEXT_FIELDS = "%(asctime)s %(levelname)-7s %(name)s [%(trace_id)s] %(message)s"


def _resolve_level(name: Optional[str]) -> int:
    name = (name or "INFO").strip().upper()
    return getattr(logging, name) if name in LEVELS else logging.INFO


def _build_formatter(fmt: str) -> logging.Formatter:
    if fmt == "text":
        return logging.Formatter(_TEXT_FIELDS, datefmt="%Y-%m-%dT%H:%M:%S")
    return JsonFormatter(
        _JSON_FIELDS,
        rename_fields={"asctime": "ts", "levelname": "level", "name": "logger"},
    )


def setup_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    """
    Install a single stderr handler on the root logger.

    Explicit arguments win over VAULT_REWARDS_LOG_LEVEL / VAULT_REWARDS_LOG_FORMAT.
    Unknown levels fall back to INFO and unknown formats to json.
    Calling it again replaces the previous handler.
    """
    resolved = _resolve_level(level or os.getenv("VAULT_REWARDS_LOG_LEVEL"))
    log_format = (fmt or os.getenv("VAULT_REWARDS_LOG_FORMAT") or "json").strip().lower()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(resolved)
    handler.addFilter(TraceIDFilter())
    handler.setFormatter(_build_formatter(log_format))

    root = logging.getLogger()
    for old in list(root.handlers):
        root.removeHandler(old)
    root.addHandler(handler)
    root.setLevel(resolved)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(resolved, logging.WARNING))


def get_logger(name: str, trace_id: Optional[str] = None) -> logging.LoggerAdapter:
    """LoggerAdapter stamping every record with trace_id ("N/A" when unset)."""
    return logging.LoggerAdapter(logging.getLogger(name), {"trace_id": trace_id or "N/A"})


class TraceIDFilter(logging.Filter):
    """Give records logged without an adapter a trace_id so the formatters never fail."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "trace_id"):
            record.trace_id = "N/A"  # type: ignore
        return True
