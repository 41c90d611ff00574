"""
Vault log acquisition over JSON-RPC (web3.py).

Walks [from_block, to_block] in fixed-size chunks, halving a chunk when the
node refuses an oversized result, and retries transient failures with
jittered exponential backoff. Logs come back ordered by (blockNumber,
logIndex) within each request; replay re-sequences them anyway.
"""

from __future__ import annotations

import random
import time
from typing import Any, Callable, List, Optional, Tuple

from web3 import Web3

from ..config import ChainConfig
from ..core.errors import LogFetchError
from ..core.events import Event
from ..logging_config import get_logger
from .decode import TOPIC0, decode_logs

_TOO_MANY = (
    "more than",
    "too many results",
    "response size exceeded",
    "query returned more than",
    "block range too wide",
    "exceed maximum block range",
    "range is too large",
)

_RETRYABLE = (
    "timeout",
    "timed out",
    "too many requests",
    "429",
    "rate limit",
    "temporarily unavailable",
    "service unavailable",
    "bad gateway",
    "gateway timeout",
    "connection reset",
    "connection aborted",
    "internal error",
)


def connect(rpc_url: str, timeout_s: int = 45) -> Web3:
    return Web3(Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": timeout_s}))


def _is_too_many(err: Exception) -> bool:
    msg = str(err).lower()
    return any(s in msg for s in _TOO_MANY)


def _is_retryable(err: Exception) -> bool:
    if isinstance(err, (TimeoutError, ConnectionError)):
        return True
    msg = str(err).lower()
    return any(s in msg for s in _RETRYABLE)


class LogFetcher:
    """
    Chunked, retrying eth_getLogs client for one vault.

    Usage:
        fetcher = LogFetcher(connect(url), vault_address, chunk_size=50_000)
        logs = fetcher.fetch(17564663, fetcher.latest_block())
    """

    def __init__(
        self,
        w3: Any,
        vault_address: str,
        chunk_size: int = 50_000,
        max_tries: int = 6,
        max_splits: int = 24,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be > 0")
        self.w3 = w3
        self.vault_address = Web3.to_checksum_address(vault_address)
        self.chunk_size = chunk_size
        self.max_tries = max_tries
        self.max_splits = max_splits
        self._sleep = sleep
        self.logger = get_logger(__name__, trace_id=self.vault_address)

    def _with_retries(self, what: str, fn: Callable[[], Any]) -> Any:
        for attempt in range(1, self.max_tries + 1):
            try:
                return fn()
            except Exception as e:
                if _is_too_many(e) or not _is_retryable(e) or attempt == self.max_tries:
                    raise
                sleep_s = min(2 ** (attempt - 1), 30.0)
                sleep_s = sleep_s * (1 + random.uniform(-0.15, 0.15))
                self.logger.warning(
                    "%s failed (attempt %d/%d): %s; retrying in %.1fs",
                    what, attempt, self.max_tries, e, sleep_s,
                )
                self._sleep(max(0.5, sleep_s))
        raise LogFetchError(f"{what} failed")

    def latest_block(self) -> int:
        try:
            return int(self._with_retries("eth_blockNumber", lambda: self.w3.eth.block_number))
        except LogFetchError:
            raise
        except Exception as e:
            raise LogFetchError(f"eth_blockNumber failed: {e}") from e

    def get_logs_range(self, from_block: int, to_block: int, max_splits: Optional[int] = None) -> List[Any]:
        """
        Fetch vault logs in one range, splitting it while the node says it is too large.
        """
        max_splits = self.max_splits if max_splits is None else max_splits
        params = {
            "address": self.vault_address,
            "topics": [list(TOPIC0.values())],
            "fromBlock": from_block,
            "toBlock": to_block,
        }
        try:
            return list(
                self._with_retries(
                    f"eth_getLogs[{from_block},{to_block}]",
                    lambda: self.w3.eth.get_logs(params),
                )
                or []
            )
        except Exception as e:
            if not _is_too_many(e) or max_splits <= 0 or from_block >= to_block:
                raise LogFetchError(f"eth_getLogs[{from_block},{to_block}] failed: {e}") from e

        mid = (from_block + to_block) // 2
        self.logger.debug("Splitting range %d-%d at %d", from_block, to_block, mid)
        left = self.get_logs_range(from_block, mid, max_splits - 1)
        right = self.get_logs_range(mid + 1, to_block, max_splits - 1)
        return left + right

    def fetch(self, from_block: int, to_block: int) -> List[Any]:
        """
        Fetch every vault log in [from_block, to_block].

        Raises:
            LogFetchError: If a range cannot be fetched
        """
        if to_block < from_block:
            return []
        logs: List[Any] = []
        start = from_block
        while start <= to_block:
            end = min(to_block, start + self.chunk_size - 1)
            chunk = self.get_logs_range(start, end)
            self.logger.info("Fetched %d logs for blocks %d-%d", len(chunk), start, end)
            logs.extend(chunk)
            start = end + 1
        return logs


def fetch_vault_events(
    config: ChainConfig,
    from_block: int,
    to_block: Optional[int] = None,
    w3: Any = None,
) -> Tuple[List[Event], int]:
    """
    Fetch and decode every stake-changing vault event.

    Args:
        config: RPC endpoint, vault address and chunk size
        from_block: First block (usually the deploy block)
        to_block: Last block (None = chain head)
        w3: Web3 instance to use (default: HTTP provider on config.rpc_url)

    Returns:
        (events in fetch order, to_block actually used)
    """
    fetcher = LogFetcher(w3 or connect(config.rpc_url), config.vault_address, chunk_size=config.chunk_size)
    end = fetcher.latest_block() if to_block is None else to_block
    logs = fetcher.fetch(from_block, end)
    return decode_logs(logs), end
