"""
Fetch command: pull vault logs from a JSON-RPC node into an event file
"""

import json
from typing import Optional

import typer

from reward_engine.chain import fetch_vault_events
from reward_engine.config import DEFAULT_CHUNK_SIZE, DEFAULT_RPC_URL, DEFAULT_VAULT_ADDRESS, ChainConfig
from reward_engine.core.errors import DecodeError, LogFetchError
from reward_engine.source import count_by_type, write_events

from ._common import DEPLOY_BLOCK_OPTION, JSON_OPTION, console, fail


def fetch_command(
    out: str = typer.Option("events.jsonl", "--out", "-o", help="Output JSONL event file"),
    from_block: Optional[int] = typer.Option(None, "--from-block", help="First block (default: deploy block)"),
    to_block: Optional[int] = typer.Option(None, "--to-block", help="Last block (default: chain head)"),
    rpc_url: str = typer.Option(DEFAULT_RPC_URL, "--rpc-url", envvar="VAULT_REWARDS_RPC_URL", help="JSON-RPC endpoint"),
    vault: str = typer.Option(
        DEFAULT_VAULT_ADDRESS, "--vault", envvar="VAULT_REWARDS_VAULT_ADDRESS", help="Vault contract address"
    ),
    chunk_size: int = typer.Option(
        DEFAULT_CHUNK_SIZE, "--chunk-size", envvar="VAULT_REWARDS_CHUNK_SIZE", help="Blocks per eth_getLogs request"
    ),
    deploy_block: int = DEPLOY_BLOCK_OPTION,
    json_output: bool = JSON_OPTION,
):
    """
    Fetch Deposit/Withdraw/Transfer logs of the vault and decode them.

    Examples:
        vault-rewards fetch --out events.jsonl
        vault-rewards fetch --from-block 17564663 --to-block 17600000
    """
    config = ChainConfig(rpc_url=rpc_url, vault_address=vault, chunk_size=chunk_size)
    start = deploy_block if from_block is None else from_block
    try:
        events, end = fetch_vault_events(config, start, to_block)
    except (LogFetchError, DecodeError) as e:
        fail(json_output, str(e), kind=type(e).__name__)
    except ValueError as e:
        fail(json_output, f"Invalid fetch option: {e}", kind="InvalidOptionError")

    written = write_events(out, events)
    counts = count_by_type(events)

    if json_output:
        print(json.dumps({"out": out, "from_block": start, "to_block": end, "events": written, "event_counts": counts}))
        return

    console.print(f"[green]✓ Wrote {written} events to {out}[/green]")
    console.print(f"  Blocks: [cyan]{start}[/cyan] - [cyan]{end}[/cyan]")
    for event_type in sorted(counts.keys()):
        console.print(f"  {event_type}: [cyan]{counts[event_type]}[/cyan]")
