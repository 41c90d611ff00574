"""
Replay command: Replay an event file and summarize the accounting state
"""

import json
from typing import Optional

import typer
from rich.table import Table

from reward_engine.core.errors import InvalidEventError, InvariantViolationError, PreconditionViolation
from reward_engine.query import format_units
from reward_engine.replay import build_reducer, replay
from reward_engine.snapshot import compute_state_hash
from reward_engine.source import count_by_type, read_events

from ._common import (
    DEPLOY_BLOCK_OPTION,
    EVENTS_OPTION,
    JSON_OPTION,
    POLICY_OPTION,
    PRECISION_OPTION,
    RATE_OPTION,
    console,
    engine_config,
    fail,
)


def replay_command(
    events_path: str = EVENTS_OPTION,
    until: Optional[int] = typer.Option(None, "--until", "-u", help="Replay events up to this block"),
    check_invariants: bool = typer.Option(
        False, "--check-invariants", help="Verify every invariant after each event"
    ),
    deploy_block: int = DEPLOY_BLOCK_OPTION,
    rate: int = RATE_OPTION,
    precision: int = PRECISION_OPTION,
    zero_stake_policy: str = POLICY_OPTION,
    json_output: bool = JSON_OPTION,
):
    """
    Replay the event history and verify state reconstruction.

    Examples:
        vault-rewards replay --events events.jsonl
        vault-rewards replay --until 17600000
        vault-rewards replay --check-invariants --json
    """
    config = engine_config(deploy_block, rate, precision, zero_stake_policy)
    try:
        events = list(read_events(events_path))
    except FileNotFoundError:
        fail(json_output, "Event file not found", path=events_path)
    except InvalidEventError as e:
        fail(json_output, str(e))

    try:
        result = replay(
            events,
            build_reducer(config),
            to_block=until,
            check_invariants=check_invariants,
        )
    except (PreconditionViolation, InvariantViolationError) as e:
        fail(json_output, str(e), kind=type(e).__name__)

    state = result.state
    state_hash = compute_state_hash(state)
    event_counts = count_by_type(e for e in events if until is None or e.block <= until)

    if json_output:
        output = {
            "success": True,
            "events_replayed": result.applied,
            "accounts": len(state.user_records),
            "total_shares_staked": str(state.total_shares_staked),
            "total_rewards_per_share": str(state.total_rewards_per_share),
            "last_accounted_block": state.last_accounted_block,
            "last_event_block": state.last_event_block,
            "state_hash": state_hash,
            "event_counts": event_counts,
        }
        print(json.dumps(output, indent=2))
        return

    console.print(f"[green]✓ Replayed {result.applied} events successfully[/green]")
    console.print(f"  Accounts: [cyan]{len(state.user_records)}[/cyan]")
    console.print(f"  Total shares staked: [cyan]{format_units(state.total_shares_staked)}[/cyan]")
    console.print(f"  Last accounted block: [cyan]{state.last_accounted_block}[/cyan]")
    console.print(f"  State hash: [yellow]{state_hash}[/yellow]")

    table = Table(title="Event Counts")
    table.add_column("Event Type", style="green")
    table.add_column("Count", style="cyan", justify="right")
    for event_type in sorted(event_counts.keys()):
        table.add_row(event_type, str(event_counts[event_type]))
    console.print(table)
