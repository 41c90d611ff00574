"""
Rewards command: aggregate and ranked rewards at an evaluation block
"""

import json
from typing import Optional

import typer
from rich.table import Table

from reward_engine.core.errors import (
    InvalidEventError,
    InvalidQueryError,
    InvariantViolationError,
    PreconditionViolation,
)
from reward_engine.query import format_units, preview_reward, reward_report
from reward_engine.replay import build_reducer, replay
from reward_engine.source import read_events

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


def rewards_command(
    events_path: str = EVENTS_OPTION,
    block: Optional[int] = typer.Option(
        None, "--block", "-b", help="Evaluation block (default: last event block)"
    ),
    account: Optional[str] = typer.Option(None, "--account", "-a", help="Show a single account"),
    top: Optional[int] = typer.Option(None, "--top", "-n", help="Show only the top N accounts"),
    deploy_block: int = DEPLOY_BLOCK_OPTION,
    rate: int = RATE_OPTION,
    precision: int = PRECISION_OPTION,
    zero_stake_policy: str = POLICY_OPTION,
    json_output: bool = JSON_OPTION,
):
    """
    Show rewards earned by every depositor up to a block.

    Examples:
        vault-rewards rewards --block 18000000
        vault-rewards rewards --block 18000000 --top 20
        vault-rewards rewards --account 0xabc... --json
    """
    config = engine_config(deploy_block, rate, precision, zero_stake_policy)
    try:
        events = list(read_events(events_path))
        state = replay(events, build_reducer(config)).state
    except FileNotFoundError:
        fail(json_output, "Event file not found", path=events_path)
    except InvalidEventError as e:
        fail(json_output, str(e))
    except (PreconditionViolation, InvariantViolationError) as e:
        fail(json_output, str(e), kind=type(e).__name__)

    if block is None:
        block = max(state.last_accounted_block, state.last_event_block or 0)

    try:
        if account is not None:
            reward = preview_reward(state, account, block, config)
            if json_output:
                print(json.dumps({"block": block, "account": account.lower(), "reward": str(reward)}))
            else:
                console.print(f"[bold]{account.lower()}[/bold] earned [cyan]{format_units(reward)}[/cyan] by block {block}")
            return
        report = reward_report(state, block, config, top=top)
    except (InvalidQueryError, InvalidEventError) as e:
        fail(json_output, str(e))

    if json_output:
        output = {
            "block": report.block,
            "expected_issuance": str(report.expected_issuance),
            "total_reward": str(report.total_reward),
            "rewards": [
                {"account": r.account, "reward": str(r.reward), "percent": str(r.percent)}
                for r in report.rows
            ],
        }
        print(json.dumps(output, indent=2))
        return

    console.print(f"  Evaluation block: [cyan]{report.block}[/cyan]")
    console.print(f"  Expected issuance: [cyan]{format_units(report.expected_issuance)}[/cyan]")
    console.print(f"  Total rewards given: [cyan]{format_units(report.total_reward)}[/cyan]")

    table = Table(title="Rewards by Account")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Account", style="yellow")
    table.add_column("Reward", style="cyan", justify="right")
    table.add_column("Share %", style="green", justify="right")
    for idx, row in enumerate(report.rows, start=1):
        table.add_row(str(idx), row.account, format_units(row.reward), f"{row.percent:.4f}")
    console.print(table)
