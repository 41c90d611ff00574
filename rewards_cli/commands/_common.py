"""
Options and error output shared by the CLI commands.
"""

import json
from typing import Any, NoReturn

import typer
from rich.console import Console

from reward_engine.config import (
    DEFAULT_DEPLOY_BLOCK,
    DEFAULT_PRECISION,
    DEFAULT_REWARD_RATE_PER_BLOCK,
    DEFAULT_ZERO_STAKE_POLICY,
    EngineConfig,
)

console = Console()
err_console = Console(stderr=True)

EVENTS_OPTION = typer.Option("events.jsonl", "--events", "-e", help="Path to JSONL event file")
DEPLOY_BLOCK_OPTION = typer.Option(
    DEFAULT_DEPLOY_BLOCK,
    "--deploy-block",
    envvar="VAULT_REWARDS_DEPLOY_BLOCK",
    help="Vault deployment block",
)
RATE_OPTION = typer.Option(
    DEFAULT_REWARD_RATE_PER_BLOCK,
    "--rate",
    envvar="VAULT_REWARDS_RATE_PER_BLOCK",
    help="Reward issued per block (base units)",
)
PRECISION_OPTION = typer.Option(
    DEFAULT_PRECISION,
    "--precision",
    envvar="VAULT_REWARDS_PRECISION",
    help="Fixed-point scale of the reward accumulator",
)
POLICY_OPTION = typer.Option(
    DEFAULT_ZERO_STAKE_POLICY,
    "--zero-stake-policy",
    envvar="VAULT_REWARDS_ZERO_STAKE_POLICY",
    help="carry or forfeit issuance during zero-stake periods",
)
JSON_OPTION = typer.Option(False, "--json", help="Output as JSON")


def engine_config(
    deploy_block: int, rate: int, precision: int, policy: str = DEFAULT_ZERO_STAKE_POLICY
) -> EngineConfig:
    try:
        return EngineConfig(
            deploy_block=deploy_block,
            reward_rate_per_block=rate,
            precision=precision,
            zero_stake_policy=policy.strip().lower(),
        )
    except ValueError as e:
        raise typer.BadParameter(str(e))


def fail(json_output: bool, message: str, code: int = 2, **extra: Any) -> NoReturn:
    if json_output:
        print(json.dumps({"error": message, **extra}))
    else:
        err_console.print(f"[red]Error:[/red] {message}")
    raise typer.Exit(code)
