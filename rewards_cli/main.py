#!/usr/bin/env python3
"""
Vault Rewards CLI

Main entrypoint for the vault-rewards command-line tool.
"""

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from reward_engine.logging_config import setup_logging
from rewards_cli.commands import fetch, replay, rewards

app = typer.Typer(
    name="vault-rewards",
    help="Offline reward reconstruction for a share-based staking vault",
    add_completion=False,
)

console = Console()


@app.callback()
def main_callback(
    log_level: Optional[str] = typer.Option(
        None, "--log-level", envvar="VAULT_REWARDS_LOG_LEVEL", help="DEBUG, INFO, WARNING, ERROR"
    ),
    log_format: Optional[str] = typer.Option(
        None, "--log-format", envvar="VAULT_REWARDS_LOG_FORMAT", help="json or text"
    ),
):
    setup_logging(level=log_level, fmt=log_format)


app.command("fetch")(fetch.fetch_command)
app.command("replay")(replay.replay_command)
app.command("rewards")(rewards.rewards_command)


@app.command()
def version():
    """Show version information."""
    from rewards_cli import __version__
    from reward_engine import __version__ as engine_version

    table = Table(show_header=False, box=None)
    table.add_row("[bold]Vault Rewards CLI[/bold]", f"v{__version__}")
    table.add_row("Engine", f"v{engine_version}")

    console.print(table)


def main():
    """Main entrypoint."""
    app()


if __name__ == "__main__":
    main()
