"""
Vault Rewards CLI - offline reward reconstruction for a share-based vault

Commands:
- vault-rewards fetch - Fetch and decode vault logs into an event file
- vault-rewards replay - Replay an event file and summarize the state
- vault-rewards rewards - Aggregate and ranked rewards at a block
"""

__version__ = "0.1.0"
