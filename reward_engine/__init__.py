"""
Vault Reward Engine

Deterministic, offline reconstruction of depositor rewards in a share-based
staking vault by replaying its Deposit/Withdraw/Transfer history.
"""

__version__ = "0.1.0"
