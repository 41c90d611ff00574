"""
Configuration for reward accounting and log acquisition.

Environment Variables:
    VAULT_REWARDS_DEPLOY_BLOCK: Vault deployment block - default: 17564663
    VAULT_REWARDS_RATE_PER_BLOCK: Reward issued per block, base units - default: 10**18
    VAULT_REWARDS_PRECISION: Fixed-point scale of the accumulator - default: 10**18
    VAULT_REWARDS_RPC_URL: JSON-RPC endpoint - default: https://rpc.flashbots.net
    VAULT_REWARDS_VAULT_ADDRESS: Vault contract address
    VAULT_REWARDS_CHUNK_SIZE: Blocks per eth_getLogs request - default: 50000
    VAULT_REWARDS_ZERO_STAKE_POLICY: carry or forfeit - default: carry

Usage:
    from reward_engine.config import EngineConfig

    config = EngineConfig.from_env()
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_DEPLOY_BLOCK = 17564663
DEFAULT_REWARD_RATE_PER_BLOCK = 10**18
DEFAULT_PRECISION = 10**18
DEFAULT_RPC_URL = "https://rpc.flashbots.net"
DEFAULT_VAULT_ADDRESS = "0xaF53431488E871D103baA0280b6360998F0F9926"
DEFAULT_CHUNK_SIZE = 50_000
DEFAULT_ZERO_STAKE_POLICY = "carry"
ZERO_STAKE_POLICIES = ("carry", "forfeit")


def _env_int(env: Mapping[str, str], key: str, default: int, minimum: int = 0) -> int:
    val = env.get(key)
    if val is None or not val.strip():
        return default
    try:
        parsed = int(val.strip(), 0)
    except ValueError as ex:
        raise ValueError(f"{key} must be an integer, got {val!r}") from ex
    if parsed < minimum:
        raise ValueError(f"{key} must be >= {minimum}, got {parsed}")
    return parsed


@dataclass(frozen=True)
class EngineConfig:
    """
    Accounting parameters.

    Fields:
        deploy_block: Block at which reward accounting starts
        reward_rate_per_block: Reward issued per block in the vault's base unit
        precision: Scaling constant of total_rewards_per_share
        zero_stake_policy: "carry" (default) leaves last_accounted_block in place
            through zero-stake periods so the next accounted interval includes
            their issuance; "forfeit" moves it forward so that issuance is never
            paid out
    """
    deploy_block: int = DEFAULT_DEPLOY_BLOCK
    reward_rate_per_block: int = DEFAULT_REWARD_RATE_PER_BLOCK
    precision: int = DEFAULT_PRECISION
    zero_stake_policy: str = DEFAULT_ZERO_STAKE_POLICY

    def __post_init__(self) -> None:
        if self.deploy_block < 0:
            raise ValueError("deploy_block must be >= 0")
        if self.reward_rate_per_block < 0:
            raise ValueError("reward_rate_per_block must be >= 0")
        if self.precision <= 0:
            raise ValueError("precision must be > 0")
        if self.zero_stake_policy not in ZERO_STAKE_POLICIES:
            raise ValueError(f"zero_stake_policy must be one of {ZERO_STAKE_POLICIES}, got {self.zero_stake_policy!r}")

    @staticmethod
    def from_env(env: Optional[Mapping[str, str]] = None) -> "EngineConfig":
        env = os.environ if env is None else env
        return EngineConfig(
            deploy_block=_env_int(env, "VAULT_REWARDS_DEPLOY_BLOCK", DEFAULT_DEPLOY_BLOCK),
            reward_rate_per_block=_env_int(env, "VAULT_REWARDS_RATE_PER_BLOCK", DEFAULT_REWARD_RATE_PER_BLOCK),
            precision=_env_int(env, "VAULT_REWARDS_PRECISION", DEFAULT_PRECISION, minimum=1),
            zero_stake_policy=(env.get("VAULT_REWARDS_ZERO_STAKE_POLICY") or DEFAULT_ZERO_STAKE_POLICY).strip().lower(),
        )


@dataclass(frozen=True)
class ChainConfig:
    """Where vault logs are fetched from."""
    rpc_url: str = DEFAULT_RPC_URL
    vault_address: str = DEFAULT_VAULT_ADDRESS
    chunk_size: int = DEFAULT_CHUNK_SIZE

    @staticmethod
    def from_env(env: Optional[Mapping[str, str]] = None) -> "ChainConfig":
        env = os.environ if env is None else env
        return ChainConfig(
            rpc_url=env.get("VAULT_REWARDS_RPC_URL") or DEFAULT_RPC_URL,
            vault_address=env.get("VAULT_REWARDS_VAULT_ADDRESS") or DEFAULT_VAULT_ADDRESS,
            chunk_size=_env_int(env, "VAULT_REWARDS_CHUNK_SIZE", DEFAULT_CHUNK_SIZE, minimum=1),
        )
