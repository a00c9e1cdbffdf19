"""
Configuration for querying a pool price.

The configuration is resolved once from the environment and passed explicitly
to the fetcher.
"""

import logging
import os
from dataclasses import dataclass, field, replace
from typing import Mapping, Optional

from web3 import Web3

from .exceptions import ConfigurationError
from .models import PoolKey, Token

logger = logging.getLogger(__name__)

API_KEY_ENV = "ALCHEMY_API_KEY"
RPC_URL_ENV = "UNIV3PRICE_RPC_URL"
RPC_HOST_ENV = "UNIV3PRICE_RPC_HOST"

DEFAULT_RPC_HOST = "eth-mainnet.g.alchemy.com"

# UniswapV3Factory on Ethereum mainnet
DEFAULT_FACTORY_ADDRESS = "0x1F98431c8aD98523631AE4a59f267346ea31F984"

USDC = Token(
    address="0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48", symbol="USDC", decimals=6
)
WETH = Token(
    address="0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2", symbol="WETH", decimals=18
)

# 0.3%, in hundredths of a basis point
DEFAULT_FEE = 3000
MAX_FEE = 2**24 - 1


@dataclass(frozen=True)
class Config:
    api_key: str
    rpc_host: str = DEFAULT_RPC_HOST
    factory_address: str = DEFAULT_FACTORY_ADDRESS
    token_a: Token = USDC
    token_b: Token = WETH
    fee: int = DEFAULT_FEE
    rpc_url_override: Optional[str] = field(default=None, repr=False)

    @property
    def rpc_url(self) -> str:
        if self.rpc_url_override:
            return self.rpc_url_override
        return f"https://{self.rpc_host}/v2/{self.api_key}"

    @property
    def pool_key(self) -> PoolKey:
        return PoolKey(token_a=self.token_a, token_b=self.token_b, fee=self.fee)

    def __repr__(self) -> str:
        # keep the API key out of logs
        return (
            f"Config(rpc_host={self.rpc_host!r}, factory={self.factory_address}, "
            f"pool={self.pool_key!r})"
        )


def checksum_address(value: str, name: str = "address") -> str:
    """Parse an address and return its checksummed form."""
    if not isinstance(value, str) or not Web3.is_address(value):
        raise ConfigurationError(f"Invalid {name}: {value!r}")
    return Web3.to_checksum_address(value)


def validate_fee(fee: int) -> int:
    if isinstance(fee, bool) or not isinstance(fee, int) or not 0 <= fee <= MAX_FEE:
        raise ConfigurationError(f"Fee tier must be a uint24, got {fee!r}")
    return fee


def validate_token(token: Token, name: str) -> Token:
    if token.decimals < 0 or token.decimals > 255:
        raise ConfigurationError(
            f"Invalid {name} decimals: {token.decimals} (must fit in uint8)"
        )
    return replace(token, address=checksum_address(token.address, f"{name} address"))


def load_config(environ: Optional[Mapping[str, str]] = None, **overrides) -> Config:
    """
    Build a Config from environment variables plus explicit overrides.

    Args:
        environ: Mapping to read variables from (defaults to os.environ)
        **overrides: Config fields that take precedence over the defaults

    Returns:
        A validated Config

    Raises:
        ConfigurationError: if the API key is missing or a value is malformed
    """
    if environ is None:
        environ = os.environ

    api_key = overrides.pop("api_key", None) or environ.get(API_KEY_ENV, "")
    api_key = api_key.strip()
    rpc_url = overrides.pop("rpc_url_override", None) or environ.get(RPC_URL_ENV)

    if not api_key and not rpc_url:
        raise ConfigurationError(f"{API_KEY_ENV} environment variable is not set")

    if "rpc_host" not in overrides and environ.get(RPC_HOST_ENV):
        overrides["rpc_host"] = environ[RPC_HOST_ENV]

    config = Config(api_key=api_key, rpc_url_override=rpc_url or None, **overrides)
    config = replace(
        config,
        factory_address=checksum_address(config.factory_address, "factory address"),
        token_a=validate_token(config.token_a, "token A"),
        token_b=validate_token(config.token_b, "token B"),
        fee=validate_fee(config.fee),
    )

    if config.token_a.address == config.token_b.address:
        raise ConfigurationError("Token A and token B must be different tokens")

    logger.debug(f"Loaded {config!r}")
    return config
