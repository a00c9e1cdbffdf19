"""
univ3price - read the current price of a Uniswap V3 pool.
"""

from .config import Config, load_config
from .exceptions import (
    ConfigurationError,
    EmptyResponseError,
    PoolNotFoundError,
    PriceDecodeError,
    UninitializedPoolError,
    Univ3PriceError,
)
from .fetcher import fetch_price, fetch_price_async
from .models import PoolKey, PoolPrice, Slot0, Token
from .pricing import (
    decode_sqrt_price,
    price_to_sqrt_price_x96,
    sqrt_price_x96_to_price,
)

__all__ = [
    "Config",
    "ConfigurationError",
    "EmptyResponseError",
    "PoolKey",
    "PoolNotFoundError",
    "PoolPrice",
    "PriceDecodeError",
    "Slot0",
    "Token",
    "UninitializedPoolError",
    "Univ3PriceError",
    "decode_sqrt_price",
    "fetch_price",
    "fetch_price_async",
    "load_config",
    "price_to_sqrt_price_x96",
    "sqrt_price_x96_to_price",
]
