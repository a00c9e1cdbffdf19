"""
Module for reading a Uniswap V3 pool price from a JSON-RPC node.

The factory and pool are queried with raw ``eth_call`` payloads encoded and
decoded with eth_abi, so no ABI files are needed. Calls are made one after the
other; any error aborts the whole lookup.
"""

import asyncio
import logging
from typing import Dict, Optional

from eth_abi import decode, encode
from web3 import Web3
from web3.main import AsyncWeb3

from .config import Config
from .exceptions import EmptyResponseError, PoolNotFoundError
from .models import PoolPrice, Slot0
from .pricing import (
    orient_price,
    sqrt_price_x96_to_price,
    tick_to_price,
    to_display,
)

logger = logging.getLogger(__name__)

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

GET_POOL_SIGNATURE = "getPool(address,address,uint24)"
GET_POOL_ARG_TYPES = ["address", "address", "uint24"]
GET_POOL_RESULT_TYPES = ["address"]

SLOT0_SIGNATURE = "slot0()"
SLOT0_RESULT_TYPES = ["uint160", "int24", "uint16", "uint16", "uint16", "uint8", "bool"]

# Web3 providers keyed by RPC URL
_web3_providers: Dict[str, AsyncWeb3] = {}


def function_selector(signature: str) -> bytes:
    """First four bytes of the keccak hash of a function signature."""
    return bytes(Web3.keccak(text=signature)[:4])


async def get_web3_provider(rpc_url: str) -> AsyncWeb3:
    """
    Get or create an async Web3 provider for the given RPC URL.

    Args:
        rpc_url: The RPC URL to connect to

    Returns:
        An AsyncWeb3 instance
    """
    if rpc_url in _web3_providers:
        return _web3_providers[rpc_url]

    async_provider = AsyncWeb3.AsyncHTTPProvider(rpc_url)
    web3 = AsyncWeb3(async_provider)
    _web3_providers[rpc_url] = web3

    return web3


async def _call(web3: AsyncWeb3, to: str, data: bytes, desc: str) -> bytes:
    logger.debug(f"Making eth_call for {desc} on {to}")
    result = await web3.eth.call({"to": to, "data": "0x" + data.hex()})

    if not result:
        raise EmptyResponseError(f"Empty response from eth_call for {desc} on {to}")
    return bytes(result)


async def get_pool(
    web3: AsyncWeb3, factory_address: str, token_a: str, token_b: str, fee: int
) -> str:
    """
    Ask the factory for the pool of a token pair and fee tier.

    Returns:
        The checksummed pool address

    Raises:
        PoolNotFoundError: if the factory returns the zero address
    """
    data = function_selector(GET_POOL_SIGNATURE) + encode(
        GET_POOL_ARG_TYPES, [token_a, token_b, fee]
    )
    result = await _call(web3, factory_address, data, "getPool")
    (pool_address,) = decode(GET_POOL_RESULT_TYPES, result)
    pool_address = Web3.to_checksum_address(pool_address)

    if pool_address == ZERO_ADDRESS:
        raise PoolNotFoundError(
            f"No pool for {token_a}/{token_b} with fee {fee} at factory {factory_address}"
        )

    logger.info(f"Resolved pool {pool_address}")
    return pool_address


async def get_slot0(web3: AsyncWeb3, pool_address: str) -> Slot0:
    """Read the packed ``slot0()`` state of a pool."""
    data = function_selector(SLOT0_SIGNATURE)
    result = await _call(web3, pool_address, data, "slot0")
    slot0 = Slot0.from_tuple(decode(SLOT0_RESULT_TYPES, result))

    logger.info(
        f"slot0 for {pool_address}: sqrtPriceX96={slot0.sqrt_price_x96} tick={slot0.tick}"
    )
    return slot0


async def fetch_price_async(
    config: Config, web3: Optional[AsyncWeb3] = None
) -> PoolPrice:
    """
    Resolve the configured pool and decode its current price.

    The price is reported as ``token_a`` units per one ``token_b``. With the
    default USDC/WETH configuration that is the USDC price of one WETH.

    Args:
        config: Resolved configuration
        web3: Optional AsyncWeb3 instance (one is created from config.rpc_url otherwise)

    Returns:
        A PoolPrice with the exact and approximate price
    """
    if web3 is None:
        web3 = await get_web3_provider(config.rpc_url)

    key = config.pool_key
    pool_address = await get_pool(
        web3, config.factory_address, key.token_a.address, key.token_b.address, key.fee
    )
    slot0 = await get_slot0(web3, pool_address)

    token0, token1 = key.sorted()
    raw_price = sqrt_price_x96_to_price(
        slot0.sqrt_price_x96, token0.decimals, token1.decimals
    )

    base, quote = key.token_b, key.token_a
    price = orient_price(raw_price, base_is_token0=base.address == token0.address)
    # fail here rather than while printing
    display = to_display(price)
    logger.debug(f"token0={token0} token1={token1} base={base} quote={quote}")
    logger.debug(
        f"Tick {slot0.tick} implies ~{tick_to_price(slot0.tick, token0.decimals, token1.decimals)}"
        f" {token1} per {token0}, sqrtPriceX96 gives {display} {quote} per {base}"
    )

    return PoolPrice(
        pool_address=pool_address,
        key=key,
        slot0=slot0,
        price=price,
        base=base,
        quote=quote,
    )


def fetch_price(config: Config, web3: Optional[AsyncWeb3] = None) -> PoolPrice:
    """
    Synchronous wrapper around ``fetch_price_async``.

    Works both from plain scripts and from code already running an event loop.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        # No running event loop, create a new one
        return asyncio.run(fetch_price_async(config, web3))

    # We're in an async context, run the lookup on its own loop in a thread
    import concurrent.futures

    with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
        future = pool.submit(asyncio.run, fetch_price_async(config, web3))
        return future.result()
