"""
Fixed-point price math for Uniswap V3 style pools.

Pools store the square root of the token1/token0 price as an unsigned Q64.96
value (``sqrtPriceX96``). Everything here works on exact ``Fraction`` values;
the only lossy step is ``to_display``, which every conversion of an exact
price to float goes through.
"""

import logging
from fractions import Fraction
from math import isqrt
from numbers import Rational
from typing import Union

from .exceptions import PriceDecodeError, UninitializedPoolError

logger = logging.getLogger(__name__)

Q96 = 2**96
MAX_SQRT_PRICE_X96 = 2**160 - 1

PriceLike = Union[int, str, Fraction, Rational]


def decode_sqrt_price(sqrt_price_x96: int) -> Fraction:
    """
    Recover the exact square-root price from its Q96 encoding.

    Args:
        sqrt_price_x96: The uint160 value reported by ``slot0()``

    Returns:
        ``sqrt_price_x96 / 2**96`` as a Fraction
    """
    if isinstance(sqrt_price_x96, bool) or not isinstance(sqrt_price_x96, int):
        raise PriceDecodeError(
            f"sqrtPriceX96 must be an integer, got {type(sqrt_price_x96).__name__}"
        )
    if sqrt_price_x96 < 0 or sqrt_price_x96 > MAX_SQRT_PRICE_X96:
        raise PriceDecodeError(f"sqrtPriceX96 {sqrt_price_x96} does not fit in uint160")
    return Fraction(sqrt_price_x96, Q96)


def decimal_adjustment(decimals0: int, decimals1: int) -> Fraction:
    """10**(decimals0 - decimals1), exact even when the exponent is negative."""
    return Fraction(10) ** (decimals0 - decimals1)


def sqrt_price_x96_to_price(
    sqrt_price_x96: int, decimals0: int, decimals1: int
) -> Fraction:
    """
    Convert sqrtPriceX96 to the price of token0 in units of token1.

    price = (sqrtPriceX96 / 2**96)**2 * 10**(decimals0 - decimals1)

    Raises:
        UninitializedPoolError: if sqrtPriceX96 is zero
        PriceDecodeError: if the value does not fit in uint160
    """
    sqrt_price = decode_sqrt_price(sqrt_price_x96)
    if sqrt_price == 0:
        raise UninitializedPoolError("sqrtPriceX96 is 0, pool is not initialized")

    price = sqrt_price**2 * decimal_adjustment(decimals0, decimals1)
    logger.debug(f"Decoded sqrtPriceX96={sqrt_price_x96} with decimals {decimals0}/{decimals1}")
    return price


def price_to_sqrt_price_x96(price: PriceLike, decimals0: int, decimals1: int) -> int:
    """
    Encode a human price (token1 per token0) as sqrtPriceX96, rounded to nearest.
    """
    price = Fraction(price)
    if price <= 0:
        raise PriceDecodeError(f"Price must be positive, got {price}")

    raw = price / decimal_adjustment(decimals0, decimals1)
    # sqrt(raw) * 2**96 == sqrt(raw * 2**192)
    scaled = raw * Q96 * Q96
    target = scaled.numerator // scaled.denominator
    root = isqrt(target)
    # round half up: sqrt(scaled) >= root + 1/2
    if scaled >= (root + Fraction(1, 2)) ** 2:
        root += 1

    if root == 0 or root > MAX_SQRT_PRICE_X96:
        raise PriceDecodeError(f"Price {price} is outside the uint160 range")
    return root


def orient_price(price: Fraction, base_is_token0: bool) -> Fraction:
    """
    Express a token1-per-token0 price as quote-per-base.

    When the base token is token1 the price is inverted.
    """
    if base_is_token0:
        return price
    if price == 0:
        raise UninitializedPoolError("Cannot invert a zero price")
    return 1 / price


def tick_to_price(tick: int, decimals0: int, decimals1: int) -> float:
    """Approximate token0 price in token1 implied by a tick (1.0001**tick)."""
    return 1.0001**tick * 10 ** (decimals0 - decimals1)


def to_display(price: Fraction) -> float:
    """
    Approximate an exact price as a float for display.

    Raises:
        PriceDecodeError: if the price is beyond the float range
    """
    try:
        return float(price)
    except OverflowError as e:
        raise PriceDecodeError(f"Price is too large to display as a float: {e}") from e
