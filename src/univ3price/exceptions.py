"""
Exceptions raised while resolving and pricing a pool.
"""


class Univ3PriceError(Exception):
    """Base class for all errors raised by univ3price."""


class ConfigurationError(Univ3PriceError):
    """Missing or invalid configuration (API key, addresses, fee tier)."""


class PoolNotFoundError(Univ3PriceError):
    """The factory returned the zero address for the requested pool key."""


class EmptyResponseError(Univ3PriceError):
    """eth_call returned no data, usually because there is no code at the address."""


class PriceDecodeError(Univ3PriceError, ArithmeticError):
    """A fixed-point value could not be decoded into a price."""


class UninitializedPoolError(PriceDecodeError, ZeroDivisionError):
    """The pool reports sqrtPriceX96 == 0, so no price can be derived."""
