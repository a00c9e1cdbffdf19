"""
Data models for pool identity, pool state and decoded prices.
"""

from dataclasses import dataclass
from fractions import Fraction
from typing import Any, Dict, Sequence, Tuple

from .pricing import to_display


@dataclass(frozen=True)
class Token:
    address: str
    symbol: str
    decimals: int

    def __repr__(self) -> str:
        return self.symbol


@dataclass(frozen=True)
class PoolKey:
    token_a: Token
    token_b: Token
    fee: int

    def sorted(self) -> Tuple[Token, Token]:
        """Return (token0, token1) in the order the pool stores them."""
        if int(self.token_a.address, 16) < int(self.token_b.address, 16):
            return self.token_a, self.token_b
        return self.token_b, self.token_a

    def __repr__(self) -> str:
        return f"{self.token_a}/{self.token_b}@{self.fee}"


@dataclass(frozen=True)
class Slot0:
    sqrt_price_x96: int
    tick: int
    observation_index: int
    observation_cardinality: int
    observation_cardinality_next: int
    fee_protocol: int
    unlocked: bool

    @classmethod
    def from_tuple(cls, values: Sequence[Any]) -> "Slot0":
        return cls(*values)

    def as_tuple(self) -> Tuple[int, int, int, int, int, int, bool]:
        return (
            self.sqrt_price_x96,
            self.tick,
            self.observation_index,
            self.observation_cardinality,
            self.observation_cardinality_next,
            self.fee_protocol,
            self.unlocked,
        )


@dataclass(frozen=True)
class PoolPrice:
    """Price of one ``base`` token expressed in ``quote`` tokens."""

    pool_address: str
    key: PoolKey
    slot0: Slot0
    price: Fraction
    base: Token
    quote: Token

    def as_float(self) -> float:
        return to_display(self.price)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pool_address": self.pool_address,
            "fee": self.key.fee,
            "base": self.base.symbol,
            "base_address": self.base.address,
            "quote": self.quote.symbol,
            "quote_address": self.quote.address,
            "slot0": {
                "sqrt_price_x96": self.slot0.sqrt_price_x96,
                "tick": self.slot0.tick,
                "observation_index": self.slot0.observation_index,
                "observation_cardinality": self.slot0.observation_cardinality,
                "observation_cardinality_next": self.slot0.observation_cardinality_next,
                "fee_protocol": self.slot0.fee_protocol,
                "unlocked": self.slot0.unlocked,
            },
            "price": self.as_float(),
            "price_exact": f"{self.price.numerator}/{self.price.denominator}",
        }

    def __repr__(self) -> str:
        return f"{self.base}/{self.quote}({self.pool_address})={self.price}"

    def __str__(self) -> str:
        return (
            f"{self.base}/{self.quote}({self.pool_address})\n"
            f"├─ fee {self.key.fee}\n"
            f"├─ sqrtPriceX96 {self.slot0.sqrt_price_x96}\n"
            f"├─ tick {self.slot0.tick}\n"
            f"└─ 1 {self.base} = {self.as_float()} {self.quote}"
        )
