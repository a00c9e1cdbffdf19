from fractions import Fraction

import pytest

from univ3price.config import USDC, WETH
from univ3price.exceptions import PriceDecodeError
from univ3price.models import PoolKey, PoolPrice, Slot0


def test_pool_key_sorted_by_address():
    assert PoolKey(WETH, USDC, 3000).sorted() == (USDC, WETH)
    assert PoolKey(USDC, WETH, 3000).sorted() == (USDC, WETH)


def test_slot0_from_tuple():
    values = (2**96, -887272, 1, 2, 3, 0, True)
    slot0 = Slot0.from_tuple(values)

    assert slot0.tick == -887272
    assert slot0.unlocked is True
    assert slot0.as_tuple() == values


def test_pool_price_rendering():
    result = PoolPrice(
        pool_address="0x8ad599c3A0ff1De082011EFDDc58f1908eb6e6D8",
        key=PoolKey(USDC, WETH, 3000),
        slot0=Slot0.from_tuple((2**96, 0, 0, 1, 1, 0, True)),
        price=Fraction(6469, 2),
        base=WETH,
        quote=USDC,
    )

    assert result.as_float() == 3234.5
    assert "1 WETH = 3234.5 USDC" in str(result)

    data = result.to_dict()
    assert data["price_exact"] == "6469/2"
    assert data["base"] == "WETH"
    assert data["slot0"]["sqrt_price_x96"] == 2**96


def test_pool_price_repr_and_overflow():
    result = PoolPrice(
        pool_address="0x8ad599c3A0ff1De082011EFDDc58f1908eb6e6D8",
        key=PoolKey(USDC, WETH, 3000),
        slot0=Slot0.from_tuple((1, 0, 0, 1, 1, 0, True)),
        price=Fraction(10**400),
        base=WETH,
        quote=USDC,
    )

    assert repr(result).startswith("WETH/USDC(0x8ad599c3A0ff1De082011EFDDc58f1908eb6e6D8)=")
    with pytest.raises(PriceDecodeError):
        result.as_float()
