from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from eth_abi import encode

from univ3price.config import USDC, WETH, load_config
from univ3price.fetcher import (
    GET_POOL_RESULT_TYPES,
    GET_POOL_SIGNATURE,
    SLOT0_RESULT_TYPES,
    SLOT0_SIGNATURE,
    function_selector,
)

POOL_ADDRESS = "0x8ad599c3A0ff1De082011EFDDc58f1908eb6e6D8"
Q96 = 2**96


def make_slot0(sqrt_price_x96=Q96, tick=0):
    return [sqrt_price_x96, tick, 5, 100, 100, 0, True]


def make_web3(pool_address=POOL_ADDRESS, slot0=None):
    """A stand-in for AsyncWeb3 answering getPool and slot0 eth_calls."""
    responses = {
        function_selector(GET_POOL_SIGNATURE): encode(
            GET_POOL_RESULT_TYPES, [pool_address]
        ),
        function_selector(SLOT0_SIGNATURE): encode(
            SLOT0_RESULT_TYPES, slot0 if slot0 is not None else make_slot0()
        ),
    }

    async def call(tx):
        data = bytes.fromhex(tx["data"][2:])
        return responses[data[:4]]

    return SimpleNamespace(eth=SimpleNamespace(call=AsyncMock(side_effect=call)))


@pytest.fixture
def config():
    return load_config({"ALCHEMY_API_KEY": "test-key"})


@pytest.fixture
def inverted_config():
    return load_config({"ALCHEMY_API_KEY": "test-key"}, token_a=WETH, token_b=USDC)


@pytest.fixture
def web3():
    return make_web3()
