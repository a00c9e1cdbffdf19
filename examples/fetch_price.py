#!/usr/bin/env python
"""
Example script demonstrating how to read the USDC/WETH pool price.

Set ALCHEMY_API_KEY before running. This reads mainnet state only.
"""

from univ3price import fetch_price, load_config


def main():
    config = load_config(fee=3000)
    result = fetch_price(config)

    assert result.base.symbol == "WETH"
    assert result.quote.symbol == "USDC"

    print("result:", result.pool_address)
    print("slot0:", result.slot0.as_tuple())
    print("price:", result.as_float())
    # result: 0x8ad599c3A0ff1De082011EFDDc58f1908eb6e6D8
    # slot0: (1393170466438906837925178744061929, 195436, ...)
    # price: 3234.17...

    print(result)


if __name__ == "__main__":
    main()
