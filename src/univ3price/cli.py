#!/usr/bin/env python
"""
Command-line interface for univ3price.
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from univ3price import fetch_price
from univ3price.config import (
    DEFAULT_FACTORY_ADDRESS,
    DEFAULT_FEE,
    USDC,
    WETH,
    load_config,
)
from univ3price.exceptions import (
    ConfigurationError,
    PoolNotFoundError,
    PriceDecodeError,
)
from univ3price.models import Token

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_CONFIG = 2
EXIT_POOL_NOT_FOUND = 3
EXIT_ARITHMETIC = 4

# no wrapping, symbols come from the command line
console = Console(highlight=False, soft_wrap=True, markup=False)
err_console = Console(stderr=True, highlight=False, soft_wrap=True)


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="univ3price - current price of a Uniswap V3 pool",
    )
    parser.add_argument(
        "--token-a",
        default=USDC.address,
        help="Quote token address (default: USDC)",
    )
    parser.add_argument(
        "--token-b",
        default=WETH.address,
        help="Base token address (default: WETH)",
    )
    parser.add_argument("--symbol-a", default=None, help="Display symbol of token A")
    parser.add_argument("--symbol-b", default=None, help="Display symbol of token B")
    parser.add_argument(
        "--decimals-a", type=int, default=None, help="Decimals of token A"
    )
    parser.add_argument(
        "--decimals-b", type=int, default=None, help="Decimals of token B"
    )
    parser.add_argument(
        "--fee",
        type=int,
        default=DEFAULT_FEE,
        help="Fee tier in hundredths of a bip (500, 3000, 10000, ...)",
    )
    parser.add_argument(
        "--factory",
        default=DEFAULT_FACTORY_ADDRESS,
        help="UniswapV3Factory address",
    )
    parser.add_argument(
        "--rpc-url", help="Full RPC URL (overrides the API key based URL)"
    )
    parser.add_argument("--rpc-host", help="Provider host used with ALCHEMY_API_KEY")
    parser.add_argument(
        "--invert",
        action="store_true",
        help="Quote token B per token A instead of token A per token B",
    )
    parser.add_argument(
        "--format",
        dest="output_format",
        choices=["text", "json"],
        default="text",
        help="Output format",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    return parser


def resolve_token(
    address: str, symbol: Optional[str], decimals: Optional[int], name: str
) -> Token:
    """Fill in symbol and decimals for well-known tokens, require them otherwise."""
    known = {t.address.lower(): t for t in (USDC, WETH)}.get(address.lower())
    if decimals is None:
        if known is None:
            raise ConfigurationError(
                f"--decimals-{name} is required for token {address}"
            )
        decimals = known.decimals
    if symbol is None:
        symbol = known.symbol if known else address[:8]
    return Token(address=address, symbol=symbol, decimals=decimals)


def render_text(result) -> List[str]:
    return [
        f"pool: {result.pool_address}",
        f"slot0: {result.slot0.as_tuple()}",
        f"price: {result.as_float()} {result.quote} per {result.base}",
    ]


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the CLI."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    load_dotenv()

    try:
        token_a = resolve_token(args.token_a, args.symbol_a, args.decimals_a, "a")
        token_b = resolve_token(args.token_b, args.symbol_b, args.decimals_b, "b")
        if args.invert:
            token_a, token_b = token_b, token_a

        overrides = dict(
            factory_address=args.factory,
            token_a=token_a,
            token_b=token_b,
            fee=args.fee,
        )
        if args.rpc_url:
            overrides["rpc_url_override"] = args.rpc_url
        if args.rpc_host:
            overrides["rpc_host"] = args.rpc_host

        config = load_config(**overrides)
        result = fetch_price(config)

        # render before printing so a failure leaves no partial output
        if args.output_format == "json":
            output = None
            payload = json.dumps(result.to_dict())
        else:
            output = render_text(result)
    except ConfigurationError as e:
        err_console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        return EXIT_CONFIG
    except PoolNotFoundError as e:
        err_console.print(f"[red]Pool not found:[/red] {escape(str(e))}")
        return EXIT_POOL_NOT_FOUND
    except PriceDecodeError as e:
        err_console.print(f"[red]Price error:[/red] {escape(str(e))}")
        return EXIT_ARITHMETIC
    except Exception as e:
        err_console.print(f"[red]Error:[/red] {type(e).__name__}: {escape(str(e))}")
        return EXIT_ERROR

    if output is None:
        console.print_json(payload)
    else:
        for line in output:
            console.print(line)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
