"""
Command-line interface for the Sales Tax receipt calculator.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from . import __version__
from .tax_calculation.cart import ShoppingCart
from .tax_calculation.errors import ProductValidationError, SalesTaxError
from .tax_calculation.models import Product, Receipt
from .tax_calculation.parser import create_cart_from_text
from .utils.config import Config
from .utils.logging import get_logger, setup_logging

logger = get_logger(__name__)

ITEM_FLAGS = ("imported", "exempt")

# The three sample baskets: (name, quantity, price, imported, exempt)
DEMO_CARTS = [
    [
        ("book", 1, "12.49", False, True),
        ("music CD", 1, "14.99", False, False),
        ("chocolate bar", 1, "0.85", False, True),
    ],
    [
        ("imported box of chocolates", 1, "10.00", True, True),
        ("imported bottle of perfume", 1, "47.50", True, False),
    ],
    [
        ("imported bottle of perfume", 1, "27.99", True, False),
        ("bottle of perfume", 1, "18.99", False, False),
        ("packet of headache pills", 1, "9.75", False, True),
        ("box of imported chocolates", 1, "11.25", True, True),
    ],
]


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="sales-tax",
        description="Sales Tax - itemized receipts with sales tax and import duty",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  sales-tax demo
  sales-tax parse --text "1 book at 12.49, 1 music CD at 14.99, 1 chocolate bar at 0.85"
  sales-tax parse --file order.txt --strict
  sales-tax receipt --item "imported bottle of perfume" 1 47.50 imported --item book 2 12.49 exempt
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Sales Tax {__version__}",
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    parser.add_argument(
        "--log-file",
        help="Log file path",
    )

    parser.add_argument(
        "--env-file",
        help="Load configuration (LOG_LEVEL, LOG_FILE, STRICT_PARSE) from this .env file",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
    )

    parse_parser = subparsers.add_parser(
        "parse",
        help="Build a receipt from free-form order text",
    )
    source = parse_parser.add_mutually_exclusive_group()
    source.add_argument(
        "--text",
        help="Order text, e.g. '1 imported bottle of perfume at 27.99' (default: read stdin)",
    )
    source.add_argument(
        "--file",
        help="Read order text from a file",
    )
    parse_parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with an error if any order line could not be turned into a product",
    )
    parse_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the receipt as JSON",
    )

    receipt_parser = subparsers.add_parser(
        "receipt",
        help="Build a receipt from explicitly entered items",
    )
    receipt_parser.add_argument(
        "--item",
        dest="items",
        action="append",
        nargs="+",
        required=True,
        metavar="VALUE",
        help="NAME QUANTITY PRICE [imported] [exempt]; repeat for each item",
    )
    receipt_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the receipt as JSON",
    )

    subparsers.add_parser(
        "demo",
        help="Print receipts for the three sample baskets",
    )

    return parser


def print_receipt(receipt: Receipt, as_json: bool = False) -> None:
    if as_json:
        print(json.dumps(receipt.to_dict(), indent=2))
        return
    for line in receipt.lines():
        print(line)


def product_from_item_args(values: Sequence[str]) -> Product:
    """Build a product from ``NAME QUANTITY PRICE [imported] [exempt]``."""
    if len(values) < 3:
        raise ProductValidationError(
            f"expected NAME QUANTITY PRICE [imported] [exempt], got {' '.join(values)!r}",
            field="item",
        )
    name, raw_quantity, raw_price, *raw_flags = values
    flags = {flag.lower() for flag in raw_flags}
    unknown = sorted(flags - set(ITEM_FLAGS))
    if unknown:
        raise ProductValidationError(f"unknown flag(s) {', '.join(unknown)} for {name!r}", field="item")

    try:
        quantity = int(raw_quantity)
    except ValueError as e:
        raise ProductValidationError(f"expected an integer, got {raw_quantity!r}", field="quantity") from e

    return Product(
        name=name,
        quantity=quantity,
        price=raw_price,
        is_imported="imported" in flags,
        is_exempt="exempt" in flags,
    )


def read_order_text(text: Optional[str], file: Optional[str]) -> str:
    if text is not None:
        return text
    if file:
        return Path(file).read_text(encoding="utf-8")
    return sys.stdin.read()


def run_parse(text: str, strict: bool = False, as_json: bool = False) -> int:
    """Parse order text and print its receipt; 1 when strict and lines were skipped."""
    result = create_cart_from_text(text)
    for failure in result.failures:
        logger.warning(f"Skipped order line {failure.source!r}: {failure.error}")

    if strict and not result.ok:
        logger.error(f"{len(result.failures)} order line(s) could not be parsed")
        return 1

    print_receipt(result.receipt(), as_json=as_json)
    return 0


def run_receipt(items: List[Sequence[str]], as_json: bool = False) -> int:
    cart = ShoppingCart()
    cart.add_products(product_from_item_args(values) for values in items)
    print_receipt(cart.generate_receipt(), as_json=as_json)
    return 0


def run_demo() -> int:
    for index, basket in enumerate(DEMO_CARTS, start=1):
        cart = ShoppingCart()
        for name, quantity, price, imported, exempt in basket:
            cart.add_product(Product(name, quantity, price, is_imported=imported, is_exempt=exempt))
        if index > 1:
            print()
        print(f"Output {index}:")
        print_receipt(cart.generate_receipt())
    return 0


def main(args: Optional[list] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        args: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    config = Config(parsed_args.env_file)
    log_level = "DEBUG" if parsed_args.verbose else config.get("log_level", "INFO")
    log_file = parsed_args.log_file or config.get("log_file") or None
    logger = setup_logging(level=log_level, log_file=log_file)

    try:
        if parsed_args.command == "parse":
            text = read_order_text(parsed_args.text, parsed_args.file)
            return run_parse(
                text,
                strict=parsed_args.strict or config.get("strict_parse", False),
                as_json=parsed_args.json,
            )

        elif parsed_args.command == "receipt":
            return run_receipt(parsed_args.items, as_json=parsed_args.json)

        elif parsed_args.command == "demo":
            return run_demo()

        elif not parsed_args.command:
            parser.print_help()
            return 1

    except (SalesTaxError, ValueError, ArithmeticError, OSError) as e:
        logger.error(f"Error: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
