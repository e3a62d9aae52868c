"""Tax calculation module entry point."""

from .calculator import TaxCalculator, calculate_tax
from .cart import ShoppingCart
from .errors import ProductValidationError, SalesTaxError
from .models import Product, Receipt, ReceiptItem
from .parser import (
    CartParseResult,
    Classification,
    KeywordClassifier,
    OrderTextParser,
    ParseOutcome,
    create_cart_from_text,
)

__all__ = [
    "TaxCalculator",
    "calculate_tax",
    "ShoppingCart",
    "ProductValidationError",
    "SalesTaxError",
    "Product",
    "Receipt",
    "ReceiptItem",
    "CartParseResult",
    "Classification",
    "KeywordClassifier",
    "OrderTextParser",
    "ParseOutcome",
    "create_cart_from_text",
]
