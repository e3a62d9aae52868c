"""Shopping cart that accumulates taxed receipt items."""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from ..utils.logging import get_logger
from .calculator import TaxCalculator
from .models import Product, Receipt, ReceiptItem

logger = get_logger(__name__)


class ShoppingCart:
    """Append-only list of receipt items.

    Tax is computed once per product when it is added. Items are never
    removed or changed; ``generate_receipt`` takes a snapshot.
    """

    def __init__(self, calculator: Optional[TaxCalculator] = None) -> None:
        self._calculator = calculator or TaxCalculator()
        self._items: List[ReceiptItem] = []

    def __len__(self) -> int:
        return len(self._items)

    @property
    def items(self) -> Tuple[ReceiptItem, ...]:
        return tuple(self._items)

    def add_product(self, product: Product) -> ReceiptItem:
        tax = self._calculator.calculate_tax(product)
        item = ReceiptItem(product=product, tax=tax)
        self._items.append(item)
        logger.debug(f"Added {product.quantity} x {product.name!r} at {product.price} (tax {tax})")
        return item

    def add_products(self, products: Iterable[Product]) -> List[ReceiptItem]:
        return [self.add_product(product) for product in products]

    def generate_receipt(self) -> Receipt:
        return Receipt(items=tuple(self._items))
