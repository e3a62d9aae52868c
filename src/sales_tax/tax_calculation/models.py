"""Domain model shared by the manual and text-parsing pipelines."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from decimal import Context, Decimal, InvalidOperation, localcontext
from typing import Any, Dict, Iterator, List, Tuple

from .errors import ProductValidationError

ZERO = Decimal("0")
CENT = Decimal("0.01")

# Widest price (significant digits plus exponent) a product accepts
MAX_PRICE_WIDTH = 100


def money_width(*amounts: Decimal) -> int:
    """Digits needed to hold the product of ``amounts`` without rounding."""
    width = 0
    for amount in amounts:
        _, digits, exponent = Decimal(amount).as_tuple()
        width += len(digits) + abs(exponent)
    return width


@contextmanager
def exact_context(width: int) -> Iterator[Context]:
    """Decimal context with enough precision for exact math on ``width`` digits."""
    with localcontext() as ctx:
        ctx.prec = max(28, width + 12)
        yield ctx


def _fmt_money(value: Decimal) -> str:
    """Format an amount with exactly two decimals (``1.50``, not ``1.5``)."""
    with exact_context(money_width(value)):
        return str(value.quantize(CENT))


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, bool):
        raise ProductValidationError(f"expected a decimal amount, got {value!r}", field="price")
    if isinstance(value, Decimal):
        return value
    try:
        # floats go through str() so 0.1 stays 0.1
        return Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as e:
        raise ProductValidationError(f"not a decimal amount: {value!r}", field="price") from e


@dataclass(frozen=True)
class Product:
    """One line item as bought: per-unit, tax-exclusive price.

    ``is_exempt`` waives the basic sales levy only; import duty still
    applies to exempt imported goods.
    """

    name: str
    quantity: int
    price: Decimal
    is_imported: bool = False
    is_exempt: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise ProductValidationError("name must be a non-empty string", field="name")
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise ProductValidationError(f"expected an integer, got {self.quantity!r}", field="quantity")
        if self.quantity < 1:
            raise ProductValidationError(f"must be at least 1, got {self.quantity}", field="quantity")

        price = _to_decimal(self.price)
        if not price.is_finite():
            raise ProductValidationError(f"must be finite, got {price}", field="price")
        if price < ZERO:
            raise ProductValidationError(f"must not be negative, got {price}", field="price")
        if money_width(price) > MAX_PRICE_WIDTH:
            raise ProductValidationError(f"more than {MAX_PRICE_WIDTH} digits: {price}", field="price")

        object.__setattr__(self, "name", self.name.strip())
        object.__setattr__(self, "price", price)
        object.__setattr__(self, "is_imported", bool(self.is_imported))
        object.__setattr__(self, "is_exempt", bool(self.is_exempt))


@dataclass(frozen=True)
class ReceiptItem:
    """A product paired with its per-unit tax."""

    product: Product
    tax: Decimal

    @property
    def total_tax(self) -> Decimal:
        with exact_context(money_width(self.product.quantity, self.tax)):
            return self.product.quantity * self.tax

    @property
    def total_price(self) -> Decimal:
        product = self.product
        with exact_context(money_width(product.quantity, product.price, self.tax)):
            return product.quantity * (product.price + self.tax)

    def line(self) -> str:
        return f"{self.product.quantity} {self.product.name}: {_fmt_money(self.total_price)}"


@dataclass(frozen=True)
class Receipt:
    """Snapshot of a cart's items with totals computed once at construction."""

    items: Tuple[ReceiptItem, ...] = ()
    total_taxes: Decimal = field(init=False)
    total_price: Decimal = field(init=False)

    def __post_init__(self) -> None:
        items = tuple(self.items)
        taxes = [item.total_tax for item in items]
        prices = [item.total_price for item in items]
        width = max((money_width(amount) for amount in taxes + prices), default=0)
        with exact_context(2 * width + len(str(len(items)))):
            total_taxes = sum(taxes, ZERO)
            total_price = sum(prices, ZERO)
        object.__setattr__(self, "items", items)
        object.__setattr__(self, "total_taxes", total_taxes)
        object.__setattr__(self, "total_price", total_price)

    def __len__(self) -> int:
        return len(self.items)

    def lines(self) -> List[str]:
        """Display rows: one per item, then sales taxes and total."""
        rows = [item.line() for item in self.items]
        rows.append(f"Sales Taxes: {_fmt_money(self.total_taxes)}")
        rows.append(f"Total: {_fmt_money(self.total_price)}")
        return rows

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [
                {
                    "name": item.product.name,
                    "quantity": item.product.quantity,
                    "unit_price": _fmt_money(item.product.price),
                    "unit_tax": _fmt_money(item.tax),
                    "imported": item.product.is_imported,
                    "exempt": item.product.is_exempt,
                    "total_price": _fmt_money(item.total_price),
                }
                for item in self.items
            ],
            "sales_taxes": _fmt_money(self.total_taxes),
            "total": _fmt_money(self.total_price),
        }
