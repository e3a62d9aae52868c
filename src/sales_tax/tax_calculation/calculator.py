"""Per-unit sales tax computation."""

from __future__ import annotations

from decimal import ROUND_CEILING, Decimal

from .models import CENT, ZERO, Product, exact_context, money_width

BASIC_TAX_RATE = Decimal("0.10")
IMPORT_DUTY_RATE = Decimal("0.05")
ROUNDING_INCREMENT = Decimal("0.05")

_STEPS_PER_UNIT = int(1 / ROUNDING_INCREMENT)


def round_up_to_increment(amount: Decimal) -> Decimal:
    """Round ``amount`` up to the next multiple of 0.05.

    Exact multiples are returned unchanged, e.g. 1.499 -> 1.50,
    7.125 -> 7.15, 0.50 -> 0.50.
    """
    with exact_context(money_width(amount, _STEPS_PER_UNIT)):
        steps = (amount * _STEPS_PER_UNIT).to_integral_value(rounding=ROUND_CEILING)
        return (steps / _STEPS_PER_UNIT).quantize(CENT)


class TaxCalculator:
    """Compute the per-unit tax owed on a product.

    Tax is the basic levy (10%, skipped for exempt goods) plus the import
    duty (5%, for every imported good), rounded up to the nearest 0.05.
    Quantity plays no part; the cart multiplies it in.
    """

    basic_rate = BASIC_TAX_RATE
    import_rate = IMPORT_DUTY_RATE

    def calculate_tax(self, product: Product) -> Decimal:
        tax = ZERO
        with exact_context(money_width(product.price, self.basic_rate, self.import_rate)):
            if not product.is_exempt:
                tax += product.price * self.basic_rate
            if product.is_imported:
                tax += product.price * self.import_rate
        return round_up_to_increment(tax)


_default_calculator = TaxCalculator()


def calculate_tax(product: Product) -> Decimal:
    """Module-level shortcut for :meth:`TaxCalculator.calculate_tax`."""
    return _default_calculator.calculate_tax(product)
