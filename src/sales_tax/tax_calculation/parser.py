"""
Free-form order text parsing.

Turns text such as ``"1 book at 12.49, 1 imported bottle of perfume at 27.99"``
into products. Every ``<quantity> <name> at <price>`` occurrence is matched
(case-insensitive, anywhere in the input) and the product name is classified
as imported and/or exempt by keyword. Occurrences that cannot be turned into
a valid product are reported individually instead of aborting the parse.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Callable, Iterable, List, Optional, Tuple

from ..utils.logging import get_logger
from .cart import ShoppingCart
from .errors import ProductValidationError
from .models import Product, Receipt

logger = get_logger(__name__)

# <integer> <one or more words of letters> at <decimal>
ORDER_LINE_PATTERN = re.compile(
    r"\b(\d+)\s+([^\W\d_]+(?:\s+[^\W\d_]+)*?)\s+at\s+(\d+(?:\.\d+)?)",
    re.IGNORECASE,
)

IMPORT_KEYWORDS: Tuple[str, ...] = ("imported",)
EXEMPT_KEYWORDS: Tuple[str, ...] = ("chocolate", "book", "pills")


@dataclass(frozen=True)
class Classification:
    is_imported: bool = False
    is_exempt: bool = False


Classifier = Callable[[str], Classification]


class KeywordClassifier:
    """Classify a product name by case-insensitive substring match.

    The exempt keywords stand in for the food, book and medical categories;
    a name matching none of them is taxable.
    """

    def __init__(
        self,
        import_keywords: Iterable[str] = IMPORT_KEYWORDS,
        exempt_keywords: Iterable[str] = EXEMPT_KEYWORDS,
    ) -> None:
        self.import_keywords = tuple(k.lower() for k in import_keywords)
        self.exempt_keywords = tuple(k.lower() for k in exempt_keywords)

    def is_imported(self, name: str) -> bool:
        lowered = name.lower()
        return any(keyword in lowered for keyword in self.import_keywords)

    def is_exempt(self, name: str) -> bool:
        lowered = name.lower()
        return any(keyword in lowered for keyword in self.exempt_keywords)

    def __call__(self, name: str) -> Classification:
        return Classification(is_imported=self.is_imported(name), is_exempt=self.is_exempt(name))


@dataclass(frozen=True)
class ParseOutcome:
    """Result for one matched occurrence: a product or the reason there is none."""

    source: str
    product: Optional[Product] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.product is not None


class OrderTextParser:
    def __init__(self, classifier: Optional[Classifier] = None) -> None:
        self.classifier = classifier or KeywordClassifier()

    def parse_occurrences(self, text: str) -> List[ParseOutcome]:
        """Match every order line in ``text`` and report each one, in order."""
        if not text or not text.strip():
            return []

        outcomes = []
        for match in ORDER_LINE_PATTERN.finditer(text):
            outcome = self._build(match)
            if not outcome.ok:
                logger.debug(f"Skipping {outcome.source!r}: {outcome.error}")
            outcomes.append(outcome)
        return outcomes

    def parse(self, text: str) -> List[Product]:
        """Products from every well-formed occurrence; malformed ones are left out."""
        return [outcome.product for outcome in self.parse_occurrences(text) if outcome.ok]

    def _build(self, match: "re.Match[str]") -> ParseOutcome:
        source = match.group(0)
        try:
            quantity = int(match.group(1))
            name = match.group(2).strip()
            price = Decimal(match.group(3))
        except (ValueError, InvalidOperation) as e:
            return ParseOutcome(source=source, error=f"unreadable value: {e}")

        classification = self.classifier(name)
        try:
            product = Product(
                name=name,
                quantity=quantity,
                price=price,
                is_imported=classification.is_imported,
                is_exempt=classification.is_exempt,
            )
        except ProductValidationError as e:
            return ParseOutcome(source=source, error=str(e))
        return ParseOutcome(source=source, product=product)


@dataclass
class CartParseResult:
    """Cart built from order text, together with the occurrences that failed.

    Always returned, even for empty input, so an empty cart is never
    confused with a failed parse.
    """

    cart: ShoppingCart
    failures: List[ParseOutcome] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def receipt(self) -> Receipt:
        return self.cart.generate_receipt()


def create_cart_from_text(
    text: str,
    parser: Optional[OrderTextParser] = None,
    cart: Optional[ShoppingCart] = None,
) -> CartParseResult:
    """Parse ``text`` and add every extracted product to a cart."""
    parser = parser or OrderTextParser()
    cart = cart if cart is not None else ShoppingCart()

    outcomes = parser.parse_occurrences(text)
    cart.add_products(outcome.product for outcome in outcomes if outcome.ok)
    failures = [outcome for outcome in outcomes if not outcome.ok]

    logger.info(f"Parsed {len(outcomes)} order line(s): {len(outcomes) - len(failures)} added, {len(failures)} skipped")
    return CartParseResult(cart=cart, failures=failures)
