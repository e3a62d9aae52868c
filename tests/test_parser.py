"""Tests for parsing free-form order text."""

from decimal import Decimal

import pytest

from sales_tax.tax_calculation.cart import ShoppingCart
from sales_tax.tax_calculation.models import Product
from sales_tax.tax_calculation.parser import (
    Classification,
    KeywordClassifier,
    OrderTextParser,
    create_cart_from_text,
)

BASKET_ONE_TEXT = "1 book at 12.49, 1 music CD at 14.99, 1 chocolate bar at 0.85"
BASKET_TWO_TEXT = "1 imported box of chocolates at 10.00\n1 imported bottle of perfume at 47.50"


class TestKeywordClassifier:
    """Keyword heuristics for the imported and exempt flags."""

    @pytest.mark.parametrize(
        "name, imported, exempt",
        [
            ("book", False, True),
            ("music CD", False, False),
            ("chocolate bar", False, True),
            ("imported box of chocolates", True, True),
            ("imported bottle of perfume", True, False),
            ("packet of headache pills", False, True),
            ("box of IMPORTED Chocolates", True, True),
            ("Notebook", False, True),
        ],
    )
    def test_default_keywords(self, name, imported, exempt):
        assert KeywordClassifier()(name) == Classification(is_imported=imported, is_exempt=exempt)

    def test_custom_keywords(self):
        classifier = KeywordClassifier(import_keywords=["foreign"], exempt_keywords=["Apple"])
        assert classifier("foreign apple") == Classification(is_imported=True, is_exempt=True)
        assert classifier("imported book") == Classification(is_imported=False, is_exempt=False)


class TestOrderTextParser:
    """Test cases for OrderTextParser.parse and parse_occurrences."""

    def test_single_imported_line(self):
        products = OrderTextParser().parse("1 imported bottle of perfume at 27.99")
        assert products == [
            Product("imported bottle of perfume", 1, Decimal("27.99"), is_imported=True, is_exempt=False)
        ]

    def test_multiple_lines_keep_order(self):
        products = OrderTextParser().parse(BASKET_ONE_TEXT)
        assert [(p.quantity, p.name, p.price) for p in products] == [
            (1, "book", Decimal("12.49")),
            (1, "music CD", Decimal("14.99")),
            (1, "chocolate bar", Decimal("0.85")),
        ]
        assert [p.is_exempt for p in products] == [True, False, True]

    def test_newline_separated_lines(self):
        products = OrderTextParser().parse(BASKET_TWO_TEXT)
        assert [p.name for p in products] == ["imported box of chocolates", "imported bottle of perfume"]
        assert all(p.is_imported for p in products)

    def test_case_insensitive(self):
        products = OrderTextParser().parse("2 IMPORTED Box Of Chocolates AT 11.25")
        assert len(products) == 1
        assert products[0].quantity == 2
        assert products[0].name == "IMPORTED Box Of Chocolates"
        assert products[0].is_imported and products[0].is_exempt

    def test_name_is_trimmed(self):
        products = OrderTextParser().parse("3    music CD    at 14.99")
        assert products[0].name == "music CD"

    def test_whole_number_price(self):
        assert OrderTextParser().parse("1 book at 12")[0].price == Decimal("12")

    def test_trailing_punctuation(self):
        assert OrderTextParser().parse("1 book at 12.49.")[0].price == Decimal("12.49")

    def test_word_at_inside_name(self):
        products = OrderTextParser().parse("1 hat at home at 5.00")
        assert products[0].name == "hat at home"

    @pytest.mark.parametrize("text", ["", "   ", "\n\t", "nothing to see here", "book at 12.49"])
    def test_no_matches(self, text):
        parser = OrderTextParser()
        assert parser.parse(text) == []
        assert parser.parse_occurrences(text) == []

    def test_malformed_occurrence_is_reported(self):
        outcomes = OrderTextParser().parse_occurrences("0 book at 12.49, 1 music CD at 14.99")

        assert len(outcomes) == 2
        failed, parsed = outcomes
        assert not failed.ok
        assert failed.product is None
        assert failed.source == "0 book at 12.49"
        assert "quantity" in failed.error
        assert parsed.ok
        assert parsed.product.name == "music CD"

    def test_parse_drops_malformed_occurrence(self):
        products = OrderTextParser().parse("0 book at 12.49, 1 music CD at 14.99")
        assert [p.name for p in products] == ["music CD"]

    def test_injected_classifier(self):
        parser = OrderTextParser(classifier=lambda name: Classification(is_imported=True))
        product = parser.parse("1 book at 12.49")[0]
        assert product.is_imported
        assert not product.is_exempt

    @pytest.mark.parametrize("text", [BASKET_ONE_TEXT, BASKET_TWO_TEXT, "4 packet of headache pills at 9.75"])
    def test_reparsing_reconstructed_text(self, text):
        parser = OrderTextParser()
        products = parser.parse(text)
        rebuilt = ", ".join(f"{p.quantity} {p.name} at {p.price}" for p in products)
        assert parser.parse(rebuilt) == products


class TestCreateCartFromText:
    """Text to cart pipeline."""

    def test_basket_one(self):
        result = create_cart_from_text(BASKET_ONE_TEXT)
        receipt = result.receipt()

        assert result.ok
        assert receipt.total_taxes == Decimal("1.50")
        assert receipt.total_price == Decimal("29.83")

    def test_basket_two(self):
        receipt = create_cart_from_text(BASKET_TWO_TEXT).receipt()
        assert receipt.lines() == [
            "1 imported box of chocolates: 10.50",
            "1 imported bottle of perfume: 54.65",
            "Sales Taxes: 7.65",
            "Total: 65.15",
        ]

    def test_empty_input_gives_empty_cart(self):
        result = create_cart_from_text("")

        assert result.cart is not None
        assert result.ok
        assert len(result.cart) == 0
        assert result.receipt().total_taxes == 0
        assert result.receipt().total_price == 0

    def test_failures_are_collected(self):
        result = create_cart_from_text("0 book at 12.49, 1 music CD at 14.99")

        assert not result.ok
        assert [f.source for f in result.failures] == ["0 book at 12.49"]
        assert len(result.cart) == 1

    def test_large_price_from_text(self):
        result = create_cart_from_text("1 yacht at 1000000000000000000000000000.00")

        assert result.ok
        assert result.receipt().lines() == [
            "1 yacht: 1100000000000000000000000000.00",
            "Sales Taxes: 100000000000000000000000000.00",
            "Total: 1100000000000000000000000000.00",
        ]

    def test_existing_cart_is_extended(self):
        cart = ShoppingCart()
        cart.add_product(Product("book", 1, "12.49", is_exempt=True))

        result = create_cart_from_text("1 music CD at 14.99", cart=cart)

        assert result.cart is cart
        assert len(cart) == 2
