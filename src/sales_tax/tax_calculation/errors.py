"""Exceptions raised by the tax calculation package."""


class SalesTaxError(Exception):
    """Base class for all sales tax errors."""


class ProductValidationError(SalesTaxError, ValueError):
    """Raised when a product is built from invalid values.

    Carries the offending field so callers (the CLI, the text parser) can
    report which part of a line item was rejected.
    """

    def __init__(self, message: str, field: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.field = field

    def __str__(self) -> str:
        if self.field:
            return f"{self.field}: {self.message}"
        return self.message
