"""
Sales Tax - receipt and sales tax calculator

Computes per-item sales tax (basic levy plus import duty, rounded up to the
nearest 0.05) and itemized receipts, for carts entered item by item or
parsed from free-form order text such as "1 book at 12.49".
"""

__version__ = "0.1.0"

from . import tax_calculation
from . import utils

__all__ = ["tax_calculation", "utils"]
