"""
Pytest configuration and fixtures for the Sales Tax tests.
"""

import logging
import sys
from pathlib import Path

import pytest

# Add src to Python path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from sales_tax.tax_calculation.models import Product  # noqa: E402


@pytest.fixture
def basket_one():
    """Book, music CD and chocolate bar, all domestic."""
    return [
        Product("book", 1, "12.49", is_exempt=True),
        Product("music CD", 1, "14.99"),
        Product("chocolate bar", 1, "0.85", is_exempt=True),
    ]


@pytest.fixture
def basket_two():
    """Imported chocolates and imported perfume."""
    return [
        Product("imported box of chocolates", 1, "10.00", is_imported=True, is_exempt=True),
        Product("imported bottle of perfume", 1, "47.50", is_imported=True),
    ]


@pytest.fixture
def basket_three():
    return [
        Product("imported bottle of perfume", 1, "27.99", is_imported=True),
        Product("bottle of perfume", 1, "18.99"),
        Product("packet of headache pills", 1, "9.75", is_exempt=True),
        Product("box of imported chocolates", 1, "11.25", is_imported=True, is_exempt=True),
    ]


@pytest.fixture
def env_file(tmp_path, monkeypatch):
    """Write a .env file and undo whatever it puts into os.environ."""
    for key in ("LOG_LEVEL", "LOG_FILE", "STRICT_PARSE"):
        monkeypatch.delenv(key, raising=False)

    def _write(**values):
        path = tmp_path / ".env"
        path.write_text("".join(f"{key}={value}\n" for key, value in values.items()))
        for key in values:
            # register for restoration after load_dotenv sets it
            monkeypatch.setenv(key, "")
            monkeypatch.delenv(key)
        return str(path)

    return _write


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers bound to streams captured by a previous test."""
    yield
    logger = logging.getLogger("sales_tax")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
