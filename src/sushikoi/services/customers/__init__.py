"""Customer service exports."""

from .book import CUSTOMERS_DOCUMENT, CustomerBook, CustomerNotFoundError

__all__ = ["CUSTOMERS_DOCUMENT", "CustomerBook", "CustomerNotFoundError"]
