"""Route group exports."""

from . import cashup, customers, health, menu, orders, quotes

__all__ = ["cashup", "customers", "health", "menu", "orders", "quotes"]
