"""Grocery storefront backend: users, products, grocery inventory and orders."""

__version__ = "1.0.0"
