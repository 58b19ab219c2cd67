"""Catalog admin backend: categories, products and their listings."""

__version__ = "0.1.0"
