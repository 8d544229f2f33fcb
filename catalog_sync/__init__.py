"""Bulk catalog reconciliation engine: import/export a product catalog as tabular text."""

__version__ = "0.1.0"
