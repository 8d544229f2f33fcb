"""Tabular text parsing and catalog snapshot I/O."""
