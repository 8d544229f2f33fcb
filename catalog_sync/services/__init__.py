"""Reconciliation engine services: validation, matching, coordination, export."""
