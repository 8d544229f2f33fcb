from __future__ import annotations

from dataclasses import dataclass

from .reconciliation_result import ImportMode

"""Config dataclasses for catalog-sync.

The loader in catalog_sync/config/loader.py builds these from YAML; the CLI
falls back to ``SyncConfig()`` defaults when no config file is present.
"""

__all__ = [
    "SyncConfig",
]


@dataclass(frozen=True)
class SyncConfig:
    """Root configuration for import/export runs."""
    delimiter: str = ","  # single character
    default_mode: ImportMode = ImportMode.CREATE  # used when --update is not given
    error_log_dir: str = "./logs"  # JSON Lines error logs land here
    export_prefix: str = "catalog-export"  # export file name: <prefix>-YYYY-MM-DD.csv
    snapshot_id_column: str = "id"  # storage id column in catalog snapshot files
