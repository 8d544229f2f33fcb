"""Domain models for catalog-sync.

Row models flow parser -> validator -> matcher; CanonicalRecord is the
storage-owned entity; ReconciliationOutcome is what one run returns.
"""

from .canonical_record import BUSINESS_FIELDS, CanonicalRecord
from .config_models import SyncConfig
from .error_record import ErrorRecord
from .reconciliation_result import (
    Created,
    Duplicate,
    ImportMode,
    Invalid,
    ReconciliationOutcome,
    RowIssue,
    RowOutcome,
    Updated,
)
from .row_data import MalformedLine, RawRow, ValidatedRow

__all__ = [
    # Configuration models
    "SyncConfig",
    # Row models
    "RawRow",
    "MalformedLine",
    "ValidatedRow",
    # Catalog entity
    "CanonicalRecord",
    "BUSINESS_FIELDS",
    # Results
    "ImportMode",
    "RowIssue",
    "Created",
    "Updated",
    "Duplicate",
    "Invalid",
    "RowOutcome",
    "ReconciliationOutcome",
    "ErrorRecord",
]
