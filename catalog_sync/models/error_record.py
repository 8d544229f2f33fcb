from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for the JSON Lines error log.

One record per rejected row (validation failure, duplicate identity, missing
update target, malformed line) or per file-level failure. ``row=-1`` marks a
file-level error where no single line is to blame.
"""

__all__ = [
    "ErrorRecord",
    "FIELD_VALIDATION",
    "IDENTITY_CONFLICT",
    "UNMATCHED_TARGET",
    "COLUMN_COUNT_MISMATCH",
    "STRUCTURAL",
]

FIELD_VALIDATION = "FIELD_VALIDATION"
IDENTITY_CONFLICT = "IDENTITY_CONFLICT"
UNMATCHED_TARGET = "UNMATCHED_TARGET"
COLUMN_COUNT_MISMATCH = "COLUMN_COUNT_MISMATCH"
STRUCTURAL = "STRUCTURAL"


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        source: Import file name being processed
        row: Source line number (1-based). -1 for file-level errors
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: Human-readable description, without the "Row N:" prefix
    """
    timestamp: str
    source: str
    row: int
    error_type: str
    message: str

    @staticmethod
    def create(source: str, row: int, error_type: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            source=source,
            row=row,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        """Serialize to one JSON line with exactly the dataclass keys."""
        return json.dumps(asdict(self), ensure_ascii=False)
