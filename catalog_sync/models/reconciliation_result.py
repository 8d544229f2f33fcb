from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .canonical_record import CanonicalRecord

"""Result models for one reconciliation run.

RowOutcome is the tagged per-row result (Created | Updated | Duplicate |
Invalid); ReconciliationOutcome accumulates them into four disjoint buckets.
Both are created fresh per run and hold no references back into the engine.
"""

__all__ = [
    "ImportMode",
    "RowIssue",
    "Created",
    "Updated",
    "Duplicate",
    "Invalid",
    "RowOutcome",
    "ReconciliationOutcome",
]


class ImportMode(Enum):
    """Whole-run mode selected by the caller (no per-row mixing)."""
    CREATE = "create"
    UPDATE = "update"

    @classmethod
    def from_flag(cls, update: bool) -> ImportMode:
        return cls.UPDATE if update else cls.CREATE


@dataclass(frozen=True)
class RowIssue:
    """Deterministic, timestamp-free description of a rejected row."""
    row: int
    error_type: str  # see models.error_record constants
    message: str

    def render(self) -> str:
        return f"Row {self.row}: {self.message}"


@dataclass(frozen=True)
class Created:
    line_number: int
    record: CanonicalRecord


@dataclass(frozen=True)
class Updated:
    line_number: int
    record: CanonicalRecord
    matched_on: str  # catalog column the identity was resolved through


@dataclass(frozen=True)
class Duplicate:
    line_number: int
    issue: RowIssue
    existing_id: str | None


@dataclass(frozen=True)
class Invalid:
    line_number: int
    issue: RowIssue


RowOutcome = Created | Updated | Duplicate | Invalid


@dataclass
class ReconciliationOutcome:
    """Aggregate of one run.

    ``errors`` and ``duplicates`` hold the literal "Row N: ..." strings shown to
    users; ``issues`` keeps the structured form of both, in row order, for the
    error log. ``structural_error`` is set only when the whole input could not
    be read as tabular data, in which case every bucket is empty.
    """
    mode: ImportMode
    to_create: list[CanonicalRecord] = field(default_factory=list)
    to_update: list[CanonicalRecord] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    duplicates: list[str] = field(default_factory=list)
    issues: list[RowIssue] = field(default_factory=list)
    total_rows: int = 0
    structural_error: str | None = None

    @classmethod
    def structural_failure(cls, mode: ImportMode, message: str) -> ReconciliationOutcome:
        return cls(mode=mode, structural_error=message)

    @property
    def succeeded(self) -> bool:
        return self.structural_error is None

    @property
    def has_proposals(self) -> bool:
        return len(self.to_create) + len(self.to_update) > 0

    @property
    def counts(self) -> dict[str, int]:
        return {
            "created": len(self.to_create),
            "updated": len(self.to_update),
            "duplicates": len(self.duplicates),
            "failed": len(self.errors),
        }

    def add(self, outcome: RowOutcome) -> None:
        """File one row outcome into exactly one bucket."""
        self.total_rows += 1
        if isinstance(outcome, Created):
            self.to_create.append(outcome.record)
        elif isinstance(outcome, Updated):
            self.to_update.append(outcome.record)
        elif isinstance(outcome, Duplicate):
            self.duplicates.append(outcome.issue.render())
            self.issues.append(outcome.issue)
        elif isinstance(outcome, Invalid):
            self.errors.append(outcome.issue.render())
            self.issues.append(outcome.issue)
        else:
            raise TypeError(f"unsupported row outcome: {type(outcome).__name__}")
