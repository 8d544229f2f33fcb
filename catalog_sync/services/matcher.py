from __future__ import annotations

import dataclasses
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from ..models.canonical_record import BUSINESS_FIELDS, CanonicalRecord
from ..models.columns import EXTERNAL_ID, MERCHANT_ID
from ..models.error_record import IDENTITY_CONFLICT, UNMATCHED_TARGET
from ..models.reconciliation_result import (
    Created,
    Duplicate,
    ImportMode,
    Invalid,
    RowIssue,
    RowOutcome,
    Updated,
)
from ..models.row_data import ValidatedRow

logger = logging.getLogger(__name__)

"""Record matcher: resolve a validated row to at most one existing record.

Lookup order is fixed: every record's external identifier first, then (only
if nothing matched) every record's merchant identifier. The first hit wins.
When the two keys point at two different records the external identifier
hit is kept and the other record is reported as ``conflicting_record``; it
never changes how the row is classified.
"""

__all__ = [
    "NoMatch",
    "MatchedRecord",
    "MatchResult",
    "match_record",
    "merge_record",
    "classify_row",
]

_KEYS: tuple[tuple[str, str], ...] = (
    ("external_id", EXTERNAL_ID),
    ("merchant_id", MERCHANT_ID),
)


@dataclass(frozen=True)
class NoMatch:
    pass


@dataclass(frozen=True)
class MatchedRecord:
    record: CanonicalRecord
    matched_on: str  # catalog column the match was found through
    conflicting_record: CanonicalRecord | None = None

    @property
    def id(self) -> str | None:
        return self.record.id


MatchResult = NoMatch | MatchedRecord


def _first_with(records: Sequence[CanonicalRecord], attr: str, value: str | None) -> CanonicalRecord | None:
    if value is None:
        return None
    for record in records:
        if getattr(record, attr) == value:
            return record
    return None


def match_record(row: ValidatedRow, records: Sequence[CanonicalRecord]) -> MatchResult:
    """Find the existing record ``row`` refers to, by external then merchant identifier."""
    for attr, column in _KEYS:
        found = _first_with(records, attr, getattr(row, attr))
        if found is None:
            continue
        conflict = None
        if attr == "external_id":
            other = _first_with(records, "merchant_id", row.merchant_id)
            if other is not None and other is not found:
                conflict = other
        return MatchedRecord(record=found, matched_on=column, conflicting_record=conflict)
    return NoMatch()


def merge_record(existing: CanonicalRecord, row: ValidatedRow) -> CanonicalRecord:
    """Overlay the row's present fields on ``existing``; the storage id is kept."""
    changes = {name: getattr(row, name) for name in BUSINESS_FIELDS if getattr(row, name) is not None}
    return dataclasses.replace(existing, **changes)


def _new_record(row: ValidatedRow) -> CanonicalRecord:
    return CanonicalRecord(id=None, **{name: getattr(row, name) for name in BUSINESS_FIELDS})


def classify_row(row: ValidatedRow, records: Sequence[CanonicalRecord], mode: ImportMode) -> RowOutcome:
    """Turn one validated row into its tagged outcome for ``mode``."""
    match = match_record(row, records)
    if isinstance(match, MatchedRecord) and match.conflicting_record is not None:
        logger.warning(
            "row %d: external identifier matches record %s, merchant identifier matches record %s; keeping %s",
            row.line_number,
            match.id,
            match.conflicting_record.id,
            match.id,
        )

    if mode is ImportMode.CREATE:
        if isinstance(match, MatchedRecord):
            value = row.external_id if match.matched_on == EXTERNAL_ID else row.merchant_id
            issue = RowIssue(row.line_number, IDENTITY_CONFLICT, f"{match.matched_on} {value} already exists")
            return Duplicate(line_number=row.line_number, issue=issue, existing_id=match.id)
        return Created(line_number=row.line_number, record=_new_record(row))

    if isinstance(match, NoMatch):
        message = (
            f"No existing record matches {EXTERNAL_ID} '{row.external_id or ''}'"
            f" / {MERCHANT_ID} '{row.merchant_id or ''}'"
        )
        return Invalid(line_number=row.line_number, issue=RowIssue(row.line_number, UNMATCHED_TARGET, message))
    return Updated(line_number=row.line_number, record=merge_record(match.record, row), matched_on=match.matched_on)
