from __future__ import annotations

import logging
from collections.abc import Iterable

from ..models.canonical_record import CanonicalRecord
from ..models.error_record import COLUMN_COUNT_MISMATCH, FIELD_VALIDATION
from ..models.reconciliation_result import ImportMode, Invalid, ReconciliationOutcome, RowIssue, RowOutcome
from ..models.row_data import MalformedLine, RawRow
from ..tabular.parser import ParsedTable, TabularStructureError, parse_tabular
from .matcher import classify_row
from .validator import validate_row

logger = logging.getLogger(__name__)

"""Reconciliation coordinator.

Runs parser -> validator -> matcher for every row of one import and files
each row into exactly one of ToCreate / ToUpdate / Duplicates / Errors.

- Only a structural failure (input not tabular at all) aborts the run, and
  then no bucket holds anything.
- Row failures are data, never exceptions.
- The reference records are only read; proposals are returned, not applied.
"""

__all__ = [
    "reconcile",
    "reconcile_table",
    "process_row",
]


def process_row(
    line: RawRow | MalformedLine,
    records: tuple[CanonicalRecord, ...],
    mode: ImportMode,
) -> RowOutcome:
    """Classify a single parsed line."""
    if isinstance(line, MalformedLine):
        issue = RowIssue(line.line_number, COLUMN_COUNT_MISMATCH, line.message)
        return Invalid(line_number=line.line_number, issue=issue)

    validated = validate_row(line, mode=mode)
    if isinstance(validated, list):
        issue = RowIssue(line.line_number, FIELD_VALIDATION, ", ".join(validated))
        return Invalid(line_number=line.line_number, issue=issue)

    return classify_row(validated, records, mode)


def reconcile_table(
    table: ParsedTable,
    reference_records: Iterable[CanonicalRecord],
    mode: ImportMode,
) -> ReconciliationOutcome:
    """Reconcile an already parsed table against ``reference_records``."""
    records = tuple(reference_records)  # read-only view for the whole run
    outcome = ReconciliationOutcome(mode=mode)
    for line in table.rows:
        row_outcome = process_row(line, records, mode)
        logger.debug("row %d -> %s", row_outcome.line_number, type(row_outcome).__name__)
        outcome.add(row_outcome)

    logger.info(
        "reconciled %d rows (mode=%s): created=%d updated=%d duplicates=%d failed=%d",
        outcome.total_rows,
        mode.value,
        len(outcome.to_create),
        len(outcome.to_update),
        len(outcome.duplicates),
        len(outcome.errors),
    )
    return outcome


def reconcile(
    raw_text: str,
    reference_records: Iterable[CanonicalRecord],
    mode: ImportMode,
    *,
    delimiter: str = ",",
) -> ReconciliationOutcome:
    """Reconcile raw catalog text against the existing records.

    Args:
        raw_text: Full import file content
        reference_records: Snapshot of existing catalog records (never mutated)
        mode: CREATE or UPDATE semantics for every row
        delimiter: Cell separator

    Returns:
        ReconciliationOutcome; ``structural_error`` is set (and every bucket
        empty) when the text could not be parsed as a table at all
    """
    try:
        table = parse_tabular(raw_text, delimiter=delimiter)
    except TabularStructureError as e:
        logger.error("structural failure: %s", e)
        return ReconciliationOutcome.structural_failure(mode, str(e))

    if table.unknown_columns:
        logger.warning("ignoring unknown columns: %s", ", ".join(table.unknown_columns))
    return reconcile_table(table, reference_records, mode)
