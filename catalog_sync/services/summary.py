from __future__ import annotations

from ..models.reconciliation_result import ReconciliationOutcome

"""SUMMARY line rendering for import runs."""


def render_summary_line(outcome: ReconciliationOutcome) -> str:
    """Render the SUMMARY line for one reconciliation outcome.

    Format:
    SUMMARY mode={mode} rows={rows} created={c} updated={u} duplicates={d} failed={f}

    A structural failure renders ``rows=0`` with every count at zero and a
    trailing ``structural_error=1``.

    Examples:
        >>> from catalog_sync.models.reconciliation_result import ImportMode
        >>> render_summary_line(ReconciliationOutcome(mode=ImportMode.CREATE))
        'SUMMARY mode=create rows=0 created=0 updated=0 duplicates=0 failed=0'
    """
    counts = outcome.counts
    line = (
        f"SUMMARY mode={outcome.mode.value} "
        f"rows={outcome.total_rows} "
        f"created={counts['created']} "
        f"updated={counts['updated']} "
        f"duplicates={counts['duplicates']} "
        f"failed={counts['failed']}"
    )
    if not outcome.succeeded:
        line += " structural_error=1"
    return line
