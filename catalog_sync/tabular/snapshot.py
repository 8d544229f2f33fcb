from __future__ import annotations

from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import pandas as pd

from ..models.canonical_record import CanonicalRecord
from ..models.columns import COLUMN_TO_FIELD, EXPORT_COLUMNS, NUMERIC_COLUMNS

"""Catalog snapshot files: the CLI's stand-in for the storage collaborator.

A snapshot is a CSV or XLSX sheet with the storage id column plus the catalog
headers. Everything is read as text (no pandas NA conversion, so literal
"NA" product names survive) and converted to CanonicalRecord here, once.
"""

__all__ = [
    "SnapshotError",
    "load_snapshot",
    "write_snapshot",
]


class SnapshotError(Exception):
    """Raised when a catalog snapshot cannot be read or written."""


def _read_frame(path: Path) -> pd.DataFrame:
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return pd.read_csv(path, dtype=str, keep_default_na=False, encoding="utf-8-sig")
    if suffix == ".xlsx":
        return pd.read_excel(path, dtype=str, keep_default_na=False, engine="openpyxl")
    raise SnapshotError(f"unsupported snapshot format: {path.name} (expected .csv or .xlsx)")


def _cell(value: Any) -> str | None:
    if value is None or pd.isna(value):
        return None
    text = str(value).strip()
    return text or None


def _to_record(raw: dict[str, Any], id_column: str, line: int) -> CanonicalRecord:
    values: dict[str, Any] = {}
    for column, attr in COLUMN_TO_FIELD.items():
        text = _cell(raw.get(column))
        if text is not None and column in NUMERIC_COLUMNS:
            try:
                number = Decimal(text)
            except InvalidOperation as e:
                raise SnapshotError(f"snapshot line {line}: {column} is not numeric: {text!r}") from e
            if not number.is_finite():
                raise SnapshotError(f"snapshot line {line}: {column} is not a finite number: {text!r}")
            values[attr] = number
        else:
            values[attr] = text
    return CanonicalRecord(id=_cell(raw.get(id_column)), **values)


def load_snapshot(path: Path, *, id_column: str = "id") -> list[CanonicalRecord]:
    """Load existing catalog records from a snapshot file.

    Raises
    ------
    SnapshotError: file missing, unsupported suffix, unreadable, no id column,
        or a non-numeric or non-finite value in a numeric column
    """
    if not path.exists():
        raise SnapshotError(f"snapshot not found: {path}")
    try:
        df = _read_frame(path)
    except SnapshotError:
        raise
    except (OSError, ValueError) as e:
        raise SnapshotError(f"cannot read snapshot {path.name}: {e}") from e

    df.columns = [str(c).strip() for c in df.columns]
    if id_column not in df.columns:
        raise SnapshotError(f"snapshot {path.name} has no '{id_column}' column")

    # header is line 1 in both formats
    return [_to_record(raw, id_column, line) for line, raw in enumerate(df.to_dict(orient="records"), start=2)]


def write_snapshot(path: Path, records: list[CanonicalRecord], *, id_column: str = "id") -> Path:
    """Write records (typically proposals) as a CSV snapshot."""
    columns = [id_column, *EXPORT_COLUMNS]
    rows = []
    for record in records:
        row: dict[str, str] = {id_column: record.id or ""}
        for column in EXPORT_COLUMNS:
            value = record.value_for(column)
            row[column] = "" if value is None else str(value)
        rows.append(row)
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        pd.DataFrame(rows, columns=columns).to_csv(path, index=False, encoding="utf-8")
    except OSError as e:
        raise SnapshotError(f"cannot write snapshot {path}: {e}") from e
    return path
