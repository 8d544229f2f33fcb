from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date
from decimal import Decimal

from ..models.canonical_record import CanonicalRecord
from ..models.columns import CATALOG_COLUMNS_V1, EXPORT_COLUMNS

"""Export side: canonical records -> tabular text, plus the blank template.

An empty record collection exports as "" (no header line). Callers treat the
empty string as "nothing to download", so a header-only file must not appear.
"""

__all__ = [
    "to_tabular_text",
    "template_text",
    "export_filename",
    "TEMPLATE_EXAMPLE_ROW",
]

QUOTE = '"'

TEMPLATE_EXAMPLE_ROW: dict[str, str] = {
    "Name": "Example Product",
    "External Identifier": "B07KG5CBQ6",
    "Merchant Identifier": "SKU-001",
    "Manufacturer Code": "M001",
    "Barcode": "X001ABC123",
    "Cost": "25.99",
    "Price": "49.99",
    "Referral-Fee Percentage": "15",
    "Fulfillment Fee": "3.50",
    "Advertising Cost": "1.25",
    "Initial Investment": "500",
}


def _render(value: str | Decimal | None, delimiter: str) -> str:
    if value is None:
        return ""
    text = str(value)
    if delimiter in text or QUOTE in text or "\n" in text or "\r" in text or text != text.strip():
        return QUOTE + text.replace(QUOTE, QUOTE * 2) + QUOTE
    return text


def _line(cells: Iterable[str | Decimal | None], delimiter: str) -> str:
    return delimiter.join(_render(cell, delimiter) for cell in cells)


def to_tabular_text(
    records: Sequence[CanonicalRecord],
    columns: Sequence[str] = EXPORT_COLUMNS,
    *,
    delimiter: str = ",",
) -> str:
    """Render records as header + one line per record, in ``columns`` order."""
    if not records:
        return ""
    lines = [_line(columns, delimiter)]
    lines.extend(_line((record.value_for(column) for column in columns), delimiter) for record in records)
    return "\n".join(lines)


def template_text(*, delimiter: str = ",") -> str:
    """Header row plus one illustrative row; no live data involved."""
    header = _line(CATALOG_COLUMNS_V1, delimiter)
    example = _line((TEMPLATE_EXAMPLE_ROW[column] for column in CATALOG_COLUMNS_V1), delimiter)
    return "\n".join([header, example])


def export_filename(prefix: str, today: date) -> str:
    """File name the download collaborator should use: <prefix>-YYYY-MM-DD.csv."""
    return f"{prefix}-{today.isoformat()}.csv"
