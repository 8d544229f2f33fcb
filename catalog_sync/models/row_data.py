from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

"""Row models for catalog import.

RawRow is what the tabular parser hands over for each data line; ValidatedRow
is the typed, fixed-schema row the validator produces from it. Line numbers
are 1-based physical lines of the source text (header = line 1).
"""

__all__ = [
    "RawRow",
    "MalformedLine",
    "ValidatedRow",
]


@dataclass(frozen=True)
class RawRow:
    """One data line split into header-keyed cells.

    Values are trimmed text (quoted cells keep their surrounding whitespace);
    an empty string means the cell was blank.
    Columns not present in the header are simply missing from ``values``.
    """
    line_number: int
    values: dict[str, str]

    def get(self, column: str) -> str | None:
        """Return the cell for ``column`` or None when blank/missing."""
        value = self.values.get(column)
        if value is None or value == "":
            return None
        return value


@dataclass(frozen=True)
class MalformedLine:
    """Data line whose cell count does not match the header."""
    line_number: int
    expected_cells: int
    found_cells: int

    @property
    def message(self) -> str:
        return f"Expected {self.expected_cells} columns but found {self.found_cells}"


@dataclass(frozen=True)
class ValidatedRow:
    """Typed catalog row after validation.

    ``None`` on any business field means the input left it blank; the matcher
    relies on that to keep existing values during an update merge.
    """
    line_number: int
    name: str | None = None
    external_id: str | None = None  # natural key 1
    merchant_id: str | None = None  # natural key 2
    manufacturer_code: str | None = None
    barcode: str | None = None
    cost: Decimal | None = None
    price: Decimal | None = None
    referral_fee_percent: Decimal | None = None
    fulfillment_fee: Decimal | None = None
    advertising_cost: Decimal | None = None
    initial_investment: Decimal | None = None
