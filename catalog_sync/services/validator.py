from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation

from ..models.columns import (
    BARCODE,
    COLUMN_TO_FIELD,
    EXTERNAL_ID,
    MERCHANT_ID,
    NUMERIC_COLUMNS,
    REFERRAL_FEE_PERCENT,
    REQUIRED_ON_CREATE,
)
from ..models.reconciliation_result import ImportMode
from ..models.row_data import RawRow, ValidatedRow

"""Row validator.

Every rule runs for every row; violations accumulate in a fixed order so the
same RawRow always yields the same message list. Nothing here raises for bad
data, the caller gets either a ValidatedRow or the list of messages.
"""

__all__ = [
    "validate_row",
    "EXTERNAL_ID_PATTERN",
    "BARCODE_PATTERN",
    "MERCHANT_ID_MIN_LENGTH",
]

EXTERNAL_ID_PATTERN = re.compile(r"^B[0-9A-Z]{9}$")
BARCODE_PATTERN = re.compile(r"^[0-9A-Z]{10}$")
MERCHANT_ID_MIN_LENGTH = 3
REFERRAL_FEE_RANGE = (Decimal(0), Decimal(100))


def _parse_number(text: str) -> Decimal | None:
    """Return a finite Decimal or None when ``text`` is not a usable number."""
    try:
        value = Decimal(text)
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value


def _required_violations(raw: RawRow, mode: ImportMode) -> list[str]:
    if mode is ImportMode.CREATE:
        return [f"{column} field is required" for column in REQUIRED_ON_CREATE if raw.get(column) is None]
    # update: only something to locate the target by
    if raw.get(EXTERNAL_ID) is None and raw.get(MERCHANT_ID) is None:
        return [f"{EXTERNAL_ID} or {MERCHANT_ID} is required to locate an existing record"]
    return []


def validate_row(raw: RawRow, *, mode: ImportMode = ImportMode.CREATE) -> ValidatedRow | list[str]:
    """Validate one RawRow.

    Returns a ValidatedRow when every rule passes, otherwise the list of
    violation messages (never empty).
    """
    violations = _required_violations(raw, mode)

    external_id = raw.get(EXTERNAL_ID)
    if external_id is not None and not EXTERNAL_ID_PATTERN.match(external_id):
        violations.append(
            f"{EXTERNAL_ID} format is invalid (expected 'B' followed by 9 uppercase letters or digits)"
        )

    merchant_id = raw.get(MERCHANT_ID)
    if merchant_id is not None and len(merchant_id) < MERCHANT_ID_MIN_LENGTH:
        violations.append(f"{MERCHANT_ID} must be at least {MERCHANT_ID_MIN_LENGTH} characters")

    barcode = raw.get(BARCODE)
    if barcode is not None and not BARCODE_PATTERN.match(barcode):
        violations.append(f"{BARCODE} must be exactly 10 uppercase letters or digits")

    numbers: dict[str, Decimal | None] = {}
    for column in NUMERIC_COLUMNS:
        text = raw.get(column)
        if text is None:
            numbers[column] = None
            continue
        value = _parse_number(text)
        if value is None:
            violations.append(f"{column} must be a valid number")
        numbers[column] = value

    fee = numbers.get(REFERRAL_FEE_PERCENT)
    low, high = REFERRAL_FEE_RANGE
    if fee is not None and not (low <= fee <= high):
        violations.append(f"{REFERRAL_FEE_PERCENT} must be between {low} and {high}")

    if violations:
        return violations

    values: dict[str, object] = {}
    for column, attr in COLUMN_TO_FIELD.items():
        values[attr] = numbers[column] if column in numbers else raw.get(column)
    return ValidatedRow(line_number=raw.line_number, **values)
