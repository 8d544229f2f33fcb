from __future__ import annotations

from dataclasses import dataclass, fields
from decimal import Decimal

from .columns import COLUMN_TO_FIELD

"""CanonicalRecord: the storage-owned catalog entity.

The engine only ever reads a caller-supplied snapshot of these; proposals it
returns are new instances, the snapshot itself is never touched.
"""

__all__ = [
    "CanonicalRecord",
    "BUSINESS_FIELDS",
]


@dataclass(frozen=True)
class CanonicalRecord:
    """Existing (or proposed) catalog product.

    ``id`` is the storage-level identity. It is None for create proposals,
    storage assigns it when the proposal is applied.
    """
    id: str | None
    name: str | None = None
    external_id: str | None = None
    merchant_id: str | None = None
    manufacturer_code: str | None = None
    barcode: str | None = None
    cost: Decimal | None = None
    price: Decimal | None = None
    referral_fee_percent: Decimal | None = None
    fulfillment_fee: Decimal | None = None
    advertising_cost: Decimal | None = None
    initial_investment: Decimal | None = None

    def value_for(self, column: str) -> str | Decimal | None:
        """Return the field value behind a catalog header column."""
        return getattr(self, COLUMN_TO_FIELD[column])


BUSINESS_FIELDS: tuple[str, ...] = tuple(f.name for f in fields(CanonicalRecord) if f.name != "id")
