from __future__ import annotations

"""Frozen column contract for catalog import/export files.

Header text is a versioned contract with files already in circulation; new
columns go into a new version tuple, existing names are never edited.
"""

__all__ = [
    "NAME",
    "EXTERNAL_ID",
    "MERCHANT_ID",
    "MANUFACTURER_CODE",
    "BARCODE",
    "COST",
    "PRICE",
    "REFERRAL_FEE_PERCENT",
    "FULFILLMENT_FEE",
    "ADVERTISING_COST",
    "INITIAL_INVESTMENT",
    "CATALOG_COLUMNS_V1",
    "EXPORT_COLUMNS",
    "COLUMN_TO_FIELD",
    "NUMERIC_COLUMNS",
    "REQUIRED_ON_CREATE",
    "KNOWN_COLUMNS",
]

NAME = "Name"
EXTERNAL_ID = "External Identifier"
MERCHANT_ID = "Merchant Identifier"
MANUFACTURER_CODE = "Manufacturer Code"
BARCODE = "Barcode"
COST = "Cost"
PRICE = "Price"
REFERRAL_FEE_PERCENT = "Referral-Fee Percentage"
FULFILLMENT_FEE = "Fulfillment Fee"
ADVERTISING_COST = "Advertising Cost"
INITIAL_INVESTMENT = "Initial Investment"

CATALOG_COLUMNS_V1: tuple[str, ...] = (
    NAME,
    EXTERNAL_ID,
    MERCHANT_ID,
    MANUFACTURER_CODE,
    BARCODE,
    COST,
    PRICE,
    REFERRAL_FEE_PERCENT,
    FULFILLMENT_FEE,
    ADVERTISING_COST,
    INITIAL_INVESTMENT,
)

# Export order currently tracks v1 exactly
EXPORT_COLUMNS: tuple[str, ...] = CATALOG_COLUMNS_V1

# Header text -> CanonicalRecord / ValidatedRow attribute name
COLUMN_TO_FIELD: dict[str, str] = {
    NAME: "name",
    EXTERNAL_ID: "external_id",
    MERCHANT_ID: "merchant_id",
    MANUFACTURER_CODE: "manufacturer_code",
    BARCODE: "barcode",
    COST: "cost",
    PRICE: "price",
    REFERRAL_FEE_PERCENT: "referral_fee_percent",
    FULFILLMENT_FEE: "fulfillment_fee",
    ADVERTISING_COST: "advertising_cost",
    INITIAL_INVESTMENT: "initial_investment",
}

NUMERIC_COLUMNS: tuple[str, ...] = (
    COST,
    PRICE,
    FULFILLMENT_FEE,
    ADVERTISING_COST,
    INITIAL_INVESTMENT,
    REFERRAL_FEE_PERCENT,
)

REQUIRED_ON_CREATE: tuple[str, ...] = (NAME, EXTERNAL_ID, MERCHANT_ID)

KNOWN_COLUMNS: frozenset[str] = frozenset(CATALOG_COLUMNS_V1)
