from __future__ import annotations

import logging
from decimal import Decimal

from catalog_sync.models.canonical_record import CanonicalRecord
from catalog_sync.models.error_record import IDENTITY_CONFLICT, UNMATCHED_TARGET
from catalog_sync.models.reconciliation_result import Created, Duplicate, ImportMode, Invalid, Updated
from catalog_sync.models.row_data import ValidatedRow
from catalog_sync.services.matcher import MatchedRecord, NoMatch, classify_row, match_record, merge_record


def _vrow(**values) -> ValidatedRow:
    return ValidatedRow(line_number=values.pop("line_number", 2), **values)


def test_match_by_external_identifier(reference_records):
    result = match_record(_vrow(external_id="B08ABCDEF1", merchant_id="NEW-1"), reference_records)
    assert isinstance(result, MatchedRecord)
    assert result.id == "p-2"
    assert result.matched_on == "External Identifier"
    assert result.conflicting_record is None


def test_match_falls_back_to_merchant_identifier(reference_records):
    result = match_record(_vrow(external_id="B000000000", merchant_id="SKU-001"), reference_records)
    assert isinstance(result, MatchedRecord)
    assert result.id == "p-1"
    assert result.matched_on == "Merchant Identifier"


def test_no_match(reference_records):
    assert match_record(_vrow(external_id="B000000000", merchant_id="NEW-1"), reference_records) == NoMatch()


def test_absent_keys_never_match_records_with_blank_keys():
    records = [CanonicalRecord(id="blank", name="No keys")]
    assert isinstance(match_record(_vrow(name="Something"), records), NoMatch)


def test_first_record_wins_for_a_key():
    records = [
        CanonicalRecord(id="a", external_id="B07KG5CBQ6"),
        CanonicalRecord(id="b", external_id="B07KG5CBQ6"),
    ]
    result = match_record(_vrow(external_id="B07KG5CBQ6"), records)
    assert isinstance(result, MatchedRecord)
    assert result.id == "a"


def test_dual_key_disagreement_keeps_external_match_and_reports_other(reference_records, caplog):
    row = _vrow(external_id="B07KG5CBQ6", merchant_id="SKU-002")
    result = match_record(row, reference_records)
    assert isinstance(result, MatchedRecord)
    assert result.id == "p-1"
    assert result.conflicting_record is not None
    assert result.conflicting_record.id == "p-2"

    with caplog.at_level(logging.WARNING, logger="catalog_sync"):
        outcome = classify_row(row, reference_records, ImportMode.UPDATE)
    assert isinstance(outcome, Updated)
    assert outcome.record.id == "p-1"
    assert any("p-2" in message for message in caplog.messages)


def test_merge_overwrites_present_fields_and_keeps_the_rest(reference_records):
    existing = reference_records[0]
    merged = merge_record(existing, _vrow(merchant_id="SKU-001", price=Decimal("21.00"), name="Bottle v2"))
    assert merged.id == "p-1"
    assert merged.name == "Bottle v2"
    assert merged.price == Decimal("21.00")
    assert merged.cost == Decimal("4.20")
    assert merged.external_id == "B07KG5CBQ6"
    assert merged.barcode == "X001ABC123"
    # original untouched
    assert existing.price == Decimal("19.99")


def test_create_mode_new_row_is_created_without_id(reference_records):
    outcome = classify_row(
        _vrow(name="Mug", external_id="B000000001", merchant_id="SKU-100", cost=Decimal("2")),
        reference_records,
        ImportMode.CREATE,
    )
    assert isinstance(outcome, Created)
    assert outcome.record.id is None
    assert outcome.record.name == "Mug"
    assert outcome.record.cost == Decimal("2")


def test_create_mode_external_collision_is_duplicate(reference_records):
    outcome = classify_row(
        _vrow(line_number=4, name="Bottle", external_id="B07KG5CBQ6", merchant_id="SKU-900"),
        reference_records,
        ImportMode.CREATE,
    )
    assert isinstance(outcome, Duplicate)
    assert outcome.existing_id == "p-1"
    assert outcome.issue.error_type == IDENTITY_CONFLICT
    assert outcome.issue.render() == "Row 4: External Identifier B07KG5CBQ6 already exists"


def test_create_mode_merchant_collision_is_duplicate(reference_records):
    outcome = classify_row(
        _vrow(name="Board", external_id="B000000002", merchant_id="SKU-002"),
        reference_records,
        ImportMode.CREATE,
    )
    assert isinstance(outcome, Duplicate)
    assert outcome.issue.message == "Merchant Identifier SKU-002 already exists"


def test_update_mode_without_target_is_invalid(reference_records):
    outcome = classify_row(
        _vrow(line_number=7, external_id="B000000003", merchant_id="SKU-404"),
        reference_records,
        ImportMode.UPDATE,
    )
    assert isinstance(outcome, Invalid)
    assert outcome.issue.error_type == UNMATCHED_TARGET
    assert outcome.issue.render() == (
        "Row 7: No existing record matches External Identifier 'B000000003' / Merchant Identifier 'SKU-404'"
    )


def test_update_mode_match_is_merged(reference_records):
    outcome = classify_row(_vrow(merchant_id="SKU-002", price=Decimal("12.00")), reference_records, ImportMode.UPDATE)
    assert isinstance(outcome, Updated)
    assert outcome.matched_on == "Merchant Identifier"
    assert outcome.record.id == "p-2"
    assert outcome.record.name == "Bamboo Cutting Board"
    assert outcome.record.price == Decimal("12.00")


def test_matching_never_mutates_reference_records(reference_records):
    snapshot = list(reference_records)
    classify_row(_vrow(merchant_id="SKU-002", name="Changed"), reference_records, ImportMode.UPDATE)
    assert reference_records == snapshot
    assert reference_records[1].name == "Bamboo Cutting Board"
