# Shared pytest fixtures
from __future__ import annotations
import tempfile
from decimal import Decimal
from pathlib import Path

import pytest

from catalog_sync.logging.init import reset_logging
from catalog_sync.models.canonical_record import CanonicalRecord
from catalog_sync.models.columns import CATALOG_COLUMNS_V1

HEADER = ",".join(CATALOG_COLUMNS_V1)


@pytest.fixture(autouse=True)
def _clean_logging():
    # handlers bind sys.stdout at setup time; capsys swaps it per test
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("CATALOG_SYNC_CONFIG", raising=False)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """delimiter: ","
default_mode: create
error_log_dir: ./logs
export_prefix: catalog-export
snapshot_id_column: id
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "catalog_sync.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def reference_records() -> list[CanonicalRecord]:
    return [
        CanonicalRecord(
            id="p-1",
            name="Steel Water Bottle",
            external_id="B07KG5CBQ6",
            merchant_id="SKU-001",
            manufacturer_code="M001",
            barcode="X001ABC123",
            cost=Decimal("4.20"),
            price=Decimal("19.99"),
            referral_fee_percent=Decimal("15"),
        ),
        CanonicalRecord(
            id="p-2",
            name="Bamboo Cutting Board",
            external_id="B08ABCDEF1",
            merchant_id="SKU-002",
            cost=Decimal("7.50"),
        ),
    ]


def make_csv(*rows: str, header: str = HEADER) -> str:
    """Join a header and data lines into import text."""
    return "\n".join([header, *rows])


def catalog_line(
    name: str = "",
    external_id: str = "",
    merchant_id: str = "",
    manufacturer_code: str = "",
    barcode: str = "",
    cost: str = "",
    price: str = "",
    referral_fee: str = "",
    fulfillment_fee: str = "",
    advertising_cost: str = "",
    initial_investment: str = "",
) -> str:
    """One data line in v1 column order (no quoting; keep values comma-free)."""
    return ",".join([
        name, external_id, merchant_id, manufacturer_code, barcode, cost, price,
        referral_fee, fulfillment_fee, advertising_cost, initial_investment,
    ])


@pytest.fixture()
def write_snapshot_csv(temp_workdir: Path):
    def _write(rows: list[dict[str, str]], name: str = "catalog.csv") -> Path:
        path = temp_workdir / "data" / name
        columns = ["id", *CATALOG_COLUMNS_V1]
        lines = [",".join(columns)]
        for row in rows:
            lines.append(",".join(row.get(c, "") for c in columns))
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path
    return _write
