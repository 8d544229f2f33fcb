from __future__ import annotations

from pathlib import Path

from catalog_sync.cli import main as cli_main
from conftest import catalog_line, make_csv

"""Exit code contract: 0 all rows accepted, 1 fatal, 2 some rows rejected."""


def _import_file(temp_workdir: Path, text: str) -> Path:
    path = temp_workdir / "data" / "import.csv"
    path.write_text(text, encoding="utf-8")
    return path


def test_exit_code_fatal_on_bad_config(temp_workdir: Path, capsys):
    (temp_workdir / "config" / "catalog_sync.yml").write_text("delimiter: ';;'\n", encoding="utf-8")
    code = cli_main(["template"])
    assert code == 1
    assert "ERROR config:" in capsys.readouterr().out


def test_exit_code_fatal_on_missing_catalog(temp_workdir: Path, capsys):
    path = _import_file(temp_workdir, make_csv(catalog_line("Lamp", "B09ZZZZZZ1", "SKU-900")))
    code = cli_main(["import", str(path), "--catalog", str(temp_workdir / "data" / "missing.csv")])
    assert code == 1
    assert "ERROR catalog:" in capsys.readouterr().out


def test_exit_code_all_success(temp_workdir: Path, write_config, write_snapshot_csv, capsys):
    catalog = write_snapshot_csv([{"id": "p-1", "Name": "Bottle", "External Identifier": "B07KG5CBQ6", "Merchant Identifier": "SKU-001"}])
    path = _import_file(temp_workdir, make_csv(catalog_line("Lamp", "B09ZZZZZZ1", "SKU-900")))
    code = cli_main(["import", str(path), "--catalog", str(catalog)])
    out = capsys.readouterr().out
    assert code == 0
    assert "SUMMARY mode=create rows=1 created=1 updated=0 duplicates=0 failed=0" in out


def test_exit_code_partial_failure(temp_workdir: Path, write_config, write_snapshot_csv, capsys):
    catalog = write_snapshot_csv([{"id": "p-1", "Name": "Bottle", "External Identifier": "B07KG5CBQ6", "Merchant Identifier": "SKU-001"}])
    path = _import_file(temp_workdir, make_csv(
        catalog_line("Lamp", "B09ZZZZZZ1", "SKU-900"),
        catalog_line("Bottle", "B07KG5CBQ6", "SKU-777"),
    ))
    code = cli_main(["import", str(path), "--catalog", str(catalog)])
    out = capsys.readouterr().out
    assert code == 2
    assert "created=1" in out
    assert "duplicates=1" in out


def test_exit_code_fatal_on_structural_error(temp_workdir: Path, write_snapshot_csv):
    catalog = write_snapshot_csv([])
    path = _import_file(temp_workdir, "just,some,words\n1,2,3\n")
    assert cli_main(["import", str(path), "--catalog", str(catalog)]) == 1
