from __future__ import annotations

import argparse
import os
import sys
from datetime import date
from pathlib import Path

from dotenv import load_dotenv

from ..config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from ..logging.error_log import ErrorLogBuffer
from ..logging.init import log_summary, setup_logging
from ..models.config_models import SyncConfig
from ..models.error_record import STRUCTURAL, ErrorRecord
from ..models.reconciliation_result import ImportMode
from ..services.reconciler import reconcile
from ..services.serializer import export_filename, template_text, to_tabular_text
from ..services.summary import render_summary_line
from ..tabular.snapshot import SnapshotError, load_snapshot, write_snapshot

"""CLI entrypoint.

Commands:
- import FILE --catalog SNAPSHOT [--update|--create] [--out PATH]
- export --catalog SNAPSHOT [--out-dir DIR]
- template [--out PATH]

The catalog snapshot stands in for storage: it is read, never written back.
Import proposals go to --out for the caller to apply.
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2

CONFIG_ENV_VAR = "CATALOG_SYNC_CONFIG"


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="catalog-sync", description="Catalog bulk import / export")
    p.add_argument("--config", type=Path, default=None, help="YAML config path")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    imp = sub.add_parser("import", help="Reconcile an import file against the catalog")
    imp.add_argument("file", type=Path, help="Import file (comma-delimited text)")
    imp.add_argument("--catalog", type=Path, required=True, help="Existing catalog snapshot (.csv/.xlsx)")
    mode = imp.add_mutually_exclusive_group()
    mode.add_argument("--update", dest="update", action="store_true", default=None, help="Update existing records")
    mode.add_argument("--create", dest="update", action="store_false", default=None, help="Create new records")
    imp.add_argument("--out", type=Path, default=None, help="Write proposed records to this CSV")

    exp = sub.add_parser("export", help="Export the catalog as import-compatible text")
    exp.add_argument("--catalog", type=Path, required=True, help="Existing catalog snapshot (.csv/.xlsx)")
    exp.add_argument("--out-dir", type=Path, default=Path("."), help="Directory for the export file")

    tpl = sub.add_parser("template", help="Print (or write) a blank import template")
    tpl.add_argument("--out", type=Path, default=None, help="Write the template here instead of stdout")
    return p.parse_args(argv)


def _resolve_config(explicit: Path | None) -> SyncConfig:
    """Explicit --config, then $CATALOG_SYNC_CONFIG, then the default path.

    Only the default path may be absent (defaults apply); an explicitly named
    file that does not exist is a ConfigError.
    """
    if explicit is not None:
        return load_config(explicit)
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return load_config(Path(env_path))
    if DEFAULT_CONFIG_PATH.exists():
        return load_config(DEFAULT_CONFIG_PATH)
    return SyncConfig()


def _run_import(args: argparse.Namespace, cfg: SyncConfig) -> int:
    logger = setup_logging()
    mode = cfg.default_mode if args.update is None else ImportMode.from_flag(args.update)

    try:
        records = load_snapshot(args.catalog, id_column=cfg.snapshot_id_column)
    except SnapshotError as e:
        logger.error(f"catalog: {e}")
        return EXIT_FATAL
    try:
        text = args.file.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"import file: {e}")
        return EXIT_FATAL

    logger.info(f"Importing {args.file.name} (mode={mode.value}) against {len(records)} catalog records")
    outcome = reconcile(text, records, mode, delimiter=cfg.delimiter)

    error_log = ErrorLogBuffer(cfg.error_log_dir)
    if not outcome.succeeded:
        logger.error(f"import file: {outcome.structural_error}")
        error_log.append(ErrorRecord.create(args.file.name, -1, STRUCTURAL, outcome.structural_error or ""))
        error_log.flush()
        log_summary(render_summary_line(outcome)[len("SUMMARY "):])
        return EXIT_FATAL

    for message in outcome.duplicates:
        logger.warning(f"duplicate: {message}")
    for message in outcome.errors:
        logger.warning(f"error: {message}")
    error_log.extend_issues(args.file.name, outcome.issues)
    log_path = error_log.flush()
    if log_path is not None:
        logger.info(f"error log written: {log_path}")

    if args.out is not None and outcome.has_proposals:
        try:
            write_snapshot(args.out, [*outcome.to_create, *outcome.to_update], id_column=cfg.snapshot_id_column)
        except SnapshotError as e:
            logger.error(f"proposals: {e}")
            return EXIT_FATAL
        logger.info(f"proposals written: {args.out}")

    log_summary(render_summary_line(outcome)[len("SUMMARY "):])
    if outcome.errors or outcome.duplicates:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


def _run_export(args: argparse.Namespace, cfg: SyncConfig) -> int:
    logger = setup_logging()
    try:
        records = load_snapshot(args.catalog, id_column=cfg.snapshot_id_column)
    except SnapshotError as e:
        logger.error(f"catalog: {e}")
        return EXIT_FATAL

    target = args.out_dir / export_filename(cfg.export_prefix, date.today())
    try:
        args.out_dir.mkdir(parents=True, exist_ok=True)
        target.write_text(to_tabular_text(records, delimiter=cfg.delimiter), encoding="utf-8")
    except OSError as e:
        logger.error(f"export: {e}")
        return EXIT_FATAL
    logger.info(f"exported {len(records)} records to {target}")
    return EXIT_SUCCESS_ALL


def _run_template(args: argparse.Namespace, cfg: SyncConfig) -> int:
    text = template_text(delimiter=cfg.delimiter)
    if args.out is None:
        print(text)
        return EXIT_SUCCESS_ALL
    try:
        args.out.write_text(text, encoding="utf-8")
    except OSError as e:
        setup_logging().error(f"template: {e}")
        return EXIT_FATAL
    setup_logging().info(f"template written: {args.out}")
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    # None only: an explicit [] from tests must not pick up pytest's own argv
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    if args.debug:
        logger.debug("debug mode enabled")

    load_dotenv(dotenv_path=Path(".env"), override=False)
    try:
        cfg = _resolve_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.command == "import":
        return _run_import(args, cfg)
    if args.command == "export":
        return _run_export(args, cfg)
    return _run_template(args, cfg)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
