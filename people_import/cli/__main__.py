from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import replace
from pathlib import Path
from typing import Any

import psycopg2
from dotenv import load_dotenv

from people_import.config.loader import ConfigError, resolve_config
from people_import.db.batch_insert import PeopleTableWriter
from people_import.db.existing_people import fetch_existing_people
from people_import.logging.error_log import ErrorLogBuffer
from people_import.logging.init import log_summary, setup_logging
from people_import.models.config_models import DatabaseConfig, ImportConfig
from people_import.parsing import FormatError, read_source
from people_import.services.field_mapper import MappingError, auto_map, mapping_warnings
from people_import.services.session import (
    ImportSession,
    SessionStateError,
    build_preview,
    load_source,
    new_session,
    remap,
    run_session_import,
)
from people_import.services.summary import render_preview_report, render_summary_line
from people_import.services.validator import ExistingRecordIndex, build_existing_index, map_row
from people_import.services.writers import DryRunWriter, JsonLinesWriter

"""CLI entrypoint.

Flow: read source -> auto map (+ --map overrides) -> preview against the
existing roster -> import in batches -> SUMMARY line.

Write target, in order of precedence:
1. --output PATH (JSON Lines file)
2. DISABLE_DB_CONNECT=1 -> mock writer (nothing persisted)
3. PostgreSQL (connection settings from .env / environment / config)
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2


def _build_dsn(db_cfg: DatabaseConfig) -> str:
    """Resolve the connection string.

    Precedence: DATABASE_URL / PGDSN > config dsn > PG* variables > config
    fields > libpq style defaults. `.env` is loaded with override=True before
    this runs, so its values win over the inherited environment.
    """
    dsn = os.getenv("DATABASE_URL") or os.getenv("PGDSN") or db_cfg.dsn
    if dsn:
        return dsn
    host = os.getenv("PGHOST", db_cfg.host or "localhost")
    port = os.getenv("PGPORT", str(db_cfg.port) if db_cfg.port else "5432")
    user = os.getenv("PGUSER", db_cfg.user or "postgres")
    password = os.getenv("PGPASSWORD", db_cfg.password or "")
    database = os.getenv("PGDATABASE", db_cfg.database or "postgres")
    dsn = f"host={host} port={port} user={user} dbname={database}"
    if password:
        dsn += f" password={password}"
    return dsn


@contextmanager
def _db_connection(cfg: ImportConfig) -> Iterator[Any]:  # pragma: no cover (thin wrapper)
    conn = psycopg2.connect(_build_dsn(cfg.database))
    conn.autocommit = False  # PeopleTableWriter がバッチ単位で COMMIT/ROLLBACK
    try:
        yield conn
    finally:
        conn.close()


def _load_env_file(path: Path, override: bool = True) -> None:
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_mapping_override(raw: str) -> tuple[str, str]:
    column, sep, target = raw.rpartition("=")
    if not sep or not column.strip() or not target.strip():
        raise argparse.ArgumentTypeError(f"expected COLUMN=FIELD, got {raw!r}")
    return column.strip(), target.strip()


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="people-import",
        description="Import a Planning Center people export (CSV / JSON / XLSX)",
    )
    p.add_argument("source", type=Path, help="export file to import")
    p.add_argument("--config", type=Path, default=None, help="YAML config (default: config/import.yml if present)")
    p.add_argument("--existing", type=Path, default=None,
                   help="existing roster file used for duplicate detection instead of the database")
    p.add_argument("--map", dest="overrides", action="append", default=[], type=_parse_mapping_override,
                   metavar="COLUMN=FIELD", help="override the mapping of one column (repeatable)")
    p.add_argument("--strict", action="store_true", help="fail instead of silently coercing bad data")
    p.add_argument("--preview-only", action="store_true", help="stop after printing the preview")
    p.add_argument("--output", type=Path, default=None, help="write records to a JSON Lines file")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _load_existing_file(path: Path, cfg: ImportConfig) -> ExistingRecordIndex:
    """Read an existing roster export and index it like an import source."""
    headers, rows = read_source(path)
    mappings = auto_map(headers, cfg.field_mappings, guess=True)
    lenient = replace(cfg, strict=False)
    return build_existing_index(map_row(r, mappings, lenient) for r in rows)


def _apply_overrides(session: ImportSession, overrides: list[tuple[str, str]]) -> ImportSession:
    for column, target in overrides:
        session = remap(session, column, target)
    return session


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    if args.debug:
        for h in logger.handlers:
            h.setLevel("DEBUG")
        logger.setLevel("DEBUG")
        logger.debug("debug mode enabled")

    _load_env_file(Path(".env"), override=True)

    try:
        cfg = resolve_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL
    if args.strict and not cfg.strict:
        cfg = replace(cfg, strict=True)

    error_log = ErrorLogBuffer()
    source_name = args.source.name

    try:
        headers, rows = read_source(args.source, strict=cfg.strict)
    except FormatError as e:
        logger.error(f"format: {e}")
        return EXIT_FATAL

    session = load_source(new_session(), headers, rows, source_name, cfg)
    try:
        session = _apply_overrides(session, args.overrides)
    except MappingError as e:
        logger.error(f"mapping: {e}")
        return EXIT_FATAL
    for warning in mapping_warnings(session.mappings):
        logger.warning(warning)
    for m in session.mappings:
        logger.debug("mapping %r -> %s", m.source_field, m.target_field)

    disable_db = os.getenv("DISABLE_DB_CONNECT") == "1"
    needs_db = not disable_db and (args.existing is None or (args.output is None and not args.preview_only))

    try:
        if needs_db:
            with _db_connection(cfg) as conn:
                return _run(args, cfg, session, error_log, logger, conn)
        return _run(args, cfg, session, error_log, logger, None)
    except psycopg2.Error as e:
        logger.error(f"database: {e}")
        return EXIT_FATAL
    finally:
        log_path = error_log.flush()
        if log_path is not None:
            logger.info(f"error log: {log_path}")


def _run(
    args: argparse.Namespace,
    cfg: ImportConfig,
    session: ImportSession,
    error_log: ErrorLogBuffer,
    logger: Any,
    conn: Any,
) -> int:
    if args.existing is not None:
        try:
            existing_index = _load_existing_file(args.existing, cfg)
        except FormatError as e:
            logger.error(f"existing: {e}")
            return EXIT_FATAL
    elif conn is not None:
        with conn.cursor() as cur:
            existing_index = build_existing_index(fetch_existing_people(cur, cfg.database.table))
        conn.rollback()  # read-only snapshot; close the implicit transaction
    else:
        existing_index = ExistingRecordIndex.empty()
    logger.info(f"existing roster: {len(existing_index)} people")

    try:
        session = build_preview(session, existing_index, cfg, error_log=error_log)
    except MappingError as e:
        logger.error(f"mapping: {e}")
        return EXIT_FATAL
    if session.preview is None:
        raise SessionStateError("preview was not built")
    for line in render_preview_report(session.preview):
        logger.info(line)

    if args.preview_only:
        log_summary(render_summary_line(session.preview)[len("SUMMARY "):])
        return EXIT_SUCCESS_ALL

    if args.output is not None:
        write: Any = JsonLinesWriter(args.output)
        mode = f"file:{args.output}"
    elif conn is not None:
        write = PeopleTableWriter(conn, cfg.database.table)
        mode = f"db:{cfg.database.table}"
    else:
        write = DryRunWriter()
        mode = "mock"

    session = run_session_import(session, write, cfg, error_log=error_log)
    if session.result is None:
        raise SessionStateError("import finished without a result")
    logger.info(f"mode={mode} imported={session.result.success} failed={session.result.failed}")

    # "SUMMARY " は log_summary 側で付与される
    log_summary(render_summary_line(session.preview, session.result)[len("SUMMARY "):])

    if session.result.failed > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
