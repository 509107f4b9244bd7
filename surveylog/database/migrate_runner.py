"""Bring the surveylog schema to the latest Alembic revision.

Usage: ``python -m surveylog.database.migrate_runner``

Databases bootstrapped with ``create_all()`` already hold ``users`` and
``survey_events`` but have no Alembic version row, so the first upgrade
fails on CREATE TABLE. In that case the revision is stamped instead, and
only once the tables and columns surveylog reads are confirmed present.
"""

import os
import sys
from typing import List, Tuple

from alembic import command
from alembic.config import Config
from sqlalchemy import inspect

from surveylog.database.database import DATABASE_URL, _is_sqlite_url, build_engine

# Fragments of driver errors raised when a table being created already exists.
_TABLE_EXISTS_MARKERS = ("already exists", "duplicate", "duplicate_table")


def _alembic_cfg() -> Config:
    cfg = Config(os.getenv("ALEMBIC_INI", "alembic.ini"))
    cfg.set_main_option("sqlalchemy.url", DATABASE_URL)
    return cfg


def _required_schema_checks() -> List[Tuple[str, str]]:
    """Return (kind, name) pairs that must exist before head may be stamped."""
    return [
        ("table", "users"),
        ("table", "survey_events"),
        ("column:survey_events", "user_id"),
        ("column:survey_events", "event_type"),
        ("column:survey_events", "payload"),
    ]


def _missing_requirements(conn) -> List[str]:
    inspector = inspect(conn)
    tables = set(inspector.get_table_names())
    missing: List[str] = []
    for kind, name in _required_schema_checks():
        if kind == "table":
            if name not in tables:
                missing.append(f"missing table: {name}")
        elif kind.startswith("column:"):
            table = kind.split(":", 1)[1]
            columns = {c["name"] for c in inspector.get_columns(table)} if table in tables else set()
            if name not in columns:
                missing.append(f"missing column: {table}.{name}")
        else:
            missing.append(f"unknown check: {kind} {name}")
    return missing


def _adopt_existing_schema(cause: Exception) -> None:
    """Stamp head over tables created outside Alembic, after checking them."""
    engine = build_engine(DATABASE_URL)
    try:
        with engine.begin() as conn:
            missing = _missing_requirements(conn)
    finally:
        engine.dispose()
    if missing:
        raise RuntimeError(
            "surveylog tables exist but do not match the current revision; not stamping: "
            + "; ".join(missing)
        ) from cause
    command.stamp(_alembic_cfg(), "head")


def main() -> int:
    cfg = _alembic_cfg()
    if _is_sqlite_url(DATABASE_URL):
        command.upgrade(cfg, "head")
        return 0

    try:
        command.upgrade(cfg, "head")
    except Exception as e:
        if not any(marker in str(e).lower() for marker in _TABLE_EXISTS_MARKERS):
            raise
        _adopt_existing_schema(e)
    return 0


if __name__ == "__main__":
    sys.exit(main())
