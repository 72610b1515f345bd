"""Creates the attendance database and applies ``database/schema.sql``."""

from __future__ import annotations

import re
from pathlib import Path

from ..common.logging_setup import get_logger
from .connection import DatabaseConnection, DBConfig, transaction

log = get_logger("bootstrap")

# The target database comes from DB_CONFIG, so the file's own CREATE DATABASE/USE lines are skipped.
_SKIPPED_LINE = re.compile(r"^\s*(?:--|#|CREATE\s+DATABASE\b|USE\b)", re.IGNORECASE)


def split_schema(sql: str) -> list[str]:
    """Split a schema file into executable statements.

    Statements end at a ``;`` that closes a line; the schema only holds DDL,
    so no statement carries a semicolon inside a string literal.
    """
    statements: list[str] = []
    current: list[str] = []
    for line in sql.splitlines():
        if not line.strip() or _SKIPPED_LINE.match(line):
            continue
        current.append(line.rstrip())
        if line.rstrip().endswith(";"):
            statements.append("\n".join(current).rstrip(";").strip())
            current = []
    tail = "\n".join(current).strip()
    if tail:
        statements.append(tail)
    return statements


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    with transaction(DatabaseConnection(target), dictionary=False, with_database=False) as cur:
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )


def apply_schema(db_config: dict, *, schema_path: str | Path) -> int:
    ensure_database_exists(db_config)
    statements = split_schema(Path(schema_path).read_text(encoding="utf-8"))
    with transaction(DatabaseConnection(DBConfig.from_dict(db_config)), dictionary=False) as cur:
        for stmt in statements:
            cur.execute(stmt)
    log.info("Applied %d schema statements from %s", len(statements), schema_path)
    return len(statements)


def list_tables(db_config: dict) -> list[str]:
    with transaction(DatabaseConnection(DBConfig.from_dict(db_config)), dictionary=False) as cur:
        cur.execute("SHOW TABLES")
        return sorted(row[0] for row in cur.fetchall())
