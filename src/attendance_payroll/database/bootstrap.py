from __future__ import annotations

import logging
import re
from contextlib import closing
from pathlib import Path
from typing import Iterator

import mysql.connector

from .connection import DBConfig

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"

_DEFAULTS = {"host": "localhost", "port": 3306, "user": "root", "password": "", "database": "backoffice_db"}

# Lines dropped before execution: comments, and the database selection the
# configured target replaces.
_SKIP_LINE = re.compile(r"^\s*(--|CREATE\s+DATABASE\b|USE\b)", re.IGNORECASE)


def _target(db_config: dict) -> DBConfig:
    return DBConfig.from_dict({**_DEFAULTS, **{k: v for k, v in db_config.items() if v is not None}})


def _server_connection(target: DBConfig, *, select_database: bool = True):
    options = {
        "host": target.host,
        "port": target.port,
        "user": target.user,
        "password": target.password,
        "use_pure": True,
    }
    if select_database:
        options["database"] = target.database
    return mysql.connector.connect(**options)


def schema_statements(sql: str) -> Iterator[str]:
    """Executable statements of a schema script, one per ``;``."""

    body = "\n".join(line for line in sql.splitlines() if not _SKIP_LINE.match(line))
    for chunk in body.split(";"):
        stmt = chunk.strip()
        if stmt:
            yield stmt


def ensure_database_exists(db_config: dict) -> None:
    target = _target(db_config)
    with closing(_server_connection(target, select_database=False)) as conn:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()


def apply_schema(db_config: dict, *, schema_path: str | Path = SCHEMA_PATH) -> int:
    """Create missing tables in the configured database. Returns the number of statements run."""

    ensure_database_exists(db_config)
    statements = list(schema_statements(Path(schema_path).read_text(encoding="utf-8")))

    with closing(_server_connection(_target(db_config))) as conn:
        cur = conn.cursor()
        for stmt in statements:
            cur.execute(stmt)
        conn.commit()

    logger.info("schema applied from %s (%d statements)", schema_path, len(statements))
    return len(statements)


def list_tables(db_config: dict) -> list[str]:
    with closing(_server_connection(_target(db_config))) as conn:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
