from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

from werkzeug.security import generate_password_hash

from .connection import DatabaseConnection, DBConfig
from .mysql_base import db_cursor, fetchone

logger = logging.getLogger(__name__)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a script on ';' outside of quoted literals."""
    buf: list[str] = []
    quote: str | None = None

    for ch in sql:
        if quote:
            buf.append(ch)
            if ch == quote:
                quote = None
            continue
        if ch in ("'", '"'):
            quote = ch
            buf.append(ch)
            continue
        if ch == ";":
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue
        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))
    name = conn.config.database
    raw = conn.connect(with_database=False)
    try:
        cur = raw.cursor()
        cur.execute(f"CREATE DATABASE IF NOT EXISTS `{name}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci")
        raw.commit()
    finally:
        raw.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    with db_cursor(DatabaseConnection(DBConfig.from_dict(db_config)), dictionary=False) as (_, cur):
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
    logger.info("Applied schema %s", schema_path)


def ensure_admin_user(db_config: dict, *, username: str, password: str, full_name: str = "Administrador") -> None:
    """Create (or re-activate) the configured admin account."""
    if not username or not password:
        return

    with db_cursor(DatabaseConnection(DBConfig.from_dict(db_config))) as (_, cur):
        cur.execute("SELECT user_id FROM users WHERE username=%s", (username,))
        if fetchone(cur):
            cur.execute("UPDATE users SET is_active=1 WHERE username=%s", (username,))
            return
        cur.execute(
            """
            INSERT INTO users (full_name, username, password_hash, is_active)
            VALUES (%s, %s, %s, 1)
            """,
            (full_name, username, generate_password_hash(password)),
        )
    logger.info("Created admin user %s", username)


def list_tables(db_config: dict) -> list[str]:
    with db_cursor(DatabaseConnection(DBConfig.from_dict(db_config)), dictionary=False) as (_, cur):
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
