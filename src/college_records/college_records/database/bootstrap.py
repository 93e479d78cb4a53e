from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

from werkzeug.security import generate_password_hash

from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)

# (full_name, email, password, role, student_code, semester, program, teacher_code, department)
DEMO_USERS = (
    ("Admin Demo", "admin@college.edu", "admin123", "admin", None, None, None, None, None),
    ("Hod Demo", "hod.cs@college.edu", "hod12345", "hod", None, None, None, None, "CS"),
    ("Teacher Demo", "teacher@college.edu", "teach123", "teacher", None, None, None, "T-001", "CS"),
    ("Student Demo", "student@college.edu", "stud1234", "student", "S-001", 1, "BSc CS", None, None),
)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a script on ';' outside of quoted strings."""
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _run_script(conn_factory: DatabaseConnection, sql: str) -> None:
    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        for stmt in iter_sql_statements(_strip_comments(_strip_create_db_and_use(sql))):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_database_exists(config: DBConfig) -> None:
    conn = DatabaseConnection(config).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(config: DBConfig, *, schema_path: str | Path) -> None:
    ensure_database_exists(config)
    _run_script(DatabaseConnection(config), Path(schema_path).read_text(encoding="utf-8"))
    logger.info("Applied schema %s to %s", schema_path, config.database)


def apply_seed_sql(config: DBConfig, *, seed_path: str | Path) -> None:
    _run_script(DatabaseConnection(config), Path(seed_path).read_text(encoding="utf-8"))
    logger.info("Applied seed %s to %s", seed_path, config.database)


def ensure_demo_users(config: DBConfig) -> None:
    """Insert or refresh one demo account per role (passwords re-hashed)."""
    conn = DatabaseConnection(config).connect()
    try:
        cur = conn.cursor()
        for full_name, email, password, role, student_code, semester, program, teacher_code, department in DEMO_USERS:
            cur.execute(
                """
                INSERT INTO users(full_name, email, password_hash, role,
                                  student_code, semester, program, teacher_code, department)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE full_name=VALUES(full_name), password_hash=VALUES(password_hash), is_active=1
                """,
                (
                    full_name,
                    email,
                    generate_password_hash(password),
                    role,
                    student_code,
                    semester,
                    program,
                    teacher_code,
                    department,
                ),
            )
        conn.commit()
    finally:
        conn.close()
    logger.info("Demo users ready (%d)", len(DEMO_USERS))


def list_tables(config: DBConfig) -> list[str]:
    conn = DatabaseConnection(config).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
