from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, integrity_errors
from .model import Profile, User, profile_from_columns, profile_to_columns
from .repository import UserRepository

_USER_COLUMNS = """
    user_id, full_name, email, password_hash, role,
    student_code, semester, program, teacher_code, department, is_active
"""


def _to_user(row: dict) -> User:
    return User(
        user_id=int(row["user_id"]),
        full_name=row["full_name"],
        email=row["email"],
        password_hash=row["password_hash"],
        profile=profile_from_columns(row),
        is_active=bool(row.get("is_active", True)),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE email=%s", (email,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def create_user(self, *, full_name: str, email: str, password_hash: str, profile: Profile) -> int:
        columns = profile_to_columns(profile)
        with integrity_errors(duplicate_message="User already exists"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO users(full_name, email, password_hash, role,
                                      student_code, semester, program, teacher_code, department)
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        full_name,
                        email,
                        password_hash,
                        profile.role.value,
                        columns["student_code"],
                        columns["semester"],
                        columns["program"],
                        columns["teacher_code"],
                        columns["department"],
                    ),
                )
                return int(cur.lastrowid)

    def list_by_role(self, role: Role) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_USER_COLUMNS} FROM users WHERE role=%s AND is_active=1 ORDER BY full_name",
                (role.value,),
            )
            return [_to_user(r) for r in fetchall(cur)]

    def count_by_role(self, role: Role) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM users WHERE role=%s", (role.value,))
            row = fetchone(cur)
            return int(row["n"]) if row else 0

    def count_all(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM users")
            row = fetchone(cur)
            return int(row["n"]) if row else 0
