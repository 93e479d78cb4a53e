from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Course
from .repository import CourseRepository


class MySQLCourseRepository(CourseRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, course_id: int) -> Optional[Course]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT course_id, name, code, department, semester, teacher_id
                FROM courses
                WHERE course_id=%s
                """,
                (int(course_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Course(
                course_id=int(r["course_id"]),
                name=r["name"],
                code=r["code"],
                department=r["department"],
                semester=int(r["semester"]),
                teacher_id=r.get("teacher_id"),
            )

    def count_all(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM courses")
            r = fetchone(cur)
            return int(r["n"]) if r else 0

    def count_for_teacher(self, teacher_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM courses WHERE teacher_id=%s", (int(teacher_id),))
            r = fetchone(cur)
            return int(r["n"]) if r else 0
