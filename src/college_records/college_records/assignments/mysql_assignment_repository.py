from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..core.exceptions import AlreadyExistsError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, integrity_errors
from .model import Assignment, Submission
from .repository import AssignmentRepository

_SELECT_ASSIGNMENTS = """
    SELECT a.assignment_id, a.title, a.course_id, a.teacher_id, a.due_date,
           c.name AS course_name, u.full_name AS teacher_name
    FROM assignments a
    LEFT JOIN courses c ON c.course_id = a.course_id
    LEFT JOIN users u ON u.user_id = a.teacher_id
"""


def _to_submission(r: dict) -> Submission:
    marks = r.get("marks")
    return Submission(
        student_id=int(r["student_id"]),
        submitted_at=r["submitted_at"],
        marks=Decimal(str(marks)) if marks is not None else None,
    )


def _hydrate(cur, rows: list[dict]) -> list[Assignment]:
    if not rows:
        return []

    ids = [int(r["assignment_id"]) for r in rows]
    placeholders = ",".join(["%s"] * len(ids))
    cur.execute(
        f"""
        SELECT assignment_id, student_id, submitted_at, marks
        FROM assignment_submissions
        WHERE assignment_id IN ({placeholders})
        ORDER BY submitted_at, submission_id
        """,
        tuple(ids),
    )
    by_assignment: dict[int, list[Submission]] = defaultdict(list)
    for s in fetchall(cur):
        by_assignment[int(s["assignment_id"])].append(_to_submission(s))

    return [
        Assignment(
            assignment_id=int(r["assignment_id"]),
            title=r["title"],
            course_id=int(r["course_id"]),
            teacher_id=int(r["teacher_id"]),
            due_date=r["due_date"],
            submissions=tuple(by_assignment.get(int(r["assignment_id"]), [])),
            course_name=r.get("course_name"),
            teacher_name=r.get("teacher_name"),
        )
        for r in rows
    ]


class MySQLAssignmentRepository(AssignmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, title: str, course_id: int, teacher_id: int, due_date: date) -> int:
        with integrity_errors(missing_message="Invalid course ID"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "INSERT INTO assignments(title, course_id, teacher_id, due_date) VALUES(%s,%s,%s,%s)",
                    (title, int(course_id), int(teacher_id), due_date),
                )
                return int(cur.lastrowid)

    def get_by_id(self, assignment_id: int) -> Optional[Assignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_ASSIGNMENTS + " WHERE a.assignment_id=%s", (int(assignment_id),))
            row = fetchone(cur)
            if not row:
                return None
            return _hydrate(cur, [row])[0]

    def add_submission(self, *, assignment_id: int, student_id: int, submitted_at: datetime) -> None:
        with integrity_errors(duplicate=AlreadyExistsError, duplicate_message="Assignment already submitted"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO assignment_submissions(assignment_id, student_id, submitted_at)
                    VALUES(%s,%s,%s)
                    """,
                    (int(assignment_id), int(student_id), submitted_at),
                )

    def set_marks(self, *, assignment_id: int, student_id: int, marks: Decimal) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT submission_id FROM assignment_submissions
                WHERE assignment_id=%s AND student_id=%s
                FOR UPDATE
                """,
                (int(assignment_id), int(student_id)),
            )
            row = fetchone(cur)
            if not row:
                return False
            cur.execute(
                "UPDATE assignment_submissions SET marks=%s WHERE submission_id=%s",
                (marks, int(row["submission_id"])),
            )
            return True

    def list_all(self) -> Sequence[Assignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_ASSIGNMENTS + " ORDER BY a.due_date ASC, a.assignment_id ASC")
            return _hydrate(cur, fetchall(cur))

    def list_for_teacher(self, teacher_id: int) -> Sequence[Assignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT_ASSIGNMENTS + " WHERE a.teacher_id=%s ORDER BY a.due_date ASC, a.assignment_id ASC",
                (int(teacher_id),),
            )
            return _hydrate(cur, fetchall(cur))

    def count_not_submitted_by(self, student_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS n
                FROM assignments a
                WHERE NOT EXISTS (
                    SELECT 1 FROM assignment_submissions s
                    WHERE s.assignment_id = a.assignment_id AND s.student_id = %s
                )
                """,
                (int(student_id),),
            )
            r = fetchone(cur)
            return int(r["n"]) if r else 0

    def count_unmarked_for_teacher(self, teacher_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS n
                FROM assignment_submissions s
                JOIN assignments a ON a.assignment_id = s.assignment_id
                WHERE a.teacher_id=%s AND s.marks IS NULL
                """,
                (int(teacher_id),),
            )
            r = fetchone(cur)
            return int(r["n"]) if r else 0
