from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import CourseAttendanceStatus, TeacherAttendanceStatus
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, integrity_errors
from .model import CourseAttendanceRecord, TeacherAttendanceRecord
from .repository import CourseAttendanceRepository, TeacherAttendanceRepository


def _date_clauses(column: str, start: Optional[date], end: Optional[date]) -> tuple[list[str], list[object]]:
    clauses: list[str] = []
    params: list[object] = []
    if start is not None:
        clauses.append(f"{column} >= %s")
        params.append(start)
    if end is not None:
        clauses.append(f"{column} <= %s")
        params.append(end)
    return clauses, params


class MySQLCourseAttendanceRepository(CourseAttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert(
        self,
        *,
        student_id: int,
        course_id: int,
        work_date: date,
        status: CourseAttendanceStatus,
        marked_by: int,
    ) -> None:
        with integrity_errors(missing_message="Unknown student or course"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO course_attendance(student_id, course_id, work_date, status, marked_by)
                    VALUES(%s,%s,%s,%s,%s)
                    ON DUPLICATE KEY UPDATE status=VALUES(status), marked_by=VALUES(marked_by)
                    """,
                    (int(student_id), int(course_id), work_date, status.value, int(marked_by)),
                )

    def list_for_student(self, student_id: int) -> Sequence[CourseAttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT ca.student_id, ca.course_id, ca.work_date, ca.status, c.name AS course_name
                FROM course_attendance ca
                JOIN courses c ON c.course_id = ca.course_id
                WHERE ca.student_id=%s
                ORDER BY ca.work_date ASC, c.name ASC
                """,
                (int(student_id),),
            )
            return [
                CourseAttendanceRecord(
                    student_id=int(r["student_id"]),
                    course_id=int(r["course_id"]),
                    work_date=r["work_date"],
                    status=CourseAttendanceStatus(r["status"]),
                    course_name=r.get("course_name"),
                )
                for r in fetchall(cur)
            ]

    def count_for_student(self, student_id: int, *, status: Optional[CourseAttendanceStatus] = None) -> int:
        sql = "SELECT COUNT(*) AS n FROM course_attendance WHERE student_id=%s"
        params: list[object] = [int(student_id)]
        if status is not None:
            sql += " AND status=%s"
            params.append(status.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            r = fetchone(cur)
            return int(r["n"]) if r else 0


def _to_teacher_record(r: dict) -> TeacherAttendanceRecord:
    return TeacherAttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        teacher_id=int(r["teacher_id"]),
        work_date=r["work_date"],
        status=TeacherAttendanceStatus(r["status"]),
        marked_by=int(r["marked_by"]),
        marked_at=r["marked_at"],
        teacher_name=r.get("teacher_name"),
        department=r.get("department"),
    )


class MySQLTeacherAttendanceRepository(TeacherAttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_teacher_and_date(self, teacher_id: int, work_date: date) -> Optional[TeacherAttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT attendance_id, teacher_id, work_date, status, marked_by, marked_at
                FROM teacher_attendance
                WHERE teacher_id=%s AND work_date=%s
                """,
                (int(teacher_id), work_date),
            )
            r = fetchone(cur)
            return _to_teacher_record(r) if r else None

    def create(
        self,
        *,
        teacher_id: int,
        work_date: date,
        status: TeacherAttendanceStatus,
        marked_by: int,
        marked_at: datetime,
    ) -> int:
        with integrity_errors(duplicate=ValidationError, duplicate_message="Attendance already marked for this day"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO teacher_attendance(teacher_id, work_date, status, marked_by, marked_at)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (int(teacher_id), work_date, status.value, int(marked_by), marked_at),
                )
                return int(cur.lastrowid)

    def _select(self, clauses: list[str], params: list[object]) -> Sequence[TeacherAttendanceRecord]:
        where = " AND ".join(clauses) if clauses else "1=1"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT ta.attendance_id, ta.teacher_id, ta.work_date, ta.status, ta.marked_by, ta.marked_at,
                       u.full_name AS teacher_name, u.department
                FROM teacher_attendance ta
                JOIN users u ON u.user_id = ta.teacher_id
                WHERE {where}
                ORDER BY ta.work_date DESC, u.full_name ASC
                """,
                tuple(params),
            )
            return [_to_teacher_record(r) for r in fetchall(cur)]

    def list_for_teacher(
        self,
        teacher_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[TeacherAttendanceRecord]:
        clauses, params = _date_clauses("ta.work_date", start, end)
        return self._select(["ta.teacher_id=%s", *clauses], [int(teacher_id), *params])

    def list_range(self, *, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[TeacherAttendanceRecord]:
        clauses, params = _date_clauses("ta.work_date", start, end)
        return self._select(clauses, params)
