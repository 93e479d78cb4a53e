from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, integrity_errors, normalize_mysql_time
from .model import ExamSchedule, ExamSlot
from .repository import ExamScheduleRepository

_DUPLICATE_SLOT = "An exam is already scheduled for this course at that date and time"


def _to_exam(r: dict) -> ExamSchedule:
    return ExamSchedule(
        exam_id=int(r["exam_id"]),
        slot=ExamSlot(
            exam_name=r["exam_name"],
            course=r["course"],
            exam_date=r["exam_date"],
            start_time=normalize_mysql_time(r["start_time"]),
            end_time=normalize_mysql_time(r["end_time"]),
            location=r["location"],
            venue=int(r["venue"]),
        ),
    )


def _params(slot: ExamSlot) -> tuple:
    return (
        slot.exam_name,
        slot.course,
        slot.exam_date,
        slot.start_time,
        slot.end_time,
        slot.location,
        int(slot.venue),
    )


class MySQLExamScheduleRepository(ExamScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, slot: ExamSlot) -> int:
        with integrity_errors(duplicate_message=_DUPLICATE_SLOT):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO exam_schedules(exam_name, course, exam_date, start_time, end_time, location, venue)
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    _params(slot),
                )
                return int(cur.lastrowid)

    def update(self, exam_id: int, slot: ExamSlot) -> bool:
        with integrity_errors(duplicate_message=_DUPLICATE_SLOT):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute("SELECT exam_id FROM exam_schedules WHERE exam_id=%s FOR UPDATE", (int(exam_id),))
                if not fetchone(cur):
                    return False
                cur.execute(
                    """
                    UPDATE exam_schedules
                    SET exam_name=%s, course=%s, exam_date=%s, start_time=%s, end_time=%s, location=%s, venue=%s
                    WHERE exam_id=%s
                    """,
                    (*_params(slot), int(exam_id)),
                )
                return True

    def delete(self, exam_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM exam_schedules WHERE exam_id=%s", (int(exam_id),))
            return cur.rowcount > 0

    def get_by_id(self, exam_id: int) -> Optional[ExamSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT exam_id, exam_name, course, exam_date, start_time, end_time, location, venue
                FROM exam_schedules
                WHERE exam_id=%s
                """,
                (int(exam_id),),
            )
            r = fetchone(cur)
            return _to_exam(r) if r else None

    def list_all(self) -> Sequence[ExamSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT exam_id, exam_name, course, exam_date, start_time, end_time, location, venue
                FROM exam_schedules
                ORDER BY exam_date ASC, start_time ASC
                """
            )
            return [_to_exam(r) for r in fetchall(cur)]
