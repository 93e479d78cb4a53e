from __future__ import annotations

import calendar
import logging
from collections import Counter
from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_id
from ..core.enums import CourseAttendanceStatus, Role, TeacherAttendanceStatus
from ..core.exceptions import AuthorizationError, DomainError, ValidationError
from ..core.principal import Principal
from ..courses.repository import CourseRepository
from ..users.repository import UserRepository
from .model import (
    AttendanceEntry,
    BatchResult,
    CourseAttendanceRecord,
    RowResult,
    TeacherAttendanceRecord,
    TeacherAttendanceStats,
)
from .repository import CourseAttendanceRepository, TeacherAttendanceRepository

logger = logging.getLogger(__name__)


def _parse_course_status(value: Any) -> CourseAttendanceStatus:
    try:
        return CourseAttendanceStatus(str(value or "").strip().lower())
    except ValueError:
        raise ValidationError(f"Invalid status {value!r}")


def _parse_teacher_status(value: Any) -> TeacherAttendanceStatus:
    try:
        return TeacherAttendanceStatus(value)
    except ValueError:
        raise ValidationError("Invalid status")


def month_range(month: int, year: int) -> tuple[date, date]:
    if not 1 <= int(month) <= 12:
        raise ValidationError("Invalid month")
    last_day = calendar.monthrange(int(year), int(month))[1]
    return date(int(year), int(month), 1), date(int(year), int(month), last_day)


class CourseAttendanceService:
    """Per (student, course, day) register written by teachers.

    Marking is an upsert: re-marking a day overwrites its status, never adds
    a second row.
    """

    def __init__(self, attendance: CourseAttendanceRepository, users: UserRepository, courses: CourseRepository):
        self._attendance = attendance
        self._users = users
        self._courses = courses

    def _mark_row(self, principal: Principal, course_id: int, work_date: date, entry: AttendanceEntry) -> RowResult:
        try:
            student_id = require_id(entry.student_id, "student id")
            status = _parse_course_status(entry.status)
            student = self._users.get_by_id(student_id)
            if not student or student.role != Role.STUDENT:
                raise ValidationError("Unknown student")
            self._attendance.upsert(
                student_id=student_id,
                course_id=course_id,
                work_date=work_date,
                status=status,
                marked_by=principal.user_id,
            )
        except DomainError as e:
            return RowResult(student_id=entry.student_id, ok=False, error=str(e))
        return RowResult(student_id=student_id, ok=True)

    def mark_batch(
        self,
        principal: Principal,
        *,
        course_id: Any,
        work_date: Optional[date],
        entries: Sequence[AttendanceEntry],
    ) -> BatchResult:
        """Upsert every row; a bad row is reported in the result, never raised."""
        principal.require(Role.TEACHER, message="Only teachers can mark attendance")

        course_id = require_id(course_id, "course id")
        if work_date is None:
            raise ValidationError("Date is required")
        if not self._courses.get_by_id(course_id):
            raise ValidationError("Unknown course")

        results = tuple(self._mark_row(principal, course_id, work_date, e) for e in entries)
        batch = BatchResult(course_id=course_id, work_date=work_date, results=results)

        if batch.failed:
            logger.warning(
                "Attendance for course %s on %s: %d marked, %d failed",
                course_id,
                work_date,
                batch.marked,
                batch.failed,
            )
        else:
            logger.info("Attendance for course %s on %s: %d marked", course_id, work_date, batch.marked)
        return batch

    def get_for_person(self, principal: Principal, *, student_id: Any) -> list[CourseAttendanceRecord]:
        student_id = require_id(student_id, "student id")
        if principal.role == Role.STUDENT:
            if principal.user_id != student_id:
                raise AuthorizationError("Students can only view their own attendance")
        else:
            principal.require(Role.TEACHER, Role.HOD, Role.ADMIN)

        records = list(self._attendance.list_for_student(student_id))
        records.sort(key=lambda r: r.work_date)
        return records


class TeacherAttendanceService:
    """Teachers' self-reported presence: one write per day, no updates."""

    def __init__(self, attendance: TeacherAttendanceRepository, users: UserRepository):
        self._attendance = attendance
        self._users = users

    def mark_self(
        self,
        principal: Principal,
        *,
        status: Any,
        work_date: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> TeacherAttendanceRecord:
        principal.require(Role.TEACHER, message="Only teachers can mark their own attendance")
        parsed = _parse_teacher_status(status)

        now = now or now_local()
        work_date = work_date or now.date()

        if self._attendance.get_for_teacher_and_date(principal.user_id, work_date):
            logger.warning("Teacher %s tried to re-mark %s", principal.user_id, work_date)
            raise ValidationError("Attendance already marked for this day")

        # The unique key still guards the race between the check and the insert.
        attendance_id = self._attendance.create(
            teacher_id=principal.user_id,
            work_date=work_date,
            status=parsed,
            marked_by=principal.user_id,
            marked_at=now,
        )
        logger.info("Teacher %s marked %s as %s", principal.user_id, work_date, parsed.value)
        return TeacherAttendanceRecord(
            attendance_id=attendance_id,
            teacher_id=principal.user_id,
            work_date=work_date,
            status=parsed,
            marked_by=principal.user_id,
            marked_at=now,
        )

    def get_self(
        self,
        principal: Principal,
        *,
        work_date: Optional[date] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> list[TeacherAttendanceRecord]:
        principal.require(Role.TEACHER)

        if work_date is not None:
            record = self._attendance.get_for_teacher_and_date(principal.user_id, work_date)
            return [record] if record else []

        start = end = None
        if month and year:
            start, end = month_range(month, year)
        return list(self._attendance.list_for_teacher(principal.user_id, start=start, end=end))

    def has_marked(self, principal: Principal, work_date: date) -> bool:
        return bool(self.get_self(principal, work_date=work_date))

    def list_all(
        self,
        principal: Principal,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        work_date: Optional[date] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> list[TeacherAttendanceRecord]:
        """All teachers' days, newest first.

        A single ``work_date`` wins over ``month``/``year``, which win over
        ``start``/``end``.
        """
        principal.require(Role.HOD, Role.ADMIN)
        if work_date is not None:
            start = end = work_date
        elif month and year:
            start, end = month_range(month, year)
        if start and end and end < start:
            raise ValidationError("End date must be on or after start date")
        return list(self._attendance.list_range(start=start, end=end))

    def stats(
        self,
        principal: Principal,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        work_date: Optional[date] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> TeacherAttendanceStats:
        records = self.list_all(principal, start=start, end=end, work_date=work_date, month=month, year=year)

        by_status = Counter(r.status for r in records)
        department_wise: dict[str, dict[str, int]] = {}
        for r in records:
            dept = department_wise.setdefault(r.department or "Other", {"present": 0, "absent": 0, "late": 0, "total": 0})
            dept[r.status.value.lower()] += 1
            dept["total"] += 1

        return TeacherAttendanceStats(
            present=by_status[TeacherAttendanceStatus.PRESENT],
            absent=by_status[TeacherAttendanceStatus.ABSENT],
            late=by_status[TeacherAttendanceStatus.LATE],
            total_teachers=self._users.count_by_role(Role.TEACHER),
            department_wise=department_wise,
        )
