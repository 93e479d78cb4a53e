from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import CourseAttendanceStatus, TeacherAttendanceStatus
from .model import CourseAttendanceRecord, TeacherAttendanceRecord


class CourseAttendanceRepository(Protocol):
    def upsert(
        self,
        *,
        student_id: int,
        course_id: int,
        work_date: date,
        status: CourseAttendanceStatus,
        marked_by: int,
    ) -> None:
        """Insert, or overwrite the status of, the (student, course, date) row in one statement."""

        raise NotImplementedError

    def list_for_student(self, student_id: int) -> Sequence[CourseAttendanceRecord]:
        raise NotImplementedError

    def count_for_student(self, student_id: int, *, status: Optional[CourseAttendanceStatus] = None) -> int:
        raise NotImplementedError


class TeacherAttendanceRepository(Protocol):
    def get_for_teacher_and_date(self, teacher_id: int, work_date: date) -> Optional[TeacherAttendanceRecord]:
        raise NotImplementedError

    def create(
        self,
        *,
        teacher_id: int,
        work_date: date,
        status: TeacherAttendanceStatus,
        marked_by: int,
        marked_at: datetime,
    ) -> int:
        """Insert a new day; raises ValidationError if the day is already marked."""

        raise NotImplementedError

    def list_for_teacher(
        self,
        teacher_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[TeacherAttendanceRecord]:
        raise NotImplementedError

    def list_range(self, *, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[TeacherAttendanceRecord]:
        raise NotImplementedError
