from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional

from ..core.enums import CourseAttendanceStatus, TeacherAttendanceStatus


@dataclass(frozen=True)
class CourseAttendanceRecord:
    """Domain entity: one student's attendance in one course on one day."""

    student_id: int
    course_id: int
    work_date: date
    status: CourseAttendanceStatus
    course_name: Optional[str] = None

    def as_dict(self) -> dict:
        return {
            "student": self.student_id,
            "course": {"id": self.course_id, "name": self.course_name},
            "date": self.work_date.isoformat(),
            "status": self.status.value,
        }


@dataclass(frozen=True)
class TeacherAttendanceRecord:
    """Domain entity: a teacher's self-reported presence for one day (write-once)."""

    attendance_id: int
    teacher_id: int
    work_date: date
    status: TeacherAttendanceStatus
    marked_by: int
    marked_at: datetime
    teacher_name: Optional[str] = None
    department: Optional[str] = None

    def as_dict(self) -> dict:
        data = {
            "id": self.attendance_id,
            "teacher": self.teacher_id,
            "date": self.work_date.isoformat(),
            "status": self.status.value,
            "markedBy": self.marked_by,
            "markedAt": self.marked_at.isoformat(),
        }
        if self.teacher_name is not None:
            data["teacherName"] = self.teacher_name
            data["department"] = self.department
        return data


@dataclass(frozen=True)
class AttendanceEntry:
    """Raw batch row as received; validated per row by the service."""

    student_id: Any
    status: Any


@dataclass(frozen=True)
class RowResult:
    student_id: Any
    ok: bool
    error: Optional[str] = None


@dataclass(frozen=True)
class BatchResult:
    course_id: int
    work_date: date
    results: tuple[RowResult, ...]

    @property
    def marked(self) -> int:
        return sum(1 for r in self.results if r.ok)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.ok)

    def as_dict(self) -> dict:
        return {
            "message": "Attendance saved" if not self.failed else "Attendance saved with errors",
            "course": self.course_id,
            "date": self.work_date.isoformat(),
            "marked": self.marked,
            "failed": self.failed,
            "results": [
                {"studentId": r.student_id, "ok": r.ok, "error": r.error} for r in self.results
            ],
        }


@dataclass(frozen=True)
class TeacherAttendanceStats:
    present: int
    absent: int
    late: int
    total_teachers: int
    department_wise: dict[str, dict[str, int]] = field(default_factory=dict)

    def as_dict(self) -> dict:
        return {
            "present": self.present,
            "absent": self.absent,
            "late": self.late,
            "totalTeachers": self.total_teachers,
            "departmentWise": self.department_wise,
        }
