from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Role of an authenticated principal."""

    STUDENT = "student"
    TEACHER = "teacher"
    HOD = "hod"
    ADMIN = "admin"


class AccountKind(str, Enum):
    """Which ledger an account belongs to."""

    FEE = "fee"
    SALARY = "salary"


class AccountStatus(str, Enum):
    """Derived account status; never stored."""

    PENDING = "Pending"
    PARTIAL = "Partial"
    PAID = "Paid"
    OVERDUE = "Overdue"


class CourseAttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"


class TeacherAttendanceStatus(str, Enum):
    PRESENT = "Present"
    ABSENT = "Absent"
    LATE = "Late"


class SubmissionState(str, Enum):
    """Per (assignment, student) workflow state."""

    UNSUBMITTED = "UNSUBMITTED"
    SUBMITTED = "SUBMITTED"
    EVALUATED = "EVALUATED"
