from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Union

from ..assignments.repository import AssignmentRepository
from ..attendance.repository import CourseAttendanceRepository
from ..core.enums import CourseAttendanceStatus, Role
from ..core.exceptions import AuthorizationError
from ..core.principal import Principal
from ..courses.repository import CourseRepository
from ..ledger.service import FeeLedgerService
from ..users.repository import UserRepository


@dataclass(frozen=True)
class Card:
    title: str
    value: Union[int, float, str]


def attendance_percentage(present: int, total: int) -> str:
    """Rounded percentage string; "0%" when there are no records."""
    if total <= 0:
        return "0%"
    pct = (Decimal(present) * 100 / Decimal(total)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return f"{int(pct)}%"


class DashboardService:
    """Read-only role dashboards, computed live from the other registers."""

    def __init__(
        self,
        *,
        users: UserRepository,
        courses: CourseRepository,
        attendance: CourseAttendanceRepository,
        assignments: AssignmentRepository,
        fees: FeeLedgerService,
    ):
        self._users = users
        self._courses = courses
        self._attendance = attendance
        self._assignments = assignments
        self._fees = fees

    def build(self, principal: Principal) -> list[Card]:
        builders: dict[Role, Callable[[Principal], list[Card]]] = {
            Role.STUDENT: self._student_cards,
            Role.TEACHER: self._teacher_cards,
            Role.HOD: self._hod_cards,
            Role.ADMIN: self._admin_cards,
        }
        builder = builders.get(principal.role)
        if builder is None:
            raise AuthorizationError("Invalid role")
        return builder(principal)

    def _student_cards(self, principal: Principal) -> list[Card]:
        total = self._attendance.count_for_student(principal.user_id)
        present = self._attendance.count_for_student(principal.user_id, status=CourseAttendanceStatus.PRESENT)
        remaining = self._fees.remaining_for(principal.user_id)
        return [
            Card("Attendance %", attendance_percentage(present, total)),
            Card("Pending Assignments", self._assignments.count_not_submitted_by(principal.user_id)),
            Card("Fee Due", float(remaining)),
        ]

    def _teacher_cards(self, principal: Principal) -> list[Card]:
        return [
            Card("My Courses", self._courses.count_for_teacher(principal.user_id)),
            Card("Pending Evaluations", self._assignments.count_unmarked_for_teacher(principal.user_id)),
        ]

    def _hod_cards(self, principal: Principal) -> list[Card]:
        return [
            Card("Students", self._users.count_by_role(Role.STUDENT)),
            Card("Teachers", self._users.count_by_role(Role.TEACHER)),
            Card("Courses", self._courses.count_all()),
        ]

    def _admin_cards(self, principal: Principal) -> list[Card]:
        return [
            Card("Total Users", self._users.count_all()),
            Card("Students", self._users.count_by_role(Role.STUDENT)),
            Card("Teachers", self._users.count_by_role(Role.TEACHER)),
            Card("Courses", self._courses.count_all()),
        ]
