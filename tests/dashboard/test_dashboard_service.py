from __future__ import annotations

from datetime import date

import pytest

from src.college_records.college_records.attendance.model import AttendanceEntry
from src.college_records.college_records.core.enums import Role
from src.college_records.college_records.core.exceptions import AuthorizationError
from src.college_records.college_records.core.principal import Principal
from src.college_records.college_records.dashboard.service import attendance_percentage


def _cards(container, principal):
    return {c.title: c.value for c in container.dashboard_service.build(principal)}


@pytest.mark.parametrize(
    "present,total,expected",
    [(0, 0, "0%"), (1, 3, "33%"), (2, 3, "67%"), (1, 8, "13%"), (5, 5, "100%")],
)
def test_attendance_percentage(present, total, expected):
    assert attendance_percentage(present, total) == expected


def test_student_dashboard_without_data(container, student):
    assert _cards(container, student) == {"Attendance %": "0%", "Pending Assignments": 0, "Fee Due": 0.0}


def test_student_dashboard_reflects_registers(container, admin, teacher, student):
    container.fee_service.open_account(admin, owner_id=student.user_id, total="1000", due_date=date(2025, 2, 1))
    container.fee_service.record_payment(student, owner_id=student.user_id, amount="400")
    for day, status in ((date(2025, 1, 8), "present"), (date(2025, 1, 9), "absent"), (date(2025, 1, 10), "present")):
        container.course_attendance_service.mark_batch(
            teacher, course_id=100, work_date=day, entries=[AttendanceEntry(student_id=student.user_id, status=status)]
        )
    first = container.assignment_service.create(teacher, title="A1", course_id=100, due_date=date(2025, 1, 20))
    container.assignment_service.create(teacher, title="A2", course_id=100, due_date=date(2025, 1, 27))
    container.assignment_service.submit(student, assignment_id=first.assignment_id)

    assert _cards(container, student) == {"Attendance %": "67%", "Pending Assignments": 1, "Fee Due": 600.0}


def test_teacher_dashboard_counts_unmarked_submissions(container, teacher, student, other_student):
    assignment = container.assignment_service.create(teacher, title="A1", course_id=100, due_date=date(2025, 1, 20))
    container.assignment_service.submit(student, assignment_id=assignment.assignment_id)
    container.assignment_service.submit(other_student, assignment_id=assignment.assignment_id)
    container.assignment_service.evaluate(
        teacher, assignment_id=assignment.assignment_id, student_id=student.user_id, marks=9
    )

    assert _cards(container, teacher) == {"My Courses": 2, "Pending Evaluations": 1}


def test_hod_and_admin_dashboards(container, hod, admin):
    assert _cards(container, hod) == {"Students": 2, "Teachers": 2, "Courses": 2}
    assert _cards(container, admin) == {"Total Users": 6, "Students": 2, "Teachers": 2, "Courses": 2}


def test_unknown_role_is_forbidden(container):
    principal = Principal(user_id=1, role="guest")

    with pytest.raises(AuthorizationError, match="Invalid role"):
        container.dashboard_service.build(principal)


def test_cards_are_read_only(container, hod, users):
    before = users.count_all()
    container.dashboard_service.build(hod)
    container.dashboard_service.build(Principal(user_id=30, role=Role.ADMIN))
    assert users.count_all() == before
