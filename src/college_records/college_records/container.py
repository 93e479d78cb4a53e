from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from .assignments.mysql_assignment_repository import MySQLAssignmentRepository
from .assignments.repository import AssignmentRepository
from .assignments.service import AssignmentService
from .attendance.mysql_attendance_repository import (
    MySQLCourseAttendanceRepository,
    MySQLTeacherAttendanceRepository,
)
from .attendance.repository import CourseAttendanceRepository, TeacherAttendanceRepository
from .attendance.service import CourseAttendanceService, TeacherAttendanceService
from .courses.mysql_course_repository import MySQLCourseRepository
from .courses.repository import CourseRepository
from .dashboard.service import DashboardService
from .database.connection import DatabaseConnection, DBConfig
from .exams.mysql_exam_repository import MySQLExamScheduleRepository
from .exams.repository import ExamScheduleRepository
from .exams.service import ExamScheduleService
from .ledger.mysql_ledger_repository import MySQLLedgerRepository
from .ledger.repository import LedgerRepository
from .ledger.service import FeeLedgerService, SalaryLedgerService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    courses_repo: CourseRepository
    ledger_repo: LedgerRepository
    course_attendance_repo: CourseAttendanceRepository
    teacher_attendance_repo: TeacherAttendanceRepository
    assignments_repo: AssignmentRepository
    exams_repo: ExamScheduleRepository

    auth_service: AuthService
    user_service: UserService
    fee_service: FeeLedgerService
    salary_service: SalaryLedgerService
    course_attendance_service: CourseAttendanceService
    teacher_attendance_service: TeacherAttendanceService
    assignment_service: AssignmentService
    exam_service: ExamScheduleService
    dashboard_service: DashboardService


def wire_services(
    *,
    users_repo: UserRepository,
    courses_repo: CourseRepository,
    ledger_repo: LedgerRepository,
    course_attendance_repo: CourseAttendanceRepository,
    teacher_attendance_repo: TeacherAttendanceRepository,
    assignments_repo: AssignmentRepository,
    exams_repo: ExamScheduleRepository,
    admin_secret: str,
    college_email_domain: str,
) -> Container:
    """Build every service over the given repositories (MySQL or in-memory)."""
    fee_service = FeeLedgerService(ledger_repo, users_repo)

    return Container(
        users_repo=users_repo,
        courses_repo=courses_repo,
        ledger_repo=ledger_repo,
        course_attendance_repo=course_attendance_repo,
        teacher_attendance_repo=teacher_attendance_repo,
        assignments_repo=assignments_repo,
        exams_repo=exams_repo,
        auth_service=AuthService(users_repo),
        user_service=UserService(
            users_repo,
            admin_secret=admin_secret,
            college_email_domain=college_email_domain,
        ),
        fee_service=fee_service,
        salary_service=SalaryLedgerService(ledger_repo, users_repo),
        course_attendance_service=CourseAttendanceService(course_attendance_repo, users_repo, courses_repo),
        teacher_attendance_service=TeacherAttendanceService(teacher_attendance_repo, users_repo),
        assignment_service=AssignmentService(assignments_repo, courses_repo),
        exam_service=ExamScheduleService(exams_repo),
        dashboard_service=DashboardService(
            users=users_repo,
            courses=courses_repo,
            attendance=course_attendance_repo,
            assignments=assignments_repo,
            fees=fee_service,
        ),
    )


def build_container(
    *,
    db_config: Mapping[str, Any],
    admin_secret: str,
    college_email_domain: str,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    return wire_services(
        users_repo=MySQLUserRepository(conn),
        courses_repo=MySQLCourseRepository(conn),
        ledger_repo=MySQLLedgerRepository(conn),
        course_attendance_repo=MySQLCourseAttendanceRepository(conn),
        teacher_attendance_repo=MySQLTeacherAttendanceRepository(conn),
        assignments_repo=MySQLAssignmentRepository(conn),
        exams_repo=MySQLExamScheduleRepository(conn),
        admin_secret=admin_secret,
        college_email_domain=college_email_domain,
    )
