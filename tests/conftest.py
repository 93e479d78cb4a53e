from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from src.college_records.college_records.assignments.model import Assignment, Submission
from src.college_records.college_records.attendance.model import CourseAttendanceRecord, TeacherAttendanceRecord
from src.college_records.college_records.container import wire_services
from src.college_records.college_records.core.enums import AccountKind, CourseAttendanceStatus, Role
from src.college_records.college_records.core.constants import MAX_MONEY
from src.college_records.college_records.core.exceptions import AlreadyExistsError, ConflictError, ValidationError
from src.college_records.college_records.core.principal import Principal
from src.college_records.college_records.courses.model import Course
from src.college_records.college_records.exams.model import ExamSchedule, ExamSlot
from src.college_records.college_records.ledger.model import Account, Installment
from src.college_records.college_records.users.model import (
    AdminProfile,
    HodProfile,
    StudentProfile,
    TeacherProfile,
    User,
)

STUDENT_ID = 1
OTHER_STUDENT_ID = 2
TEACHER_ID = 10
OTHER_TEACHER_ID = 11
HOD_ID = 20
ADMIN_ID = 30
COURSE_ID = 100

PASSWORD = "secret123"
ADMIN_SECRET = "test-admin-secret"


class InMemoryUsers:
    def __init__(self):
        self._by_id: dict[int, User] = {}
        self._id = 1000

    def add(self, user: User) -> User:
        self._by_id[user.user_id] = user
        return user

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._by_id.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self._by_id.values() if u.email == email), None)

    def create_user(self, *, full_name, email, password_hash, profile) -> int:
        if self.get_by_email(email):
            raise ConflictError("User already exists")
        self._id += 1
        self.add(User(user_id=self._id, full_name=full_name, email=email, password_hash=password_hash, profile=profile))
        return self._id

    def list_by_role(self, role: Role):
        return [u for u in self._by_id.values() if u.role == role]

    def count_by_role(self, role: Role) -> int:
        return len(self.list_by_role(role))

    def count_all(self) -> int:
        return len(self._by_id)


class InMemoryCourses:
    def __init__(self, courses: list[Course]):
        self._by_id = {c.course_id: c for c in courses}

    def get_by_id(self, course_id: int) -> Optional[Course]:
        return self._by_id.get(course_id)

    def count_all(self) -> int:
        return len(self._by_id)

    def count_for_teacher(self, teacher_id: int) -> int:
        return sum(1 for c in self._by_id.values() if c.teacher_id == teacher_id)


class InMemoryLedger:
    """Thread-safe: the lock plays the role of the row lock."""

    def __init__(self):
        self._lock = threading.Lock()
        self._accounts: dict[tuple[AccountKind, int], Account] = {}
        self._id = 0

    def get_by_owner(self, kind: AccountKind, owner_id: int) -> Optional[Account]:
        return self._accounts.get((kind, owner_id))

    def create(self, *, kind, owner_id, total, due_date) -> int:
        with self._lock:
            if (kind, owner_id) in self._accounts:
                raise ConflictError(f"{kind.value.capitalize()} already set for this owner")
            self._id += 1
            self._accounts[(kind, owner_id)] = Account(
                account_id=self._id,
                kind=kind,
                owner_id=owner_id,
                total=total,
                paid=Decimal("0"),
                due_date=due_date,
            )
            return self._id

    def append_installment(self, *, kind, owner_id, amount, paid_on) -> Optional[Account]:
        with self._lock:
            account = self._accounts.get((kind, owner_id))
            if account is None:
                return None
            if account.paid + amount > MAX_MONEY:
                raise ValidationError("Payment would exceed the largest amount an account can hold")
            account = replace(
                account,
                paid=account.paid + amount,
                installments=account.installments + (Installment(amount=amount, paid_on=paid_on),),
            )
            self._accounts[(kind, owner_id)] = account
            return account

    def list_by_kind(self, kind: AccountKind):
        return [a for (k, _), a in self._accounts.items() if k == kind]


class InMemoryCourseAttendance:
    def __init__(self):
        self.rows: dict[tuple[int, int, date], CourseAttendanceRecord] = {}

    def upsert(self, *, student_id, course_id, work_date, status, marked_by) -> None:
        self.rows[(student_id, course_id, work_date)] = CourseAttendanceRecord(
            student_id=student_id, course_id=course_id, work_date=work_date, status=status
        )

    def list_for_student(self, student_id: int):
        return [r for r in self.rows.values() if r.student_id == student_id]

    def count_for_student(self, student_id: int, *, status: Optional[CourseAttendanceStatus] = None) -> int:
        return sum(1 for r in self.list_for_student(student_id) if status is None or r.status == status)


class InMemoryTeacherAttendance:
    def __init__(self, users: InMemoryUsers):
        self._users = users
        self.rows: dict[tuple[int, date], TeacherAttendanceRecord] = {}
        self._id = 0

    def get_for_teacher_and_date(self, teacher_id: int, work_date: date):
        return self.rows.get((teacher_id, work_date))

    def create(self, *, teacher_id, work_date, status, marked_by, marked_at) -> int:
        if (teacher_id, work_date) in self.rows:
            raise ValidationError("Attendance already marked for this day")
        self._id += 1
        teacher = self._users.get_by_id(teacher_id)
        self.rows[(teacher_id, work_date)] = TeacherAttendanceRecord(
            attendance_id=self._id,
            teacher_id=teacher_id,
            work_date=work_date,
            status=status,
            marked_by=marked_by,
            marked_at=marked_at,
            teacher_name=teacher.full_name if teacher else None,
            department=teacher.department if teacher else None,
        )
        return self._id

    def _in_range(self, record, start, end) -> bool:
        return (start is None or record.work_date >= start) and (end is None or record.work_date <= end)

    def list_for_teacher(self, teacher_id: int, *, start=None, end=None):
        return [r for r in self.list_range(start=start, end=end) if r.teacher_id == teacher_id]

    def list_range(self, *, start=None, end=None):
        return sorted(
            (r for r in self.rows.values() if self._in_range(r, start, end)),
            key=lambda r: r.work_date,
            reverse=True,
        )


class InMemoryAssignments:
    def __init__(self):
        self._by_id: dict[int, Assignment] = {}
        self._id = 0

    def create(self, *, title, course_id, teacher_id, due_date) -> int:
        self._id += 1
        self._by_id[self._id] = Assignment(
            assignment_id=self._id, title=title, course_id=course_id, teacher_id=teacher_id, due_date=due_date
        )
        return self._id

    def get_by_id(self, assignment_id: int) -> Optional[Assignment]:
        return self._by_id.get(assignment_id)

    def add_submission(self, *, assignment_id, student_id, submitted_at) -> None:
        assignment = self._by_id[assignment_id]
        if assignment.submission_for(student_id):
            raise AlreadyExistsError("Assignment already submitted")
        submission = Submission(student_id=student_id, submitted_at=submitted_at)
        self._by_id[assignment_id] = replace(assignment, submissions=assignment.submissions + (submission,))

    def set_marks(self, *, assignment_id, student_id, marks) -> bool:
        assignment = self._by_id.get(assignment_id)
        if not assignment or not assignment.submission_for(student_id):
            return False
        submissions = tuple(
            replace(s, marks=marks) if s.student_id == student_id else s for s in assignment.submissions
        )
        self._by_id[assignment_id] = replace(assignment, submissions=submissions)
        return True

    def list_all(self):
        return list(self._by_id.values())

    def list_for_teacher(self, teacher_id: int):
        return [a for a in self._by_id.values() if a.teacher_id == teacher_id]

    def count_not_submitted_by(self, student_id: int) -> int:
        return sum(1 for a in self._by_id.values() if not a.submission_for(student_id))

    def count_unmarked_for_teacher(self, teacher_id: int) -> int:
        return sum(a.pending_evaluations for a in self.list_for_teacher(teacher_id))


class InMemoryExams:
    def __init__(self):
        self._by_id: dict[int, ExamSlot] = {}
        self._id = 0

    def _taken(self, slot: ExamSlot, ignore_id: Optional[int] = None) -> bool:
        return any(
            (s.course, s.exam_date, s.start_time) == (slot.course, slot.exam_date, slot.start_time)
            for exam_id, s in self._by_id.items()
            if exam_id != ignore_id
        )

    def create(self, slot: ExamSlot) -> int:
        if self._taken(slot):
            raise ConflictError("An exam is already scheduled for this course at that time")
        self._id += 1
        self._by_id[self._id] = slot
        return self._id

    def update(self, exam_id: int, slot: ExamSlot) -> bool:
        if exam_id not in self._by_id:
            return False
        if self._taken(slot, ignore_id=exam_id):
            raise ConflictError("An exam is already scheduled for this course at that time")
        self._by_id[exam_id] = slot
        return True

    def delete(self, exam_id: int) -> bool:
        return self._by_id.pop(exam_id, None) is not None

    def get_by_id(self, exam_id: int):
        slot = self._by_id.get(exam_id)
        return ExamSchedule(exam_id=exam_id, slot=slot) if slot else None

    def list_all(self):
        return [ExamSchedule(exam_id=i, slot=s) for i, s in sorted(self._by_id.items())]


def _user(user_id: int, name: str, email: str, profile) -> User:
    return User(
        user_id=user_id,
        full_name=name,
        email=email,
        password_hash=generate_password_hash(PASSWORD),
        profile=profile,
    )


@pytest.fixture
def users() -> InMemoryUsers:
    repo = InMemoryUsers()
    repo.add(_user(STUDENT_ID, "Asha Student", "student@college.edu", StudentProfile("S-001", 3, "BSc CS")))
    repo.add(_user(OTHER_STUDENT_ID, "Ravi Student", "ravi@college.edu", StudentProfile("S-002", 3)))
    repo.add(_user(TEACHER_ID, "Meera Teacher", "teacher@college.edu", TeacherProfile("T-001", "Computer Science")))
    repo.add(_user(OTHER_TEACHER_ID, "Arun Teacher", "arun@college.edu", TeacherProfile("T-002", "Mathematics")))
    repo.add(_user(HOD_ID, "Hari Hod", "hod@college.edu", HodProfile("CS")))
    repo.add(_user(ADMIN_ID, "Ada Admin", "admin@college.edu", AdminProfile()))
    return repo


@pytest.fixture
def courses() -> InMemoryCourses:
    return InMemoryCourses(
        [
            Course(course_id=COURSE_ID, name="Data Structures", code="CS201", department="Computer Science", semester=3, teacher_id=TEACHER_ID),
            Course(course_id=101, name="Algorithms", code="CS301", department="Computer Science", semester=5, teacher_id=TEACHER_ID),
        ]
    )


@pytest.fixture
def ledger() -> InMemoryLedger:
    return InMemoryLedger()


@pytest.fixture
def course_attendance() -> InMemoryCourseAttendance:
    return InMemoryCourseAttendance()


@pytest.fixture
def teacher_attendance(users) -> InMemoryTeacherAttendance:
    return InMemoryTeacherAttendance(users)


@pytest.fixture
def assignments() -> InMemoryAssignments:
    return InMemoryAssignments()


@pytest.fixture
def exams() -> InMemoryExams:
    return InMemoryExams()


@pytest.fixture
def container(users, courses, ledger, course_attendance, teacher_attendance, assignments, exams):
    return wire_services(
        users_repo=users,
        courses_repo=courses,
        ledger_repo=ledger,
        course_attendance_repo=course_attendance,
        teacher_attendance_repo=teacher_attendance,
        assignments_repo=assignments,
        exams_repo=exams,
        admin_secret=ADMIN_SECRET,
        college_email_domain="@college.edu",
    )


@pytest.fixture
def student() -> Principal:
    return Principal(user_id=STUDENT_ID, role=Role.STUDENT)


@pytest.fixture
def other_student() -> Principal:
    return Principal(user_id=OTHER_STUDENT_ID, role=Role.STUDENT)


@pytest.fixture
def teacher() -> Principal:
    return Principal(user_id=TEACHER_ID, role=Role.TEACHER)


@pytest.fixture
def other_teacher() -> Principal:
    return Principal(user_id=OTHER_TEACHER_ID, role=Role.TEACHER)


@pytest.fixture
def hod() -> Principal:
    return Principal(user_id=HOD_ID, role=Role.HOD)


@pytest.fixture
def admin() -> Principal:
    return Principal(user_id=ADMIN_ID, role=Role.ADMIN)


@pytest.fixture
def now() -> datetime:
    return datetime(2025, 1, 10, 9, 30)


class RecordingCursor:
    """Records every statement; answers fetches from a scripted queue."""

    def __init__(self, db: "RecordingDatabase"):
        self._db = db
        self.lastrowid = None

    def execute(self, sql, params=()):
        statement = " ".join(sql.split())
        self._db.statements.append((statement, tuple(params)))
        if self._db.fail_on and self._db.fail_on in statement:
            raise self._db.error
        self.lastrowid = self._db.next_rowid

    def fetchone(self):
        return self._db.results.pop(0) if self._db.results else None

    def fetchall(self):
        return self._db.results.pop(0) if self._db.results else []

    def close(self):
        pass


class RecordingConnection:
    def __init__(self, db: "RecordingDatabase"):
        self._db = db

    def cursor(self, dictionary=True):
        return RecordingCursor(self._db)

    def commit(self):
        self._db.commits += 1

    def rollback(self):
        self._db.rollbacks += 1

    def close(self):
        pass


class RecordingDatabase:
    """Stands in for DatabaseConnection in repository tests."""

    def __init__(self):
        self.statements: list[tuple[str, tuple]] = []
        self.results: list = []
        self.commits = 0
        self.rollbacks = 0
        self.next_rowid = 1
        self.fail_on: Optional[str] = None
        self.error: Optional[Exception] = None

    def connect(self, *, with_database: bool = True):
        return RecordingConnection(self)

    def sql(self) -> list[str]:
        return [s for s, _ in self.statements]


@pytest.fixture
def recording_db() -> RecordingDatabase:
    return RecordingDatabase()
