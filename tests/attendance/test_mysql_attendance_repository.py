from __future__ import annotations

from datetime import date, datetime

import mysql.connector
import pytest
from mysql.connector import errorcode

from src.college_records.college_records.attendance.mysql_attendance_repository import (
    MySQLCourseAttendanceRepository,
    MySQLTeacherAttendanceRepository,
)
from src.college_records.college_records.core.enums import CourseAttendanceStatus, TeacherAttendanceStatus
from src.college_records.college_records.core.exceptions import ValidationError


def test_course_upsert_is_one_statement(recording_db):
    MySQLCourseAttendanceRepository(recording_db).upsert(
        student_id=1, course_id=100, work_date=date(2025, 1, 10), status=CourseAttendanceStatus.ABSENT, marked_by=10
    )

    (statement, params), = recording_db.statements
    assert "ON DUPLICATE KEY UPDATE status=VALUES(status)" in statement
    assert params == (1, 100, date(2025, 1, 10), "absent", 10)


def test_teacher_day_duplicate_is_rejected(recording_db):
    recording_db.fail_on = "INSERT INTO teacher_attendance"
    recording_db.error = mysql.connector.IntegrityError(msg="Duplicate entry", errno=errorcode.ER_DUP_ENTRY)

    with pytest.raises(ValidationError, match="already marked"):
        MySQLTeacherAttendanceRepository(recording_db).create(
            teacher_id=10,
            work_date=date(2025, 1, 10),
            status=TeacherAttendanceStatus.ABSENT,
            marked_by=10,
            marked_at=datetime(2025, 1, 10, 9, 0),
        )

    assert recording_db.rollbacks == 1
