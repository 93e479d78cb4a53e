from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import json_body, principal_required
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..core.principal import Principal
from .model import AttendanceEntry


def _optional_date(value):
    return parse_iso_date(value) if value else None


def _optional_int(value, field_name: str):
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {field_name}")


def _period_filters() -> dict:
    return {
        "start": _optional_date(request.args.get("startDate")),
        "end": _optional_date(request.args.get("endDate")),
        "work_date": _optional_date(request.args.get("date")),
        "month": _optional_int(request.args.get("month"), "month"),
        "year": _optional_int(request.args.get("year"), "year"),
    }


def register(app: Flask, container: Container) -> None:
    course_attendance = container.course_attendance_service
    teacher_attendance = container.teacher_attendance_service

    # -------- Course attendance --------
    @app.route("/api/attendance/mark", methods=["POST"], endpoint="attendance_mark")
    @principal_required(Role.TEACHER)
    def attendance_mark(principal: Principal):
        data = json_body()
        records = data.get("records") or []
        if not isinstance(records, list):
            raise ValidationError("records must be a list")

        entries = [
            AttendanceEntry(student_id=r.get("studentId"), status=r.get("status"))
            if isinstance(r, dict)
            else AttendanceEntry(student_id=None, status=None)
            for r in records
        ]
        batch = course_attendance.mark_batch(
            principal,
            course_id=data.get("courseId"),
            work_date=_optional_date(data.get("date")),
            entries=entries,
        )
        return jsonify(batch.as_dict())

    @app.route("/api/attendance/me", methods=["GET"], endpoint="attendance_me")
    @principal_required(Role.STUDENT)
    def attendance_me(principal: Principal):
        records = course_attendance.get_for_person(principal, student_id=principal.user_id)
        return jsonify([r.as_dict() for r in records])

    @app.route("/api/attendance/student/<int:student_id>", methods=["GET"], endpoint="attendance_student")
    @principal_required(Role.TEACHER, Role.HOD, Role.ADMIN)
    def attendance_student(student_id: int, principal: Principal):
        records = course_attendance.get_for_person(principal, student_id=student_id)
        return jsonify([r.as_dict() for r in records])

    # -------- Teacher self-attendance --------
    @app.route("/api/teacher-attendance/mark", methods=["POST"], endpoint="teacher_attendance_mark")
    @principal_required(Role.TEACHER)
    def teacher_attendance_mark(principal: Principal):
        data = json_body()
        record = teacher_attendance.mark_self(
            principal,
            status=data.get("status"),
            work_date=_optional_date(data.get("date")),
        )
        return jsonify({"message": "Attendance marked successfully", "attendance": record.as_dict()}), 201

    @app.route("/api/teacher-attendance/my-attendance", methods=["GET"], endpoint="teacher_attendance_mine")
    @principal_required(Role.TEACHER)
    def teacher_attendance_mine(principal: Principal):
        records = teacher_attendance.get_self(
            principal,
            work_date=_optional_date(request.args.get("date")),
            month=_optional_int(request.args.get("month"), "month"),
            year=_optional_int(request.args.get("year"), "year"),
        )
        return jsonify([r.as_dict() for r in records])

    @app.route("/api/teacher-attendance/all", methods=["GET"], endpoint="teacher_attendance_all")
    @principal_required(Role.HOD, Role.ADMIN)
    def teacher_attendance_all(principal: Principal):
        records = teacher_attendance.list_all(principal, **_period_filters())
        return jsonify([r.as_dict() for r in records])

    @app.route("/api/teacher-attendance/stats", methods=["GET"], endpoint="teacher_attendance_stats")
    @principal_required(Role.HOD, Role.ADMIN)
    def teacher_attendance_stats(principal: Principal):
        stats = teacher_attendance.stats(principal, **_period_filters())
        return jsonify(stats.as_dict())
