from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import parse_iso_date
from ..common.web import json_body, principal_required
from ..container import Container
from ..core.enums import Role
from ..core.principal import Principal


def register(app: Flask, container: Container) -> None:
    assignments = container.assignment_service

    @app.route("/api/assignment/create", methods=["POST"], endpoint="assignment_create")
    @principal_required(Role.TEACHER)
    def assignment_create(principal: Principal):
        data = json_body()
        due = data.get("dueDate")
        assignment = assignments.create(
            principal,
            title=data.get("title", ""),
            course_id=data.get("courseId"),
            due_date=parse_iso_date(due) if due else None,
        )
        return jsonify(assignment.as_dict()), 201

    @app.route("/api/assignment/submit/<int:assignment_id>", methods=["POST"], endpoint="assignment_submit")
    @principal_required(Role.STUDENT)
    def assignment_submit(assignment_id: int, principal: Principal):
        assignment = assignments.submit(principal, assignment_id=assignment_id)
        return jsonify({"message": "Assignment submitted", "assignment": assignment.as_student_dict(principal.user_id)}), 201

    @app.route("/api/assignment/evaluate/<int:assignment_id>", methods=["POST"], endpoint="assignment_evaluate")
    @principal_required(Role.TEACHER)
    def assignment_evaluate(assignment_id: int, principal: Principal):
        data = json_body()
        assignment = assignments.evaluate(
            principal,
            assignment_id=assignment_id,
            student_id=data.get("studentId"),
            marks=data.get("marks"),
        )
        return jsonify({"message": "Assignment evaluated", "assignment": assignment.as_dict()})

    @app.route("/api/assignment/student", methods=["GET"], endpoint="assignment_student")
    @principal_required(Role.STUDENT)
    def assignment_student(principal: Principal):
        return jsonify([a.as_student_dict(principal.user_id) for a in assignments.list_for_student(principal)])

    @app.route("/api/assignment/teacher", methods=["GET"], endpoint="assignment_teacher")
    @principal_required(Role.TEACHER)
    def assignment_teacher(principal: Principal):
        return jsonify([a.as_dict() for a in assignments.list_for_teacher(principal)])
