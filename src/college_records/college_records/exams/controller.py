from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import json_body, principal_required
from ..container import Container
from ..core.principal import Principal
from .service import SCHEDULER_ROLES


def register(app: Flask, container: Container) -> None:
    exams = container.exam_service

    @app.route("/api/examschedule/add", methods=["POST"], endpoint="exam_add")
    @principal_required(*SCHEDULER_ROLES)
    def exam_add(principal: Principal):
        return jsonify(exams.create(principal, json_body()).as_dict()), 201

    @app.route("/api/examschedule/update/<int:exam_id>", methods=["PUT"], endpoint="exam_update")
    @principal_required(*SCHEDULER_ROLES)
    def exam_update(exam_id: int, principal: Principal):
        return jsonify(exams.update(principal, exam_id, json_body()).as_dict())

    @app.route("/api/examschedule/delete/<int:exam_id>", methods=["DELETE"], endpoint="exam_delete")
    @principal_required(*SCHEDULER_ROLES)
    def exam_delete(exam_id: int, principal: Principal):
        exams.delete(principal, exam_id)
        return jsonify({"message": "Exam schedule deleted"})

    @app.route("/api/examschedule/all", methods=["GET"], endpoint="exam_all")
    @principal_required()
    def exam_all(principal: Principal):
        return jsonify([e.as_dict() for e in exams.list_all(principal)])
