from __future__ import annotations

import logging
from typing import Any, Mapping

from ..common.datetime_utils import parse_hhmm, parse_iso_date
from ..common.validators import require_id
from ..core.enums import Role
from ..core.exceptions import NotFoundError, ValidationError
from ..core.principal import Principal
from .model import ExamSchedule, ExamSlot
from .repository import ExamScheduleRepository

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("examName", "course", "examDate", "startTime", "endTime", "location", "venue")
SCHEDULER_ROLES = (Role.TEACHER, Role.HOD, Role.ADMIN)


def parse_slot(data: Mapping[str, Any]) -> ExamSlot:
    if any(data.get(f) in (None, "") for f in REQUIRED_FIELDS):
        raise ValidationError("All fields are required")

    start_time = parse_hhmm(str(data["startTime"]))
    end_time = parse_hhmm(str(data["endTime"]))
    if end_time <= start_time:
        raise ValidationError("End time must be after start time")

    return ExamSlot(
        exam_name=str(data["examName"]).strip(),
        course=str(data["course"]).strip(),
        exam_date=parse_iso_date(str(data["examDate"])),
        start_time=start_time,
        end_time=end_time,
        location=str(data["location"]).strip(),
        venue=require_id(data["venue"], "venue"),
    )


class ExamScheduleService:
    def __init__(self, exams: ExamScheduleRepository):
        self._exams = exams

    def create(self, principal: Principal, data: Mapping[str, Any]) -> ExamSchedule:
        principal.require(*SCHEDULER_ROLES)
        slot = parse_slot(data)
        exam_id = self._exams.create(slot)
        logger.info("Exam %s scheduled for %s on %s", exam_id, slot.course, slot.exam_date)
        return ExamSchedule(exam_id=exam_id, slot=slot)

    def update(self, principal: Principal, exam_id: Any, data: Mapping[str, Any]) -> ExamSchedule:
        principal.require(*SCHEDULER_ROLES)
        exam_id = require_id(exam_id, "exam id")
        slot = parse_slot(data)
        if not self._exams.update(exam_id, slot):
            raise NotFoundError("Exam schedule not found")
        return ExamSchedule(exam_id=exam_id, slot=slot)

    def delete(self, principal: Principal, exam_id: Any) -> None:
        principal.require(*SCHEDULER_ROLES)
        if not self._exams.delete(require_id(exam_id, "exam id")):
            raise NotFoundError("Exam schedule not found")

    def list_all(self, principal: Principal) -> list[ExamSchedule]:
        return list(self._exams.list_all())
