from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time


@dataclass(frozen=True)
class ExamSlot:
    """Validated exam fields; (course, exam_date, start_time) is unique."""

    exam_name: str
    course: str
    exam_date: date
    start_time: time
    end_time: time
    location: str
    venue: int


@dataclass(frozen=True)
class ExamSchedule:
    exam_id: int
    slot: ExamSlot

    def as_dict(self) -> dict:
        s = self.slot
        return {
            "id": self.exam_id,
            "examName": s.exam_name,
            "course": s.course,
            "examDate": s.exam_date.isoformat(),
            "startTime": s.start_time.strftime("%H:%M"),
            "endTime": s.end_time.strftime("%H:%M"),
            "location": s.location,
            "venue": s.venue,
        }
