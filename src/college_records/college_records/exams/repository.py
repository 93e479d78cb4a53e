from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import ExamSchedule, ExamSlot


class ExamScheduleRepository(Protocol):
    def create(self, slot: ExamSlot) -> int:
        """Raises ConflictError when the (course, date, start time) slot is taken."""

        raise NotImplementedError

    def update(self, exam_id: int, slot: ExamSlot) -> bool:
        raise NotImplementedError

    def delete(self, exam_id: int) -> bool:
        raise NotImplementedError

    def get_by_id(self, exam_id: int) -> Optional[ExamSchedule]:
        raise NotImplementedError

    def list_all(self) -> Sequence[ExamSchedule]:
        raise NotImplementedError
