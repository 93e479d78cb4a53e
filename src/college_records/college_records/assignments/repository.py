from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from .model import Assignment


class AssignmentRepository(Protocol):
    def create(self, *, title: str, course_id: int, teacher_id: int, due_date: date) -> int:
        raise NotImplementedError

    def get_by_id(self, assignment_id: int) -> Optional[Assignment]:
        raise NotImplementedError

    def add_submission(self, *, assignment_id: int, student_id: int, submitted_at: datetime) -> None:
        """Append a submission; raises AlreadyExistsError if the student already submitted."""

        raise NotImplementedError

    def set_marks(self, *, assignment_id: int, student_id: int, marks: Decimal) -> bool:
        raise NotImplementedError

    def list_all(self) -> Sequence[Assignment]:
        raise NotImplementedError

    def list_for_teacher(self, teacher_id: int) -> Sequence[Assignment]:
        raise NotImplementedError

    def count_not_submitted_by(self, student_id: int) -> int:
        raise NotImplementedError

    def count_unmarked_for_teacher(self, teacher_id: int) -> int:
        raise NotImplementedError
