from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import SubmissionState


@dataclass(frozen=True)
class Submission:
    student_id: int
    submitted_at: datetime
    marks: Optional[Decimal] = None

    @property
    def state(self) -> SubmissionState:
        return SubmissionState.EVALUATED if self.marks is not None else SubmissionState.SUBMITTED

    def as_dict(self) -> dict:
        return {
            "student": self.student_id,
            "submittedAt": self.submitted_at.isoformat(),
            "marks": float(self.marks) if self.marks is not None else None,
            "state": self.state.value,
        }


@dataclass(frozen=True)
class Assignment:
    """Domain entity: an assignment with at most one submission per student."""

    assignment_id: int
    title: str
    course_id: int
    teacher_id: int
    due_date: date
    submissions: tuple[Submission, ...] = ()
    course_name: Optional[str] = None
    teacher_name: Optional[str] = None

    def submission_for(self, student_id: int) -> Optional[Submission]:
        return next((s for s in self.submissions if s.student_id == student_id), None)

    def state_for(self, student_id: int) -> SubmissionState:
        submission = self.submission_for(student_id)
        return submission.state if submission else SubmissionState.UNSUBMITTED

    @property
    def pending_evaluations(self) -> int:
        return sum(1 for s in self.submissions if s.marks is None)

    def _base_dict(self) -> dict:
        return {
            "id": self.assignment_id,
            "title": self.title,
            "course": {"id": self.course_id, "name": self.course_name},
            "teacher": {"id": self.teacher_id, "name": self.teacher_name},
            "dueDate": self.due_date.isoformat(),
        }

    def as_dict(self) -> dict:
        data = self._base_dict()
        data["submissions"] = [s.as_dict() for s in self.submissions]
        data["pendingEvaluations"] = self.pending_evaluations
        return data

    def as_student_dict(self, student_id: int) -> dict:
        """Student view: only the student's own submission is exposed."""
        data = self._base_dict()
        submission = self.submission_for(student_id)
        data["state"] = self.state_for(student_id).value
        data["submission"] = submission.as_dict() if submission else None
        return data
