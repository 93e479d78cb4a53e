from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Optional

from ..common.datetime_utils import now_local
from ..common.validators import require_amount, require_id, require_non_empty
from ..core.constants import MAX_MARKS
from ..core.enums import Role, SubmissionState
from ..core.exceptions import AlreadyExistsError, AuthorizationError, NotFoundError, ValidationError
from ..core.principal import Principal
from ..courses.repository import CourseRepository
from .model import Assignment
from .repository import AssignmentRepository

logger = logging.getLogger(__name__)


class AssignmentService:
    """Submission workflow per (assignment, student).

    UNSUBMITTED -> SUBMITTED -> EVALUATED. There is no way back: no
    withdrawal and no re-submission. Re-evaluating overwrites the marks.
    """

    def __init__(self, assignments: AssignmentRepository, courses: CourseRepository):
        self._assignments = assignments
        self._courses = courses

    def _get(self, assignment_id: Any) -> Assignment:
        assignment_id = require_id(assignment_id, "assignment id")
        assignment = self._assignments.get_by_id(assignment_id)
        if not assignment:
            raise NotFoundError("Assignment not found")
        return assignment

    def create(
        self,
        principal: Principal,
        *,
        title: str,
        course_id: Any,
        due_date: Optional[date],
    ) -> Assignment:
        principal.require(Role.TEACHER, message="Only teachers can create assignments")

        if not title or not str(title).strip() or course_id in (None, "") or due_date is None:
            raise ValidationError("All fields are required")
        title = require_non_empty(title, "Title")
        try:
            course_id = require_id(course_id, "course ID")
        except ValidationError:
            raise ValidationError("Invalid course ID")
        if not self._courses.get_by_id(course_id):
            raise ValidationError("Invalid course ID")

        assignment_id = self._assignments.create(
            title=title,
            course_id=course_id,
            teacher_id=principal.user_id,
            due_date=due_date,
        )
        logger.info("Teacher %s created assignment %s for course %s", principal.user_id, assignment_id, course_id)
        return self._get(assignment_id)

    def submit(self, principal: Principal, *, assignment_id: Any, now: Optional[datetime] = None) -> Assignment:
        principal.require(Role.STUDENT, message="Only students can submit assignments")
        assignment = self._get(assignment_id)

        if assignment.submission_for(principal.user_id):
            raise AlreadyExistsError("Assignment already submitted")

        self._assignments.add_submission(
            assignment_id=assignment.assignment_id,
            student_id=principal.user_id,
            submitted_at=now or now_local(),
        )
        logger.info("Student %s submitted assignment %s", principal.user_id, assignment.assignment_id)
        return self._get(assignment.assignment_id)

    def evaluate(self, principal: Principal, *, assignment_id: Any, student_id: Any, marks: Any) -> Assignment:
        principal.require(Role.TEACHER, message="Only teachers can evaluate assignments")
        assignment = self._get(assignment_id)
        if assignment.teacher_id != principal.user_id:
            raise AuthorizationError("Only the assignment's teacher can evaluate it")

        student_id = require_id(student_id, "student id")
        marks = require_amount(marks, "Marks", max_value=MAX_MARKS, allow_zero=True)

        if not assignment.submission_for(student_id):
            raise NotFoundError("Submission not found")
        if not self._assignments.set_marks(assignment_id=assignment.assignment_id, student_id=student_id, marks=marks):
            raise NotFoundError("Submission not found")

        logger.info("Assignment %s: student %s evaluated with %s", assignment.assignment_id, student_id, marks)
        return self._get(assignment.assignment_id)

    def state_of(self, *, assignment_id: Any, student_id: int) -> SubmissionState:
        return self._get(assignment_id).state_for(int(student_id))

    def list_for_student(self, principal: Principal) -> list[Assignment]:
        principal.require(Role.STUDENT)
        return list(self._assignments.list_all())

    def list_for_teacher(self, principal: Principal) -> list[Assignment]:
        principal.require(Role.TEACHER)
        return list(self._assignments.list_for_teacher(principal.user_id))
