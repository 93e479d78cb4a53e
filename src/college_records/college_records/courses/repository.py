from __future__ import annotations

from typing import Optional, Protocol

from .model import Course


class CourseRepository(Protocol):
    def get_by_id(self, course_id: int) -> Optional[Course]:
        raise NotImplementedError

    def count_all(self) -> int:
        raise NotImplementedError

    def count_for_teacher(self, teacher_id: int) -> int:
        raise NotImplementedError
