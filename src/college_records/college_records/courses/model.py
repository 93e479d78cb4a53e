from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Course:
    """Read-side view of a course; course CRUD lives outside this service."""

    course_id: int
    name: str
    code: str
    department: str
    semester: int
    teacher_id: Optional[int] = None
