from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from ..core.enums import Role


@dataclass(frozen=True)
class StudentProfile:
    student_code: str
    semester: int
    program: Optional[str] = None

    role = Role.STUDENT


@dataclass(frozen=True)
class TeacherProfile:
    teacher_code: str
    department: str

    role = Role.TEACHER


@dataclass(frozen=True)
class HodProfile:
    department_code: str

    role = Role.HOD


@dataclass(frozen=True)
class AdminProfile:
    role = Role.ADMIN


Profile = Union[StudentProfile, TeacherProfile, HodProfile, AdminProfile]


@dataclass(frozen=True)
class User:
    """Domain entity: an identity with exactly one role-specific profile.

    The role is read from the profile variant, so a student without a
    semester (or a teacher without a department) cannot be represented.
    """

    user_id: int
    full_name: str
    email: str
    password_hash: str
    profile: Profile
    is_active: bool = True

    @property
    def role(self) -> Role:
        return self.profile.role

    @property
    def department(self) -> Optional[str]:
        if isinstance(self.profile, TeacherProfile):
            return self.profile.department
        if isinstance(self.profile, HodProfile):
            return self.profile.department_code
        return None

    def as_public_dict(self) -> dict:
        data = {
            "id": self.user_id,
            "name": self.full_name,
            "email": self.email,
            "role": self.role.value,
        }
        if isinstance(self.profile, StudentProfile):
            data.update(studentId=self.profile.student_code, semester=self.profile.semester, program=self.profile.program)
        elif isinstance(self.profile, TeacherProfile):
            data.update(teacherId=self.profile.teacher_code, department=self.profile.department)
        elif isinstance(self.profile, HodProfile):
            data.update(departmentCode=self.profile.department_code)
        return data


def profile_from_columns(row: dict) -> Profile:
    """Rebuild the profile variant from the flat users row."""
    role = Role(row["role"])
    if role == Role.STUDENT:
        return StudentProfile(
            student_code=row.get("student_code") or "",
            semester=int(row.get("semester") or 1),
            program=row.get("program"),
        )
    if role == Role.TEACHER:
        return TeacherProfile(teacher_code=row.get("teacher_code") or "", department=row.get("department") or "")
    if role == Role.HOD:
        return HodProfile(department_code=row.get("department") or "")
    return AdminProfile()


def profile_to_columns(profile: Profile) -> dict:
    columns = {"student_code": None, "semester": None, "program": None, "teacher_code": None, "department": None}
    if isinstance(profile, StudentProfile):
        columns.update(student_code=profile.student_code, semester=profile.semester, program=profile.program)
    elif isinstance(profile, TeacherProfile):
        columns.update(teacher_code=profile.teacher_code, department=profile.department)
    elif isinstance(profile, HodProfile):
        columns.update(department=profile.department_code)
    return columns
