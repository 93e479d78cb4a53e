from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass
from typing import Any, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ConflictError, ValidationError
from ..core.principal import Principal
from .model import AdminProfile, HodProfile, Profile, StudentProfile, TeacherProfile, User
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: int
    full_name: str
    role: Role

    @property
    def principal(self) -> Principal:
        return Principal(user_id=self.user_id, role=self.role)


class AuthService:
    """Use case: authenticate a user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, email: str, password: str) -> SessionUser:
        user = self._users.get_by_email((email or "").strip().lower())
        if not user or not user.is_active:
            raise AuthenticationError("Invalid credentials")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # unknown hash method, e.g. a placeholder value
            ok = False

        if not ok:
            raise AuthenticationError("Invalid credentials")

        return SessionUser(user_id=user.user_id, full_name=user.full_name, role=user.role)


class UserService:
    """Use cases: register identities and list them by role."""

    def __init__(self, users: UserRepository, *, admin_secret: str, college_email_domain: str):
        self._users = users
        self._admin_secret = admin_secret
        self._college_email_domain = college_email_domain.lower()

    def _build_profile(self, role: Role, email: str, data: dict[str, Any]) -> Profile:
        if role == Role.STUDENT:
            student_code = require_non_empty(data.get("studentId"), "Student ID")
            try:
                semester = int(data.get("semester") or 0)
            except (TypeError, ValueError):
                raise ValidationError("Semester must be a number")
            if semester < 1:
                raise ValidationError("Semester is required")
            program = (data.get("program") or "").strip() or None
            return StudentProfile(student_code=student_code, semester=semester, program=program)

        if role == Role.TEACHER:
            return TeacherProfile(
                teacher_code=require_non_empty(data.get("teacherId"), "Teacher ID"),
                department=require_non_empty(data.get("department"), "Department"),
            )

        if role == Role.HOD:
            if not email.endswith(self._college_email_domain):
                raise AuthorizationError("Use college email only")
            return HodProfile(department_code=require_non_empty(data.get("departmentCode"), "Department code"))

        secret = str(data.get("adminSecret") or "")
        if not self._admin_secret or not hmac.compare_digest(secret, self._admin_secret):
            raise AuthorizationError("Invalid admin secret")
        return AdminProfile()

    def register(
        self,
        *,
        full_name: str,
        email: str,
        password: str,
        role: str,
        details: Optional[dict[str, Any]] = None,
    ) -> int:
        full_name = require_non_empty(full_name, "Name")
        email = require_non_empty(email, "Email").lower()
        if "@" not in email:
            raise ValidationError("Invalid email")
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        try:
            parsed_role = Role(role)
        except ValueError:
            raise ValidationError("Invalid role")

        profile = self._build_profile(parsed_role, email, details or {})

        if self._users.get_by_email(email):
            raise ConflictError("User already exists")

        user_id = self._users.create_user(
            full_name=full_name,
            email=email,
            password_hash=generate_password_hash(password),
            profile=profile,
        )
        logger.info("Registered user %s as %s", user_id, parsed_role.value)
        return user_id

    def list_students(self, principal: Principal) -> list[User]:
        principal.require(Role.TEACHER, Role.HOD)
        return list(self._users.list_by_role(Role.STUDENT))

    def list_teachers(self, principal: Principal) -> list[User]:
        principal.require(Role.HOD)
        return list(self._users.list_by_role(Role.TEACHER))
