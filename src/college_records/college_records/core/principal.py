from __future__ import annotations

from dataclasses import dataclass

from .enums import Role
from .exceptions import AuthorizationError


@dataclass(frozen=True)
class Principal:
    """Authenticated caller: who is acting and in which role.

    Supplied by the HTTP layer from the session; services only read it.
    """

    user_id: int
    role: Role

    def has_role(self, *roles: Role) -> bool:
        return self.role in roles

    def require(self, *roles: Role, message: str = "You do not have permission") -> None:
        if not self.has_role(*roles):
            raise AuthorizationError(message)
