from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from ..common.datetime_utils import now_local
from ..common.validators import require_amount, require_id
from ..core.constants import MAX_MONEY
from ..core.enums import AccountKind, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..core.principal import Principal
from ..users.repository import UserRepository
from .model import Account, AccountView
from .repository import LedgerRepository

logger = logging.getLogger(__name__)


class LedgerService(ABC):
    """Installment ledger shared by fee and salary accounts.

    Subclasses pick the account kind, whose accounts these are and who may
    open, pay into and read them (Template Method over the shared engine).
    """

    kind: AccountKind
    owner_role: Role
    setter_role: Role

    def __init__(self, accounts: LedgerRepository, users: UserRepository):
        self._accounts = accounts
        self._users = users

    @abstractmethod
    def _authorize_payment(self, principal: Principal, owner_id: int) -> None:
        raise NotImplementedError

    def _authorize_read(self, principal: Principal, owner_id: int) -> None:
        if principal.role == self.setter_role:
            return
        if principal.role == self.owner_role and principal.user_id == owner_id:
            return
        raise AuthorizationError("You do not have permission to view this account")

    def _view(self, account: Account, now: Optional[datetime]) -> AccountView:
        return AccountView(account=account, status=account.status_at(now or now_local()))

    def open_account(
        self,
        principal: Principal,
        *,
        owner_id: Any,
        total: Any,
        due_date: Optional[date],
        now: Optional[datetime] = None,
    ) -> AccountView:
        principal.require(self.setter_role)

        owner_id = require_id(owner_id, "owner")
        total = require_amount(total, "Total amount", max_value=MAX_MONEY)
        if due_date is None:
            raise ValidationError("Due date is required")

        owner = self._users.get_by_id(owner_id)
        if not owner or owner.role != self.owner_role:
            raise ValidationError(f"Owner must be an existing {self.owner_role.value}")

        self._accounts.create(kind=self.kind, owner_id=owner_id, total=total, due_date=due_date)
        account = self._accounts.get_by_owner(self.kind, owner_id)
        if not account:
            raise NotFoundError("Account not found")

        logger.info("Opened %s account for owner %s (total=%s, due=%s)", self.kind.value, owner_id, total, due_date)
        return self._view(account, now)

    def record_payment(
        self,
        principal: Principal,
        *,
        owner_id: Any,
        amount: Any,
        now: Optional[datetime] = None,
    ) -> AccountView:
        owner_id = require_id(owner_id, "owner")
        self._authorize_payment(principal, owner_id)
        amount = require_amount(amount, "Amount", max_value=MAX_MONEY)

        now = now or now_local()
        account = self._accounts.append_installment(kind=self.kind, owner_id=owner_id, amount=amount, paid_on=now)
        if not account:
            raise NotFoundError(f"{self.kind.value.capitalize()} record not found")

        logger.info(
            "Recorded %s payment of %s for owner %s (paid=%s/%s)",
            self.kind.value,
            amount,
            owner_id,
            account.paid,
            account.total,
        )
        return self._view(account, now)

    def get_account(self, principal: Principal, *, owner_id: Any, now: Optional[datetime] = None) -> AccountView:
        owner_id = require_id(owner_id, "owner")
        self._authorize_read(principal, owner_id)

        account = self._accounts.get_by_owner(self.kind, owner_id)
        if not account:
            raise NotFoundError(f"No {self.kind.value} record found")
        return self._view(account, now)

    def remaining_for(self, owner_id: int) -> Decimal:
        """Outstanding balance without authorization; zero when no account exists."""
        account = self._accounts.get_by_owner(self.kind, int(owner_id))
        return account.remaining if account else Decimal("0")

    def list_accounts(self, principal: Principal, *, now: Optional[datetime] = None) -> list[AccountView]:
        principal.require(self.setter_role)
        now = now or now_local()
        return [self._view(a, now) for a in self._accounts.list_by_kind(self.kind)]


class FeeLedgerService(LedgerService):
    """Student fees: set by admin, paid by the student themself."""

    kind = AccountKind.FEE
    owner_role = Role.STUDENT
    setter_role = Role.ADMIN

    def _authorize_payment(self, principal: Principal, owner_id: int) -> None:
        principal.require(Role.STUDENT)
        if principal.user_id != owner_id:
            raise AuthorizationError("Students can only pay their own fee")


class SalaryLedgerService(LedgerService):
    """Teacher salaries: set and paid out by the head of department."""

    kind = AccountKind.SALARY
    owner_role = Role.TEACHER
    setter_role = Role.HOD

    def _authorize_payment(self, principal: Principal, owner_id: int) -> None:
        principal.require(Role.HOD)
