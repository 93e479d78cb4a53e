from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import AccountKind, AccountStatus


def derive_status(*, paid: Decimal, total: Decimal, due_date: date, now: datetime) -> AccountStatus:
    """Pure status projection.

    Priority: Paid, then Partial, then Overdue, then Pending. Any payment at
    all reports Partial even past the due date; Overdue only signals the
    zero-payment case.
    """
    if paid >= total:
        return AccountStatus.PAID
    if paid > 0:
        return AccountStatus.PARTIAL
    if due_date < now.date():
        return AccountStatus.OVERDUE
    return AccountStatus.PENDING


@dataclass(frozen=True)
class Installment:
    amount: Decimal
    paid_on: datetime


@dataclass(frozen=True)
class Account:
    """Domain entity: a fee or salary ledger owned by one person.

    ``paid`` always equals the sum of the installment amounts; installments
    are append-only.
    """

    account_id: int
    kind: AccountKind
    owner_id: int
    total: Decimal
    paid: Decimal
    due_date: date
    installments: tuple[Installment, ...] = ()
    owner_name: Optional[str] = None

    @property
    def remaining(self) -> Decimal:
        return self.total - self.paid

    def status_at(self, now: datetime) -> AccountStatus:
        return derive_status(paid=self.paid, total=self.total, due_date=self.due_date, now=now)


@dataclass(frozen=True)
class AccountView:
    """Account plus the status derived at read time."""

    account: Account
    status: AccountStatus

    def as_dict(self) -> dict:
        a = self.account
        data = {
            "id": a.account_id,
            "kind": a.kind.value,
            "owner": a.owner_id,
            "total": float(a.total),
            "paid": float(a.paid),
            "remaining": float(a.remaining),
            "dueDate": a.due_date.isoformat(),
            "status": self.status.value,
            "installments": [
                {"amount": float(i.amount), "paidOn": i.paid_on.isoformat()} for i in a.installments
            ],
        }
        if a.owner_name is not None:
            data["ownerName"] = a.owner_name
        return data
