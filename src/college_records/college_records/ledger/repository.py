from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import AccountKind
from .model import Account


class LedgerRepository(Protocol):
    def get_by_owner(self, kind: AccountKind, owner_id: int) -> Optional[Account]:
        raise NotImplementedError

    def create(self, *, kind: AccountKind, owner_id: int, total: Decimal, due_date: date) -> int:
        """Insert a fresh account; raises ConflictError if the owner already has one."""

        raise NotImplementedError

    def append_installment(
        self,
        *,
        kind: AccountKind,
        owner_id: int,
        amount: Decimal,
        paid_on: datetime,
    ) -> Optional[Account]:
        """Atomically append one installment and add it to ``paid``.

        Returns the updated account, or None when the owner has no account.
        Raises ValidationError when ``paid`` would pass MAX_MONEY.
        Must not be implemented as read-then-write in application code.
        """

        raise NotImplementedError

    def list_by_kind(self, kind: AccountKind) -> Sequence[Account]:
        raise NotImplementedError
