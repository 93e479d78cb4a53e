from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..core.constants import MAX_MONEY
from ..core.enums import AccountKind
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, integrity_errors
from .model import Account, Installment
from .repository import LedgerRepository


def _to_account(row: dict, installments: Sequence[Installment]) -> Account:
    return Account(
        account_id=int(row["account_id"]),
        kind=AccountKind(row["kind"]),
        owner_id=int(row["owner_id"]),
        total=Decimal(str(row["total"])),
        paid=Decimal(str(row["paid"])),
        due_date=row["due_date"],
        installments=tuple(installments),
        owner_name=row.get("owner_name"),
    )


def _load_installments(cur, account_id: int) -> list[Installment]:
    cur.execute(
        """
        SELECT amount, paid_on
        FROM ledger_installments
        WHERE account_id=%s
        ORDER BY installment_id
        """,
        (account_id,),
    )
    return [Installment(amount=Decimal(str(r["amount"])), paid_on=r["paid_on"]) for r in fetchall(cur)]


def _load_account(cur, kind: AccountKind, owner_id: int) -> Optional[Account]:
    cur.execute(
        """
        SELECT account_id, kind, owner_id, total, paid, due_date
        FROM ledger_accounts
        WHERE kind=%s AND owner_id=%s
        """,
        (kind.value, int(owner_id)),
    )
    row = fetchone(cur)
    if not row:
        return None
    return _to_account(row, _load_installments(cur, int(row["account_id"])))


class MySQLLedgerRepository(LedgerRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_owner(self, kind: AccountKind, owner_id: int) -> Optional[Account]:
        with db_cursor(self._conn_factory) as (_, cur):
            return _load_account(cur, kind, owner_id)

    def create(self, *, kind: AccountKind, owner_id: int, total: Decimal, due_date: date) -> int:
        with integrity_errors(duplicate_message=f"{kind.value.capitalize()} account already set for this owner"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO ledger_accounts(kind, owner_id, total, paid, due_date)
                    VALUES(%s,%s,%s,0,%s)
                    """,
                    (kind.value, int(owner_id), total, due_date),
                )
                return int(cur.lastrowid)

    def append_installment(
        self,
        *,
        kind: AccountKind,
        owner_id: int,
        amount: Decimal,
        paid_on: datetime,
    ) -> Optional[Account]:
        with db_cursor(self._conn_factory) as (_, cur):
            # Row lock serializes concurrent payments on the same account.
            cur.execute(
                "SELECT account_id, paid FROM ledger_accounts WHERE kind=%s AND owner_id=%s FOR UPDATE",
                (kind.value, int(owner_id)),
            )
            row = fetchone(cur)
            if not row:
                return None
            account_id = int(row["account_id"])
            if Decimal(str(row["paid"])) + amount > MAX_MONEY:
                raise ValidationError("Payment would exceed the largest amount an account can hold")

            cur.execute("UPDATE ledger_accounts SET paid = paid + %s WHERE account_id=%s", (amount, account_id))
            cur.execute(
                "INSERT INTO ledger_installments(account_id, amount, paid_on) VALUES(%s,%s,%s)",
                (account_id, amount, paid_on),
            )
            return _load_account(cur, kind, owner_id)

    def list_by_kind(self, kind: AccountKind) -> Sequence[Account]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT la.account_id, la.kind, la.owner_id, la.total, la.paid, la.due_date,
                       u.full_name AS owner_name
                FROM ledger_accounts la
                JOIN users u ON u.user_id = la.owner_id
                WHERE la.kind=%s
                ORDER BY u.full_name
                """,
                (kind.value,),
            )
            accounts = fetchall(cur)

            cur.execute(
                """
                SELECT li.account_id, li.amount, li.paid_on
                FROM ledger_installments li
                JOIN ledger_accounts la ON la.account_id = li.account_id
                WHERE la.kind=%s
                ORDER BY li.installment_id
                """,
                (kind.value,),
            )
            by_account: dict[int, list[Installment]] = defaultdict(list)
            for r in fetchall(cur):
                by_account[int(r["account_id"])].append(Installment(amount=Decimal(str(r["amount"])), paid_on=r["paid_on"]))

            return [_to_account(r, by_account.get(int(r["account_id"]), [])) for r in accounts]
