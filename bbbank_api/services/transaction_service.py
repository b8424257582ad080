from __future__ import annotations

import calendar
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable, Protocol

from sqlalchemy import select
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from bbbank_api.db.models import Account, Transaction, User
from bbbank_api.models.schemas import BalanceReport

MONTHS_OF_HISTORY = 12

# Fixed English abbreviations; strftime("%b") follows the process locale.
_MONTH_ABBREVIATIONS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

logger = logging.getLogger(__name__)


class UserNotFoundError(ValueError):
    pass


class TransactionServiceProtocol(Protocol):
    async def get_last_12_month_balances(self, user_id: str | None) -> BalanceReport: ...


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def add_months(moment: datetime, months: int) -> datetime:
    """Shift by whole calendar months, clamping the day to the target month's length."""
    month_index = moment.year * 12 + (moment.month - 1) + months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def month_label(moment: datetime) -> str:
    return f"{_MONTH_ABBREVIATIONS[moment.month - 1]} {moment.year}"


def build_balance_report(rows: list[tuple[datetime, Decimal]], now: datetime) -> BalanceReport:
    """
    Roll transactions up into month-end running balances for the trailing year.

    The running figure starts at zero at the beginning of the window; the total is
    taken over every row, including ones older than the window.
    """
    if not rows:
        return BalanceReport()

    total_balance = sum((Decimal(amount) for _, amount in rows), Decimal("0"))
    figures: list[Decimal] = []
    labels: list[str] = []
    running = Decimal("0")
    for i in range(MONTHS_OF_HISTORY, 0, -1):
        window_start = add_months(now, -i)
        window_end = add_months(now, -i + 1)
        running += sum(
            (Decimal(amount) for moment, amount in rows if window_start <= moment < window_end),
            Decimal("0"),
        )
        figures.append(running)
        labels.append(month_label(window_end))

    return BalanceReport(figures=figures, labels=labels, total_balance=total_balance)


class TransactionService:
    """Balance reporting over the transactions table."""

    def __init__(self, db: Session, clock: Callable[[], datetime] = _utcnow) -> None:
        self._db = db
        self._clock = clock

    async def get_last_12_month_balances(self, user_id: str | None) -> BalanceReport:
        rows = await run_in_threadpool(self._load_rows, user_id)
        return build_balance_report(rows, now=self._clock())

    def _load_rows(self, user_id: str | None) -> list[tuple[datetime, Decimal]]:
        stmt = select(Transaction.transaction_date, Transaction.transaction_amount)
        if user_id is not None:
            if self._db.get(User, user_id) is None:
                raise UserNotFoundError(f"User '{user_id}' not found")
            stmt = stmt.join(Account, Transaction.account_id == Account.id).where(Account.user_id == user_id)

        rows = [(moment, amount) for moment, amount in self._db.execute(stmt).all()]
        logger.debug("balances.rows_loaded", extra={"user_id": user_id, "row_count": len(rows)})
        return rows
