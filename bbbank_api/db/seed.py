from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from bbbank_api.db.models import Account, Transaction, User
from bbbank_api.services.transaction_service import add_months

logger = logging.getLogger(__name__)

_DEMO_USERS = [
    # (user id, first, last, email, account number, opening deposit, monthly deposit, monthly withdrawal)
    ("aa45e3c9-261d-41fe-a1b0-5b4dcf79cfd3", "Nadia", "Karim", "nadia.karim@example.com", "0001-1001", "5000", "1500", "-950"),
    ("c6a8c2a1-3f0e-4a35-9f0b-2d1d3c9e1c55", "Omar", "Haddad", "omar.haddad@example.com", "0002-2002", "12000", "3200", "-2750"),
]


def seed_demo_data(db: Session, now: datetime | None = None) -> int:
    """
    Insert two demo users with one account each and a year of monthly activity.

    No-op when any user already exists. Returns the number of transactions inserted.
    """
    if db.execute(select(func.count()).select_from(User)).scalar_one() > 0:
        logger.info("seed.skipped", extra={"reason": "users already present"})
        return 0

    now = now or datetime.now(timezone.utc).replace(tzinfo=None)
    inserted = 0
    for user_id, first, last, email, account_number, opening, deposit, withdrawal in _DEMO_USERS:
        user = User(id=user_id, first_name=first, last_name=last, email=email)
        account = Account(
            account_number=account_number,
            title=f"{first} {last}",
            account_status="active",
            user=user,
        )
        db.add_all([user, account])

        balance = Decimal(opening)
        account.transactions.append(
            Transaction(transaction_type="deposit", transaction_date=add_months(now, -13), transaction_amount=balance)
        )
        inserted += 1
        for months_back in range(11, -1, -1):
            window_start = add_months(now, -months_back - 1)
            window_end = add_months(now, -months_back)
            # Mid-window dates keep each pair inside a single monthly bucket.
            moment = window_start + (window_end - window_start) / 2
            account.transactions.append(
                Transaction(transaction_type="deposit", transaction_date=moment, transaction_amount=Decimal(deposit))
            )
            account.transactions.append(
                Transaction(transaction_type="withdrawal", transaction_date=moment, transaction_amount=Decimal(withdrawal))
            )
            balance += Decimal(deposit) + Decimal(withdrawal)
            inserted += 2
        account.current_balance = balance

    db.commit()
    logger.info("seed.complete", extra={"transactions": inserted})
    return inserted
