from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Numeric, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def _new_id() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    pass


class BaseEntity(Base):
    """Every stored entity is addressed by an opaque string key."""

    __abstract__ = True

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)


class User(BaseEntity):
    __tablename__ = "users"

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(320), unique=True, index=True, nullable=False)

    accounts: Mapped[list["Account"]] = relationship(back_populates="user")


class Account(BaseEntity):
    __tablename__ = "accounts"

    account_number: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    current_balance: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False, default=Decimal("0"))
    account_status: Mapped[str] = mapped_column(String(16), nullable=False, default="active")
    user_id: Mapped[str] = mapped_column(String(64), ForeignKey("users.id"), index=True, nullable=False)

    user: Mapped["User"] = relationship(back_populates="accounts")
    transactions: Mapped[list["Transaction"]] = relationship(back_populates="account", cascade="all, delete-orphan")


class Transaction(BaseEntity):
    __tablename__ = "transactions"

    # "deposit" or "withdrawal"; withdrawals carry a negative amount.
    transaction_type: Mapped[str] = mapped_column(String(16), nullable=False)
    # Naive UTC.
    transaction_date: Mapped[datetime] = mapped_column(DateTime, index=True, nullable=False)
    transaction_amount: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    account_id: Mapped[str] = mapped_column(String(64), ForeignKey("accounts.id", ondelete="CASCADE"), index=True, nullable=False)

    account: Mapped["Account"] = relationship(back_populates="transactions")
