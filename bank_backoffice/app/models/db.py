from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlmodel import Field, SQLModel

from ..core.clock import utc_now
from .enums import AccountStatus, AccountType, TransactionType

MONEY_MAX_DIGITS = 15
MONEY_DECIMAL_PLACES = 2
MAX_MONEY = Decimal(10) ** (MONEY_MAX_DIGITS - MONEY_DECIMAL_PLACES) - Decimal("0.01")


class Customer(SQLModel, table=True):
    __tablename__ = "customers"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=100, index=True)
    email: Optional[str] = Field(default=None, max_length=100, unique=True)
    phone: Optional[str] = Field(default=None, max_length=20)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class Account(SQLModel, table=True):
    __tablename__ = "accounts"

    account_number: str = Field(primary_key=True, max_length=20)
    customer_id: int = Field(foreign_key="customers.id", index=True)
    account_type: AccountType
    balance: Decimal = Field(
        default=Decimal("0.00"),
        max_digits=MONEY_MAX_DIGITS,
        decimal_places=MONEY_DECIMAL_PLACES,
    )
    status: AccountStatus = Field(default=AccountStatus.ACTIVE)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class Transaction(SQLModel, table=True):
    __tablename__ = "transactions"

    id: Optional[int] = Field(default=None, primary_key=True)
    account_number: str = Field(foreign_key="accounts.account_number", index=True)
    transaction_type: TransactionType
    amount: Decimal = Field(max_digits=MONEY_MAX_DIGITS, decimal_places=MONEY_DECIMAL_PLACES)
    balance_after: Decimal = Field(max_digits=MONEY_MAX_DIGITS, decimal_places=MONEY_DECIMAL_PLACES)
    description: Optional[str] = Field(default=None, max_length=255)
    created_at: datetime = Field(default_factory=utc_now, index=True)
