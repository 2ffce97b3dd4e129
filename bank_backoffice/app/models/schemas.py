from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .enums import AccountStatus, AccountType, TransactionType


class CustomerCreate(BaseModel):
    name: str = Field(..., description="Full name of the customer")
    email: Optional[str] = Field(default=None, description="Unique contact email")
    phone: Optional[str] = Field(default=None, description="Contact phone number")


class CustomerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    created_at: datetime


class AccountCreate(BaseModel):
    customer_id: int
    account_type: AccountType


class AccountResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    account_number: str
    customer_id: int
    customer_name: Optional[str] = Field(default=None, description="Name of the account holder")
    account_type: AccountType
    balance: Decimal
    status: AccountStatus
    created_at: datetime

    @classmethod
    def from_records(cls, account, customer=None) -> "AccountResponse":
        response = cls.model_validate(account)
        if customer is not None:
            response.customer_name = customer.name
        return response


class TransactionRequest(BaseModel):
    account_number: str = Field(..., min_length=1)
    amount: Decimal = Field(..., description="Positive amount with at most two decimal places")
    description: Optional[str] = Field(
        default=None,
        max_length=255,
        description="Narrative to display on the statement",
    )


class TransactionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    account_number: str
    transaction_type: TransactionType
    amount: Decimal
    balance_after: Decimal
    description: Optional[str] = None
    created_at: datetime
