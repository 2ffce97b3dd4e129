from .db import MAX_MONEY
from .db import Account as AccountModel
from .db import Customer as CustomerModel
from .db import Transaction as TransactionModel
from .enums import AccountStatus, AccountType, TransactionType
from .schemas import (
    AccountCreate,
    AccountResponse,
    CustomerCreate,
    CustomerResponse,
    TransactionRequest,
    TransactionResponse,
)

__all__ = [
    "AccountCreate",
    "AccountResponse",
    "CustomerCreate",
    "CustomerResponse",
    "TransactionRequest",
    "TransactionResponse",
    "AccountStatus",
    "AccountType",
    "TransactionType",
    "MAX_MONEY",
    "AccountModel",
    "CustomerModel",
    "TransactionModel",
]
