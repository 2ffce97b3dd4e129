from .accounts import AccountService
from .customers import CustomerService
from .ledger import LedgerService
from .repository import (
    AccountRepository,
    CustomerRepository,
    SQLModelRepository,
    TransactionRepository,
)

__all__ = [
    "AccountService",
    "CustomerService",
    "LedgerService",
    "AccountRepository",
    "CustomerRepository",
    "SQLModelRepository",
    "TransactionRepository",
]
