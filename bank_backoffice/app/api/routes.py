from fastapi import APIRouter, Depends, Query, status

from ..core.dependencies import (
    get_account_service,
    get_customer_service,
    get_ledger_service,
)
from ..models import (
    AccountCreate,
    AccountResponse,
    CustomerCreate,
    CustomerResponse,
    TransactionRequest,
    TransactionResponse,
    TransactionType,
)
from ..services import AccountService, CustomerService, LedgerService


customer_router = APIRouter(prefix="/api/customers", tags=["customers"])

@customer_router.post("", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
def create_customer(
    payload: CustomerCreate,
    service: CustomerService = Depends(get_customer_service),
) -> CustomerResponse:
    customer = service.create_customer(payload.name, payload.email, payload.phone)
    return CustomerResponse.model_validate(customer)

@customer_router.get("", response_model=list[CustomerResponse])
def list_customers(
    service: CustomerService = Depends(get_customer_service),
) -> list[CustomerResponse]:
    return [CustomerResponse.model_validate(c) for c in service.find_all_customers()]

@customer_router.get("/search", response_model=list[CustomerResponse])
def search_customers(
    name: str = Query(...),
    service: CustomerService = Depends(get_customer_service),
) -> list[CustomerResponse]:
    return [CustomerResponse.model_validate(c) for c in service.find_customers_by_name(name)]

@customer_router.get("/count", response_model=int)
def count_customers(
    service: CustomerService = Depends(get_customer_service),
) -> int:
    return service.get_customer_count()

@customer_router.get("/{customer_id}", response_model=CustomerResponse)
def get_customer(
    customer_id: int,
    service: CustomerService = Depends(get_customer_service),
) -> CustomerResponse:
    return CustomerResponse.model_validate(service.find_customer_by_id(customer_id))


account_router = APIRouter(prefix="/api/accounts", tags=["accounts"])

@account_router.post("", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
def create_account(
    payload: AccountCreate,
    service: AccountService = Depends(get_account_service),
) -> AccountResponse:
    account = service.create_account(payload.customer_id, payload.account_type)
    customer = service.customers.find_customer_by_id(account.customer_id)
    return AccountResponse.from_records(account, customer)

@account_router.get("/{account_number}", response_model=AccountResponse)
def get_account(
    account_number: str,
    service: AccountService = Depends(get_account_service),
) -> AccountResponse:
    account = service.find_by_account_number(account_number)
    customer = service.customers.find_customer_by_id(account.customer_id)
    return AccountResponse.from_records(account, customer)

@account_router.put("/{account_number}/close", response_model=AccountResponse)
def close_account(
    account_number: str,
    service: AccountService = Depends(get_account_service),
) -> AccountResponse:
    account = service.close_account(account_number)
    customer = service.customers.find_customer_by_id(account.customer_id)
    return AccountResponse.from_records(account, customer)

@account_router.get("/customer/{customer_id}", response_model=list[AccountResponse])
def list_customer_accounts(
    customer_id: int,
    service: AccountService = Depends(get_account_service),
) -> list[AccountResponse]:
    accounts = service.find_accounts_by_customer_id(customer_id)
    customer = service.customers.find_customer_by_id(customer_id)
    return [AccountResponse.from_records(account, customer) for account in accounts]

@account_router.get("/customer/{customer_id}/active", response_model=list[AccountResponse])
def list_active_customer_accounts(
    customer_id: int,
    service: AccountService = Depends(get_account_service),
) -> list[AccountResponse]:
    accounts = service.find_active_accounts_by_customer_id(customer_id)
    if not accounts:
        return []
    customer = service.customers.find_customer_by_id(customer_id)
    return [AccountResponse.from_records(account, customer) for account in accounts]


transaction_router = APIRouter(prefix="/api/transactions", tags=["transactions"])

@transaction_router.post("/deposit", response_model=TransactionResponse)
def deposit(
    payload: TransactionRequest,
    service: LedgerService = Depends(get_ledger_service),
) -> TransactionResponse:
    transaction = service.deposit(payload.account_number, payload.amount, payload.description)
    return TransactionResponse.model_validate(transaction)

@transaction_router.post("/withdraw", response_model=TransactionResponse)
def withdraw(
    payload: TransactionRequest,
    service: LedgerService = Depends(get_ledger_service),
) -> TransactionResponse:
    transaction = service.withdraw(payload.account_number, payload.amount, payload.description)
    return TransactionResponse.model_validate(transaction)

@transaction_router.get("/account/{account_number}", response_model=list[TransactionResponse])
def get_transaction_history(
    account_number: str,
    service: LedgerService = Depends(get_ledger_service),
) -> list[TransactionResponse]:
    return [
        TransactionResponse.model_validate(t)
        for t in service.get_transaction_history(account_number)
    ]

@transaction_router.get("/account/{account_number}/recent", response_model=list[TransactionResponse])
def get_recent_transactions(
    account_number: str,
    service: LedgerService = Depends(get_ledger_service),
) -> list[TransactionResponse]:
    return [
        TransactionResponse.model_validate(t)
        for t in service.get_recent_transactions(account_number)
    ]

@transaction_router.get(
    "/account/{account_number}/type/{transaction_type}",
    response_model=list[TransactionResponse],
)
def get_transactions_by_type(
    account_number: str,
    transaction_type: TransactionType,
    service: LedgerService = Depends(get_ledger_service),
) -> list[TransactionResponse]:
    return [
        TransactionResponse.model_validate(t)
        for t in service.get_transactions_by_type(account_number, transaction_type)
    ]

@transaction_router.get("/account/{account_number}/count", response_model=int)
def get_transaction_count(
    account_number: str,
    service: LedgerService = Depends(get_ledger_service),
) -> int:
    return service.get_transaction_count(account_number)

__all__ = ["customer_router", "account_router", "transaction_router"]
