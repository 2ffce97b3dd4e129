from fastapi import Depends
from sqlmodel import Session

from ..services import AccountService, CustomerService, LedgerService
from .config import Settings, get_settings
from .db import get_session


def get_customer_service(session: Session = Depends(get_session)) -> CustomerService:
    return CustomerService(session)


def get_account_service(
    session: Session = Depends(get_session),
    customers: CustomerService = Depends(get_customer_service),
    settings: Settings = Depends(get_settings),
) -> AccountService:
    return AccountService(
        session,
        customers,
        max_attempts=settings.account_number_max_attempts,
    )


def get_ledger_service(
    session: Session = Depends(get_session),
    accounts: AccountService = Depends(get_account_service),
    settings: Settings = Depends(get_settings),
) -> LedgerService:
    return LedgerService(
        session,
        accounts,
        recent_limit=settings.recent_transactions_limit,
    )
