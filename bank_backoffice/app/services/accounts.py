from __future__ import annotations

import logging
import random
from decimal import Decimal
from typing import Optional

from sqlmodel import Session

from ..core.clock import Clock, epoch_millis, utc_now
from ..core.db import atomic
from ..core.errors import (
    AccountNotFoundError,
    AlreadyClosedError,
    GenerationError,
    InactiveAccountError,
    InsufficientFundsError,
    NonZeroBalanceError,
    ValidationError,
)
from ..models import MAX_MONEY, AccountModel, AccountStatus, AccountType
from .customers import CustomerService
from .repository import AccountRepository


logger = logging.getLogger(__name__)

ACCOUNT_NUMBER_PREFIX = "ACC"
DEFAULT_MAX_ATTEMPTS = 10
ZERO = Decimal("0.00")


class AccountService:
    """Account lifecycle and the single place where balances change.

    Mutating methods either open their own unit of work (``create_account``,
    ``close_account``) or expect to run inside the caller's
    (``update_balance``, ``lock_account``).
    """

    def __init__(
        self,
        session: Session,
        customers: Optional[CustomerService] = None,
        repository: Optional[AccountRepository] = None,
        clock: Clock = utc_now,
        rng: Optional[random.Random] = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        self.session = session
        self.customers = customers or CustomerService(session, clock=clock)
        self.repository = repository or AccountRepository(session)
        self.clock = clock
        self.rng = rng or random.Random()
        self.max_attempts = max_attempts

    # ------------------------------------------------------------------
    # Helper utilities
    # ------------------------------------------------------------------
    def _generate_account_number(self) -> str:
        for attempt in range(1, self.max_attempts + 1):
            candidate = (
                f"{ACCOUNT_NUMBER_PREFIX}{epoch_millis(self.clock())}"
                f"{self.rng.randrange(1000):03d}"
            )
            if not self.repository.exists(candidate):
                logger.debug(
                    "account.number.generated",
                    extra={"account_number": candidate, "attempts": attempt},
                )
                return candidate

        logger.error(
            "account.number.exhausted", extra={"attempts": self.max_attempts}
        )
        raise GenerationError("Unable to generate unique account number")

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def create_account(self, customer_id: int, account_type: AccountType) -> AccountModel:
        customer = self.customers.find_customer_by_id(customer_id)

        with atomic(self.session):
            now = self.clock()
            account = AccountModel(
                account_number=self._generate_account_number(),
                customer_id=customer.id,
                account_type=account_type,
                balance=ZERO,
                status=AccountStatus.ACTIVE,
                created_at=now,
                updated_at=now,
            )
            self.repository.save(account)

        logger.info(
            "account.created",
            extra={
                "account_number": account.account_number,
                "customer_id": customer_id,
                "account_type": account_type.value,
            },
        )
        return account

    def find_by_account_number(self, account_number: str) -> AccountModel:
        account = self.repository.get(account_number)
        if account is None:
            raise AccountNotFoundError(f"Account not found: {account_number}")
        return account

    def lock_account(self, account_number: str) -> AccountModel:
        account = self.repository.get_for_update(account_number)
        if account is None:
            raise AccountNotFoundError(f"Account not found: {account_number}")
        return account

    def close_account(self, account_number: str) -> AccountModel:
        with atomic(self.session):
            account = self.lock_account(account_number)

            if account.status == AccountStatus.CLOSED:
                raise AlreadyClosedError(f"Account is already closed: {account_number}")
            if account.balance != 0:
                sign = "positive" if account.balance > 0 else "negative"
                logger.warning(
                    "account.close.rejected",
                    extra={"account_number": account_number, "balance": str(account.balance)},
                )
                raise NonZeroBalanceError(
                    f"Cannot close account with {sign} balance. Current balance: {account.balance}"
                )

            account.status = AccountStatus.CLOSED
            account.updated_at = self.clock()
            self.repository.save(account)

        logger.info("account.closed", extra={"account_number": account_number})
        return account

    def update_balance(self, account_number: str, new_balance: Decimal) -> AccountModel:
        account = self.lock_account(account_number)

        if account.status != AccountStatus.ACTIVE:
            raise InactiveAccountError(
                f"Cannot update balance for non-active account: {account_number}"
            )
        if new_balance < 0:
            raise InsufficientFundsError(
                f"Balance cannot become negative for account: {account_number}"
            )
        if new_balance > MAX_MONEY:
            raise ValidationError(
                f"Balance would exceed {MAX_MONEY} for account: {account_number}"
            )

        account.balance = new_balance
        account.updated_at = self.clock()
        return self.repository.save(account)

    def find_accounts_by_customer_id(self, customer_id: int) -> list[AccountModel]:
        self.customers.find_customer_by_id(customer_id)
        accounts = self.repository.find_by_customer_id(customer_id)
        logger.debug(
            "account.list", extra={"customer_id": customer_id, "count": len(accounts)}
        )
        return accounts

    def find_active_accounts_by_customer_id(self, customer_id: int) -> list[AccountModel]:
        # Unlike find_accounts_by_customer_id this does not check that the
        # customer exists; an unknown id yields an empty list.
        return self.repository.find_active_by_customer_id(customer_id)
