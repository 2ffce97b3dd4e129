from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from sqlmodel import Session

from ..core.clock import Clock, utc_now
from ..core.db import atomic
from ..core.errors import InactiveAccountError, InsufficientFundsError, ValidationError
from ..models import (
    MAX_MONEY,
    AccountModel,
    AccountStatus,
    TransactionModel,
    TransactionType,
)
from .accounts import AccountService
from .repository import TransactionRepository


logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
DEFAULT_RECENT_LIMIT = 10
DEFAULT_DESCRIPTIONS = {
    TransactionType.DEPOSIT: "Cash deposit",
    TransactionType.WITHDRAWAL: "Cash withdrawal",
}


class LedgerService:
    def __init__(
        self,
        session: Session,
        accounts: Optional[AccountService] = None,
        repository: Optional[TransactionRepository] = None,
        clock: Clock = utc_now,
        recent_limit: int = DEFAULT_RECENT_LIMIT,
    ) -> None:
        self.session = session
        self.accounts = accounts or AccountService(session, clock=clock)
        self.repository = repository or TransactionRepository(session)
        self.clock = clock
        self.recent_limit = recent_limit

    # ------------------------------------------------------------------
    # Helper utilities
    # ------------------------------------------------------------------
    def _validate_amount(self, amount: Any) -> Decimal:
        try:
            value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid amount: {amount!r}") from exc

        if not value.is_finite() or value <= 0:
            raise ValidationError("Amount must be greater than 0")
        try:
            quantized = value.quantize(CENT)
        except InvalidOperation as exc:
            raise ValidationError(f"Amount out of range: {value}") from exc
        if value != quantized:
            raise ValidationError("Amount must have at most two decimal places")
        if quantized > MAX_MONEY:
            raise ValidationError(f"Amount must not exceed {MAX_MONEY}")
        return quantized

    def _require_active(self, account: AccountModel, action: str) -> None:
        if account.status != AccountStatus.ACTIVE:
            raise InactiveAccountError(
                f"Cannot {action} non-active account: {account.account_number}"
            )

    def _append(
        self,
        account_number: str,
        transaction_type: TransactionType,
        amount: Decimal,
        balance_after: Decimal,
        description: Optional[str],
    ) -> TransactionModel:
        transaction = TransactionModel(
            account_number=account_number,
            transaction_type=transaction_type,
            amount=amount,
            balance_after=balance_after,
            description=description or DEFAULT_DESCRIPTIONS[transaction_type],
            created_at=self.clock(),
        )
        return self.repository.save(transaction)

    # ------------------------------------------------------------------
    # Money movement
    # ------------------------------------------------------------------
    def deposit(
        self,
        account_number: str,
        amount: Any,
        description: Optional[str] = None,
    ) -> TransactionModel:
        amount = self._validate_amount(amount)

        with atomic(self.session):
            account = self.accounts.lock_account(account_number)
            self._require_active(account, "deposit to")

            new_balance = account.balance + amount
            self.accounts.update_balance(account_number, new_balance)
            transaction = self._append(
                account_number, TransactionType.DEPOSIT, amount, new_balance, description
            )

        logger.info(
            "account.deposit",
            extra={
                "account_number": account_number,
                "amount": str(amount),
                "balance": str(new_balance),
            },
        )
        return transaction

    def withdraw(
        self,
        account_number: str,
        amount: Any,
        description: Optional[str] = None,
    ) -> TransactionModel:
        amount = self._validate_amount(amount)

        with atomic(self.session):
            account = self.accounts.lock_account(account_number)
            self._require_active(account, "withdraw from")

            if amount > account.balance:
                logger.warning(
                    "account.withdraw.rejected",
                    extra={
                        "account_number": account_number,
                        "amount": str(amount),
                        "balance": str(account.balance),
                    },
                )
                raise InsufficientFundsError(
                    f"Insufficient balance. Available: {account.balance}, Requested: {amount}"
                )

            new_balance = account.balance - amount
            self.accounts.update_balance(account_number, new_balance)
            transaction = self._append(
                account_number, TransactionType.WITHDRAWAL, amount, new_balance, description
            )

        logger.info(
            "account.withdraw",
            extra={
                "account_number": account_number,
                "amount": str(amount),
                "balance": str(new_balance),
            },
        )
        return transaction

    # ------------------------------------------------------------------
    # Ledger queries
    # ------------------------------------------------------------------
    def get_transaction_history(self, account_number: str) -> list[TransactionModel]:
        self.accounts.find_by_account_number(account_number)
        return self.repository.list_for_account(account_number)

    def get_recent_transactions(self, account_number: str) -> list[TransactionModel]:
        self.accounts.find_by_account_number(account_number)
        return self.repository.list_for_account(account_number, limit=self.recent_limit)

    def get_transactions_by_type(
        self, account_number: str, transaction_type: TransactionType
    ) -> list[TransactionModel]:
        self.accounts.find_by_account_number(account_number)
        return self.repository.list_for_account(
            account_number, transaction_type=transaction_type
        )

    def get_transaction_count(self, account_number: str) -> int:
        self.accounts.find_by_account_number(account_number)
        return self.repository.count_for_account(account_number)
