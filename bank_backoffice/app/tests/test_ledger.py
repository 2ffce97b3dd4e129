import random
from decimal import Decimal

import pytest

from ..core.errors import (
    AccountNotFoundError,
    InactiveAccountError,
    InsufficientFundsError,
    NonZeroBalanceError,
    ValidationError,
)
from ..models import MAX_MONEY, AccountStatus, AccountType, TransactionType
from ..services import AccountService, CustomerService, LedgerService


@pytest.fixture
def account_number(customer_service: CustomerService, account_service: AccountService) -> str:
    customer = customer_service.create_customer("Ada Lovelace", "ada@example.com")
    return account_service.create_account(customer.id, AccountType.SAVINGS).account_number


def _balance(account_service: AccountService, account_number: str) -> Decimal:
    return account_service.find_by_account_number(account_number).balance


def test_ada_lovelace_account_lifecycle(
    customer_service: CustomerService,
    account_service: AccountService,
    ledger_service: LedgerService,
) -> None:
    ada = customer_service.create_customer("Ada Lovelace")
    account = account_service.create_account(ada.id, AccountType.SAVINGS)
    number = account.account_number
    assert account.balance == Decimal("0.00")
    assert account.status == AccountStatus.ACTIVE

    deposit = ledger_service.deposit(number, Decimal("100.00"))
    assert deposit.transaction_type == TransactionType.DEPOSIT
    assert _balance(account_service, number) == Decimal("100.00")
    assert ledger_service.get_transaction_count(number) == 1

    withdrawal = ledger_service.withdraw(number, Decimal("40.00"))
    assert withdrawal.transaction_type == TransactionType.WITHDRAWAL
    assert _balance(account_service, number) == Decimal("60.00")
    assert len(ledger_service.get_transactions_by_type(number, TransactionType.WITHDRAWAL)) == 1

    with pytest.raises(InsufficientFundsError):
        ledger_service.withdraw(number, Decimal("1000.00"))
    assert _balance(account_service, number) == Decimal("60.00")

    with pytest.raises(NonZeroBalanceError):
        account_service.close_account(number)

    ledger_service.withdraw(number, Decimal("60.00"))
    assert _balance(account_service, number) == Decimal("0.00")

    closed = account_service.close_account(number)
    assert closed.status == AccountStatus.CLOSED


def test_deposit_records_transaction(
    ledger_service: LedgerService, account_service: AccountService, account_number: str
) -> None:
    transaction = ledger_service.deposit(account_number, Decimal("25.10"), "Payroll")

    assert transaction.id is not None
    assert transaction.account_number == account_number
    assert transaction.amount == Decimal("25.10")
    assert transaction.balance_after == Decimal("25.10")
    assert transaction.description == "Payroll"
    assert _balance(account_service, account_number) == Decimal("25.10")


def test_default_descriptions(ledger_service: LedgerService, account_number: str) -> None:
    deposit = ledger_service.deposit(account_number, Decimal("10.00"))
    withdrawal = ledger_service.withdraw(account_number, Decimal("5.00"), "")

    assert deposit.description == "Cash deposit"
    assert withdrawal.description == "Cash withdrawal"


def test_withdraw_exact_balance_zeroes_account(
    ledger_service: LedgerService, account_service: AccountService, account_number: str
) -> None:
    ledger_service.deposit(account_number, Decimal("42.42"))

    transaction = ledger_service.withdraw(account_number, Decimal("42.42"))

    assert transaction.balance_after == Decimal("0.00")
    assert _balance(account_service, account_number) == Decimal("0.00")


def test_overdraw_leaves_balance_and_ledger_untouched(
    ledger_service: LedgerService, account_service: AccountService, account_number: str
) -> None:
    ledger_service.deposit(account_number, Decimal("10.00"))

    with pytest.raises(InsufficientFundsError):
        ledger_service.withdraw(account_number, Decimal("10.01"))

    assert _balance(account_service, account_number) == Decimal("10.00")
    assert ledger_service.get_transaction_count(account_number) == 1


@pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-5.00"), Decimal("1.005"), "abc", "NaN"])
def test_invalid_amounts_are_rejected(
    ledger_service: LedgerService, account_number: str, amount
) -> None:
    with pytest.raises(ValidationError):
        ledger_service.deposit(account_number, amount)
    with pytest.raises(ValidationError):
        ledger_service.withdraw(account_number, amount)

    assert ledger_service.get_transaction_count(account_number) == 0


def test_amount_given_as_string_is_exact(
    ledger_service: LedgerService, account_number: str
) -> None:
    transaction = ledger_service.deposit(account_number, "0.10")
    transaction = ledger_service.deposit(account_number, "0.20")

    assert transaction.balance_after == Decimal("0.30")


def test_money_movement_on_closed_account(
    ledger_service: LedgerService, account_service: AccountService, account_number: str
) -> None:
    account_service.close_account(account_number)

    with pytest.raises(InactiveAccountError):
        ledger_service.deposit(account_number, Decimal("1.00"))
    with pytest.raises(InactiveAccountError):
        ledger_service.withdraw(account_number, Decimal("1.00"))

    assert ledger_service.get_transaction_count(account_number) == 0


def test_money_movement_on_unknown_account(ledger_service: LedgerService) -> None:
    with pytest.raises(AccountNotFoundError):
        ledger_service.deposit("ACC404", Decimal("1.00"))
    with pytest.raises(AccountNotFoundError):
        ledger_service.withdraw("ACC404", Decimal("1.00"))


def test_history_is_newest_first(ledger_service: LedgerService, account_number: str) -> None:
    for amount in ("100.00", "200.00", "300.00"):
        ledger_service.deposit(account_number, Decimal(amount))

    history = ledger_service.get_transaction_history(account_number)

    assert [t.amount for t in history] == [Decimal("300.00"), Decimal("200.00"), Decimal("100.00")]


def test_recent_transactions_are_capped(ledger_service: LedgerService, account_number: str) -> None:
    for cents in range(1, 13):
        ledger_service.deposit(account_number, Decimal(cents))

    recent = ledger_service.get_recent_transactions(account_number)

    assert len(recent) == 10
    assert [t.amount for t in recent] == [Decimal(n) for n in range(12, 2, -1)]
    assert ledger_service.get_transaction_count(account_number) == 12


def test_transactions_by_type(ledger_service: LedgerService, account_number: str) -> None:
    ledger_service.deposit(account_number, Decimal("50.00"))
    ledger_service.withdraw(account_number, Decimal("20.00"))
    ledger_service.deposit(account_number, Decimal("5.00"))

    deposits = ledger_service.get_transactions_by_type(account_number, TransactionType.DEPOSIT)
    withdrawals = ledger_service.get_transactions_by_type(account_number, TransactionType.WITHDRAWAL)

    assert [t.amount for t in deposits] == [Decimal("5.00"), Decimal("50.00")]
    assert [t.amount for t in withdrawals] == [Decimal("20.00")]


@pytest.mark.parametrize(
    "query",
    ["get_transaction_history", "get_recent_transactions", "get_transaction_count"],
)
def test_ledger_queries_require_known_account(ledger_service: LedgerService, query: str) -> None:
    with pytest.raises(AccountNotFoundError):
        getattr(ledger_service, query)("ACC404")


def test_deposit_then_withdraw_restores_balance(
    ledger_service: LedgerService, account_service: AccountService, account_number: str
) -> None:
    ledger_service.deposit(account_number, Decimal("13.37"))
    before = _balance(account_service, account_number)

    ledger_service.deposit(account_number, Decimal("0.01"))
    ledger_service.withdraw(account_number, Decimal("0.01"))

    assert _balance(account_service, account_number) == before


@pytest.mark.parametrize("seed", [1, 7, 42, 2024])
def test_random_operations_keep_balance_consistent(
    ledger_service: LedgerService,
    account_service: AccountService,
    account_number: str,
    seed: int,
) -> None:
    rng = random.Random(seed)
    expected = Decimal("0.00")

    for _ in range(40):
        amount = Decimal(rng.randint(1, 50000)) / 100
        count_before = ledger_service.get_transaction_count(account_number)

        if rng.random() < 0.5:
            transaction = ledger_service.deposit(account_number, amount)
            expected += amount
        else:
            try:
                transaction = ledger_service.withdraw(account_number, amount)
            except InsufficientFundsError:
                assert amount > expected
                assert _balance(account_service, account_number) == expected
                assert ledger_service.get_transaction_count(account_number) == count_before
                continue
            expected -= amount

        balance = _balance(account_service, account_number)
        assert balance >= 0
        assert balance == expected
        assert transaction.balance_after == balance
        assert ledger_service.get_transaction_count(account_number) == count_before + 1


def test_amount_beyond_column_capacity_is_rejected(
    ledger_service: LedgerService, account_service: AccountService, account_number: str
) -> None:
    with pytest.raises(ValidationError, match="must not exceed"):
        ledger_service.deposit(account_number, Decimal("123456789012345678.91"))
    with pytest.raises(ValidationError):
        ledger_service.withdraw(account_number, Decimal("10000000000000.00"))

    assert _balance(account_service, account_number) == Decimal("0.00")
    assert ledger_service.get_transaction_count(account_number) == 0


def test_largest_amount_is_stored_exactly(
    ledger_service: LedgerService, account_service: AccountService, account_number: str
) -> None:
    transaction = ledger_service.deposit(account_number, MAX_MONEY)

    assert transaction.balance_after == Decimal("9999999999999.99")
    assert _balance(account_service, account_number) == Decimal("9999999999999.99")


def test_deposit_that_would_overflow_balance_is_rolled_back(
    ledger_service: LedgerService, account_service: AccountService, account_number: str
) -> None:
    ledger_service.deposit(account_number, Decimal("1.00"))

    with pytest.raises(ValidationError, match="Balance would exceed"):
        ledger_service.deposit(account_number, MAX_MONEY)

    assert _balance(account_service, account_number) == Decimal("1.00")
    assert ledger_service.get_transaction_count(account_number) == 1
