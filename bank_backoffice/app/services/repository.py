from __future__ import annotations

from typing import Any, Generic, Optional, TypeVar

from sqlalchemy import func
from sqlmodel import Session, SQLModel, col, select

from ..models import (
    AccountModel,
    AccountStatus,
    CustomerModel,
    TransactionModel,
    TransactionType,
)

RecordT = TypeVar("RecordT", bound=SQLModel)


class SQLModelRepository(Generic[RecordT]):
    """Thin data access layer around the SQLModel session for one table."""

    model: type[RecordT]

    def __init__(self, session: Session) -> None:
        self.session = session

    def _primary_key(self):
        return self.model.__table__.primary_key.columns.values()[0]

    def get(self, key: Any) -> Optional[RecordT]:
        return self.session.get(self.model, key)

    def save(self, record: RecordT) -> RecordT:
        self.session.add(record)
        self.session.flush()
        self.session.refresh(record)
        return record

    def exists(self, key: Any) -> bool:
        stmt = select(self._primary_key()).where(self._primary_key() == key)
        return self.session.exec(stmt).first() is not None

    def find_by(self, **fields: Any) -> list[RecordT]:
        stmt = select(self.model).filter_by(**fields).order_by(self._primary_key())
        return list(self.session.exec(stmt))

    def count(self) -> int:
        stmt = select(func.count()).select_from(self.model)
        return self.session.exec(stmt).one()


class CustomerRepository(SQLModelRepository[CustomerModel]):
    model = CustomerModel

    def exists_by_email(self, email: str) -> bool:
        stmt = select(CustomerModel.id).where(CustomerModel.email == email)
        return self.session.exec(stmt).first() is not None

    def find_by_name_containing(self, term: str) -> list[CustomerModel]:
        stmt = (
            select(CustomerModel)
            .where(func.lower(CustomerModel.name).contains(term.lower(), autoescape=True))
            .order_by(CustomerModel.id)
        )
        return list(self.session.exec(stmt))


class AccountRepository(SQLModelRepository[AccountModel]):
    model = AccountModel

    def get_for_update(self, account_number: str) -> Optional[AccountModel]:
        stmt = (
            select(AccountModel)
            .where(AccountModel.account_number == account_number)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return self.session.exec(stmt).first()

    def find_by_customer_id(self, customer_id: int) -> list[AccountModel]:
        return self.find_by(customer_id=customer_id)

    def find_active_by_customer_id(self, customer_id: int) -> list[AccountModel]:
        return self.find_by(customer_id=customer_id, status=AccountStatus.ACTIVE)


class TransactionRepository(SQLModelRepository[TransactionModel]):
    model = TransactionModel

    def list_for_account(
        self,
        account_number: str,
        *,
        transaction_type: Optional[TransactionType] = None,
        limit: Optional[int] = None,
    ) -> list[TransactionModel]:
        stmt = select(TransactionModel).where(
            TransactionModel.account_number == account_number
        )
        if transaction_type is not None:
            stmt = stmt.where(TransactionModel.transaction_type == transaction_type)
        stmt = stmt.order_by(
            col(TransactionModel.created_at).desc(),
            col(TransactionModel.id).desc(),
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.session.exec(stmt))

    def count_for_account(self, account_number: str) -> int:
        stmt = (
            select(func.count())
            .select_from(TransactionModel)
            .where(TransactionModel.account_number == account_number)
        )
        return self.session.exec(stmt).one()
