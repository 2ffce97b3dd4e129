from __future__ import annotations

import logging
import re
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from ..core.clock import Clock, utc_now
from ..core.db import atomic
from ..core.errors import CustomerNotFoundError, DuplicateEmailError, ValidationError
from ..models import CustomerModel
from .repository import CustomerRepository


logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
EMAIL_MAX_LENGTH = 100
PHONE_MAX_LENGTH = 20


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class CustomerService:
    def __init__(
        self,
        session: Session,
        repository: Optional[CustomerRepository] = None,
        clock: Clock = utc_now,
    ) -> None:
        self.session = session
        self.repository = repository or CustomerRepository(session)
        self.clock = clock

    def _validate(
        self, name: Optional[str], email: Optional[str], phone: Optional[str]
    ) -> None:
        if name is None or not name.strip():
            raise ValidationError("Customer name is required")
        if not NAME_MIN_LENGTH <= len(name.strip()) <= NAME_MAX_LENGTH:
            raise ValidationError(
                f"Name must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters"
            )
        if email is not None:
            if len(email) > EMAIL_MAX_LENGTH:
                raise ValidationError(
                    f"Email must not exceed {EMAIL_MAX_LENGTH} characters"
                )
            if not EMAIL_PATTERN.match(email):
                raise ValidationError(f"Email should be valid: {email}")
        if phone is not None and len(phone) > PHONE_MAX_LENGTH:
            raise ValidationError(
                f"Phone number must not exceed {PHONE_MAX_LENGTH} characters"
            )

    def create_customer(
        self,
        name: Optional[str],
        email: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> CustomerModel:
        email = _blank_to_none(email)
        phone = _blank_to_none(phone)
        self._validate(name, email, phone)

        if email is not None and self.repository.exists_by_email(email):
            raise DuplicateEmailError(f"Email already exists: {email}")

        now = self.clock()
        customer = CustomerModel(
            name=name.strip(),
            email=email,
            phone=phone,
            created_at=now,
            updated_at=now,
        )
        try:
            with atomic(self.session):
                self.repository.save(customer)
        except IntegrityError as exc:
            # Lost a race with a concurrent insert of the same email.
            if email is not None and self.repository.exists_by_email(email):
                raise DuplicateEmailError(f"Email already exists: {email}") from exc
            raise

        logger.info(
            "customer.created",
            extra={"customer_id": customer.id, "customer_name": customer.name},
        )
        return customer

    def find_customer_by_id(self, customer_id: int) -> CustomerModel:
        customer = self.repository.get(customer_id)
        if customer is None:
            raise CustomerNotFoundError(f"Customer not found with ID: {customer_id}")
        return customer

    def find_all_customers(self) -> list[CustomerModel]:
        customers = self.repository.find_by()
        logger.debug("customer.list", extra={"count": len(customers)})
        return customers

    def find_customers_by_name(self, term: Optional[str]) -> list[CustomerModel]:
        if term is None or not term.strip():
            raise ValidationError("Search name cannot be empty")
        customers = self.repository.find_by_name_containing(term.strip())
        logger.debug(
            "customer.search",
            extra={"term": term.strip(), "count": len(customers)},
        )
        return customers

    def get_customer_count(self) -> int:
        return self.repository.count()
