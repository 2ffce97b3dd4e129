from datetime import UTC, datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel

from ..core import db as db_module
from ..core.db import create_engine_for_url, get_session, set_engine
from ..main import app
from ..services import AccountService, CustomerService, LedgerService


class SteppingClock:
    """Clock that moves forward by a fixed step on every reading."""

    def __init__(self, start: datetime, step: timedelta = timedelta(milliseconds=1)) -> None:
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        self.now += self.step
        return self.now


@pytest.fixture
def engine():
    engine = create_engine_for_url("sqlite://", poolclass=StaticPool)
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def clock() -> SteppingClock:
    return SteppingClock(datetime(2024, 1, 15, 9, 30, tzinfo=UTC))


@pytest.fixture
def customer_service(session: Session, clock: SteppingClock) -> CustomerService:
    return CustomerService(session, clock=clock)


@pytest.fixture
def account_service(
    session: Session, customer_service: CustomerService, clock: SteppingClock
) -> AccountService:
    return AccountService(session, customer_service, clock=clock)


@pytest.fixture
def ledger_service(
    session: Session, account_service: AccountService, clock: SteppingClock
) -> LedgerService:
    return LedgerService(session, account_service, clock=clock)


@pytest.fixture
def client(tmp_path) -> TestClient:
    test_db = tmp_path / "test.db"
    engine = create_engine_for_url(f"sqlite:///{test_db}")
    original_engine = db_module.engine
    set_engine(engine)
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)

    def _get_session_override():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_session_override

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    set_engine(original_engine)
    engine.dispose()
