from __future__ import annotations

from collections.abc import Generator, Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import event
from sqlmodel import Session, SQLModel, create_engine

from ..models import db as _db_models  # noqa: F401 - ensure models register with metadata
from .config import get_settings


def _use_immediate_transactions(engine) -> None:
    """Make every SQLite transaction take the write lock when it begins.

    pysqlite defers BEGIN until the first write and SQLite ignores
    ``FOR UPDATE``, so without this a balance read is not protected from a
    concurrent writer before the update lands.
    """

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn) -> None:
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_engine_for_url(database_url: str, **kwargs: Any):
    connect_args: dict[str, Any] = dict(kwargs.pop("connect_args", {}))
    if database_url.startswith("sqlite"):
        connect_args.setdefault("check_same_thread", False)
    engine = create_engine(database_url, echo=False, connect_args=connect_args, **kwargs)
    if database_url.startswith("sqlite"):
        _use_immediate_transactions(engine)
    return engine


settings = get_settings()
engine = create_engine_for_url(settings.database_url)


def init_db() -> None:
    SQLModel.metadata.create_all(engine)


def get_session() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


def set_engine(new_engine) -> None:
    global engine
    engine = new_engine


@contextmanager
def atomic(session: Session) -> Iterator[Session]:
    """Run a block as one unit of work on ``session``.

    Commits when the block finishes and rolls back when it raises, so a
    balance write is never committed without the ledger row written next to it.
    """
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
