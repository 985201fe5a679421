from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import Table, create_engine
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from cleanadmin.core.config import settings
from cleanadmin.core.errors import StorageError

engine = create_engine(settings.database_url, pool_pre_ping=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def get_session() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def session_scope() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def upsert_statement(session: Session, table: Table):
    """INSERT builder supporting ``on_conflict_do_update`` for the bound dialect."""
    dialect = session.get_bind().dialect.name
    try:
        return _UPSERT_DIALECTS[dialect](table)
    except KeyError:
        raise StorageError(f"Atomic upsert is not supported on {dialect}") from None
