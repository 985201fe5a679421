from __future__ import annotations

import os

os.environ.setdefault("CLEANADMIN_DATABASE_URL", "sqlite://")

from datetime import date  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine, event  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from cleanadmin.core.weeks import week_end  # noqa: E402
from cleanadmin.db.session import Base, get_session  # noqa: E402
from cleanadmin.main import app  # noqa: E402
from cleanadmin.models import Employee, Timesheet  # noqa: E402

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


# pysqlite needs explicit BEGIN for SAVEPOINTs to nest inside the transaction
@event.listens_for(engine, "connect")
def _disable_pysqlite_transactions(dbapi_connection, connection_record):
    dbapi_connection.isolation_level = None


@event.listens_for(engine, "begin")
def _emit_begin(conn):
    conn.exec_driver_sql("BEGIN")


TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_session] = override_get_session


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def session_factory():
    return TestingSessionLocal


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_employee(db):
    def _make(name: str = "Ava Thompson", hourly_rate=30, **kwargs) -> Employee:
        employee = Employee(name=name, hourly_rate=hourly_rate, **kwargs)
        db.add(employee)
        db.commit()
        db.refresh(employee)
        return employee

    return _make


@pytest.fixture
def make_timesheet(db):
    def _make(employee: Employee, week_start: date, hours) -> Timesheet:
        timesheet = Timesheet(
            employee_id=employee.id,
            week_start_date=week_start,
            week_end_date=week_end(week_start),
            total_hours=hours,
        )
        db.add(timesheet)
        db.commit()
        return timesheet

    return _make
