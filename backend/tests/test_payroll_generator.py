from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from cleanadmin.core.errors import ValidationError
from cleanadmin.db import session as db_session
from cleanadmin.domains.employees.service import update_employee
from cleanadmin.domains.payroll import generator
from cleanadmin.domains.payroll.generator import generate_weekly_payroll
from cleanadmin.domains.payroll.ledger import record_payment
from cleanadmin.domains.timesheets.service import upsert_timesheet
from cleanadmin.models import PayrollRecord, PayrollStatus
from cleanadmin.seed import seed_data
from cleanadmin.seed.seed_data import DEMO_WEEK, seed

WEEK = date(2025, 1, 6)


def test_generates_pending_record_from_timesheet(db, make_employee, make_timesheet):
    ava = make_employee(hourly_rate=30)
    make_timesheet(ava, WEEK, 38)

    result = generate_weekly_payroll(db, "2025-01-06")

    assert result.week_start == WEEK
    assert result.week_end == date(2025, 1, 12)
    assert (result.created, result.updated, result.timesheets_found) == (1, 0, 1)
    assert result.failures == []
    record = result.records[0]
    assert record.pay_date == WEEK
    assert record.hours_worked == Decimal("38")
    assert record.hourly_rate == Decimal("30")
    assert record.total_pay == Decimal("1140.00")
    assert record.status == PayrollStatus.PENDING.value
    assert record.notes == "Week of 2025-01-06 - 2025-01-12"


def test_any_day_of_the_week_targets_its_monday(db, make_employee, make_timesheet):
    make_timesheet(make_employee(), WEEK, 8)

    result = generate_weekly_payroll(db, date(2025, 1, 11))

    assert result.week_start == WEEK
    assert result.records[0].pay_date == WEEK


def test_invalid_week_date_is_rejected(db):
    with pytest.raises(ValidationError):
        generate_weekly_payroll(db, "next tuesday")


def test_regenerating_updates_instead_of_duplicating(db, make_employee, make_timesheet):
    make_timesheet(make_employee(), WEEK, 38)
    first = generate_weekly_payroll(db, WEEK).records[0]
    snapshot = (first.id, first.hours_worked, first.hourly_rate, first.total_pay, first.status)

    again = generate_weekly_payroll(db, WEEK)

    assert (again.created, again.updated) == (0, 1)
    assert db.query(PayrollRecord).count() == 1
    record = again.records[0]
    assert (record.id, record.hours_worked, record.hourly_rate, record.total_pay, record.status) == snapshot
    assert snapshot[1:] == (Decimal("38.00"), Decimal("30.00"), Decimal("1140.00"), "pending")


def test_regenerating_refreshes_rate_snapshot(db, make_employee, make_timesheet):
    ava = make_employee(hourly_rate=30)
    make_timesheet(ava, WEEK, 38)
    generate_weekly_payroll(db, WEEK)
    update_employee(db, ava.id, {"hourly_rate": 32})

    record = generate_weekly_payroll(db, WEEK).records[0]

    assert record.hourly_rate == Decimal("32")
    assert record.total_pay == Decimal("1216.00")


def test_zero_hours_and_inactive_employees_get_no_record(db, make_employee, make_timesheet):
    make_timesheet(make_employee(name="Ava Thompson"), WEEK, 38)
    make_timesheet(make_employee(name="Liam Nguyen"), WEEK, 0)
    make_timesheet(make_employee(name="Mia Patel", is_active=False), WEEK, 12)
    make_employee(name="Noah Ortiz")

    result = generate_weekly_payroll(db, WEEK)

    assert result.timesheets_found == 2
    assert [r.employee.name for r in result.records] == ["Ava Thompson"]
    assert db.query(PayrollRecord).count() == 1


def test_week_without_timesheets_creates_nothing(db, make_employee):
    make_employee()

    result = generate_weekly_payroll(db, WEEK)

    assert (result.created, result.updated, result.timesheets_found) == (0, 0, 0)
    assert result.records == []


def test_regenerating_with_more_hours_reopens_a_paid_record(db, make_employee, make_timesheet):
    ava = make_employee(hourly_rate=30)
    make_timesheet(ava, WEEK, 38)
    record = generate_weekly_payroll(db, WEEK).records[0]
    record_payment(db, record.id, 1140)
    upsert_timesheet(db, ava.id, WEEK, total_hours=40)

    record = generate_weekly_payroll(db, WEEK).records[0]

    assert record.total_pay == Decimal("1200.00")
    assert record.status == PayrollStatus.PARTIAL.value


def test_one_failing_employee_does_not_stop_the_batch(db, make_employee, make_timesheet, monkeypatch):
    make_timesheet(make_employee(name="Ava Thompson"), WEEK, 38)
    liam = make_employee(name="Liam Nguyen", hourly_rate=28.5)
    make_timesheet(liam, WEEK, 20)
    make_timesheet(make_employee(name="Zoe Fraser", hourly_rate=25), WEEK, 10)

    original = generator._upsert_record

    def flaky(session, employee, start, hours):
        if employee.id == liam.id:
            raise OperationalError("INSERT INTO payroll_records", {}, Exception("database is locked"))
        return original(session, employee, start, hours)

    monkeypatch.setattr(generator, "_upsert_record", flaky)

    result = generate_weekly_payroll(db, WEEK)

    assert result.created == 2
    assert [r.employee.name for r in result.records] == ["Ava Thompson", "Zoe Fraser"]
    assert len(result.failures) == 1
    assert result.failures[0].employee_id == liam.id
    assert result.failures[0].employee_name == "Liam Nguyen"
    assert "database is locked" in result.failures[0].error
    assert db.query(PayrollRecord).count() == 2


def test_demo_seed_generates_one_record(db):
    seed(db)

    result = generate_weekly_payroll(db, DEMO_WEEK)

    assert result.timesheets_found == 2
    assert len(result.records) == 1
    assert result.records[0].employee.name == "Ava Thompson"
    assert result.records[0].total_pay == Decimal("1140.00")


def test_hours_dropping_to_zero_reset_the_existing_record(db, make_employee, make_timesheet):
    ava = make_employee(hourly_rate=30)
    make_timesheet(ava, WEEK, 38)
    record_id = generate_weekly_payroll(db, WEEK).records[0].id
    upsert_timesheet(db, ava.id, WEEK, total_hours=0)

    result = generate_weekly_payroll(db, WEEK)

    assert (result.created, result.updated) == (0, 1)
    record = result.records[0]
    assert record.id == record_id
    assert record.hours_worked == Decimal("0")
    assert record.total_pay == Decimal("0")
    assert record.status == PayrollStatus.PENDING.value
    assert db.query(PayrollRecord).count() == 1


def test_seed_entry_point_commits_demo_crew(db, session_factory, monkeypatch):
    monkeypatch.setattr(db_session, "SessionLocal", session_factory)

    seed_data.run()

    assert generate_weekly_payroll(db, DEMO_WEEK).created == 1
