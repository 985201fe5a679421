from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from cleanadmin.core.errors import ValidationError
from cleanadmin.domains.payroll.ledger import record_payment
from cleanadmin.domains.payroll.service import create_payroll_record
from cleanadmin.domains.reporting.service import build_payroll_report

WEEK_1 = date(2025, 1, 6)
WEEK_2 = date(2025, 1, 13)


@pytest.fixture
def ledger(db, make_employee):
    ava = make_employee(name="Ava Thompson", hourly_rate=30)
    liam = make_employee(name="Liam Nguyen", hourly_rate=20)

    paid = create_payroll_record(db, ava.id, WEEK_1, 38, 30)
    record_payment(db, paid.id, 1140)
    create_payroll_record(db, ava.id, WEEK_2, 10, 30)

    partial = create_payroll_record(db, liam.id, WEEK_1, 20, 20)
    record_payment(db, partial.id, 100)
    overpaid = create_payroll_record(db, liam.id, WEEK_2, 5, 20)
    record_payment(db, overpaid.id, 150)
    return {"ava": ava.id, "liam": liam.id}


def test_report_totals(db, ledger):
    report = build_payroll_report(db)

    assert report["totals"] == {
        "record_count": 4,
        "total_hours": Decimal("73.00"),
        "total_pay": Decimal("1940.00"),
        "total_paid": Decimal("1390.00"),
        "total_outstanding": Decimal("600.00"),
        "total_overpaid": Decimal("50.00"),
    }


def test_report_per_employee(db, ledger):
    employees = build_payroll_report(db)["employees"]

    assert [row["employee_name"] for row in employees] == ["Ava Thompson", "Liam Nguyen"]
    ava, liam = employees
    assert ava["total_pay"] == Decimal("1440.00")
    assert ava["total_outstanding"] == Decimal("300.00")
    assert liam["total_paid"] == Decimal("250.00")
    assert liam["total_outstanding"] == Decimal("300.00")
    assert liam["total_overpaid"] == Decimal("50.00")


def test_report_per_week_by_status(db, ledger):
    first, second = build_payroll_report(db)["weeks"]

    assert first["week_start"] == WEEK_1
    assert first["total_pay"] == Decimal("1540.00")
    assert first["paid_pay"] == Decimal("1140.00")
    assert first["partial_pay"] == Decimal("400.00")
    assert first["pending_pay"] == Decimal("0.00")
    assert second["week_end"] == date(2025, 1, 19)
    assert second["pending_pay"] == Decimal("300.00")
    assert second["paid_pay"] == Decimal("100.00")


def test_report_filters(db, ledger):
    assert build_payroll_report(db, date_from=WEEK_2)["totals"]["record_count"] == 2
    assert build_payroll_report(db, date_to=WEEK_1)["totals"]["total_pay"] == Decimal("1540.00")
    by_liam = build_payroll_report(db, employee_id=ledger["liam"])
    assert by_liam["totals"]["record_count"] == 2
    assert [row["employee_id"] for row in by_liam["employees"]] == [ledger["liam"]]


def test_empty_report(db):
    report = build_payroll_report(db, date_from=WEEK_1, date_to=WEEK_2)

    assert report["totals"]["record_count"] == 0
    assert report["totals"]["total_pay"] == Decimal("0")
    assert report["employees"] == []
    assert report["weeks"] == []


def test_report_rejects_reversed_range(db):
    with pytest.raises(ValidationError):
        build_payroll_report(db, date_from=WEEK_2, date_to=WEEK_1)


def test_report_endpoint(client):
    employee = client.post("/employees", json={"name": "Ava Thompson", "hourly_rate": 30}).json()
    client.post(
        "/payroll",
        json={"employeeId": employee["id"], "date": "2025-01-06", "hoursWorked": 38, "hourlyRate": 30},
    )

    response = client.get("/reports/weekly", params={"from": "2025-01-06", "to": "2025-01-12"})

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["from"] == "2025-01-06"
    assert body["to"] == "2025-01-12"
    assert body["totals"]["total_hours"] == 38.0
    assert body["totals"]["total_pay"] == 1140.0
    assert body["totals"]["total_outstanding"] == 1140.0
    assert body["weeks"][0]["pending_pay"] == 1140.0

    reversed_range = client.get("/reports/weekly", params={"from": "2025-01-12", "to": "2025-01-06"})
    assert reversed_range.status_code == 400
