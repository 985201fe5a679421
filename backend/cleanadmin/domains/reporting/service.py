from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any

from sqlalchemy.orm import Session

from cleanadmin.core.errors import ValidationError
from cleanadmin.core.numbers import ZERO, quantize
from cleanadmin.core.weeks import week_end
from cleanadmin.domains.payroll.ledger import summarize
from cleanadmin.domains.payroll.service import list_payroll_records
from cleanadmin.models import PayrollStatus


@dataclass
class _Totals:
    record_count: int = 0
    total_hours: Decimal = ZERO
    total_pay: Decimal = ZERO
    total_paid: Decimal = ZERO
    total_outstanding: Decimal = ZERO
    total_overpaid: Decimal = ZERO

    def add(self, hours, pay, paid, outstanding, overpaid) -> None:
        self.record_count += 1
        self.total_hours += hours
        self.total_pay += pay
        self.total_paid += paid
        self.total_outstanding += outstanding
        self.total_overpaid += overpaid

    def as_dict(self) -> dict[str, Any]:
        return {
            "record_count": self.record_count,
            "total_hours": quantize(self.total_hours),
            "total_pay": quantize(self.total_pay),
            "total_paid": quantize(self.total_paid),
            "total_outstanding": quantize(self.total_outstanding),
            "total_overpaid": quantize(self.total_overpaid),
        }


@dataclass
class _Week:
    total_hours: Decimal = ZERO
    total_pay: Decimal = ZERO
    by_status: dict[str, Decimal] = field(default_factory=lambda: defaultdict(lambda: ZERO))


def build_payroll_report(
    db: Session,
    date_from: date | None = None,
    date_to: date | None = None,
    employee_id: int | None = None,
) -> dict[str, Any]:
    """Roll payroll records in ``[date_from, date_to]`` up into totals.

    Outstanding is the sum of per-record balances, so an overpaid record never
    offsets another record's debt.
    """
    if date_from and date_to and date_from > date_to:
        raise ValidationError("'from' must be on or before 'to'")

    records = list_payroll_records(db, date_from=date_from, date_to=date_to, employee_id=employee_id)

    totals = _Totals()
    employees: dict[int, _Totals] = {}
    names: dict[int, str] = {}
    weeks: dict[date, _Week] = {}
    for record in records:
        summary = summarize(record.total_pay, [t.amount for t in record.transactions])
        hours = quantize(record.hours_worked)
        pay = quantize(record.total_pay)
        figures = (hours, pay, summary.total_paid, summary.balance, summary.overpaid)

        totals.add(*figures)
        employees.setdefault(record.employee_id, _Totals()).add(*figures)
        names[record.employee_id] = record.employee.name if record.employee else ""

        week = weeks.setdefault(record.pay_date, _Week())
        week.total_hours += hours
        week.total_pay += pay
        week.by_status[record.status] += pay

    return {
        "from": date_from,
        "to": date_to,
        "totals": totals.as_dict(),
        "employees": [
            {"employee_id": employee, "employee_name": names[employee], **figures.as_dict()}
            for employee, figures in sorted(employees.items(), key=lambda item: names[item[0]].lower())
        ],
        "weeks": [
            {
                "week_start": start,
                "week_end": week_end(start),
                "total_hours": quantize(week.total_hours),
                "total_pay": quantize(week.total_pay),
                "pending_pay": quantize(week.by_status[PayrollStatus.PENDING.value]),
                "partial_pay": quantize(week.by_status[PayrollStatus.PARTIAL.value]),
                "paid_pay": quantize(week.by_status[PayrollStatus.PAID.value]),
            }
            for start, week in sorted(weeks.items())
        ],
    }
