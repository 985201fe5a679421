from datetime import date

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from cleanadmin.db.session import get_session
from cleanadmin.domains.reporting.service import build_payroll_report

router = APIRouter(prefix="/reports", tags=["reporting"])


class ReportTotals(BaseModel):
    record_count: int
    total_hours: float
    total_pay: float
    total_paid: float
    total_outstanding: float
    total_overpaid: float


class EmployeeTotals(ReportTotals):
    employee_id: int
    employee_name: str


class WeekTotals(BaseModel):
    week_start: date
    week_end: date
    total_hours: float
    total_pay: float
    pending_pay: float
    partial_pay: float
    paid_pay: float


class PayrollReportOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    date_from: date | None = Field(default=None, alias="from")
    date_to: date | None = Field(default=None, alias="to")
    totals: ReportTotals
    employees: list[EmployeeTotals]
    weeks: list[WeekTotals]


@router.get("/weekly", response_model=PayrollReportOut)
def weekly_report(
    date_from: date | None = Query(default=None, alias="from"),
    date_to: date | None = Query(default=None, alias="to"),
    employee_id: int | None = Query(default=None, alias="employeeId"),
    db: Session = Depends(get_session),
) -> PayrollReportOut:
    report = build_payroll_report(db, date_from=date_from, date_to=date_to, employee_id=employee_id)
    return PayrollReportOut(
        date_from=report["from"],
        date_to=report["to"],
        totals=ReportTotals(**report["totals"]),
        employees=[EmployeeTotals(**row) for row in report["employees"]],
        weeks=[WeekTotals(**row) for row in report["weeks"]],
    )
