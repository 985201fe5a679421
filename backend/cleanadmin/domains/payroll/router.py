from datetime import date

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from cleanadmin.db.session import get_session
from cleanadmin.domains.payroll import ledger, service
from cleanadmin.domains.payroll.generator import generate_weekly_payroll
from cleanadmin.domains.payroll.schemas import (
    GenerationFailureOut,
    GenerationResultOut,
    PaymentCreate,
    PaymentResultOut,
    PayrollRecordCreate,
    PayrollRecordOut,
    PayrollRecordUpdate,
    PayrollWeekOut,
    TransactionOut,
    WeeklyGenerateRequest,
    WeeklyHoursUpdate,
    serialize_record,
    serialize_transaction,
)
from cleanadmin.domains.timesheets.router import TimesheetOut, serialize_timesheet

router = APIRouter(prefix="/payroll", tags=["payroll"])


class WeeklyHoursOut(BaseModel):
    timesheet: TimesheetOut
    record: PayrollRecordOut | None = None


@router.get("", response_model=list[PayrollRecordOut])
def list_records(
    status: str | None = None,
    date_from: date | None = Query(default=None, alias="from"),
    date_to: date | None = Query(default=None, alias="to"),
    employee_id: int | None = Query(default=None, alias="employeeId"),
    db: Session = Depends(get_session),
) -> list[PayrollRecordOut]:
    rows = service.list_payroll_records(
        db, status=status, date_from=date_from, date_to=date_to, employee_id=employee_id
    )
    return [serialize_record(row) for row in rows]


@router.post("", response_model=PayrollRecordOut, status_code=201)
def create_record(payload: PayrollRecordCreate, db: Session = Depends(get_session)):
    record = service.create_payroll_record(
        db,
        employee_id=payload.employeeId,
        pay_date=payload.date,
        hours_worked=payload.hoursWorked,
        hourly_rate=payload.hourlyRate,
        notes=payload.notes,
    )
    return serialize_record(record)


@router.get("/weekly", response_model=list[PayrollWeekOut])
def list_weeks(db: Session = Depends(get_session)):
    return [PayrollWeekOut(**week) for week in service.list_payroll_weeks(db)]


@router.post("/weekly/generate", response_model=GenerationResultOut)
def generate_week(payload: WeeklyGenerateRequest, db: Session = Depends(get_session)):
    result = generate_weekly_payroll(db, payload.weekStartDate)
    return GenerationResultOut(
        week_start=result.week_start,
        week_end=result.week_end,
        created=result.created,
        updated=result.updated,
        timesheets_found=result.timesheets_found,
        records=[serialize_record(record) for record in result.records],
        failures=[GenerationFailureOut(**vars(failure)) for failure in result.failures],
    )


@router.get("/weekly/{week_date}", response_model=list[PayrollRecordOut])
def weekly_records(week_date: str, db: Session = Depends(get_session)):
    return [serialize_record(row) for row in service.get_weekly_payroll(db, week_date)]


@router.patch("/weekly/{week_date}", response_model=WeeklyHoursOut)
def update_weekly_hours(week_date: str, payload: WeeklyHoursUpdate, db: Session = Depends(get_session)):
    timesheet, record = service.update_weekly_hours(db, week_date, payload.employeeId, payload.hours)
    return WeeklyHoursOut(
        timesheet=serialize_timesheet(timesheet),
        record=serialize_record(record) if record else None,
    )


@router.get("/{record_id}", response_model=PayrollRecordOut)
def get_record(record_id: int, db: Session = Depends(get_session)):
    return serialize_record(service.get_payroll_record(db, record_id))


@router.patch("/{record_id}", response_model=PayrollRecordOut)
def update_record(record_id: int, payload: PayrollRecordUpdate, db: Session = Depends(get_session)):
    changes = payload.model_dump(exclude_unset=True)
    status = changes.pop("status", None)
    corrections = {
        "hours_worked": changes.get("hoursWorked"),
        "hourly_rate": changes.get("hourlyRate"),
        "total_pay": changes.get("totalPay"),
    }
    if "notes" in changes:
        corrections["notes"] = changes["notes"]

    if "notes" in corrections or any(value is not None for value in corrections.values()):
        record = service.update_payroll_record(db, record_id, corrections, status=status)
    elif status is not None:
        record = service.request_status(db, record_id, status)
    else:
        record = service.get_payroll_record(db, record_id)
    return serialize_record(record)


@router.get("/{record_id}/transactions", response_model=list[TransactionOut])
def list_transactions(record_id: int, db: Session = Depends(get_session)):
    return [serialize_transaction(row) for row in ledger.list_transactions(db, record_id)]


@router.post("/{record_id}/transactions", response_model=PaymentResultOut, status_code=201)
def record_payment(record_id: int, payload: PaymentCreate, db: Session = Depends(get_session)):
    record, transaction = ledger.record_payment(
        db,
        record_id,
        payload.amount,
        paid_at=payload.paidAt,
        method=payload.method,
        memo=payload.memo,
    )
    return PaymentResultOut(
        record=serialize_record(service.get_payroll_record(db, record.id)),
        transaction=serialize_transaction(transaction),
    )
