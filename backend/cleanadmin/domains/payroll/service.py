from __future__ import annotations

from datetime import date
from typing import Any

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload, selectinload

from cleanadmin.core.errors import NotFound, ValidationError
from cleanadmin.core.logging import get_logger
from cleanadmin.core.numbers import quantize
from cleanadmin.core.weeks import parse_week_date, week_end, week_label, week_start
from cleanadmin.domains.employees.service import get_employee_by_id
from cleanadmin.domains.payroll.ledger import lock_record, recompute_status
from cleanadmin.domains.timesheets.service import upsert_timesheet
from cleanadmin.models import Employee, PayrollRecord, PayrollStatus, Timesheet

logger = get_logger(__name__)


def parse_status(value: str) -> PayrollStatus:
    try:
        return PayrollStatus(value)
    except ValueError:
        raise ValidationError(
            f"Invalid status: {value}", {"allowed": [s.value for s in PayrollStatus]}
        ) from None


def _records(db: Session):
    return db.query(PayrollRecord).options(
        joinedload(PayrollRecord.employee), selectinload(PayrollRecord.transactions)
    )


def list_payroll_records(
    db: Session,
    status: str | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    employee_id: int | None = None,
) -> list[PayrollRecord]:
    if date_from and date_to and date_from > date_to:
        raise ValidationError("'from' must be on or before 'to'")

    query = _records(db)
    if status and status != "all":
        query = query.filter(PayrollRecord.status == parse_status(status).value)
    if date_from:
        query = query.filter(PayrollRecord.pay_date >= date_from)
    if date_to:
        query = query.filter(PayrollRecord.pay_date <= date_to)
    if employee_id is not None:
        query = query.filter(PayrollRecord.employee_id == employee_id)
    return query.order_by(
        PayrollRecord.pay_date.desc(), PayrollRecord.created_at.desc(), PayrollRecord.id.desc()
    ).all()


def get_payroll_record(db: Session, record_id: int) -> PayrollRecord:
    record = _records(db).filter(PayrollRecord.id == record_id).one_or_none()
    if not record:
        raise NotFound("Payroll record not found", {"payroll_record_id": record_id})
    return record


def create_payroll_record(
    db: Session,
    employee_id: int,
    pay_date: date,
    hours_worked,
    hourly_rate,
    notes: str | None = None,
) -> PayrollRecord:
    get_employee_by_id(db, employee_id)
    hours = quantize(hours_worked)
    rate = quantize(hourly_rate)
    if hours < 0 or rate < 0:
        raise ValidationError("Hours and hourly rate must be non-negative")

    record = PayrollRecord(
        employee_id=employee_id,
        pay_date=week_start(pay_date),
        hours_worked=hours,
        hourly_rate=rate,
        total_pay=quantize(hours * rate),
        status=PayrollStatus.PENDING.value,
        notes=notes,
    )
    db.add(record)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationError(
            "A payroll record already exists for this employee and week",
            {"employee_id": employee_id, "date": week_start(pay_date).isoformat()},
        ) from None
    logger.info(
        "payroll_record_created",
        payroll_record_id=record.id,
        employee_id=employee_id,
        total_pay=str(record.total_pay),
    )
    return get_payroll_record(db, record.id)


def _status_mismatch(requested: PayrollStatus, derived: PayrollStatus) -> ValidationError:
    return ValidationError(
        f"Status is derived from recorded payments; this record is {derived.value}",
        {"requested": requested.value, "derived": derived.value},
    )


def update_payroll_record(
    db: Session, record_id: int, changes: dict[str, Any], status: str | None = None
) -> PayrollRecord:
    """Apply an hours/rate/total correction; status is re-derived afterwards.

    ``changes`` may hold ``hours_worked``, ``hourly_rate``, ``total_pay`` and
    ``notes``. Total pay follows hours x rate unless given explicitly. When
    ``status`` is given the correction is only committed if the re-derived
    status matches it.
    """
    requested = parse_status(status) if status is not None else None
    record = lock_record(db, record_id)
    previous_total = quantize(record.total_pay)

    for key in ("hours_worked", "hourly_rate", "total_pay"):
        if changes.get(key) is not None and quantize(changes[key]) < 0:
            raise ValidationError(f"{key} must be non-negative")

    if changes.get("hours_worked") is not None:
        record.hours_worked = quantize(changes["hours_worked"])
    if changes.get("hourly_rate") is not None:
        record.hourly_rate = quantize(changes["hourly_rate"])
    if changes.get("total_pay") is not None:
        record.total_pay = quantize(changes["total_pay"])
    elif changes.get("hours_worked") is not None or changes.get("hourly_rate") is not None:
        record.total_pay = quantize(quantize(record.hours_worked) * quantize(record.hourly_rate))
    if "notes" in changes:
        record.notes = changes["notes"]

    derived = recompute_status(db, record)
    if requested is not None and derived is not requested:
        db.rollback()
        raise _status_mismatch(requested, derived)
    db.commit()
    logger.info(
        "payroll_record_corrected",
        payroll_record_id=record_id,
        previous_total=str(previous_total),
        total_pay=str(quantize(record.total_pay)),
        status=record.status,
    )
    return get_payroll_record(db, record_id)


def request_status(db: Session, record_id: int, status: str) -> PayrollRecord:
    """Check a requested status against the ledger.

    Status cannot be set by hand; the record is re-derived and the request is
    rejected when it disagrees with the recorded payments.
    """
    requested = parse_status(status)
    record = lock_record(db, record_id)
    derived = recompute_status(db, record)
    db.commit()
    if derived is not requested:
        raise _status_mismatch(requested, derived)
    return get_payroll_record(db, record_id)


def list_payroll_weeks(db: Session) -> list[dict[str, Any]]:
    rows = (
        db.query(PayrollRecord.pay_date, func.count(PayrollRecord.id))
        .group_by(PayrollRecord.pay_date)
        .order_by(PayrollRecord.pay_date.desc())
        .all()
    )
    return [
        {
            "week_id": week_label(start),
            "week_start": start,
            "week_end": week_end(start),
            "record_count": count,
        }
        for start, count in rows
    ]


def get_weekly_payroll(db: Session, week_date: date | str) -> list[PayrollRecord]:
    start = week_start(parse_week_date(week_date))
    return (
        _records(db)
        .join(Employee, PayrollRecord.employee_id == Employee.id)
        .filter(PayrollRecord.pay_date == start)
        .order_by(Employee.name.asc(), PayrollRecord.id.asc())
        .all()
    )


def update_weekly_hours(
    db: Session, week_date: date | str, employee_id: int, hours
) -> tuple[Timesheet, PayrollRecord | None]:
    """Correct an employee's hours for a week and re-derive their payroll record.

    The timesheet total is overwritten; an existing record keeps its rate
    snapshot and gets a new total and status.
    """
    start = week_start(parse_week_date(week_date))
    value = quantize(hours)
    if value < 0:
        raise ValidationError("Hours worked cannot be negative")

    timesheet = upsert_timesheet(db, employee_id, start, total_hours=value, commit=False)
    record = (
        db.query(PayrollRecord)
        .filter(PayrollRecord.employee_id == employee_id, PayrollRecord.pay_date == start)
        .with_for_update()
        .populate_existing()
        .one_or_none()
    )
    if record:
        record.hours_worked = value
        record.total_pay = quantize(value * quantize(record.hourly_rate))
        recompute_status(db, record)
    db.commit()
    logger.info(
        "weekly_hours_updated",
        employee_id=employee_id,
        week_start=start.isoformat(),
        hours=str(value),
        payroll_record_id=record.id if record else None,
    )
    db.refresh(timesheet)
    return timesheet, (get_payroll_record(db, record.id) if record else None)
