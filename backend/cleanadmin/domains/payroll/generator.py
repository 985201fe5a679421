"""Weekly payroll generation from the timesheet store."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from cleanadmin.core.errors import StorageError
from cleanadmin.core.logging import get_logger
from cleanadmin.core.numbers import quantize
from cleanadmin.core.observability import get_tracer
from cleanadmin.core.weeks import parse_week_date, week_end, week_label, week_start
from cleanadmin.db.session import upsert_statement
from cleanadmin.domains.payroll.ledger import recompute_status
from cleanadmin.models import Employee, PayrollRecord, PayrollStatus, Timesheet

logger = get_logger(__name__)
tracer = get_tracer(__name__)


@dataclass
class GenerationFailure:
    employee_id: int
    employee_name: str
    error: str


@dataclass
class GenerationResult:
    week_start: date
    week_end: date
    created: int = 0
    updated: int = 0
    timesheets_found: int = 0
    records: list[PayrollRecord] = field(default_factory=list)
    failures: list[GenerationFailure] = field(default_factory=list)


def _upsert_record(db: Session, employee: Employee, start: date, hours: Decimal) -> PayrollRecord:
    rate = quantize(employee.hourly_rate)
    stmt = upsert_statement(db, PayrollRecord.__table__).values(
        employee_id=employee.id,
        pay_date=start,
        hours_worked=hours,
        hourly_rate=rate,
        total_pay=quantize(hours * rate),
        status=PayrollStatus.PENDING.value,
        notes=week_label(start),
    )
    db.execute(
        stmt.on_conflict_do_update(
            index_elements=["employee_id", "pay_date"],
            set_={
                "hours_worked": stmt.excluded.hours_worked,
                "hourly_rate": stmt.excluded.hourly_rate,
                "total_pay": stmt.excluded.total_pay,
                "updated_at": datetime.utcnow(),
            },
        )
    )
    record = (
        db.query(PayrollRecord)
        .filter(PayrollRecord.employee_id == employee.id, PayrollRecord.pay_date == start)
        .populate_existing()
        .one()
    )
    # A regenerated total can move a paid record back to partial
    recompute_status(db, record)
    return record


def generate_weekly_payroll(db: Session, week_date: date | str) -> GenerationResult:
    """Create or refresh one payroll record per active employee with hours in the week.

    Existing records are refreshed even when the hours have dropped to zero.

    Any day of the week is accepted. One employee's storage failure is
    reported in ``failures`` and does not stop the rest of the batch.
    """
    start = week_start(parse_week_date(week_date))
    result = GenerationResult(week_start=start, week_end=week_end(start))

    with tracer.start_as_current_span("generate_weekly_payroll") as span:
        span.set_attribute("payroll.week_start", start.isoformat())
        try:
            rows = (
                db.query(Employee, Timesheet)
                .join(Timesheet, Timesheet.employee_id == Employee.id)
                .filter(Timesheet.week_start_date == start, Employee.is_active.is_(True))
                .order_by(Employee.name.asc(), Employee.id.asc())
                .all()
            )
            existing = {
                employee_id
                for (employee_id,) in db.query(PayrollRecord.employee_id).filter(
                    PayrollRecord.pay_date == start
                )
            }
        except OperationalError as exc:
            raise StorageError("Payroll store is unreachable", str(exc.orig)) from exc

        result.timesheets_found = len(rows)
        for employee, timesheet in rows:
            hours = quantize(timesheet.total_hours)
            # A week that drops to zero still corrects a record generated earlier
            if hours <= 0 and employee.id not in existing:
                continue
            try:
                with db.begin_nested():
                    record = _upsert_record(db, employee, start, hours)
            except SQLAlchemyError as exc:
                result.failures.append(
                    GenerationFailure(employee_id=employee.id, employee_name=employee.name, error=str(exc))
                )
                logger.warning(
                    "payroll_generation_employee_failed",
                    employee_id=employee.id,
                    week_start=start.isoformat(),
                    error=str(exc),
                )
                continue

            if employee.id in existing:
                result.updated += 1
            else:
                result.created += 1
            result.records.append(record)

        db.commit()
        span.set_attribute("payroll.records", len(result.records))
        span.set_attribute("payroll.failures", len(result.failures))

    logger.info(
        "payroll_generated",
        week_start=start.isoformat(),
        created=result.created,
        updated=result.updated,
        failed=len(result.failures),
    )
    return result
