from __future__ import annotations

from datetime import date, datetime
from typing import Any, Mapping

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from cleanadmin.core.errors import ServiceError, ValidationError
from cleanadmin.core.logging import get_logger
from cleanadmin.core.numbers import ZERO, quantize
from cleanadmin.core.weeks import parse_week_date, week_end, week_start
from cleanadmin.db.session import upsert_statement
from cleanadmin.domains.employees.service import get_employee_by_id
from cleanadmin.models import WEEKDAYS, Employee, Timesheet

logger = get_logger(__name__)


def upsert_timesheet(
    db: Session,
    employee_id: int,
    week_date: date | str,
    total_hours=None,
    daily_hours: Mapping[str, Any] | None = None,
    notes: str | None = None,
    synced_at: datetime | None = None,
    commit: bool = True,
) -> Timesheet:
    """Insert or overwrite the employee's entry for the week containing ``week_date``.

    Without ``daily_hours`` the stored per-day breakdown is kept; with it, days
    left out are zero. When ``total_hours`` is omitted it is the sum of the days.
    """
    get_employee_by_id(db, employee_id)
    start = week_start(parse_week_date(week_date))

    daily = None
    if daily_hours is not None:
        unknown = set(daily_hours) - set(WEEKDAYS)
        if unknown:
            raise ValidationError("Unknown weekday in daily hours", sorted(unknown))
        daily = {f"{day}_hours": quantize(daily_hours.get(day) or 0) for day in WEEKDAYS}

    if total_hours is None:
        total = sum(daily.values(), ZERO) if daily else ZERO
    else:
        total = quantize(total_hours)
    if total < 0 or (daily and min(daily.values()) < 0):
        raise ValidationError("Hours worked cannot be negative")

    values: dict[str, Any] = {
        "employee_id": employee_id,
        "week_start_date": start,
        "week_end_date": week_end(start),
        "total_hours": total,
        "synced_from_scheduler": synced_at is not None,
        "synced_at": synced_at,
    }
    if daily:
        values.update(daily)
    if notes is not None:
        values["notes"] = notes

    stmt = upsert_statement(db, Timesheet.__table__).values(**values)
    updates = {key: value for key, value in values.items() if key not in ("employee_id", "week_start_date")}
    if synced_at is None:
        # A manual edit keeps the provenance of the last sync
        updates.pop("synced_from_scheduler")
        updates.pop("synced_at")
    updates["updated_at"] = datetime.utcnow()
    db.execute(
        stmt.on_conflict_do_update(index_elements=["employee_id", "week_start_date"], set_=updates)
    )
    if commit:
        db.commit()

    return (
        db.query(Timesheet)
        .filter(Timesheet.employee_id == employee_id, Timesheet.week_start_date == start)
        .populate_existing()
        .one()
    )


def bulk_upsert_timesheets(db: Session, entries: list[Mapping[str, Any]]) -> dict[str, Any]:
    success = 0
    errors: list[str] = []
    for entry in entries:
        try:
            with db.begin_nested():
                upsert_timesheet(
                    db,
                    entry["employee_id"],
                    entry["week_start_date"],
                    total_hours=entry.get("total_hours"),
                    daily_hours=entry.get("daily_hours"),
                    notes=entry.get("notes"),
                    synced_at=entry.get("synced_at"),
                    commit=False,
                )
            success += 1
        except (ServiceError, SQLAlchemyError) as exc:
            message = exc.message if isinstance(exc, ServiceError) else str(exc)
            errors.append(f"employee {entry.get('employee_id')}: {message}")
    db.commit()
    if errors:
        logger.warning("timesheet_bulk_upsert_errors", errors=len(errors), success=success)
    return {"success": success, "errors": errors}


def get_timesheets_for_week(db: Session, week_date: date | str) -> list[Timesheet]:
    start = week_start(parse_week_date(week_date))
    return (
        db.query(Timesheet)
        .join(Employee, Timesheet.employee_id == Employee.id)
        .options(joinedload(Timesheet.employee))
        .filter(Timesheet.week_start_date == start)
        .order_by(Employee.name.asc(), Timesheet.id.asc())
        .all()
    )


def list_timesheet_weeks(db: Session) -> list[dict[str, Any]]:
    rows = (
        db.query(
            Timesheet.week_start_date,
            func.count(Timesheet.id),
            func.coalesce(func.sum(Timesheet.total_hours), 0),
            func.max(Timesheet.synced_at),
        )
        .group_by(Timesheet.week_start_date)
        .order_by(Timesheet.week_start_date.desc())
        .all()
    )
    return [
        {
            "week_start_date": start,
            "week_end_date": week_end(start),
            "employee_count": count,
            "total_hours": quantize(hours),
            "last_synced_at": synced,
        }
        for start, count, hours, synced in rows
    ]
