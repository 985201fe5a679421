"""Pull a week of time-clock hours from the scheduling provider into the timesheet store."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cleanadmin.core.errors import IntegrationError
from cleanadmin.core.logging import get_logger
from cleanadmin.core.numbers import ZERO
from cleanadmin.core.weeks import week_end, week_start
from cleanadmin.domains.employees.service import list_employees
from cleanadmin.domains.timesheets.service import upsert_timesheet
from cleanadmin.integrations.connecteam import ConnecteamClient
from cleanadmin.models import WEEKDAYS

logger = get_logger(__name__)


def _resolve_time_clock(client: ConnecteamClient) -> int:
    if client.config.time_clock_id is not None:
        return client.config.time_clock_id
    for clock in client.get_time_clocks():
        if not clock.get("isArchived"):
            return clock["id"]
    raise IntegrationError("No active time clock found in Connecteam")


def sync_week_timesheets(
    db: Session,
    client: ConnecteamClient,
    week_date: date | None = None,
    today: date | None = None,
) -> dict[str, Any]:
    start = week_start(week_date or today or date.today())
    end = week_end(start)
    totals = client.get_timesheet_totals(_resolve_time_clock(client), start, end)
    synced_at = datetime.utcnow()

    synced = 0
    errors: list[str] = []
    for employee in list_employees(db, active_only=True):
        # The provider is authoritative for the week: unmatched employees sync to zero
        hours = totals.get(employee.scheduler_id) if employee.scheduler_id else None
        daily = {day: ZERO for day in WEEKDAYS}
        total = ZERO
        if hours is not None:
            total = hours.total_hours
            for day, value in hours.daily_hours.items():
                if start <= day <= end:
                    daily[WEEKDAYS[day.weekday()]] += value
        try:
            with db.begin_nested():
                upsert_timesheet(
                    db,
                    employee.id,
                    start,
                    total_hours=total,
                    daily_hours=daily,
                    synced_at=synced_at,
                    commit=False,
                )
                employee.current_week_hours = total
                employee.last_sync_at = synced_at
            synced += 1
        except SQLAlchemyError as exc:
            errors.append(f"{employee.name}: {exc.__class__.__name__}")
            logger.warning("timesheet_sync_employee_failed", employee_id=employee.id, error=str(exc))
    db.commit()

    unmatched = set(totals) - {e.scheduler_id for e in list_employees(db) if e.scheduler_id}
    if unmatched:
        errors.append(f"{len(unmatched)} Connecteam user(s) not linked to an employee")
    logger.info(
        "timesheets_synced",
        week_start=start.isoformat(),
        employees_synced=synced,
        errors=len(errors),
    )
    return {
        "week_start": start,
        "week_end": end,
        "employees_synced": synced,
        "errors": errors,
        "synced_at": synced_at,
    }
